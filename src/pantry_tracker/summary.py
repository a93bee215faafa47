"""Aggregation and filtering over pantry items, shopping entries and recommendations."""

from collections import Counter
from datetime import date
from typing import TypeVar

from .lifecycle import classify_item
from .models import (
    DEFAULT_THRESHOLDS,
    InventoryItem,
    PantrySummary,
    Recommendation,
    RecommendationSummary,
    RecommendationType,
    ShoppingEntry,
    ShoppingSummary,
    StockStatus,
    Thresholds,
)
from .recommendations import total_savings

ALL_CATEGORIES = "all"

T = TypeVar("T", InventoryItem, ShoppingEntry)


def filter_by_category(items: list[T], category: str) -> list[T]:
    """Items whose category matches exactly. 'all' returns every item."""
    if category == ALL_CATEGORIES:
        return list(items)
    return [i for i in items if i.category == category]


def available_categories(items: list[InventoryItem] | list[ShoppingEntry]) -> list[str]:
    """'all' followed by the distinct categories in first-seen order."""
    return [ALL_CATEGORIES, *dict.fromkeys(i.category for i in items)]


def filter_by_status(
    items: list[InventoryItem],
    status: StockStatus,
    today: date | None = None,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> list[InventoryItem]:
    """Pantry items currently in the given status."""
    return [i for i in items if classify_item(i, today, thresholds) == status]


def summarize_pantry(
    items: list[InventoryItem],
    today: date | None = None,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> PantrySummary:
    """Count items per derived status and total the pantry value."""
    counts = Counter(classify_item(i, today, thresholds) for i in items)
    return PantrySummary(
        total_items=len(items),
        healthy_count=counts[StockStatus.HEALTHY],
        warning_count=counts[StockStatus.WARNING],
        critical_count=counts[StockStatus.CRITICAL],
        total_value=round(sum(i.current_price or 0.0 for i in items), 2),
    )


def shopping_total(entries: list[ShoppingEntry]) -> float:
    """Estimated cost of the entries still to buy."""
    return round(sum(e.estimated_price for e in entries if not e.is_checked), 2)


def summarize_shopping(entries: list[ShoppingEntry]) -> ShoppingSummary:
    """Count checked/unchecked entries and total the remaining cost."""
    checked = sum(1 for e in entries if e.is_checked)
    return ShoppingSummary(
        total_items=len(entries),
        checked_count=checked,
        unchecked_count=len(entries) - checked,
        total_estimated_cost=shopping_total(entries),
    )


def summarize_recommendations(recommendations: list[Recommendation]) -> RecommendationSummary:
    """Count recommendations per type and total their savings."""
    counts = Counter(r.type for r in recommendations)
    return RecommendationSummary(
        total=len(recommendations),
        total_savings=total_savings(recommendations),
        by_type={t.value: counts[t] for t in RecommendationType},
    )


def toggle(entry: ShoppingEntry) -> ShoppingEntry:
    """Copy of the entry with its checked state flipped."""
    return entry.model_copy(update={"is_checked": not entry.is_checked})


def visible_entries(
    entries: list[ShoppingEntry], show_completed: bool = True
) -> list[ShoppingEntry]:
    """Entries to display; checked entries are hidden unless show_completed."""
    if show_completed:
        return list(entries)
    return [e for e in entries if not e.is_checked]
