"""Recommendation ordering, filtering and promotion to the shopping list."""

from datetime import date

from .errors import ValidationError
from .lifecycle import classify_item, effective_days_left
from .models import (
    DEFAULT_THRESHOLDS,
    InventoryItem,
    Priority,
    Recommendation,
    RecommendationType,
    ShoppingEntry,
    StockStatus,
    Thresholds,
)

ALL_TYPES = "all"

_PRIORITY_WEIGHT = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


def priority_weight(priority: Priority) -> int:
    """Sort weight for a priority; lower sorts first."""
    return _PRIORITY_WEIGHT[priority]


def _rank_key(rec: Recommendation) -> tuple:
    # Recommendations without a need-by date go after dated ones.
    urgency = rec.days_until_needed
    return (
        priority_weight(rec.priority),
        urgency is None,
        urgency if urgency is not None else 0,
        -rec.confidence,
    )


def rank(recommendations: list[Recommendation]) -> list[Recommendation]:
    """Order by priority, then urgency, then confidence.

    Args:
        recommendations: Recommendations in any order

    Returns:
        New list; ties on every key keep their input order
    """
    return sorted(recommendations, key=_rank_key)


def filter_by_type(
    recommendations: list[Recommendation], rec_type: RecommendationType | str
) -> list[Recommendation]:
    """Select recommendations of one type. 'all' selects everything.

    Raises:
        ValidationError: If rec_type is not a known type
    """
    if rec_type == ALL_TYPES:
        return list(recommendations)
    try:
        wanted = RecommendationType(rec_type)
    except ValueError:
        raise ValidationError(f"Unknown recommendation type: {rec_type}") from None
    return [r for r in recommendations if r.type == wanted]


def total_savings(recommendations: list[Recommendation]) -> float:
    """Sum of potential savings."""
    return round(sum(r.savings for r in recommendations), 2)


def to_shopping_entry(
    recommendation: Recommendation,
    quantity: float = 1.0,
    unit: str = "kg",
    category: str = "Other",
) -> ShoppingEntry:
    """Build a shopping entry from a recommendation."""
    return ShoppingEntry(
        name=recommendation.item_name,
        quantity=quantity,
        unit=unit,
        estimated_price=recommendation.current_price or 0.0,
        priority=recommendation.priority,
        category=category,
        reason=recommendation.reason or "Recommended",
        days_until_needed=recommendation.days_until_needed,
    )


_STATUS_PRIORITY = {
    StockStatus.CRITICAL: Priority.HIGH,
    StockStatus.WARNING: Priority.MEDIUM,
    StockStatus.HEALTHY: Priority.LOW,
}


def restock_entry(
    item: InventoryItem,
    today: date | None = None,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> ShoppingEntry:
    """Build a shopping entry that restocks a pantry item.

    Priority follows the item's status: critical items are high priority.
    """
    status = classify_item(item, today, thresholds)
    days_left = max(0, effective_days_left(item, today))

    if status == StockStatus.CRITICAL:
        reason = f"Running low - needed in {days_left} days"
    elif status == StockStatus.WARNING:
        reason = "Stock running low"
    else:
        reason = "Restock ahead of time"

    return ShoppingEntry(
        name=item.name,
        quantity=item.quantity,
        unit=item.unit,
        estimated_price=item.current_price or 0.0,
        priority=_STATUS_PRIORITY[status],
        category=item.category,
        reason=reason,
        days_until_needed=days_left,
    )
