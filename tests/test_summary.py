"""Tests for list aggregation and filtering."""

from datetime import date

from pantry_tracker.models import StockStatus
from pantry_tracker.summary import (
    available_categories,
    filter_by_category,
    filter_by_status,
    shopping_total,
    summarize_pantry,
    summarize_recommendations,
    summarize_shopping,
    toggle,
    visible_entries,
)

TODAY = date(2024, 7, 1)


class TestCategories:
    """Tests for category filtering."""

    def test_filter_by_category(self, sample_items):
        grains = filter_by_category(sample_items, "Grains")
        assert [i.name for i in grains] == ["Basmati Rice", "Wheat Flour"]

    def test_all_returns_every_item(self, sample_items):
        assert len(filter_by_category(sample_items, "all")) == 4

    def test_match_is_exact(self, sample_items):
        assert filter_by_category(sample_items, "grains") == []

    def test_available_categories_first_seen_order(self, sample_items):
        assert available_categories(sample_items) == ["all", "Pulses", "Grains", "Oils"]

    def test_available_categories_empty(self):
        assert available_categories([]) == ["all"]

    def test_filter_by_status(self, sample_items):
        warning = filter_by_status(sample_items, StockStatus.WARNING, TODAY)
        assert [i.name for i in warning] == ["Basmati Rice", "Wheat Flour"]


class TestPantrySummary:
    """Tests for summarize_pantry."""

    def test_counts_and_value(self, sample_items):
        summary = summarize_pantry(sample_items, TODAY)
        assert summary.total_items == 4
        assert summary.critical_count == 1
        assert summary.warning_count == 2
        assert summary.healthy_count == 1
        assert summary.total_value == 1325

    def test_empty_pantry(self):
        summary = summarize_pantry([], TODAY)
        assert summary.total_items == 0
        assert summary.total_value == 0

    def test_unpriced_items_add_nothing(self, sample_items):
        items = [sample_items[0], sample_items[1].model_copy(update={"current_price": None})]
        assert summarize_pantry(items, TODAY).total_value == 150


class TestShoppingSummary:
    """Tests for shopping list totals."""

    def test_total_excludes_checked(self, sample_entries):
        assert shopping_total(sample_entries) == 475

    def test_summary(self, sample_entries):
        summary = summarize_shopping(sample_entries)
        assert summary.total_items == 4
        assert summary.checked_count == 1
        assert summary.unchecked_count == 3
        assert summary.total_estimated_cost == 475

    def test_empty_list(self):
        assert summarize_shopping([]).total_estimated_cost == 0

    def test_toggle_flips_copy(self, sample_entries):
        flipped = toggle(sample_entries[2])
        assert flipped.is_checked is False
        assert sample_entries[2].is_checked is True
        assert flipped.id == sample_entries[2].id

    def test_toggle_twice_restores(self, sample_entries):
        assert toggle(toggle(sample_entries[0])).is_checked is False

    def test_toggle_round_trip_restores_total(self, sample_entries):
        """Checking removes exactly its price; unchecking puts it back."""
        before = shopping_total(sample_entries)
        entries = [toggle(e) if e.name == "Moong Dal" else e for e in sample_entries]
        assert shopping_total(entries) == before - 150
        entries = [toggle(e) if e.name == "Moong Dal" else e for e in entries]
        assert shopping_total(entries) == before
        assert [e.is_checked for e in entries] == [e.is_checked for e in sample_entries]

    def test_toggling_changes_total(self, sample_entries):
        entries = [toggle(e) if e.name == "Olive Oil" else e for e in sample_entries]
        assert shopping_total(entries) == 1325

    def test_visible_entries(self, sample_entries):
        assert len(visible_entries(sample_entries)) == 4
        hidden = visible_entries(sample_entries, show_completed=False)
        assert "Olive Oil" not in [e.name for e in hidden]


class TestRecommendationSummary:
    """Tests for summarize_recommendations."""

    def test_counts_every_type(self, sample_recommendations):
        summary = summarize_recommendations(sample_recommendations)
        assert summary.total == 4
        assert summary.total_savings == 90
        assert summary.by_type == {
            "refill": 1,
            "bulk_buy": 1,
            "alternative": 1,
            "seasonal": 1,
        }

    def test_empty(self):
        summary = summarize_recommendations([])
        assert summary.total == 0
        assert summary.by_type["refill"] == 0
