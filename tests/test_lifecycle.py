"""Tests for stock status and remaining-supply rules."""

from datetime import date, timedelta

import pytest

from pantry_tracker.errors import ValidationError
from pantry_tracker.lifecycle import (
    classify,
    classify_item,
    describe_item,
    effective_days_left,
    item_ratio,
    remaining_ratio,
)
from pantry_tracker.models import InventoryItem, StockStatus, Thresholds

TODAY = date(2024, 7, 1)


class TestRemainingRatio:
    """Tests for remaining_ratio."""

    def test_ratio_is_percentage(self):
        assert remaining_ratio(15, 30) == pytest.approx(50.0)

    def test_full_supply(self):
        assert remaining_ratio(30, 30) == pytest.approx(100.0)

    def test_expired_stock_clamped_to_zero(self):
        """Negative days left never gives a negative ratio."""
        assert remaining_ratio(-5, 30) == 0.0

    @pytest.mark.parametrize("days_left", [31, 45, 300])
    def test_ratio_capped_at_full(self, days_left):
        """Stock that outlasts its estimate shows a full bar."""
        assert remaining_ratio(days_left, 30) == 100.0

    @pytest.mark.parametrize("duration", [0, -10])
    def test_non_positive_duration_rejected(self, duration):
        with pytest.raises(ValidationError):
            remaining_ratio(5, duration)


class TestClassify:
    """Tests for classify."""

    def test_critical(self):
        """Moong Dal: 3 of 30 days left."""
        assert classify(3, 30) == StockStatus.CRITICAL

    def test_warning(self):
        """Basmati: 15 of 45 days left."""
        assert classify(15, 45) == StockStatus.WARNING

    def test_healthy(self):
        """Olive Oil: 25 of 60 days left."""
        assert classify(25, 60) == StockStatus.HEALTHY

    def test_critical_boundary_is_warning(self):
        """Exactly 15% is no longer critical."""
        assert classify(15, 100) == StockStatus.WARNING

    def test_warning_boundary_is_healthy(self):
        """Exactly 40% is healthy."""
        assert classify(40, 100) == StockStatus.HEALTHY

    def test_expired_is_critical(self):
        assert classify(-2, 30) == StockStatus.CRITICAL

    def test_zero_duration_rejected(self):
        with pytest.raises(ValidationError):
            classify(3, 0)

    def test_custom_thresholds(self):
        thresholds = Thresholds(critical_ratio=0.25, warning_ratio=0.5)
        assert classify(20, 100, thresholds) == StockStatus.CRITICAL
        assert classify(45, 100, thresholds) == StockStatus.WARNING
        assert classify(50, 100, thresholds) == StockStatus.HEALTHY


class TestItemRules:
    """Tests for rules applied to InventoryItem."""

    def test_stored_days_left_wins(self):
        item = InventoryItem(name="Salt", quantity=1, estimated_duration=90, days_left=80)
        assert effective_days_left(item, TODAY) == 80

    def test_days_left_derived_from_purchase_date(self):
        item = InventoryItem(
            name="Sugar",
            quantity=1,
            estimated_duration=30,
            purchase_date=TODAY - timedelta(days=20),
        )
        assert effective_days_left(item, TODAY) == 10
        assert classify_item(item, TODAY) == StockStatus.WARNING

    def test_days_left_goes_negative_after_duration(self):
        item = InventoryItem(
            name="Milk",
            quantity=1,
            estimated_duration=7,
            purchase_date=TODAY - timedelta(days=10),
        )
        assert effective_days_left(item, TODAY) == -3
        assert item_ratio(item, TODAY) == 0.0
        assert classify_item(item, TODAY) == StockStatus.CRITICAL

    def test_sample_items_classified(self, sample_items):
        statuses = [classify_item(i, TODAY) for i in sample_items]
        assert statuses == [
            StockStatus.CRITICAL,
            StockStatus.WARNING,
            StockStatus.HEALTHY,
            StockStatus.WARNING,
        ]


class TestDescribeItem:
    """Tests for describe_item."""

    def test_includes_derived_fields(self, sample_items):
        data = describe_item(sample_items[0], TODAY)
        assert data["name"] == "Moong Dal"
        assert data["days_left"] == 3
        assert data["status"] == "critical"
        assert data["remaining_pct"] == 10.0

    def test_is_json_ready(self):
        item = InventoryItem(
            name="Ghee", quantity=1, estimated_duration=60, purchase_date=date(2024, 6, 1)
        )
        data = describe_item(item, TODAY)
        assert data["purchase_date"] == "2024-06-01"
        assert isinstance(data["id"], str)
        assert data["days_left"] == 30
        assert data["remaining_pct"] == 50.0

    def test_remaining_pct_capped_for_long_lasting_stock(self):
        item = InventoryItem(name="Salt", quantity=1, estimated_duration=30, days_left=45)
        data = describe_item(item, TODAY)
        assert data["remaining_pct"] == 100.0
        assert data["status"] == "healthy"

    def test_price_delta_from_evaluator(self, sample_items):
        delta = describe_item(sample_items[0], TODAY)["price_delta"]
        assert delta["direction"] == "down"
        assert delta["absolute_delta"] == 10
        assert delta["savings"] == 10

    def test_price_rise_has_no_savings(self, sample_items):
        delta = describe_item(sample_items[1], TODAY)["price_delta"]
        assert delta["direction"] == "up"
        assert delta["savings"] == 0.0

    def test_price_delta_missing_price(self):
        item = InventoryItem(name="Salt", quantity=1, estimated_duration=90, current_price=20)
        assert describe_item(item, TODAY)["price_delta"] is None

    def test_price_delta_from_free_item_is_undefined(self):
        item = InventoryItem(
            name="Samples", quantity=1, estimated_duration=30, current_price=20, last_price=0
        )
        assert describe_item(item, TODAY)["price_delta"] == "undefined"


class TestStatusOrdering:
    """Status only worsens as days left fall."""

    SEVERITY = {StockStatus.HEALTHY: 0, StockStatus.WARNING: 1, StockStatus.CRITICAL: 2}

    @pytest.mark.parametrize("duration", [7, 30, 45, 365])
    def test_monotonic_in_days_left(self, duration):
        severities = [self.SEVERITY[classify(d, duration)] for d in range(duration, -1, -1)]
        assert severities == sorted(severities)

    def test_ratio_bounds(self):
        assert remaining_ratio(0, 30) == 0.0
        assert remaining_ratio(30, 30) == 100.0
        assert all(0 <= remaining_ratio(d, 30) <= 100 for d in range(100))
