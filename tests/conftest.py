"""Shared test fixtures for Pantry Tracker."""

import pytest

from pantry_tracker.gateway import JSONGateway
from pantry_tracker.models import (
    InventoryItem,
    PricePoint,
    PriceSeries,
    Priority,
    Recommendation,
    RecommendationType,
    ShoppingEntry,
)
from pantry_tracker.session import PantrySession


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create a temporary data directory."""
    data_dir = tmp_path / "test_data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def gateway(temp_data_dir):
    """Create a JSONGateway with temporary storage."""
    return JSONGateway(data_dir=temp_data_dir, user_id="local")


@pytest.fixture
def session(gateway):
    """Create a loaded PantrySession with temporary storage."""
    sess = PantrySession(gateway, "local")
    sess.refresh()
    return sess


@pytest.fixture
def sample_items():
    """Pantry items: one critical, two warning, one healthy."""
    return [
        InventoryItem(
            name="Moong Dal",
            category="Pulses",
            quantity=1,
            estimated_duration=30,
            days_left=3,
            current_price=150,
            last_price=160,
        ),
        InventoryItem(
            name="Basmati Rice",
            category="Grains",
            quantity=5,
            estimated_duration=45,
            days_left=15,
            current_price=280,
            last_price=270,
        ),
        InventoryItem(
            name="Olive Oil",
            category="Oils",
            quantity=1,
            unit="L",
            estimated_duration=60,
            days_left=25,
            current_price=850,
            last_price=900,
        ),
        InventoryItem(
            name="Wheat Flour",
            category="Grains",
            quantity=10,
            estimated_duration=35,
            days_left=8,
            current_price=45,
            last_price=45,
        ),
    ]


@pytest.fixture
def sample_entries():
    """Shopping list with one checked entry."""
    return [
        ShoppingEntry(name="Moong Dal", quantity=2, estimated_price=150, priority=Priority.HIGH),
        ShoppingEntry(name="Basmati Rice", quantity=5, estimated_price=280),
        ShoppingEntry(
            name="Olive Oil",
            quantity=1,
            unit="L",
            estimated_price=850,
            priority=Priority.LOW,
            is_checked=True,
        ),
        ShoppingEntry(name="Wheat Flour", quantity=10, estimated_price=45),
    ]


@pytest.fixture
def sample_recommendations():
    """Recommendations of every type, in storage order."""
    return [
        Recommendation(
            item_name="Moong Dal",
            type=RecommendationType.REFILL,
            reason="Running low - needed in 3 days",
            priority=Priority.HIGH,
            savings=10,
            days_until_needed=3,
            confidence=95,
        ),
        Recommendation(
            item_name="Basmati Rice",
            type=RecommendationType.BULK_BUY,
            reason="Buy 10kg to save on unit price",
            priority=Priority.MEDIUM,
            savings=50,
            days_until_needed=15,
            confidence=78,
        ),
        Recommendation(
            item_name="Organic Moong Dal",
            type=RecommendationType.ALTERNATIVE,
            reason="Similar price, better quality",
            priority=Priority.LOW,
            savings=5,
            days_until_needed=3,
            confidence=68,
        ),
        Recommendation(
            item_name="Mustard Oil",
            type=RecommendationType.SEASONAL,
            reason="Prices drop after harvest",
            priority=Priority.MEDIUM,
            savings=25,
            days_until_needed=20,
            confidence=82,
        ),
    ]


@pytest.fixture
def rice_series():
    """Six months of rice prices."""
    return PriceSeries(
        item_name="Basmati Rice",
        points=[
            PricePoint(period="2024-01", price=260),
            PricePoint(period="2024-02", price=265),
            PricePoint(period="2024-03", price=270),
            PricePoint(period="2024-04", price=275),
            PricePoint(period="2024-05", price=290),
            PricePoint(period="2024-06", price=280),
        ],
        best_time_to_buy="After the kharif harvest",
    )
