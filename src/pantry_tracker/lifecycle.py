"""Stock status and remaining-supply rules for pantry items."""

from datetime import date

from .errors import DivisionError, ValidationError
from .models import DEFAULT_THRESHOLDS, InventoryItem, StockStatus, Thresholds
from .pricing import evaluate_item

UNDEFINED_CHANGE = "undefined"


def _require_duration(estimated_duration: float) -> None:
    if estimated_duration <= 0:
        raise ValidationError(
            f"Estimated duration must be positive, got {estimated_duration}"
        )


def remaining_ratio(days_left: float, estimated_duration: float) -> float:
    """Percentage of supply remaining.

    Args:
        days_left: Days until the item runs out (negative once expired)
        estimated_duration: Days a full purchase is expected to last

    Returns:
        Percentage in [0, 100]; expired stock is 0 and stock outlasting
        its estimate is 100

    Raises:
        ValidationError: If estimated_duration is zero or negative
    """
    _require_duration(estimated_duration)
    return min(100.0, max(0.0, days_left / estimated_duration) * 100)


def classify(
    days_left: float,
    estimated_duration: float,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> StockStatus:
    """Derive stock status from days left and estimated duration.

    Raises:
        ValidationError: If estimated_duration is zero or negative
    """
    _require_duration(estimated_duration)
    ratio = days_left / estimated_duration
    if ratio < thresholds.critical_ratio:
        return StockStatus.CRITICAL
    if ratio < thresholds.warning_ratio:
        return StockStatus.WARNING
    return StockStatus.HEALTHY


def effective_days_left(item: InventoryItem, today: date | None = None) -> int:
    """Stored days-left, or days-left derived from the purchase date."""
    if item.days_left is not None:
        return item.days_left
    today = today or date.today()
    return item.estimated_duration - (today - item.purchase_date).days


def classify_item(
    item: InventoryItem,
    today: date | None = None,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> StockStatus:
    """Derive the status of a pantry item."""
    return classify(effective_days_left(item, today), item.estimated_duration, thresholds)


def item_ratio(item: InventoryItem, today: date | None = None) -> float:
    """Remaining-supply percentage of a pantry item."""
    return remaining_ratio(effective_days_left(item, today), item.estimated_duration)


def price_change(item: InventoryItem) -> dict | str | None:
    """Price movement of an item for display.

    Returns:
        The evaluated delta with its savings, "undefined" when the last price
        was 0, or None when the item lacks a current or last price
    """
    if item.current_price is None or item.last_price is None:
        return None
    try:
        delta = evaluate_item(item)
    except DivisionError:
        return UNDEFINED_CHANGE
    data = delta.model_dump(mode="json")
    data["savings"] = delta.savings
    return data


def describe_item(
    item: InventoryItem,
    today: date | None = None,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> dict:
    """Serialize an item together with its derived fields."""
    days_left = effective_days_left(item, today)
    data = item.model_dump(mode="json")
    data["days_left"] = days_left
    data["status"] = classify(days_left, item.estimated_duration, thresholds).value
    data["remaining_pct"] = round(remaining_ratio(days_left, item.estimated_duration), 1)
    data["price_delta"] = price_change(item)
    return data
