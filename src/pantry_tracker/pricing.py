"""Price movement and trend calculations."""

from .errors import DivisionError, ValidationError
from .models import (
    InventoryItem,
    PriceDelta,
    PricePoint,
    PriceSeries,
    TimeRange,
    TrendDirection,
    TrendSummary,
)


def evaluate(current: float, previous: float) -> PriceDelta:
    """Compare a current price against a previous one.

    Args:
        current: Latest price
        previous: Price it is compared against

    Returns:
        PriceDelta with direction, percent change and absolute delta

    Raises:
        ValidationError: If either price is negative
        DivisionError: If previous is 0
    """
    if current < 0 or previous < 0:
        raise ValidationError(f"Prices must not be negative ({current}, {previous})")
    if previous == 0:
        raise DivisionError(current, previous)

    if current < previous:
        direction = TrendDirection.DOWN
    elif current > previous:
        direction = TrendDirection.UP
    else:
        direction = TrendDirection.STABLE

    return PriceDelta(
        direction=direction,
        percent_change=(current - previous) / previous * 100,
        absolute_delta=abs(current - previous),
    )


def evaluate_item(item: InventoryItem) -> PriceDelta:
    """Compare a pantry item's current price with its last price."""
    if item.current_price is None or item.last_price is None:
        raise ValidationError(f"{item.name} needs both a current and a last price")
    return evaluate(item.current_price, item.last_price)


def window(series: PriceSeries, time_range: TimeRange = TimeRange.SIX_MONTHS) -> list[PricePoint]:
    """Most recent points of a series covered by the time range."""
    return series.points[-time_range.periods :]


def record_price(series: PriceSeries, period: str, price: float) -> PriceSeries:
    """Return a copy of the series with a price recorded for a period.

    An existing period keeps its position and takes the new price;
    a new period is appended as the newest point.
    """
    point = PricePoint(period=period, price=price)
    points = list(series.points)
    for i, existing in enumerate(points):
        if existing.period == period:
            points[i] = point
            break
    else:
        points.append(point)
    return series.model_copy(update={"points": points})


def trend_summary(
    series: PriceSeries, time_range: TimeRange = TimeRange.SIX_MONTHS
) -> TrendSummary:
    """Summarize a series over a time range.

    The delta compares the last two points of the window. It is None when the
    earlier of the two is 0, which callers report as an undefined change.

    Raises:
        ValidationError: If the series has no points
    """
    points = window(series, time_range)
    if not points:
        raise ValidationError(f"No price history for {series.item_name}")

    prices = [p.price for p in points]
    latest = prices[-1]
    previous = prices[-2] if len(prices) > 1 else latest

    delta = None
    if previous > 0:
        delta = evaluate(latest, previous)
    elif latest == previous:
        delta = PriceDelta(direction=TrendDirection.STABLE, percent_change=0.0, absolute_delta=0.0)

    return TrendSummary(
        item_name=series.item_name,
        time_range=time_range,
        points=points,
        latest_price=latest,
        lowest_price=min(prices),
        highest_price=max(prices),
        average_price=round(sum(prices) / len(prices), 2),
        delta=delta,
        best_time_to_buy=series.best_time_to_buy,
    )
