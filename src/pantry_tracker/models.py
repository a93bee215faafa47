"""Core data models for Pantry Tracker."""

from datetime import date, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator


class StockStatus(str, Enum):
    """Health of a pantry item's remaining supply."""

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


class Priority(str, Enum):
    """Priority levels for shopping entries and recommendations."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendationType(str, Enum):
    """Kinds of restock recommendation."""

    REFILL = "refill"
    BULK_BUY = "bulk_buy"
    ALTERNATIVE = "alternative"
    SEASONAL = "seasonal"


class TrendDirection(str, Enum):
    """Direction of a price movement."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class TimeRange(str, Enum):
    """Trend windows offered by the price view."""

    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    ONE_YEAR = "1y"

    @property
    def periods(self) -> int:
        """Number of monthly periods covered by the range."""
        return {"3m": 3, "6m": 6, "1y": 12}[self.value]


class Thresholds(BaseModel):
    """Ratio cut-offs used to derive stock status."""

    critical_ratio: float = Field(default=0.15, gt=0)
    warning_ratio: float = Field(default=0.40, le=1)

    @model_validator(mode="after")
    def _check_order(self) -> "Thresholds":
        if self.critical_ratio >= self.warning_ratio:
            raise ValueError("critical_ratio must be lower than warning_ratio")
        return self


DEFAULT_THRESHOLDS = Thresholds()


class InventoryItem(BaseModel):
    """A pantry item.

    Status is never stored: it is derived from days-left and the
    estimated duration whenever it is read.
    """

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1)
    category: str = "Other"
    quantity: float = Field(gt=0)
    unit: str = "kg"
    purchase_date: date = Field(default_factory=date.today)
    estimated_duration: int = Field(gt=0)
    current_price: float | None = Field(default=None, ge=0)
    last_price: float | None = Field(default=None, ge=0)
    days_left: int | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class ShoppingEntry(BaseModel):
    """An entry on the shopping list."""

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1)
    quantity: float = Field(default=1.0, gt=0)
    unit: str = "kg"
    estimated_price: float = Field(default=0.0, ge=0)
    priority: Priority = Priority.MEDIUM
    category: str = "Other"
    is_checked: bool = False
    reason: str = "Manually added"
    days_until_needed: int | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class Recommendation(BaseModel):
    """A restock suggestion produced by an external process."""

    id: UUID = Field(default_factory=uuid4)
    item_name: str = Field(min_length=1)
    type: RecommendationType
    reason: str = ""
    priority: Priority = Priority.MEDIUM
    savings: float = Field(default=0.0, ge=0)
    days_until_needed: int | None = None
    current_price: float | None = Field(default=None, ge=0)
    previous_price: float | None = Field(default=None, ge=0)
    confidence: float = Field(ge=0, le=100)
    created_at: datetime = Field(default_factory=datetime.now)


class PricePoint(BaseModel):
    """One price observation for a period (e.g. '2024-06')."""

    period: str = Field(min_length=1)
    price: float = Field(ge=0)


class PriceSeries(BaseModel):
    """Chronological price history for one item, oldest first."""

    id: UUID = Field(default_factory=uuid4)
    item_name: str = Field(min_length=1)
    points: list[PricePoint] = Field(default_factory=list)
    best_time_to_buy: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def latest(self) -> PricePoint | None:
        """Most recent price point."""
        if not self.points:
            return None
        return self.points[-1]


class PriceDelta(BaseModel):
    """Movement between two price points."""

    direction: TrendDirection
    percent_change: float
    absolute_delta: float

    @property
    def savings(self) -> float:
        """Amount saved; only a fall in price counts as a saving."""
        if self.direction == TrendDirection.DOWN:
            return self.absolute_delta
        return 0.0


class TrendSummary(BaseModel):
    """Summary statistics for a windowed price series."""

    item_name: str
    time_range: TimeRange
    points: list[PricePoint]
    latest_price: float
    lowest_price: float
    highest_price: float
    average_price: float
    delta: PriceDelta | None = None
    best_time_to_buy: str | None = None


class PantrySummary(BaseModel):
    """Counts and value for the pantry dashboard."""

    total_items: int
    healthy_count: int
    warning_count: int
    critical_count: int
    total_value: float


class ShoppingSummary(BaseModel):
    """Counts and cost for the shopping list."""

    total_items: int
    checked_count: int
    unchecked_count: int
    total_estimated_cost: float


class RecommendationSummary(BaseModel):
    """Counts and savings across recommendations."""

    total: int
    total_savings: float
    by_type: dict[str, int] = Field(default_factory=dict)
