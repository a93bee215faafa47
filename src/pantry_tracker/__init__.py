"""Pantry Tracker - Pantry status, restock recommendations and price trends."""

from .config import ConfigManager
from .errors import (
    DivisionError,
    DuplicateEntryError,
    NotFoundError,
    PantryError,
    UpstreamError,
    ValidationError,
)
from .gateway import JSONGateway, PersistenceGateway, Table, create_gateway
from .lifecycle import classify, classify_item, effective_days_left, remaining_ratio
from .models import (
    DEFAULT_THRESHOLDS,
    InventoryItem,
    PantrySummary,
    PriceDelta,
    PricePoint,
    PriceSeries,
    Priority,
    Recommendation,
    RecommendationSummary,
    RecommendationType,
    ShoppingEntry,
    ShoppingSummary,
    StockStatus,
    Thresholds,
    TimeRange,
    TrendDirection,
    TrendSummary,
)
from .notifications import NotificationDispatcher
from .output_formatter import OutputFormatter
from .pricing import evaluate, trend_summary
from .recommendations import filter_by_type, rank, total_savings
from .results import Failure, Result, Success
from .session import PantrySession
from .summary import (
    available_categories,
    filter_by_category,
    summarize_pantry,
    summarize_shopping,
    toggle,
)

__version__ = "0.1.0"

__all__ = [
    "available_categories",
    "classify",
    "classify_item",
    "ConfigManager",
    "create_gateway",
    "DEFAULT_THRESHOLDS",
    "DivisionError",
    "DuplicateEntryError",
    "effective_days_left",
    "evaluate",
    "Failure",
    "filter_by_category",
    "filter_by_type",
    "InventoryItem",
    "JSONGateway",
    "NotFoundError",
    "NotificationDispatcher",
    "OutputFormatter",
    "PantryError",
    "PantrySession",
    "PantrySummary",
    "PersistenceGateway",
    "PriceDelta",
    "PricePoint",
    "PriceSeries",
    "Priority",
    "rank",
    "Recommendation",
    "RecommendationSummary",
    "RecommendationType",
    "remaining_ratio",
    "Result",
    "ShoppingEntry",
    "ShoppingSummary",
    "StockStatus",
    "Success",
    "summarize_pantry",
    "summarize_shopping",
    "Table",
    "Thresholds",
    "TimeRange",
    "toggle",
    "total_savings",
    "TrendDirection",
    "TrendSummary",
    "trend_summary",
    "UpstreamError",
    "ValidationError",
]
