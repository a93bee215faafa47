"""Session-scoped state for one user's pantry, shopping list and recommendations.

The session keeps the latest snapshot of each table and performs every
change through the persistence gateway. Operations never raise for domain
or gateway failures; they return Success or Failure for the caller to show.
"""

import logging
from datetime import date
from typing import Any, TypeVar
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from . import pricing
from .errors import DuplicateEntryError, NotFoundError, PantryError, ValidationError
from .gateway import PersistenceGateway, Table
from .item_normalizer import same_item
from .models import (
    DEFAULT_THRESHOLDS,
    InventoryItem,
    PantrySummary,
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
    TrendSummary,
)
from .recommendations import filter_by_type, rank, restock_entry, to_shopping_entry
from .results import Failure, Result, Success
from .summary import (
    available_categories,
    filter_by_category,
    filter_by_status,
    summarize_pantry,
    summarize_recommendations,
    summarize_shopping,
    toggle,
    visible_entries,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_SERVER_FIELDS = {"id", "created_at", "updated_at"}


def _validated(model: type[M], data: dict[str, Any]) -> M:
    """Build a model, reporting bad fields as a ValidationError."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        fields = ", ".join(
            ".".join(str(p) for p in err["loc"]) + f": {err['msg']}" for err in e.errors()
        )
        raise ValidationError(f"Invalid {model.__name__}: {fields}") from e


def _record(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", exclude=_SERVER_FIELDS)


def _find(records: list[M], record_id: UUID | str, table: Table) -> M:
    """Look up a record by id, or by a unique prefix of its id."""
    if isinstance(record_id, str):
        prefix = record_id.strip().lower()
        matches = [r for r in records if str(r.id).startswith(prefix)]  # type: ignore[attr-defined]
        if prefix and len(matches) == 1:
            return matches[0]
        raise NotFoundError(table.value, record_id)
    for record in records:
        if record.id == record_id:  # type: ignore[attr-defined]
            return record
    raise NotFoundError(table.value, record_id)


def _replace(records: list[M], updated: M) -> list[M]:
    return [updated if r.id == updated.id else r for r in records]  # type: ignore[attr-defined]


def _without(records: list[M], record_id: UUID) -> list[M]:
    return [r for r in records if r.id != record_id]  # type: ignore[attr-defined]


class PantrySession:
    """Current snapshots plus the operations that change them."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        user_id: str,
        thresholds: Thresholds = DEFAULT_THRESHOLDS,
    ):
        """Initialize a session.

        Args:
            gateway: Store holding the user's records
            user_id: Authenticated identity; assumed valid
            thresholds: Status thresholds used for derived fields

        Raises:
            ValidationError: If user_id is empty
        """
        if not user_id or not user_id.strip():
            raise ValidationError("A user identity is required to open a session")
        self.gateway = gateway
        self.user_id = user_id
        self.thresholds = thresholds
        self.pantry_items: list[InventoryItem] = []
        self.shopping_entries: list[ShoppingEntry] = []
        self.recommendations: list[Recommendation] = []
        self.price_series: list[PriceSeries] = []

    def _fail(self, message: str, error: PantryError) -> Failure:
        logger.warning("%s: %s", message, error)
        return Failure(error=error, message=message)

    # --- Loading ---

    def refresh(self) -> Result:
        """Reload every table from the gateway."""
        try:
            pantry = [_validated(InventoryItem, r) for r in self.gateway.list(Table.PANTRY_ITEMS)]
            shopping = [
                _validated(ShoppingEntry, r) for r in self.gateway.list(Table.SHOPPING_LIST)
            ]
            recs = [
                _validated(Recommendation, r) for r in self.gateway.list(Table.RECOMMENDATIONS)
            ]
            series = [_validated(PriceSeries, r) for r in self.gateway.list(Table.PRICE_SERIES)]
        except PantryError as e:
            return self._fail("Error fetching data", e)

        self.pantry_items = pantry
        self.shopping_entries = shopping
        self.recommendations = recs
        self.price_series = series
        return Success(
            None,
            f"Loaded {len(pantry)} pantry items, {len(shopping)} shopping entries "
            f"and {len(recs)} recommendations",
        )

    # --- Pantry items ---

    def add_item(
        self,
        name: str,
        quantity: float,
        estimated_duration: int,
        unit: str = "kg",
        category: str = "Other",
        purchase_date: date | None = None,
        current_price: float | None = None,
        last_price: float | None = None,
        days_left: int | None = None,
    ) -> Result[InventoryItem]:
        """Add an item to the pantry."""
        try:
            item = _validated(
                InventoryItem,
                {
                    "name": name,
                    "quantity": quantity,
                    "estimated_duration": estimated_duration,
                    "unit": unit,
                    "category": category,
                    "purchase_date": purchase_date or date.today(),
                    "current_price": current_price,
                    "last_price": last_price,
                    "days_left": days_left,
                },
            )
            stored = _validated(
                InventoryItem, self.gateway.insert(Table.PANTRY_ITEMS, _record(item))
            )
        except PantryError as e:
            return self._fail("Error adding item", e)

        self.pantry_items = [stored, *self.pantry_items]
        return Success(stored, f"{stored.name} has been added to your pantry.")

    def _save_item(self, current: InventoryItem, changes: dict[str, Any]) -> InventoryItem:
        merged = _validated(InventoryItem, {**current.model_dump(), **changes})
        partial = {k: v for k, v in _record(merged).items() if k in changes}
        stored = _validated(
            InventoryItem, self.gateway.update(Table.PANTRY_ITEMS, current.id, partial)
        )
        self.pantry_items = _replace(self.pantry_items, stored)
        return stored

    def update_item(
        self,
        item_id: UUID | str,
        name: str | None = None,
        quantity: float | None = None,
        unit: str | None = None,
        category: str | None = None,
        estimated_duration: int | None = None,
        purchase_date: date | None = None,
        days_left: int | None = None,
    ) -> Result[InventoryItem]:
        """Update editable pantry fields. None leaves a field unchanged."""
        changes = {
            key: value
            for key, value in {
                "name": name,
                "quantity": quantity,
                "unit": unit,
                "category": category,
                "estimated_duration": estimated_duration,
                "purchase_date": purchase_date,
                "days_left": days_left,
            }.items()
            if value is not None
        }
        try:
            current = _find(self.pantry_items, item_id, Table.PANTRY_ITEMS)
            stored = self._save_item(current, changes)
        except PantryError as e:
            return self._fail("Error updating item", e)
        return Success(stored, f"Updated {stored.name}")

    def update_price(self, item_id: UUID | str, price: float) -> Result[InventoryItem]:
        """Record a new current price; the old one becomes the last price."""
        try:
            current = _find(self.pantry_items, item_id, Table.PANTRY_ITEMS)
            changes: dict[str, Any] = {"current_price": price}
            if current.current_price is not None:
                changes["last_price"] = current.current_price
            stored = self._save_item(current, changes)
        except PantryError as e:
            return self._fail("Error updating price", e)
        return Success(stored, f"Updated price of {stored.name} to {price}")

    def consume(self, item_id: UUID | str, amount: float = 1.0) -> Result[InventoryItem | None]:
        """Use up some of an item. Fully consumed items are removed.

        Returns:
            Success with the updated item, or with None once it is used up
        """
        try:
            if amount <= 0:
                raise ValidationError(f"Amount to consume must be positive, got {amount}")
            current = _find(self.pantry_items, item_id, Table.PANTRY_ITEMS)
            remaining = current.quantity - amount
            if remaining <= 0:
                self.gateway.delete(Table.PANTRY_ITEMS, current.id)
                self.pantry_items = _without(self.pantry_items, current.id)
                return Success(None, f"Used up {current.name}; removed from your pantry.")
            stored = self._save_item(current, {"quantity": remaining})
        except PantryError as e:
            return self._fail("Error updating item", e)
        return Success(
            stored,
            f"Used {amount:g} {stored.unit} of {stored.name} (remaining: {stored.quantity:g})",
        )

    def remove_item(self, item_id: UUID | str) -> Result[InventoryItem]:
        """Delete an item from the pantry."""
        try:
            current = _find(self.pantry_items, item_id, Table.PANTRY_ITEMS)
            self.gateway.delete(Table.PANTRY_ITEMS, current.id)
        except PantryError as e:
            return self._fail("Error removing item", e)
        self.pantry_items = _without(self.pantry_items, current.id)
        return Success(current, "Item has been removed from your pantry.")

    def restock(self, item_id: UUID | str, today: date | None = None) -> Result[ShoppingEntry]:
        """Put a pantry item on the shopping list, prioritised by its status."""
        try:
            item = _find(self.pantry_items, item_id, Table.PANTRY_ITEMS)
            entry = self._insert_entry(restock_entry(item, today, self.thresholds))
        except PantryError as e:
            return self._fail("Error adding to shopping list", e)
        return Success(entry, f"{entry.name} has been added to your shopping list.")

    # --- Shopping list ---

    def _check_duplicate(self, name: str) -> None:
        for existing in self.shopping_entries:
            if not existing.is_checked and same_item(existing.name, name):
                raise DuplicateEntryError(existing.name, existing.quantity, existing.unit)

    def _insert_entry(self, entry: ShoppingEntry, allow_duplicate: bool = False) -> ShoppingEntry:
        if not allow_duplicate:
            self._check_duplicate(entry.name)
        stored = _validated(
            ShoppingEntry, self.gateway.insert(Table.SHOPPING_LIST, _record(entry))
        )
        self.shopping_entries = [stored, *self.shopping_entries]
        return stored

    def add_entry(
        self,
        name: str,
        quantity: float = 1.0,
        unit: str = "kg",
        estimated_price: float = 0.0,
        priority: Priority = Priority.MEDIUM,
        category: str = "Other",
        reason: str = "Manually added",
        days_until_needed: int | None = None,
        notes: str | None = None,
        allow_duplicate: bool = False,
    ) -> Result[ShoppingEntry]:
        """Add an entry to the shopping list."""
        try:
            if not name.strip():
                raise ValidationError("Item name must not be empty")
            entry = _validated(
                ShoppingEntry,
                {
                    "name": name.strip(),
                    "quantity": quantity,
                    "unit": unit,
                    "estimated_price": estimated_price,
                    "priority": priority,
                    "category": category,
                    "reason": reason,
                    "days_until_needed": days_until_needed,
                    "notes": notes,
                },
            )
            stored = self._insert_entry(entry, allow_duplicate=allow_duplicate)
        except PantryError as e:
            return self._fail("Error adding item", e)
        return Success(stored, f"{stored.name} has been added to your shopping list.")

    def toggle_entry(self, entry_id: UUID | str) -> Result[ShoppingEntry]:
        """Flip an entry between checked and unchecked."""
        try:
            current = _find(self.shopping_entries, entry_id, Table.SHOPPING_LIST)
            flipped = toggle(current)
            stored = _validated(
                ShoppingEntry,
                self.gateway.update(
                    Table.SHOPPING_LIST, current.id, {"is_checked": flipped.is_checked}
                ),
            )
        except PantryError as e:
            return self._fail("Error updating item", e)
        self.shopping_entries = _replace(self.shopping_entries, stored)
        state = "checked" if stored.is_checked else "unchecked"
        return Success(stored, f"Marked {stored.name} as {state}")

    def update_entry(
        self,
        entry_id: UUID | str,
        name: str | None = None,
        quantity: float | None = None,
        unit: str | None = None,
        estimated_price: float | None = None,
        priority: Priority | None = None,
        category: str | None = None,
        notes: str | None = None,
    ) -> Result[ShoppingEntry]:
        """Update shopping entry fields. None leaves a field unchanged."""
        changes = {
            key: value
            for key, value in {
                "name": name,
                "quantity": quantity,
                "unit": unit,
                "estimated_price": estimated_price,
                "priority": priority,
                "category": category,
                "notes": notes,
            }.items()
            if value is not None
        }
        try:
            current = _find(self.shopping_entries, entry_id, Table.SHOPPING_LIST)
            merged = _validated(ShoppingEntry, {**current.model_dump(), **changes})
            partial = {k: v for k, v in _record(merged).items() if k in changes}
            stored = _validated(
                ShoppingEntry, self.gateway.update(Table.SHOPPING_LIST, current.id, partial)
            )
        except PantryError as e:
            return self._fail("Error updating item", e)
        self.shopping_entries = _replace(self.shopping_entries, stored)
        return Success(stored, f"Updated {stored.name}")

    def remove_entry(self, entry_id: UUID | str) -> Result[ShoppingEntry]:
        """Delete an entry from the shopping list."""
        try:
            current = _find(self.shopping_entries, entry_id, Table.SHOPPING_LIST)
            self.gateway.delete(Table.SHOPPING_LIST, current.id)
        except PantryError as e:
            return self._fail("Error removing item", e)
        self.shopping_entries = _without(self.shopping_entries, current.id)
        return Success(current, f"Removed {current.name} from your shopping list.")

    # --- Recommendations ---

    def add_recommendation(
        self,
        item_name: str,
        rec_type: RecommendationType,
        confidence: float,
        reason: str = "",
        priority: Priority = Priority.MEDIUM,
        savings: float = 0.0,
        days_until_needed: int | None = None,
        current_price: float | None = None,
        previous_price: float | None = None,
    ) -> Result[Recommendation]:
        """Store a recommendation produced elsewhere."""
        try:
            rec = _validated(
                Recommendation,
                {
                    "item_name": item_name,
                    "type": rec_type,
                    "confidence": confidence,
                    "reason": reason,
                    "priority": priority,
                    "savings": savings,
                    "days_until_needed": days_until_needed,
                    "current_price": current_price,
                    "previous_price": previous_price,
                },
            )
            stored = _validated(
                Recommendation, self.gateway.insert(Table.RECOMMENDATIONS, _record(rec))
            )
        except PantryError as e:
            return self._fail("Error adding recommendation", e)
        self.recommendations = [stored, *self.recommendations]
        return Success(stored, f"{stored.item_name} recommendation has been added.")

    def dismiss_recommendation(self, rec_id: UUID | str) -> Result[Recommendation]:
        """Delete a recommendation the user does not want."""
        try:
            current = _find(self.recommendations, rec_id, Table.RECOMMENDATIONS)
            self.gateway.delete(Table.RECOMMENDATIONS, current.id)
        except PantryError as e:
            return self._fail("Error removing recommendation", e)
        self.recommendations = _without(self.recommendations, current.id)
        return Success(current, "Recommendation has been removed.")

    def promote_recommendation(
        self,
        rec_id: UUID | str,
        quantity: float = 1.0,
        unit: str = "kg",
        category: str = "Other",
    ) -> Result[ShoppingEntry]:
        """Add a recommended item to the shopping list."""
        try:
            rec = _find(self.recommendations, rec_id, Table.RECOMMENDATIONS)
            entry = self._insert_entry(to_shopping_entry(rec, quantity, unit, category))
        except PantryError as e:
            return self._fail("Error adding to shopping list", e)
        return Success(entry, f"{entry.name} has been added to your shopping list.")

    # --- Price history ---

    def find_series(self, item_name: str) -> PriceSeries:
        """Price series for an item name.

        Raises:
            NotFoundError: If no series matches the name
        """
        for series in self.price_series:
            if same_item(series.item_name, item_name):
                return series
        raise NotFoundError(Table.PRICE_SERIES.value, item_name)

    def record_price(self, item_name: str, period: str, price: float) -> Result[PriceSeries]:
        """Record an item's price for a period, creating its series if needed."""
        try:
            try:
                current = self.find_series(item_name)
            except NotFoundError:
                current = None

            if current is None:
                series = pricing.record_price(PriceSeries(item_name=item_name), period, price)
                stored = _validated(
                    PriceSeries, self.gateway.insert(Table.PRICE_SERIES, _record(series))
                )
                self.price_series = [stored, *self.price_series]
            else:
                series = pricing.record_price(current, period, price)
                stored = _validated(
                    PriceSeries,
                    self.gateway.update(
                        Table.PRICE_SERIES, current.id, {"points": _record(series)["points"]}
                    ),
                )
                self.price_series = _replace(self.price_series, stored)
        except PantryError as e:
            return self._fail("Error recording price", e)
        except PydanticValidationError as e:
            return self._fail("Error recording price", ValidationError(str(e)))
        return Success(stored, f"Recorded {item_name} at {price} for {period}")

    def price_trend(
        self, item_name: str, time_range: TimeRange = TimeRange.SIX_MONTHS
    ) -> Result[TrendSummary]:
        """Summarize the price history of an item over a time range."""
        try:
            summary = pricing.trend_summary(self.find_series(item_name), time_range)
        except PantryError as e:
            return self._fail("Error loading price trend", e)
        return Success(summary, f"Price trend for {summary.item_name}")

    # --- Read-only views ---

    def pantry_view(
        self,
        category: str = "all",
        status: StockStatus | None = None,
        today: date | None = None,
    ) -> list[InventoryItem]:
        """Pantry items filtered by category and derived status."""
        items = filter_by_category(self.pantry_items, category)
        if status is not None:
            items = filter_by_status(items, status, today, self.thresholds)
        return items

    def categories(self) -> list[str]:
        """Category choices for the pantry view."""
        return available_categories(self.pantry_items)

    def shopping_view(self, show_completed: bool = True) -> list[ShoppingEntry]:
        """Shopping entries, optionally hiding checked ones."""
        return visible_entries(self.shopping_entries, show_completed)

    def recommendation_view(
        self, rec_type: RecommendationType | str = "all"
    ) -> list[Recommendation]:
        """Recommendations of a type, ranked.

        Raises:
            ValidationError: If rec_type is unknown
        """
        return rank(filter_by_type(self.recommendations, rec_type))

    def pantry_summary(self, today: date | None = None) -> PantrySummary:
        return summarize_pantry(self.pantry_items, today, self.thresholds)

    def shopping_summary(self) -> ShoppingSummary:
        return summarize_shopping(self.shopping_entries)

    def recommendation_summary(self) -> RecommendationSummary:
        return summarize_recommendations(self.recommendations)
