"""Terminal UI for Pantry Tracker."""

from __future__ import annotations

from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Static,
    TabbedContent,
    TabPane,
)

from .lifecycle import UNDEFINED_CHANGE, describe_item
from .models import Priority, TimeRange
from .notifications import NotificationDispatcher
from .pricing import trend_summary
from .recommendations import ALL_TYPES
from .results import Success
from .session import PantrySession

REC_TYPE_CYCLE = [ALL_TYPES, "refill", "bulk_buy", "alternative", "seasonal"]


class ShoppingEntryFormScreen(ModalScreen[dict[str, Any] | None]):
    """Modal dialog to add a shopping list entry."""

    DEFAULT_CSS = """
    ShoppingEntryFormScreen {
        align: center middle;
    }

    #entry-form-dialog {
        width: 70;
        height: auto;
        padding: 1 2;
        border: round $primary;
        background: $surface;
    }

    #entry-form-actions {
        align-horizontal: right;
        height: auto;
        margin-top: 1;
    }

    .field-label {
        margin-top: 1;
    }
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def compose(self) -> ComposeResult:
        with Vertical(id="entry-form-dialog"):
            yield Label("Add Shopping List Item", classes="field-label")
            yield Label("Name", classes="field-label")
            yield Input(placeholder="Moong Dal", id="name")
            yield Label("Quantity", classes="field-label")
            yield Input(value="1", id="quantity")
            yield Label("Unit", classes="field-label")
            yield Input(value="kg", id="unit")
            yield Label("Estimated Price", classes="field-label")
            yield Input(value="0", id="price")
            yield Label("Priority: high | medium | low", classes="field-label")
            yield Input(value=Priority.MEDIUM.value, id="priority")
            yield Label("Category", classes="field-label")
            yield Input(value="Other", id="category")
            with Horizontal(id="entry-form-actions"):
                yield Button("Cancel", id="cancel")
                yield Button("Add", id="submit", variant="primary")

    def action_cancel(self) -> None:
        self.dismiss(None)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
            return

        if event.button.id != "submit":
            return

        name = self.query_one("#name", Input).value.strip()
        quantity_raw = self.query_one("#quantity", Input).value.strip() or "1"
        unit_raw = self.query_one("#unit", Input).value.strip() or "kg"
        price_raw = self.query_one("#price", Input).value.strip() or "0"
        priority_raw = (
            self.query_one("#priority", Input).value.strip().lower() or Priority.MEDIUM.value
        )
        category_raw = self.query_one("#category", Input).value.strip() or "Other"

        if not name:
            self.app.bell()
            return

        try:
            quantity = float(quantity_raw)
            price = float(price_raw)
            priority = Priority(priority_raw)
        except ValueError:
            self.app.bell()
            return

        self.dismiss(
            {
                "name": name,
                "quantity": quantity,
                "unit": unit_raw,
                "estimated_price": price,
                "priority": priority,
                "category": category_raw,
            }
        )


class PantryTrackerTUI(App[None]):
    """Interactive terminal UI for pantry, suggestions, prices and shopping."""

    TITLE = "Pantry Tracker"
    SUB_TITLE = "Terminal Interface"

    DEFAULT_CSS = """
    #status {
        dock: bottom;
        height: 1;
        padding: 0 1;
        background: $boost;
        color: $text;
    }

    .totals {
        height: 1;
        padding: 0 1;
    }

    DataTable {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("a", "add_entry", "Add Item"),
        Binding("o", "restock", "Add to List"),
        Binding("u", "consume", "Use 1"),
        Binding("t", "toggle", "Toggle"),
        Binding("x", "remove_selected", "Remove"),
        Binding("p", "promote", "Promote"),
        Binding("f", "cycle_filter", "Filter"),
        Binding("g", "cycle_range", "Range"),
    ]

    def __init__(self, session: PantrySession, currency_symbol: str = "₹"):
        super().__init__()
        self.session = session
        self.currency = currency_symbol
        self.dispatcher = NotificationDispatcher(self)
        self._category_index = 0
        self._type_index = 0
        self._range_index = 1
        self._row_ids: dict[str, list[str]] = {
            "pantry": [],
            "suggestions": [],
            "prices": [],
            "shopping": [],
        }

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with TabbedContent(initial="pantry"):
            with TabPane("Pantry", id="pantry"):
                yield Static(id="pantry-totals", classes="totals")
                yield DataTable(id="pantry-table")
            with TabPane("AI Suggestions", id="suggestions"):
                yield Static(id="suggestions-totals", classes="totals")
                yield DataTable(id="suggestions-table")
            with TabPane("Price Intel", id="prices"):
                yield Static(id="prices-totals", classes="totals")
                yield DataTable(id="prices-table")
            with TabPane("Shopping List", id="shopping"):
                yield Static(id="shopping-totals", classes="totals")
                yield DataTable(id="shopping-table")
        yield Static(
            "a:add  o:add to list  u:use one  t:toggle  x:remove  p:promote  f:filter  r:refresh",
            id="status",
        )
        yield Footer()

    def on_mount(self) -> None:
        columns = {
            "pantry": ("Item", "Category", "Qty", "Days Left", "Left", "Status", "Price"),
            "suggestions": ("Item", "Type", "Priority", "Need In", "Confidence", "Savings"),
            "prices": ("Item", "Latest", "Change", "Low", "High", "Best Time"),
            "shopping": ("", "Item", "Qty", "Priority", "Est. Price", "Reason"),
        }
        for tab, names in columns.items():
            table = self.query_one(f"#{tab}-table", DataTable)
            table.cursor_type = "row"
            table.add_columns(*names)

        self.action_refresh()

    # --- Notification sink ---

    def notify_success(self, message: str, data: dict[str, Any] | None = None) -> None:
        self._set_status(message)

    def notify_failure(self, message: str, error_code: str | None = None) -> None:
        self._set_status(f"[red]{message}[/red]")

    # --- Actions ---

    def action_refresh(self) -> None:
        result = self.session.refresh()
        self._redraw()
        self.dispatcher.dispatch(result)

    def action_add_entry(self) -> None:
        self.push_screen(ShoppingEntryFormScreen(), self._handle_add_entry)

    def action_restock(self) -> None:
        item_id = self._require_selection("pantry", "Switch to Pantry tab to add items to the list")
        if item_id is not None:
            self._apply(self.session.restock(item_id))

    def action_consume(self) -> None:
        item_id = self._require_selection("pantry", "Switch to Pantry tab to use items")
        if item_id is not None:
            self._apply(self.session.consume(item_id, 1.0))

    def action_toggle(self) -> None:
        entry_id = self._require_selection(
            "shopping", "Switch to Shopping List tab to check items"
        )
        if entry_id is not None:
            self._apply(self.session.toggle_entry(entry_id))

    def action_promote(self) -> None:
        rec_id = self._require_selection(
            "suggestions", "Switch to AI Suggestions tab to add suggestions"
        )
        if rec_id is not None:
            self._apply(self.session.promote_recommendation(rec_id))

    def action_remove_selected(self) -> None:
        tab = self._active_tab()
        row_id = self._selected_id(tab)
        if row_id is None:
            self._set_status("No item selected")
            return

        if tab == "pantry":
            self._apply(self.session.remove_item(row_id))
        elif tab == "suggestions":
            self._apply(self.session.dismiss_recommendation(row_id))
        elif tab == "shopping":
            self._apply(self.session.remove_entry(row_id))
        else:
            self._set_status("Price history cannot be removed here")

    def action_cycle_filter(self) -> None:
        tab = self._active_tab()
        if tab == "pantry":
            categories = self.session.categories()
            self._category_index = (self._category_index + 1) % len(categories)
        elif tab == "suggestions":
            self._type_index = (self._type_index + 1) % len(REC_TYPE_CYCLE)
        self._redraw()

    def action_cycle_range(self) -> None:
        self._range_index = (self._range_index + 1) % len(TimeRange)
        self._redraw()

    # --- Rendering ---

    def _apply(self, result) -> None:
        self.dispatcher.dispatch(result)
        if isinstance(result, Success):
            self._redraw()

    def _redraw(self) -> None:
        self._refresh_pantry_table()
        self._refresh_suggestions_table()
        self._refresh_prices_table()
        self._refresh_shopping_table()

    def _money(self, amount: float | None) -> str:
        if amount is None:
            return "-"
        return f"{self.currency}{amount:g}"

    def _price_cell(self, data: dict[str, Any]) -> str:
        price = self._money(data["current_price"])
        delta = data["price_delta"]
        if delta == UNDEFINED_CHANGE:
            return f"{price} (change undefined)"
        if not delta or delta["direction"] == "stable":
            return price
        if delta["direction"] == "down":
            return f"{price} save {self._money(delta['savings'])}"
        return f"{price} +{self._money(delta['absolute_delta'])}"

    def _reset_table(self, tab: str) -> DataTable:
        table = self.query_one(f"#{tab}-table", DataTable)
        table.clear(columns=False)
        self._row_ids[tab] = []
        return table

    def _refresh_pantry_table(self) -> None:
        table = self._reset_table("pantry")
        categories = self.session.categories()
        category = categories[self._category_index % len(categories)]

        for item in self.session.pantry_view(category=category):
            data = describe_item(item, thresholds=self.session.thresholds)
            self._row_ids["pantry"].append(data["id"])
            table.add_row(
                item.name,
                item.category,
                f"{item.quantity:g} {item.unit}",
                str(data["days_left"]),
                f"{round(data['remaining_pct'])}%",
                data["status"],
                self._price_cell(data),
                key=data["id"],
            )

        summary = self.session.pantry_summary()
        self.query_one("#pantry-totals", Static).update(
            f"Category: {category}  Total: {summary.total_items}  "
            f"Critical: {summary.critical_count}  Warning: {summary.warning_count}"
        )

    def _refresh_suggestions_table(self) -> None:
        table = self._reset_table("suggestions")
        rec_type = REC_TYPE_CYCLE[self._type_index]

        for rec in self.session.recommendation_view(rec_type):
            rec_id = str(rec.id)
            self._row_ids["suggestions"].append(rec_id)
            table.add_row(
                rec.item_name,
                rec.type.value,
                rec.priority.value,
                "-" if rec.days_until_needed is None else f"{rec.days_until_needed}d",
                f"{rec.confidence:g}%",
                self._money(rec.savings),
                key=rec_id,
            )

        summary = self.session.recommendation_summary()
        self.query_one("#suggestions-totals", Static).update(
            f"Type: {rec_type}  Potential savings: {self._money(summary.total_savings)}"
        )

    def _refresh_prices_table(self) -> None:
        table = self._reset_table("prices")
        time_range = list(TimeRange)[self._range_index]

        for series in self.session.price_series:
            if not series.points:
                continue
            summary = trend_summary(series, time_range)
            change = "undefined"
            if summary.delta is not None:
                change = f"{summary.delta.percent_change:+.1f}% ({summary.delta.direction.value})"
            series_id = str(series.id)
            self._row_ids["prices"].append(series_id)
            table.add_row(
                summary.item_name,
                self._money(summary.latest_price),
                change,
                self._money(summary.lowest_price),
                self._money(summary.highest_price),
                summary.best_time_to_buy or "-",
                key=series_id,
            )

        self.query_one("#prices-totals", Static).update(f"Range: {time_range.value}")

    def _refresh_shopping_table(self) -> None:
        table = self._reset_table("shopping")

        for entry in self.session.shopping_view():
            entry_id = str(entry.id)
            self._row_ids["shopping"].append(entry_id)
            table.add_row(
                "✓" if entry.is_checked else "○",
                entry.name,
                f"{entry.quantity:g} {entry.unit}",
                entry.priority.value,
                self._money(entry.estimated_price),
                entry.reason,
                key=entry_id,
            )

        summary = self.session.shopping_summary()
        self.query_one("#shopping-totals", Static).update(
            f"Items: {summary.total_items}  Completed: {summary.checked_count}  "
            f"Estimated total: {self._money(summary.total_estimated_cost)}"
        )

    def _handle_add_entry(self, payload: dict[str, Any] | None) -> None:
        if payload is None:
            self._set_status("Add item canceled")
            return
        self._apply(self.session.add_entry(**payload))

    def _require_selection(self, tab: str, wrong_tab_message: str) -> str | None:
        if self._active_tab() != tab:
            self._set_status(wrong_tab_message)
            return None
        row_id = self._selected_id(tab)
        if row_id is None:
            self._set_status("No item selected")
        return row_id

    def _selected_id(self, tab: str) -> str | None:
        ids = self._row_ids.get(tab, [])
        table = self.query_one(f"#{tab}-table", DataTable)
        row = table.cursor_row
        if row is None or row < 0 or row >= len(ids):
            return None
        return ids[row]

    def _active_tab(self) -> str:
        tabbed_content = self.query_one(TabbedContent)
        return tabbed_content.active or "pantry"

    def _set_status(self, message: str) -> None:
        self.query_one("#status", Static).update(message)
