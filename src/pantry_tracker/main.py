"""CLI entry point for Pantry Tracker."""

import logging
from datetime import date
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from .config import ConfigManager
from .errors import PantryError
from .gateway import create_gateway
from .lifecycle import describe_item
from .models import Priority, RecommendationType, StockStatus, TimeRange
from .notifications import NotificationDispatcher
from .output_formatter import OutputFormatter
from .pricing import evaluate
from .results import Failure
from .session import PantrySession

app = typer.Typer(
    name="pantry",
    help="Pantry tracking with restock recommendations and price trends",
    no_args_is_help=True,
)

# Global state for formatter, config and session (set by callback)
formatter: OutputFormatter = OutputFormatter()
config: ConfigManager | None = None
session: PantrySession | None = None
dispatcher: NotificationDispatcher = NotificationDispatcher(formatter)


def configure_logging(level: str) -> None:
    """Send log records to stderr through Rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def get_config() -> ConfigManager:
    """Get or create ConfigManager instance."""
    global config
    if config is None:
        config = ConfigManager()
    return config


def get_session() -> PantrySession:
    """Get the session, loading the latest records from the gateway."""
    global session
    if session is None:
        cfg = get_config()
        gateway = create_gateway(data_dir=cfg.data.storage_dir, user_id=cfg.session.user_id)
        session = PantrySession(gateway, cfg.session.user_id, cfg.status.thresholds)

    result = session.refresh()
    if isinstance(result, Failure):
        dispatcher.dispatch(result)
        raise typer.Exit(code=1)
    return session


def _finish(result, data_key: str | None = None, render=None) -> None:
    """Dispatch a session result and exit non-zero on failure."""
    data = None
    if data_key is not None and result.ok and result.value is not None:
        value = render(result.value) if render else result.value.model_dump(mode="json")
        data = {data_key: value}
    if not dispatcher.dispatch(result, data):
        raise typer.Exit(code=1)


def _describe(item) -> dict:
    thresholds = session.thresholds if session else get_config().status.thresholds
    return describe_item(item, thresholds=thresholds)


@app.callback()
def main(
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON for programmatic use")
    ] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path")] = None,
    user: Annotated[str | None, typer.Option("--user", help="User identity to act as")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose logging")] = False,
) -> None:
    """Pantry Tracker CLI - Know what is running low and what it costs."""
    global formatter, config, session, dispatcher

    try:
        config = ConfigManager()
    except PantryError as e:
        OutputFormatter(json_mode=json_output).error(str(e), error_code=e.error_code)
        raise typer.Exit(code=1)

    configure_logging("DEBUG" if verbose else config.logging.level)
    formatter = OutputFormatter(json_mode=json_output, currency_symbol=config.display.currency_symbol)
    dispatcher = NotificationDispatcher(formatter)

    # CLI options override config, which overrides defaults
    if data_dir:
        config.data.storage_dir = data_dir
    if user is not None:
        config.session.user_id = user

    try:
        gateway = create_gateway(data_dir=config.data.storage_dir, user_id=config.session.user_id)
        session = PantrySession(gateway, config.session.user_id, config.status.thresholds)
    except PantryError as e:
        formatter.error(str(e), error_code=e.error_code)
        raise typer.Exit(code=1)


# --- Pantry items ---
items_app = typer.Typer(help="Pantry item commands")
app.add_typer(items_app, name="items")


@items_app.command("add")
def items_add(
    name: Annotated[str, typer.Argument(help="Item name")],
    quantity: Annotated[float, typer.Option("--quantity", "-q", help="Quantity in stock")] = 1.0,
    duration: Annotated[
        int | None, typer.Option("--duration", "-d", help="Days a full purchase lasts")
    ] = None,
    unit: Annotated[str | None, typer.Option("--unit", "-u", help="Unit of measurement")] = None,
    category: Annotated[str | None, typer.Option("--category", "-c", help="Category")] = None,
    purchased: Annotated[
        str | None, typer.Option("--purchased", help="Purchase date (YYYY-MM-DD)")
    ] = None,
    price: Annotated[float | None, typer.Option("--price", "-p", help="Current price")] = None,
    last_price: Annotated[
        float | None, typer.Option("--last-price", help="Previous price paid")
    ] = None,
    days_left: Annotated[
        int | None, typer.Option("--days-left", help="Days until it runs out")
    ] = None,
) -> None:
    """Add an item to the pantry."""
    cfg = get_config()
    try:
        purchase_date = date.fromisoformat(purchased) if purchased else None
    except ValueError:
        formatter.error(f"Invalid purchase date: {purchased}", error_code="VALIDATION_ERROR")
        raise typer.Exit(code=1)

    result = get_session().add_item(
        name=name,
        quantity=quantity,
        estimated_duration=duration or cfg.defaults.estimated_duration,
        unit=unit or cfg.defaults.unit,
        category=category or cfg.defaults.category,
        purchase_date=purchase_date,
        current_price=price,
        last_price=last_price,
        days_left=days_left,
    )
    _finish(result, "pantry_item", _describe)


@items_app.command("list")
def items_list(
    category: Annotated[str, typer.Option("--category", "-c", help="Filter by category")] = "all",
    status: Annotated[
        StockStatus | None, typer.Option("--status", "-s", help="Filter by status")
    ] = None,
) -> None:
    """View pantry items with their derived status."""
    sess = get_session()
    items = sess.pantry_view(category=category, status=status)

    output_data = {
        "success": True,
        "data": {
            "pantry": [_describe(i) for i in items],
            "count": len(items),
            "categories": sess.categories(),
            "summary": sess.pantry_summary().model_dump(mode="json"),
        },
    }
    formatter.output(output_data, f"{len(items)} items in your pantry")


@items_app.command("summary")
def items_summary() -> None:
    """Show pantry dashboard counts."""
    summary = get_session().pantry_summary()
    formatter.output({"success": True, "data": {"pantry_summary": summary.model_dump(mode="json")}})


@items_app.command("update")
def items_update(
    item_id: Annotated[str, typer.Argument(help="Item ID (or unique prefix)")],
    name: Annotated[str | None, typer.Option("--name", help="New name")] = None,
    quantity: Annotated[float | None, typer.Option("--quantity", "-q", help="Quantity")] = None,
    unit: Annotated[str | None, typer.Option("--unit", "-u", help="Unit")] = None,
    category: Annotated[str | None, typer.Option("--category", "-c", help="Category")] = None,
    duration: Annotated[
        int | None, typer.Option("--duration", "-d", help="Days a full purchase lasts")
    ] = None,
    days_left: Annotated[
        int | None, typer.Option("--days-left", help="Days until it runs out")
    ] = None,
) -> None:
    """Update a pantry item."""
    result = get_session().update_item(
        item_id,
        name=name,
        quantity=quantity,
        unit=unit,
        category=category,
        estimated_duration=duration,
        days_left=days_left,
    )
    _finish(result, "pantry_item", _describe)


@items_app.command("price")
def items_price(
    item_id: Annotated[str, typer.Argument(help="Item ID (or unique prefix)")],
    price: Annotated[float, typer.Argument(help="New current price")],
) -> None:
    """Record a new price; the old price becomes the last price."""
    _finish(get_session().update_price(item_id, price), "pantry_item", _describe)


@items_app.command("consume")
def items_consume(
    item_id: Annotated[str, typer.Argument(help="Item ID (or unique prefix)")],
    amount: Annotated[float, typer.Option("--amount", "-a", help="Amount used")] = 1.0,
) -> None:
    """Use up some of an item; fully used items are removed."""
    _finish(get_session().consume(item_id, amount), "pantry_item", _describe)


@items_app.command("remove")
def items_remove(
    item_id: Annotated[str, typer.Argument(help="Item ID (or unique prefix)")],
) -> None:
    """Remove an item from the pantry."""
    _finish(get_session().remove_item(item_id), "pantry_item", _describe)


@items_app.command("restock")
def items_restock(
    item_id: Annotated[str, typer.Argument(help="Item ID (or unique prefix)")],
) -> None:
    """Add a pantry item to the shopping list."""
    _finish(get_session().restock(item_id), "shopping_entry")


# --- Shopping list ---
shop_app = typer.Typer(help="Shopping list commands")
app.add_typer(shop_app, name="shop")


@shop_app.command("add")
def shop_add(
    name: Annotated[str, typer.Argument(help="Item name")],
    quantity: Annotated[float, typer.Option("--quantity", "-q", help="Quantity to buy")] = 1.0,
    unit: Annotated[str | None, typer.Option("--unit", "-u", help="Unit of measurement")] = None,
    price: Annotated[float, typer.Option("--price", "-p", help="Estimated price")] = 0.0,
    priority: Annotated[
        Priority, typer.Option("--priority", help="Entry priority")
    ] = Priority.MEDIUM,
    category: Annotated[str | None, typer.Option("--category", "-c", help="Category")] = None,
    reason: Annotated[str, typer.Option("--reason", help="Why it is needed")] = "Manually added",
    days: Annotated[int | None, typer.Option("--days", help="Days until needed")] = None,
    notes: Annotated[str | None, typer.Option("--notes", "-n", help="Additional notes")] = None,
    force: Annotated[bool, typer.Option("--force", "-f", help="Allow duplicate entries")] = False,
) -> None:
    """Add an entry to the shopping list."""
    cfg = get_config()
    result = get_session().add_entry(
        name=name,
        quantity=quantity,
        unit=unit or cfg.defaults.unit,
        estimated_price=price,
        priority=priority,
        category=category or cfg.defaults.category,
        reason=reason,
        days_until_needed=days,
        notes=notes,
        allow_duplicate=force,
    )
    _finish(result, "shopping_entry")


@shop_app.command("list")
def shop_list(
    hide_completed: Annotated[
        bool, typer.Option("--hide-completed", help="Hide checked entries")
    ] = False,
) -> None:
    """View the shopping list and its estimated total."""
    sess = get_session()
    entries = sess.shopping_view(show_completed=not hide_completed)

    output_data = {
        "success": True,
        "data": {
            "shopping_list": [e.model_dump(mode="json") for e in entries],
            "summary": sess.shopping_summary().model_dump(mode="json"),
        },
    }
    formatter.output(output_data)


@shop_app.command("toggle")
def shop_toggle(
    entry_id: Annotated[str, typer.Argument(help="Entry ID (or unique prefix)")],
) -> None:
    """Check or uncheck an entry."""
    _finish(get_session().toggle_entry(entry_id), "shopping_entry")


@shop_app.command("update")
def shop_update(
    entry_id: Annotated[str, typer.Argument(help="Entry ID (or unique prefix)")],
    name: Annotated[str | None, typer.Option("--name", help="New name")] = None,
    quantity: Annotated[float | None, typer.Option("--quantity", "-q", help="Quantity")] = None,
    unit: Annotated[str | None, typer.Option("--unit", "-u", help="Unit")] = None,
    price: Annotated[float | None, typer.Option("--price", "-p", help="Estimated price")] = None,
    priority: Annotated[
        Priority | None, typer.Option("--priority", help="Entry priority")
    ] = None,
    category: Annotated[str | None, typer.Option("--category", "-c", help="Category")] = None,
    notes: Annotated[str | None, typer.Option("--notes", "-n", help="Notes")] = None,
) -> None:
    """Update a shopping list entry."""
    result = get_session().update_entry(
        entry_id,
        name=name,
        quantity=quantity,
        unit=unit,
        estimated_price=price,
        priority=priority,
        category=category,
        notes=notes,
    )
    _finish(result, "shopping_entry")


@shop_app.command("remove")
def shop_remove(
    entry_id: Annotated[str, typer.Argument(help="Entry ID (or unique prefix)")],
) -> None:
    """Remove an entry from the shopping list."""
    _finish(get_session().remove_entry(entry_id), "shopping_entry")


# --- Recommendations ---
recs_app = typer.Typer(help="Recommendation commands")
app.add_typer(recs_app, name="recs")


@recs_app.command("list")
def recs_list(
    rec_type: Annotated[
        str, typer.Option("--type", "-t", help="all, refill, bulk_buy, alternative or seasonal")
    ] = "all",
) -> None:
    """View ranked recommendations."""
    sess = get_session()
    try:
        recs = sess.recommendation_view(rec_type)
    except PantryError as e:
        formatter.error(str(e), error_code=e.error_code)
        raise typer.Exit(code=1)

    output_data = {
        "success": True,
        "data": {
            "recommendations": [r.model_dump(mode="json") for r in recs],
            "summary": sess.recommendation_summary().model_dump(mode="json"),
        },
    }
    formatter.output(output_data)


@recs_app.command("add")
def recs_add(
    item_name: Annotated[str, typer.Argument(help="Recommended item")],
    rec_type: Annotated[
        RecommendationType, typer.Option("--type", "-t", help="Recommendation type")
    ] = RecommendationType.REFILL,
    confidence: Annotated[
        float, typer.Option("--confidence", help="Confidence score (0-100)")
    ] = 50.0,
    reason: Annotated[str, typer.Option("--reason", help="Why it is recommended")] = "",
    priority: Annotated[
        Priority, typer.Option("--priority", help="Priority")
    ] = Priority.MEDIUM,
    savings: Annotated[float, typer.Option("--savings", help="Potential savings")] = 0.0,
    days: Annotated[int | None, typer.Option("--days", help="Days until needed")] = None,
    price: Annotated[float | None, typer.Option("--price", help="Current price")] = None,
    previous_price: Annotated[
        float | None, typer.Option("--previous-price", help="Previous price")
    ] = None,
) -> None:
    """Store a recommendation."""
    result = get_session().add_recommendation(
        item_name=item_name,
        rec_type=rec_type,
        confidence=confidence,
        reason=reason,
        priority=priority,
        savings=savings,
        days_until_needed=days,
        current_price=price,
        previous_price=previous_price,
    )
    _finish(result, "recommendation")


@recs_app.command("dismiss")
def recs_dismiss(
    rec_id: Annotated[str, typer.Argument(help="Recommendation ID (or unique prefix)")],
) -> None:
    """Dismiss a recommendation."""
    _finish(get_session().dismiss_recommendation(rec_id), "recommendation")


@recs_app.command("promote")
def recs_promote(
    rec_id: Annotated[str, typer.Argument(help="Recommendation ID (or unique prefix)")],
    quantity: Annotated[float, typer.Option("--quantity", "-q", help="Quantity to buy")] = 1.0,
    unit: Annotated[str | None, typer.Option("--unit", "-u", help="Unit")] = None,
    category: Annotated[str | None, typer.Option("--category", "-c", help="Category")] = None,
) -> None:
    """Add a recommended item to the shopping list."""
    cfg = get_config()
    result = get_session().promote_recommendation(
        rec_id,
        quantity=quantity,
        unit=unit or cfg.defaults.unit,
        category=category or cfg.defaults.category,
    )
    _finish(result, "shopping_entry")


# --- Prices ---
price_app = typer.Typer(help="Price history commands")
app.add_typer(price_app, name="price")


@price_app.command("record")
def price_record(
    item: Annotated[str, typer.Argument(help="Item name")],
    period: Annotated[str, typer.Argument(help="Period label, e.g. 2024-06")],
    price: Annotated[float, typer.Argument(help="Price for the period")],
) -> None:
    """Record an item's price for a period."""
    _finish(get_session().record_price(item, period, price), "price_series")


@price_app.command("trend")
def price_trend(
    item: Annotated[str, typer.Argument(help="Item name")],
    time_range: Annotated[
        TimeRange, typer.Option("--range", "-r", help="Time range")
    ] = TimeRange.SIX_MONTHS,
) -> None:
    """Show the price trend for an item."""
    _finish(get_session().price_trend(item, time_range), "trend")


@price_app.command("compare")
def price_compare(
    current: Annotated[float, typer.Argument(help="Current price")],
    previous: Annotated[float, typer.Argument(help="Previous price")],
) -> None:
    """Compare two prices."""
    try:
        delta = evaluate(current, previous)
    except PantryError as e:
        formatter.error(str(e), error_code=e.error_code)
        raise typer.Exit(code=1)

    data = delta.model_dump(mode="json")
    data["savings"] = delta.savings
    formatter.output({"success": True, "data": {"price_delta": data}})


@app.command()
def tui() -> None:
    """Launch the interactive terminal UI."""
    from .tui import PantryTrackerTUI

    PantryTrackerTUI(get_session(), currency_symbol=get_config().display.currency_symbol).run()


if __name__ == "__main__":
    app()
