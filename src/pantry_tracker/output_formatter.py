"""Output formatting for CLI and programmatic use."""

import json
from datetime import date, datetime
from typing import Any
from uuid import UUID

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .lifecycle import UNDEFINED_CHANGE


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for output."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, date):
            return obj.isoformat()
        return super().default(obj)


STATUS_STYLE = {"critical": "red", "warning": "yellow", "healthy": "green"}
PRIORITY_STYLE = {"high": "red", "medium": "yellow", "low": "dim"}
TYPE_LABELS = {
    "refill": "Refill Alert",
    "bulk_buy": "Bulk Savings",
    "alternative": "Better Options",
    "seasonal": "Seasonal Deals",
}


class OutputFormatter:
    """Formats output for both Rich terminal and JSON modes."""

    def __init__(self, json_mode: bool = False, currency_symbol: str = "₹"):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
            currency_symbol: Symbol prefixed to money amounts in Rich mode
        """
        self.json_mode = json_mode
        self.currency = currency_symbol
        self.console = Console()

    def money(self, amount: float | None) -> str:
        """Format a plain amount for display."""
        if amount is None:
            return "-"
        return f"{self.currency}{amount:,.2f}".rstrip("0").rstrip(".")

    def output(self, data: dict[str, Any], message: str = "") -> None:
        """Output data in appropriate format.

        Args:
            data: Data to output
            message: Optional message for Rich mode
        """
        if self.json_mode:
            self._output_json(data)
        else:
            self._output_rich(data, message)

    def _output_json(self, data: dict[str, Any]) -> None:
        """Output as JSON to stdout."""
        print(json.dumps(data, cls=JSONEncoder, indent=2))

    def _output_rich(self, data: dict[str, Any], message: str) -> None:
        """Output with Rich formatting."""
        if message:
            self.console.print(f"[green]✓[/green] {message}")

        payload = data.get("data", {})
        if "pantry" in payload:
            self._render_pantry(payload)
        elif "pantry_item" in payload:
            self._render_pantry_item(payload["pantry_item"])
        elif "pantry_summary" in payload:
            self._render_pantry_summary(payload["pantry_summary"])
        elif "shopping_list" in payload:
            self._render_shopping_list(payload)
        elif "shopping_entry" in payload:
            self._render_shopping_entry(payload["shopping_entry"])
        elif "recommendations" in payload:
            self._render_recommendations(payload)
        elif "trend" in payload:
            self._render_trend(payload["trend"])
        elif "price_delta" in payload:
            self._render_price_delta(payload["price_delta"])

    def _render_pantry(self, payload: dict) -> None:
        """Render pantry items with derived status."""
        items = payload["pantry"]

        if not items:
            self.console.print("[dim]No items in your pantry[/dim]")
            return

        table = Table(title="Your Pantry Items", show_header=True, header_style="bold cyan")
        table.add_column("Item", style="cyan")
        table.add_column("Category", style="yellow")
        table.add_column("Qty", justify="right")
        table.add_column("Days Left", justify="right")
        table.add_column("Left", justify="right")
        table.add_column("Status")
        table.add_column("Price", justify="right")
        table.add_column("ID", style="dim")

        for item in items:
            style = STATUS_STYLE.get(item["status"], "white")
            table.add_row(
                item["name"],
                item.get("category", "Other"),
                f"{item['quantity']:g} {item.get('unit', '')}".strip(),
                str(item["days_left"]),
                f"{round(item['remaining_pct'])}%",
                f"[{style}]{item['status']}[/{style}]",
                self._price_change(item),
                str(item["id"])[:8],
            )

        self.console.print(table)
        if "summary" in payload:
            self._render_pantry_summary(payload["summary"])

    def _price_change(self, item: dict) -> str:
        """Current price with the evaluated change against the last price."""
        current = item.get("current_price")
        if current is None:
            return "-"
        delta = item.get("price_delta")
        if delta == UNDEFINED_CHANGE:
            return f"{self.money(current)} [dim]change undefined[/dim]"
        if not delta or delta["direction"] == "stable":
            return self.money(current)
        if delta["direction"] == "down":
            return f"{self.money(current)} [green]Save {self.money(delta['savings'])}[/green]"
        return f"{self.money(current)} [red]Increase {self.money(delta['absolute_delta'])}[/red]"

    def _render_pantry_item(self, item: dict) -> None:
        """Render a single pantry item."""
        lines = [
            f"[bold]{item['name']}[/bold] ({item.get('category', 'Other')})",
            f"Quantity: {item['quantity']:g} {item.get('unit', '')}",
        ]
        if "status" in item:
            style = STATUS_STYLE.get(item["status"], "white")
            lines.append(
                f"Status: [{style}]{item['status']}[/{style}] - "
                f"{item['days_left']} days left ({round(item['remaining_pct'])}%)"
            )
        if item.get("current_price") is not None:
            lines.append(f"Price: {self._price_change(item)}")
        lines.append(f"[dim]ID: {item['id']}[/dim]")
        self.console.print(Panel("\n".join(lines), expand=False))

    def _render_pantry_summary(self, summary: dict) -> None:
        """Render dashboard counts."""
        self.console.print(
            f"\nTotal items: {summary['total_items']}  "
            f"[red]Critical: {summary['critical_count']}[/red]  "
            f"[yellow]Warning: {summary['warning_count']}[/yellow]  "
            f"[green]Healthy: {summary['healthy_count']}[/green]  "
            f"Value: {self.money(summary['total_value'])}"
        )

    def _render_shopping_list(self, payload: dict) -> None:
        """Render the shopping list."""
        entries = payload["shopping_list"]

        if not entries:
            self.console.print("[dim]Your shopping list is empty[/dim]")
        else:
            table = Table(title="Shopping List", show_header=True, header_style="bold cyan")
            table.add_column("", width=1)
            table.add_column("Item", style="cyan")
            table.add_column("Qty", justify="right")
            table.add_column("Priority")
            table.add_column("Est. Price", justify="right")
            table.add_column("Reason", style="dim")
            table.add_column("ID", style="dim")

            for entry in entries:
                check = "[green]✓[/green]" if entry["is_checked"] else "○"
                name = f"[strike]{entry['name']}[/strike]" if entry["is_checked"] else entry["name"]
                style = PRIORITY_STYLE.get(entry["priority"], "white")
                reason = entry.get("reason", "")
                if entry.get("days_until_needed") is not None:
                    reason = f"{reason} (need in {entry['days_until_needed']}d)"
                table.add_row(
                    check,
                    name,
                    f"{entry['quantity']:g} {entry.get('unit', '')}".strip(),
                    f"[{style}]{entry['priority']}[/{style}]",
                    self.money(entry.get("estimated_price")),
                    reason,
                    str(entry["id"])[:8],
                )

            self.console.print(table)

        summary = payload.get("summary")
        if summary:
            self.console.print(
                f"\nItems: {summary['total_items']}  "
                f"Completed: {summary['checked_count']}  "
                f"Estimated total: [bold]{self.money(summary['total_estimated_cost'])}[/bold]"
            )

    def _render_shopping_entry(self, entry: dict) -> None:
        """Render a single shopping entry."""
        state = "checked" if entry["is_checked"] else "to buy"
        self.console.print(
            Panel(
                f"[bold]{entry['name']}[/bold] - {entry['quantity']:g} {entry.get('unit', '')}\n"
                f"Priority: {entry['priority']}  Status: {state}\n"
                f"Estimated price: {self.money(entry.get('estimated_price'))}\n"
                f"[dim]ID: {entry['id']}[/dim]",
                expand=False,
            )
        )

    def _render_recommendations(self, payload: dict) -> None:
        """Render ranked recommendations."""
        recs = payload["recommendations"]

        if not recs:
            self.console.print("[dim]No recommendations at this time[/dim]")
        else:
            self.console.print("\n[bold]Smart Recommendations[/bold]")
            for rec in recs:
                style = PRIORITY_STYLE.get(rec["priority"], "white")
                need = (
                    f", needed in {rec['days_until_needed']} days"
                    if rec.get("days_until_needed") is not None
                    else ""
                )
                savings = (
                    f" [green]save {self.money(rec['savings'])}[/green]" if rec["savings"] else ""
                )
                self.console.print(
                    f"  [{style}]●[/{style}] [bold]{rec['item_name']}[/bold] "
                    f"[dim]{TYPE_LABELS.get(rec['type'], rec['type'])}[/dim]"
                    f"{savings}\n"
                    f"    {rec['reason']} ({rec['confidence']:g}% confidence{need}) "
                    f"[dim]{str(rec['id'])[:8]}[/dim]"
                )

        summary = payload.get("summary")
        if summary:
            self.console.print(
                f"\nPotential savings: [bold green]{self.money(summary['total_savings'])}"
                "[/bold green]"
            )

    def _render_trend(self, trend: dict) -> None:
        """Render a price trend."""
        table = Table(
            title=f"{trend['item_name']} ({trend['time_range']})",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("Period")
        table.add_column("Price", justify="right")
        for point in trend["points"]:
            table.add_row(point["period"], self.money(point["price"]))
        self.console.print(table)

        self.console.print(
            f"Latest: {self.money(trend['latest_price'])}  "
            f"Low: {self.money(trend['lowest_price'])}  "
            f"High: {self.money(trend['highest_price'])}  "
            f"Average: {self.money(trend['average_price'])}"
        )
        if trend.get("delta"):
            self._render_price_delta(trend["delta"])
        else:
            self.console.print("[dim]Change: undefined[/dim]")
        if trend.get("best_time_to_buy"):
            self.console.print(f"Best time to buy: {trend['best_time_to_buy']}")

    def _render_price_delta(self, delta: dict) -> None:
        """Render a price movement."""
        direction = delta["direction"]
        pct = delta["percent_change"]
        sign = "+" if pct > 0 else ""
        if direction == "down":
            self.console.print(
                f"[green]↓ {sign}{pct:.1f}%[/green] Save {self.money(delta['absolute_delta'])}"
            )
        elif direction == "up":
            self.console.print(
                f"[red]↑ {sign}{pct:.1f}%[/red] Increase {self.money(delta['absolute_delta'])}"
            )
        else:
            self.console.print("[dim]→ Stable pricing[/dim]")

    def error(self, message: str, error_code: str | None = None) -> None:
        """Output error message.

        Args:
            message: Error message
            error_code: Optional error code
        """
        if self.json_mode:
            output = {"success": False, "error": message}
            if error_code:
                output["error_code"] = error_code
            print(json.dumps(output))
        else:
            self.console.print(f"[red]✗ Error:[/red] {message}")

    def success(self, message: str, data: dict | None = None) -> None:
        """Output success message.

        Args:
            message: Success message
            data: Optional data to include
        """
        if self.json_mode:
            output: dict[str, Any] = {"success": True, "message": message}
            if data:
                output["data"] = data
            print(json.dumps(output, cls=JSONEncoder))
        else:
            self.console.print(f"[green]✓[/green] {message}")

    def notify_success(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Show a successful operation, rendering its data when present."""
        if data is None:
            self.success(message)
            return
        self.output({"success": True, "message": message, "data": data}, message)

    def notify_failure(self, message: str, error_code: str | None = None) -> None:
        """Show a failed operation."""
        self.error(message, error_code=error_code)
