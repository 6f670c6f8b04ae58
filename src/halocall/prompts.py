"""Console rendering and operator prompts for the setup workflow."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .formatting import format_address, format_date
from .services.customer_svc import CustomerSummary, LocationSummary

Validator = Callable[[str], str | None]


def _truncate(value: str, width: int) -> str:
    return value if len(value) <= width else value[: width - 1] + "…"


def customer_status(customer: CustomerSummary) -> str:
    if customer.is_configured:
        return "[green]Configured[/green]"
    return "[yellow]Needs Setup[/yellow]"


def location_status(location: LocationSummary) -> str:
    if location.has_phone_config:
        return "[green]Ready[/green]"
    return "[yellow]Pending[/yellow]"


def customers_table(customers: Sequence[CustomerSummary], title: str = "Customers") -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Organization", style="cyan")
    table.add_column("Status")
    table.add_column("Env")
    table.add_column("Connected")

    for index, customer in enumerate(customers, start=1):
        table.add_row(
            str(index),
            escape(customer.clerk_organization_name),
            customer_status(customer),
            customer.environment,
            format_date(customer.created_at),
        )
    return table


def locations_table(
    locations: Sequence[LocationSummary], title: str = "Locations", numbered: bool = False
) -> Table:
    table = Table(title=title)
    if numbered:
        table.add_column("#", style="dim", justify="right")
    table.add_column("ID", justify="right")
    table.add_column("Merchant Location ID", style="cyan")
    table.add_column("Address")
    table.add_column("Timezone")
    table.add_column("Status")

    for index, location in enumerate(locations, start=1):
        row = [
            str(location.id),
            escape(_truncate(location.merchant_location_id, 26)),
            escape(_truncate(format_address(location.address), 40)),
            location.timezone,
            location_status(location),
        ]
        if numbered:
            row.insert(0, str(index))
        table.add_row(*row)
    return table


def choose_index(console: Console, message: str, count: int) -> int:
    """Prompt for a 1-based choice and return the 0-based index."""
    while True:
        choice = typer.prompt(message, type=int)
        if 1 <= choice <= count:
            return choice - 1
        console.print(f"[red]Choose a number between 1 and {count}[/red]")


def ask_text(console: Console, message: str, validate: Validator) -> str:
    """Prompt until ``validate`` returns None for the stripped answer."""
    while True:
        value = typer.prompt(message).strip()
        error = validate(value)
        if error is None:
            return value
        console.print(f"[red]{error}[/red]")


def ask_confirm(message: str, default: bool) -> bool:
    return typer.confirm(message, default=default)


def required(label: str) -> Validator:
    def _validate(value: str) -> str | None:
        return None if value else f"{label} is required"

    return _validate


def print_step(console: Console, number: int, title: str) -> None:
    console.print(f"\n[bold cyan]Step {number}:[/bold cyan] [bold]{title}[/bold]\n")


def print_details(console: Console, rows: Sequence[tuple[str, str]]) -> None:
    width = max(len(label) for label, _ in rows) + 1
    for label, value in rows:
        console.print(f"  {label + ':':<{width}} {escape(value)}")


def print_banner(console: Console, title: str, body: str = "", style: str = "bold") -> None:
    console.print(Panel(body or title, title=title if body else None, style=style, expand=False))
