"""HaloCall CLI - Main entry point."""

import asyncio
import logging

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .errors import HaloCallError, SetupDeclined

app = typer.Typer(
    name="halocall",
    help="HaloCall — customer phone number and voice agent provisioning",
    no_args_is_help=True,
)
console = Console()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log database activity"),
):
    """Provision phone numbers and voice agents for connected customers."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[logging.StreamHandler()])


def _print_error(exc: HaloCallError) -> None:
    console.print(f"[red]Error: {escape(exc.message)}[/red]")
    if exc.hint:
        console.print(f"[dim]{escape(exc.hint)}[/dim]")


# ============================================================================
# Setup Command
# ============================================================================


@app.command("setup")
def setup(
    user_id: str = typer.Option(
        None,
        "--user-id", "-u",
        help="Clerk user ID to grant access to the configured location",
    ),
):
    """Link a phone number and voice agent to a customer location.

    Walks through choosing a recently connected customer and one of its
    synced locations, then collects the phone number and agent ID and
    writes the configuration after confirmation.
    """
    from .database import open_session
    from .workflow import SetupWorkflow

    async def _run():
        async with open_session() as db:
            workflow = SetupWorkflow(
                db,
                console,
                user_id=user_id,
                customer_limit=settings.customer_list_limit,
            )
            return await workflow.run()

    try:
        console.print(Panel("[bold]HaloCall Customer Setup (Interactive)[/bold]", expand=False))
        result = asyncio.run(_run())
    except SetupDeclined as e:
        console.print(f"\n[yellow]{e.message}[/yellow]")
        raise typer.Exit(0)
    except (typer.Abort, KeyboardInterrupt):
        console.print("\n[yellow]Setup cancelled.[/yellow]")
        raise typer.Exit(0)
    except HaloCallError as e:
        _print_error(e)
        raise typer.Exit(1)
    except (SQLAlchemyError, OSError) as e:
        console.print(f"[red]Setup failed: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(
        Panel(
            "[bold green]Setup complete![/bold green]\n\n"
            "Next steps:\n"
            "  1. Verify the agent appears in the customer dashboard\n"
            f"  2. Make a test call to {result.plan.phone_number}\n"
            "  3. Notify the customer that their AI agent is ready",
            title="Done",
            expand=False,
        )
    )


# ============================================================================
# Customer Commands
# ============================================================================


@app.command("customers")
def customers(
    limit: int = typer.Option(None, "--limit", "-l", min=1, help="Maximum customers to show"),
):
    """List recently connected customers and their setup status."""
    from .database import open_session
    from .prompts import customers_table
    from .services.customer_svc import list_recent_active_customers

    async def _list():
        async with open_session() as db:
            return await list_recent_active_customers(db, limit or settings.customer_list_limit)

    try:
        rows = asyncio.run(_list())
    except HaloCallError as e:
        _print_error(e)
        raise typer.Exit(1)
    except (SQLAlchemyError, OSError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not rows:
        console.print("[yellow]No customers found. Make sure customers have connected Square first.[/yellow]")
        return

    console.print(customers_table(rows, title="Recently Connected Customers"))
    configured = sum(1 for c in rows if c.is_configured)
    console.print(f"\n[dim]{configured} of {len(rows)} configured[/dim]")


@app.command()
def version():
    """Show version information."""
    from . import __version__

    console.print(f"HaloCall v{__version__}")


if __name__ == "__main__":
    app()
