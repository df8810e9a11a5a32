"""CLI entry point for cofre."""

import typer

from cofre.commands.admin import backup_command, config_command, init_command
from cofre.commands.dashboard import dashboard_command, list_command
from cofre.commands.importer import import_command
from cofre.commands.report import report_command
from cofre.commands.schedule import calendar_command
from cofre.commands.subscriptions import (
    activate_command,
    add_command,
    delete_command,
    edit_command,
    share_command,
    toggle_active_command,
)
from cofre.logs import set_verbose

app = typer.Typer(
    name="cofre",
    help="Cofre Forte - Keep track of your subscriptions and what they cost you",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging on stderr"),
) -> None:
    """Cofre Forte - Keep track of your subscriptions and what they cost you."""
    set_verbose(verbose)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
    migrate: bool = typer.Option(False, "--migrate", help="Only update the database schema"),
) -> None:
    """Initialize cofre database and configuration."""
    init_command(force, migrate)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: ~/.cofre/backups)"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(output_dir)


@app.command(name="config")
def config(
    key: str = typer.Argument(None, help="Setting to change (e.g. currency, reports.forecast_months)"),
    value: str = typer.Argument(None, help="New value"),
) -> None:
    """Show your settings, or change one."""
    config_command(key, value)


@app.command()
def add(
    name: str,
    value: str = typer.Argument(..., help="Amount charged per cycle (e.g. 39.90)"),
    billing_date: str = typer.Argument(..., help="Next billing date (YYYY-MM-DD or DD/MM/YYYY)"),
    cycle: str = typer.Option("monthly", "--cycle", "-c", help="'monthly' or 'annually'"),
    category: str = typer.Option("Other", "--category", help="Streaming, Work, Wellness, Games or Other"),
    shared_with: int = typer.Option(None, "--shared-with", "-s", help="Number of people splitting the cost"),
    ghost: bool = typer.Option(False, "--ghost", "-g", help="Register as a planned subscription"),
    description: str = typer.Option(None, "--description", "-d", help="Free text note"),
) -> None:
    """Add a subscription."""
    add_command(name, value, billing_date, cycle, category, shared_with, ghost, description)


@app.command()
def edit(
    subscription_id: str = typer.Argument(..., help="Subscription id (or its first characters)"),
    name: str = typer.Option(None, "--name", help="New name"),
    value: str = typer.Option(None, "--value", help="New amount per cycle"),
    billing_date: str = typer.Option(None, "--billing-date", help="New billing date"),
    cycle: str = typer.Option(None, "--cycle", "-c", help="'monthly' or 'annually'"),
    category: str = typer.Option(None, "--category", help="New category"),
    shared_with: int = typer.Option(None, "--shared-with", "-s", help="Number of people splitting the cost"),
    description: str = typer.Option(None, "--description", "-d", help="New note (empty to clear)"),
) -> None:
    """Edit one of your subscriptions."""
    edit_command(subscription_id, name, value, billing_date, cycle, category, shared_with, description)


@app.command()
def delete(
    subscription_id: str = typer.Argument(..., help="Subscription id (or its first characters)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation"),
) -> None:
    """Delete a subscription."""
    delete_command(subscription_id, yes)


@app.command()
def activate(
    subscription_id: str = typer.Argument(..., help="Subscription id (or its first characters)"),
) -> None:
    """Commit to a planned subscription."""
    activate_command(subscription_id)


@app.command()
def pause(
    subscription_id: str = typer.Argument(..., help="Subscription id (or its first characters)"),
) -> None:
    """Pause a subscription (excluded from everything until resumed)."""
    toggle_active_command(subscription_id, active=False)


@app.command()
def resume(
    subscription_id: str = typer.Argument(..., help="Subscription id (or its first characters)"),
) -> None:
    """Resume a paused subscription."""
    toggle_active_command(subscription_id, active=True)


@app.command(name="list")
def list_subscriptions(
    category: str = typer.Option(None, "--category", help="Only show this category"),
    sort_by: str = typer.Option("billing_date", "--sort", help="Sort by 'billing_date', 'value' or 'name'"),
    order: str = typer.Option("asc", "--order", help="'asc' or 'desc'"),
    search: str = typer.Option(None, "--search", help="Filter by name"),
    all: bool = typer.Option(False, "--all", "-a", help="Include planned and paused subscriptions"),
) -> None:
    """List your subscriptions."""
    list_command(category, sort_by, order, search, all)


@app.command()
def dashboard(
    without: list[str] = typer.Option(
        None, "--without", "-w", help="Simulate cancelling this subscription (repeatable)"
    ),
) -> None:
    """Show your spending dashboard."""
    dashboard_command(without)


@app.command()
def calendar(
    month: str = typer.Option(None, "--month", help="Month to show (YYYY-MM)"),
    day: str = typer.Option(None, "--day", help="Show what is billed on this day"),
) -> None:
    """Show your upcoming billing dates."""
    calendar_command(month, day)


@app.command()
def report(
    histogram: bool = typer.Option(True, help="Show histogram bars"),
) -> None:
    """Show spending by category and expected charges for the next months."""
    report_command(histogram)


@app.command()
def share(
    subscription_id: str = typer.Argument(..., help="Subscription id (or its first characters)"),
) -> None:
    """Print a payment reminder for a shared subscription."""
    share_command(subscription_id)


@app.command(name="import")
def import_(
    file_path: str = typer.Argument(..., help="CSV or JSON export of subscriptions"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List skipped records"),
) -> None:
    """Import subscriptions from a CSV or JSON file."""
    import_command(file_path, verbose)


if __name__ == "__main__":
    app()
