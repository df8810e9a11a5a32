"""Dashboard and list commands for viewing subscriptions."""

import sqlite3
import sys
from datetime import datetime
from pathlib import Path

from rich.table import Table

from cofre.commands.common import console, get_settings, require_database
from cofre.dates import short_month_label, to_datetime
from cofre.domain.billing import calculate_user_share, monthly_equivalent
from cofre.domain.dashboard import (
    SORT_FIELDS,
    SORT_ORDERS,
    create_dashboard_summary,
    filter_by_category,
    search_by_name,
    sort_subscriptions,
)
from cofre.domain.models import CategoryName
from cofre.domain.report import category_of, committed_subscriptions, ghost_subscriptions
from cofre.domain.subscriptions import Subscription, effective_shared_count, format_money, normalize_category
from cofre.store.queries import find_subscription_id, get_subscription_snapshot


def resolve_simulation_ids(prefixes: list[str], db_path: Path) -> set[str]:
    """Resolve id prefixes given to --without, warning about unknown ones."""
    resolved: set[str] = set()
    for prefix in prefixes:
        sub_id = find_subscription_id(prefix, db_path)
        if sub_id is None:
            console.print(f"[yellow]Ignoring unknown subscription id '{prefix}'[/yellow]")
            continue
        resolved.add(sub_id)
    return resolved


def dashboard_command(without: list[str] | None = None) -> None:
    """Show spending totals, category split and forecast.

    Args:
        without: Subscription ids to switch off in simulation mode.
    """
    db_path = require_database()
    settings = get_settings()
    currency = settings.currency

    try:
        snapshot = get_subscription_snapshot(db_path)
        deactivated = resolve_simulation_ids(without or [], db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if not snapshot:
        console.print("[dim]No subscriptions yet. Add one with 'cofre add'.[/dim]")
        return

    simulation = bool(deactivated)
    summary = create_dashboard_summary(
        snapshot,
        deactivated_ids=deactivated,
        simulation=simulation,
        reference_now=datetime.now(),
        forecast_months=settings.dashboard_months,
    )

    if simulation:
        console.print("[bold magenta]Simulation mode[/bold magenta] [dim](nothing is changed)[/dim]\n")

    console.print(f"[bold]Monthly spending:[/bold] {format_money(summary.monthly_spending, currency)}")
    if summary.ghost_monthly_spending > 0:
        console.print(f"  [dim]+ {format_money(summary.ghost_monthly_spending, currency)} planned[/dim]")
    console.print(f"[bold]Annual forecast:[/bold] {format_money(summary.annual_forecast, currency)}")
    if summary.ghost_annual_forecast > 0:
        console.print(f"  [dim]+ {format_money(summary.ghost_annual_forecast, currency)} planned[/dim]")
    console.print(f"[bold]Subscriptions:[/bold] {summary.subscription_count}")

    if simulation:
        console.print(
            f"\n[green]Simulated savings: {format_money(summary.simulated_savings, currency)} per month[/green]"
        )

    counts = summary.cycle_counts
    console.print(
        f"[dim]{counts.get('monthly', 0)} monthly, {counts.get('annually', 0)} annual[/dim]\n"
    )

    if summary.most_expensive:
        share = calculate_user_share(summary.most_expensive)
        console.print(
            f"[bold]Most expensive:[/bold] {summary.most_expensive.name} ({format_money(share, currency)})"
        )
    if summary.top_category:
        console.print(
            f"[bold]Top category:[/bold] {summary.top_category.category} "
            f"({format_money(summary.top_category.total, currency)}/month)"
        )

    if summary.categories:
        table = Table(title="Monthly spending by category")
        table.add_column("Category", style="magenta")
        table.add_column("Subscriptions", justify="right")
        table.add_column("Per month", justify="right")
        for cat in summary.categories:
            table.add_row(cat.category, str(cat.count), format_money(cat.total, currency))
        console.print()
        console.print(table)

    if summary.forecast:
        table = Table(title="Next months")
        for bucket in summary.forecast:
            table.add_column(short_month_label(bucket.month), justify="right")
        table.add_row(*(f"{bucket.total:,.2f}" for bucket in summary.forecast))
        console.print(table)

    ghosts = ghost_subscriptions(snapshot)
    if ghosts:
        console.print("\n[bold]Planned subscriptions[/bold] [dim](activate with 'cofre activate ID')[/dim]")
        for ghost in ghosts:
            console.print(
                f"  [dim]{ghost.id[:8]}[/dim] {ghost.name}: {format_money(monthly_equivalent(ghost), currency)}/month"
            )


def render_subscription_table(subscriptions: list[Subscription], currency: str, title: str) -> Table:
    """Build the subscription list table."""
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Cycle")
    table.add_column("Billing date", style="cyan")
    table.add_column("Your share", justify="right")
    table.add_column("Status", justify="center")

    for sub in subscriptions:
        people = effective_shared_count(sub)
        share_display = format_money(calculate_user_share(sub), currency)
        if people > 1:
            share_display += f" [dim](1/{people})[/dim]"

        if not sub.is_active:
            status = "⏸"
        elif sub.is_ghost:
            status = "👻"
        else:
            status = "✓"

        table.add_row(
            sub.id[:8],
            sub.name,
            category_of(sub),
            sub.cycle,
            f"{to_datetime(sub.billing_date):%Y-%m-%d}",
            share_display,
            status,
        )

    return table


def list_command(
    category: str | None = None,
    sort_by: str = "billing_date",
    order: str = "asc",
    search: str | None = None,
    all: bool = False,
) -> None:
    """List subscriptions with filtering, sorting and search.

    Args:
        category: Only show this category.
        sort_by: 'billing_date', 'value' or 'name'.
        order: 'asc' or 'desc'.
        search: Case-insensitive name filter.
        all: Include planned and paused subscriptions.
    """
    if sort_by not in SORT_FIELDS:
        console.print(f"[red]Sort must be one of: {', '.join(SORT_FIELDS)}[/red]")
        sys.exit(1)
    if order not in SORT_ORDERS:
        console.print(f"[red]Order must be one of: {', '.join(SORT_ORDERS)}[/red]")
        sys.exit(1)

    db_path = require_database()
    settings = get_settings()

    try:
        snapshot = get_subscription_snapshot(db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    base = snapshot if all else committed_subscriptions(snapshot)
    category_name: CategoryName | None = normalize_category(category) if category else None

    shown = search_by_name(sort_subscriptions(filter_by_category(base, category_name), sort_by, order), search)

    if not shown:
        console.print("[yellow]No subscriptions found[/yellow]")
        return

    title = f"Subscriptions ({category_name})" if category_name else "Subscriptions"
    console.print(render_subscription_table(shown, settings.currency, f"{title} - {len(shown)}"))
