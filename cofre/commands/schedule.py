"""Calendar command for viewing projected billing dates."""

import calendar
import sqlite3
import sys
from datetime import datetime

from rich.table import Table

from cofre.commands.common import console, get_settings, parse_billing_date, require_database
from cofre.dates import month_key, month_range
from cofre.domain.billing import calculate_user_share
from cofre.domain.models import Month
from cofre.domain.schedule import occurrences_in_month, subscriptions_on_day
from cofre.domain.subscriptions import format_money
from cofre.store.queries import get_subscription_snapshot


def render_month_grid(month: Month, billing_days: dict[int, int]) -> Table:
    """Build a month grid marking days with billings.

    Args:
        month: Month in YYYY-MM format.
        billing_days: Day of month -> number of billings on that day.

    Returns:
        Rich table laid out Monday to Sunday.
    """
    year, month_int = (int(part) for part in month.split("-"))
    _, _, label = month_range(month)

    table = Table(title=label, show_lines=False)
    for day_name in ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"):
        table.add_column(day_name, justify="right")

    for week in calendar.Calendar(firstweekday=0).monthdayscalendar(year, month_int):
        cells = []
        for day in week:
            if day == 0:
                cells.append("")
            elif day in billing_days:
                cells.append(f"[bold green]{day}•[/bold green]")
            else:
                cells.append(str(day))
        table.add_row(*cells)

    return table


def calendar_command(month: str | None = None, day: str | None = None) -> None:
    """Show billings for a month, or the subscriptions billed on one day.

    Args:
        month: Month to show (YYYY-MM). Defaults to the current month.
        day: Specific day to inspect (YYYY-MM-DD).
    """
    db_path = require_database()
    settings = get_settings()
    now = datetime.now()

    try:
        snapshot = get_subscription_snapshot(db_path, now)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if day:
        try:
            target = parse_billing_date(day)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            sys.exit(1)

        billed = subscriptions_on_day(snapshot, target, settings.horizon_occurrences, now)
        if not billed:
            console.print(f"[dim]No billings on {target:%Y-%m-%d}[/dim]")
            return

        console.print(f"[bold cyan]Billings on {target:%Y-%m-%d}[/bold cyan]\n")
        for sub in billed:
            planned = " [dim](planned)[/dim]" if sub.is_ghost else ""
            console.print(f"  {sub.name}: {format_money(calculate_user_share(sub), settings.currency)}{planned}")
        return

    try:
        target_month = Month(datetime.strptime(month, "%Y-%m").strftime("%Y-%m")) if month else month_key(now)
    except ValueError:
        console.print(f"[red]Invalid month '{month}'. Use YYYY-MM.[/red]")
        sys.exit(1)

    hits = occurrences_in_month(snapshot, target_month, settings.horizon_occurrences, now)

    billing_days: dict[int, int] = {}
    for billing_date, _ in hits:
        billing_days[billing_date.day] = billing_days.get(billing_date.day, 0) + 1

    console.print(render_month_grid(target_month, billing_days))

    if not hits:
        console.print("[dim]No billings projected for this month[/dim]")
        return

    table = Table(title="Billings")
    table.add_column("Date", style="cyan")
    table.add_column("Subscription", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Your share", justify="right")
    for billing_date, sub in hits:
        name = f"{sub.name} [dim](planned)[/dim]" if sub.is_ghost else sub.name
        table.add_row(
            f"{billing_date:%Y-%m-%d}",
            name,
            sub.category or "Other",
            format_money(calculate_user_share(sub), settings.currency),
        )
    console.print(table)
