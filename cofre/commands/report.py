"""Report command for category analysis and the 12-month charge forecast."""

import sqlite3
import sys
from datetime import datetime
from decimal import Decimal

from cofre.commands.common import console, get_settings, require_database
from cofre.dates import short_month_label
from cofre.domain.models import Money
from cofre.domain.report import category_breakdown, committed_subscriptions, monthly_charge_forecast
from cofre.domain.subscriptions import format_money
from cofre.store.queries import get_subscription_snapshot

BAR_WIDTH = 30


def calculate_histogram_bar_length(
    amount: Decimal,
    max_amount: Decimal,
    bar_width: int,
) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)


def render_bar_line(label: str, amount: Money, max_amount: Money, currency: str, histogram: bool) -> None:
    """Render one labelled amount, with an optional histogram bar."""
    amount_display = format_money(amount, currency)
    if histogram:
        bar = "█" * calculate_histogram_bar_length(amount, max_amount, BAR_WIDTH)
        console.print(f"  {label:12} {amount_display:>14} {bar}")
    else:
        console.print(f"  {label}: {amount_display}")


def report_command(histogram: bool = True) -> None:
    """Show spending by category and the raw charges expected per month."""
    db_path = require_database()
    settings = get_settings()
    currency = settings.currency
    now = datetime.now()

    try:
        snapshot = get_subscription_snapshot(db_path, now)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    committed = committed_subscriptions(snapshot)
    if not committed:
        console.print("[dim]No active subscriptions yet[/dim]")
        return

    categories = category_breakdown(committed)
    console.print("[bold cyan]Monthly spending by category[/bold cyan]\n")
    max_category = Money(max(c.total for c in categories))
    for cat in categories:
        render_bar_line(cat.category, cat.total, max_category, currency, histogram)

    forecast = monthly_charge_forecast(
        committed,
        reference_now=now,
        months=settings.forecast_months,
        steps=settings.forecast_steps,
    )
    console.print(f"\n[bold cyan]Expected charges (next {len(forecast)} months)[/bold cyan]\n")
    max_bucket = Money(max(b.total for b in forecast))
    for bucket in forecast:
        render_bar_line(short_month_label(bucket.month), bucket.total, max_bucket, currency, histogram)

    total = sum((b.total for b in forecast), Decimal(0))
    console.print(f"\n  [bold]Total expected:[/bold] {format_money(total, currency)}")
