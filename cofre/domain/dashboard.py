"""Pure functions for the dashboard summary and subscription list.

This module contains the functional core for dashboard operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Simulation mode provisionally switches off some committed subscriptions to
show what would be saved. It never changes stored records.
"""

from collections.abc import Collection, Sequence
from dataclasses import dataclass
from datetime import datetime

from cofre.dates import to_datetime
from cofre.domain.billing import calculate_user_share
from cofre.domain.models import CategoryName, Cycle, Money
from cofre.domain.report import (
    DEFAULT_DASHBOARD_MONTHS,
    CategoryTotal,
    ForecastBucket,
    category_breakdown,
    category_of,
    committed_subscriptions,
    ghost_subscriptions,
    steady_state_forecast,
    total_annual_spend,
    total_monthly_spend,
)
from cofre.domain.subscriptions import Subscription

SORT_FIELDS = ("billing_date", "value", "name")
SORT_ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class DashboardSummary:
    """Immutable dashboard figures for a subscription snapshot."""

    monthly_spending: Money
    annual_forecast: Money
    subscription_count: int
    baseline_monthly_spending: Money
    simulated_savings: Money
    ghost_monthly_spending: Money
    ghost_annual_forecast: Money
    categories: list[CategoryTotal]
    top_category: CategoryTotal | None
    most_expensive: Subscription | None
    cycle_counts: dict[Cycle, int]
    forecast: list[ForecastBucket]


def most_expensive_subscription(subscriptions: Sequence[Subscription]) -> Subscription | None:
    """Subscription with the highest user share; the first one wins ties."""
    best: Subscription | None = None
    best_share = None
    for subscription in subscriptions:
        share = calculate_user_share(subscription)
        if best_share is None or share > best_share:
            best, best_share = subscription, share
    return best


def count_cycles(subscriptions: Sequence[Subscription]) -> dict[Cycle, int]:
    """Count subscriptions per billing cycle, for cycles that are present."""
    counts: dict[Cycle, int] = {}
    for subscription in subscriptions:
        counts[subscription.cycle] = counts.get(subscription.cycle, 0) + 1
    return counts


def create_dashboard_summary(
    subscriptions: Sequence[Subscription],
    deactivated_ids: Collection[str] | None = None,
    simulation: bool = False,
    reference_now: datetime | None = None,
    forecast_months: int = DEFAULT_DASHBOARD_MONTHS,
) -> DashboardSummary:
    """Create the dashboard summary.

    Args:
        subscriptions: Subscription snapshot.
        deactivated_ids: Ids switched off in simulation mode.
        simulation: Whether simulation mode is on. When off, deactivated_ids is ignored.
        reference_now: Instant opening the forecast series. If None, uses current time.
        forecast_months: Length of the steady-state forecast.

    Returns:
        DashboardSummary with all calculations.
    """
    committed = committed_subscriptions(subscriptions)
    simulated = committed_subscriptions(subscriptions, deactivated_ids) if simulation else committed
    ghosts = ghost_subscriptions(subscriptions)

    baseline_monthly = total_monthly_spend(committed)
    monthly = total_monthly_spend(simulated)
    categories = category_breakdown(committed)

    return DashboardSummary(
        monthly_spending=monthly,
        annual_forecast=total_annual_spend(simulated),
        subscription_count=len(simulated),
        baseline_monthly_spending=baseline_monthly,
        simulated_savings=Money(baseline_monthly - monthly),
        ghost_monthly_spending=total_monthly_spend(ghosts),
        ghost_annual_forecast=total_annual_spend(ghosts),
        categories=categories,
        top_category=categories[0] if categories else None,
        most_expensive=most_expensive_subscription(committed),
        cycle_counts=count_cycles(committed),
        forecast=steady_state_forecast(committed, reference_now, forecast_months),
    )


def filter_by_category(
    subscriptions: Sequence[Subscription],
    category: CategoryName | None,
) -> list[Subscription]:
    """Keep subscriptions of one category; None keeps everything."""
    if category is None:
        return list(subscriptions)
    return [s for s in subscriptions if category_of(s) == category]


def sort_subscriptions(
    subscriptions: Sequence[Subscription],
    sort_by: str = "billing_date",
    order: str = "asc",
) -> list[Subscription]:
    """Sort subscriptions for display.

    Args:
        subscriptions: Subscriptions to sort.
        sort_by: "billing_date", "value" (user share) or "name" (case-insensitive).
        order: "asc" or "desc".

    Returns:
        New sorted list. Equal keys keep their input order.
    """
    reverse = order == "desc"

    if sort_by == "value":
        return sorted(subscriptions, key=calculate_user_share, reverse=reverse)
    if sort_by == "name":
        return sorted(subscriptions, key=lambda s: (s.name or "").lower(), reverse=reverse)
    return sorted(subscriptions, key=lambda s: to_datetime(s.billing_date), reverse=reverse)


def search_by_name(subscriptions: Sequence[Subscription], query: str | None) -> list[Subscription]:
    """Case-insensitive substring search on the subscription name."""
    if not query:
        return list(subscriptions)
    needle = query.lower()
    return [s for s in subscriptions if needle in (s.name or "").lower()]
