"""Pure functions for spending aggregations and forecasts.

This module contains the functional core for reporting operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Two forecasts live here and must not be confused:
- monthly_charge_forecast: raw charges landing in each calendar month
- steady_state_forecast: the committed monthly-equivalent total per month
"""

from collections.abc import Collection, Iterable
from dataclasses import dataclass
from datetime import datetime

from cofre.dates import add_months, month_key, month_start, to_datetime
from cofre.domain.billing import (
    advance,
    annual_equivalent,
    calculate_user_share,
    monthly_equivalent,
    sum_money,
)
from cofre.domain.models import DEFAULT_CATEGORY, ZERO, CategoryName, Money, Month
from cofre.domain.subscriptions import Subscription

DEFAULT_FORECAST_MONTHS = 12
DEFAULT_FORECAST_STEPS = 24
DEFAULT_DASHBOARD_MONTHS = 6


@dataclass(frozen=True)
class CategoryTotal:
    """Immutable monthly-equivalent spending for a category."""

    category: CategoryName
    total: Money
    count: int


@dataclass(frozen=True)
class ForecastBucket:
    """Immutable forecast amount for a calendar month."""

    month: Month
    total: Money


def category_of(subscription: Subscription) -> CategoryName:
    """Category used for grouping, falling back to Other."""
    return subscription.category or DEFAULT_CATEGORY


def committed_subscriptions(
    subscriptions: Iterable[Subscription],
    deactivated_ids: Collection[str] | None = None,
) -> list[Subscription]:
    """Filter subscriptions that count towards real spending.

    Args:
        subscriptions: Subscription snapshot.
        deactivated_ids: Ids provisionally switched off in simulation mode.

    Returns:
        Active, non-ghost subscriptions not in deactivated_ids.
    """
    excluded = deactivated_ids or ()
    return [s for s in subscriptions if s.is_active and not s.is_ghost and s.id not in excluded]


def ghost_subscriptions(subscriptions: Iterable[Subscription]) -> list[Subscription]:
    """Filter active planned subscriptions."""
    return [s for s in subscriptions if s.is_active and s.is_ghost]


def total_monthly_spend(subscriptions: Iterable[Subscription]) -> Money:
    """Sum of monthly equivalents.

    Callers pick the set: committed_subscriptions for real spending,
    ghost_subscriptions for the planned forecast.
    """
    return sum_money(monthly_equivalent(s) for s in subscriptions)


def total_annual_spend(subscriptions: Iterable[Subscription]) -> Money:
    """Sum of annual equivalents."""
    return sum_money(annual_equivalent(s) for s in subscriptions)


def category_breakdown(subscriptions: Iterable[Subscription]) -> list[CategoryTotal]:
    """Group monthly-equivalent spending by category.

    Args:
        subscriptions: Subscriptions to group (usually the committed set).

    Returns:
        CategoryTotal list sorted by total descending. Ties keep the order in
        which categories were first seen.
    """
    totals: dict[CategoryName, Money] = {}
    counts: dict[CategoryName, int] = {}

    for subscription in subscriptions:
        category = category_of(subscription)
        totals[category] = Money(totals.get(category, ZERO) + monthly_equivalent(subscription))
        counts[category] = counts.get(category, 0) + 1

    breakdown = [CategoryTotal(category=cat, total=total, count=counts[cat]) for cat, total in totals.items()]
    # sorted() is stable, so equal totals keep insertion order
    return sorted(breakdown, key=lambda c: c.total, reverse=True)


def top_category(subscriptions: Iterable[Subscription]) -> CategoryTotal | None:
    """Category with the highest monthly-equivalent spending, if any."""
    breakdown = category_breakdown(subscriptions)
    return breakdown[0] if breakdown else None


def forecast_window(now: datetime, months: int = DEFAULT_FORECAST_MONTHS) -> list[Month]:
    """Consecutive month keys starting at the month of now."""
    start = month_start(now)
    return [month_key(add_months(start, i)) for i in range(months)]


def monthly_charge_forecast(
    subscriptions: Iterable[Subscription],
    reference_now: datetime | None = None,
    months: int = DEFAULT_FORECAST_MONTHS,
    steps: int = DEFAULT_FORECAST_STEPS,
) -> list[ForecastBucket]:
    """Forecast the raw charges landing in each upcoming calendar month.

    Each subscription is walked for `steps` occurrences from its billing date.
    Every occurrence inside the window adds the full user share to its month,
    so a monthly subscription fills every bucket while an annual one fills
    only the month it renews in.

    Args:
        subscriptions: Subscriptions to forecast (usually the committed set).
        reference_now: Instant whose month opens the window. If None, uses current time.
        months: Number of month buckets.
        steps: Occurrences walked per subscription.

    Returns:
        One ForecastBucket per month, in calendar order.
    """
    now = to_datetime(reference_now) if reference_now is not None else datetime.now()
    buckets: dict[Month, Money] = {month: ZERO for month in forecast_window(now, months)}

    for subscription in subscriptions:
        share = calculate_user_share(subscription)
        next_date = to_datetime(subscription.billing_date, now)
        for _ in range(steps):
            key = month_key(next_date)
            if key in buckets:
                buckets[key] = Money(buckets[key] + share)
            next_date = advance(next_date, subscription.cycle)

    return [ForecastBucket(month=month, total=total) for month, total in buckets.items()]


def steady_state_forecast(
    subscriptions: Iterable[Subscription],
    reference_now: datetime | None = None,
    months: int = DEFAULT_DASHBOARD_MONTHS,
) -> list[ForecastBucket]:
    """Monthly-equivalent spending repeated over the coming months.

    Args:
        subscriptions: Subscriptions to total (usually the committed set).
        reference_now: Instant whose month opens the series. If None, uses current time.
        months: Number of months in the series.

    Returns:
        One ForecastBucket per month, each carrying the same total.
    """
    now = to_datetime(reference_now) if reference_now is not None else datetime.now()
    total = total_monthly_spend(subscriptions)
    return [ForecastBucket(month=month, total=total) for month in forecast_window(now, months)]
