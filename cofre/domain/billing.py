"""Pure functions for billing projection and cost normalization.

This module contains the functional core for billing operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Cycle policy: only the "monthly" literal steps by one month. Every other
cycle value, including unknown ones, steps by one year. Only "annually" is
divided by 12 for the monthly equivalent; unknown cycles count their share
unchanged in both equivalents.
"""

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal

from cofre.dates import add_months, add_years, as_local_naive, is_same_day, to_datetime
from cofre.domain.models import ANNUALLY, MONTHLY, Cycle, Money
from cofre.domain.subscriptions import Subscription, coerce_money, effective_shared_count

DEFAULT_HORIZON_OCCURRENCES = 12
MONTHS_PER_YEAR = 12


def is_monthly(cycle: Cycle) -> bool:
    """Check whether a cycle steps monthly."""
    return cycle == MONTHLY


def advance(billing_date: datetime, cycle: Cycle) -> datetime:
    """Move a billing date forward by one cycle period.

    Args:
        billing_date: Current occurrence.
        cycle: Billing cycle.

    Returns:
        Next occurrence (+1 month for monthly, +1 year otherwise).
    """
    if is_monthly(cycle):
        return add_months(billing_date, 1)
    return add_years(billing_date, 1)


def project_occurrences(
    subscription: Subscription,
    horizon_occurrences: int = DEFAULT_HORIZON_OCCURRENCES,
    reference_now: datetime | None = None,
) -> list[datetime]:
    """Project billing occurrences for one subscription.

    The stored billing date is kept only when it is after reference_now or on
    the same calendar day. The following horizon_occurrences steps are always
    appended, even if some of them are still in the past.

    Args:
        subscription: Subscription to project.
        horizon_occurrences: Number of steps to take after the stored date.
        reference_now: Instant considered "now". If None, uses current time.

    Returns:
        Chronological list of occurrences; empty for inactive subscriptions.
    """
    if not subscription.is_active:
        return []

    now = as_local_naive(reference_now) if reference_now is not None else datetime.now()
    next_date = to_datetime(subscription.billing_date, now)

    occurrences: list[datetime] = []
    if next_date > now or is_same_day(next_date, now):
        occurrences.append(next_date)

    for _ in range(max(horizon_occurrences, 0)):
        next_date = advance(next_date, subscription.cycle)
        occurrences.append(next_date)

    return occurrences


def project_billing_dates(
    subscriptions: Iterable[Subscription],
    horizon_occurrences: int = DEFAULT_HORIZON_OCCURRENCES,
    reference_now: datetime | None = None,
) -> list[datetime]:
    """Project billing dates for a snapshot of subscriptions.

    Ghost subscriptions are projected like any other active one. Results are
    concatenated in subscription order, chronological within each
    subscription, without merging or deduplication.

    Args:
        subscriptions: Subscription snapshot.
        horizon_occurrences: Steps to project per subscription.
        reference_now: Instant considered "now". If None, uses current time.

    Returns:
        Flat list of projected dates.
    """
    now = reference_now if reference_now is not None else datetime.now()

    dates: list[datetime] = []
    for subscription in subscriptions:
        dates.extend(project_occurrences(subscription, horizon_occurrences, now))
    return dates


def calculate_user_share(subscription: Subscription) -> Money:
    """Portion of the subscription value paid by the current user.

    Args:
        subscription: Subscription record.

    Returns:
        value / shared_with_count, with non-numeric values counted as zero.
    """
    value = coerce_money(subscription.value)
    return Money(value / effective_shared_count(subscription))


def monthly_equivalent(subscription: Subscription) -> Money:
    """User share normalized to a monthly amount."""
    share = calculate_user_share(subscription)
    if subscription.cycle == ANNUALLY:
        return Money(share / MONTHS_PER_YEAR)
    return share


def annual_equivalent(subscription: Subscription) -> Money:
    """User share normalized to an annual amount."""
    share = calculate_user_share(subscription)
    if is_monthly(subscription.cycle):
        return Money(share * MONTHS_PER_YEAR)
    return share


def sum_money(amounts: Iterable[Decimal]) -> Money:
    """Sum amounts starting from a Decimal zero."""
    return Money(sum(amounts, Decimal(0)))
