"""Pure functions for the billing calendar schedule."""

from collections.abc import Iterable
from datetime import datetime

from cofre.dates import is_same_day, month_key
from cofre.domain.billing import DEFAULT_HORIZON_OCCURRENCES, project_occurrences
from cofre.domain.models import Month
from cofre.domain.subscriptions import Subscription


def occurrences_by_subscription(
    subscriptions: Iterable[Subscription],
    horizon_occurrences: int = DEFAULT_HORIZON_OCCURRENCES,
    reference_now: datetime | None = None,
) -> list[tuple[Subscription, list[datetime]]]:
    """Pair each active subscription with its projected occurrences."""
    now = reference_now if reference_now is not None else datetime.now()
    return [
        (subscription, project_occurrences(subscription, horizon_occurrences, now))
        for subscription in subscriptions
        if subscription.is_active
    ]


def subscriptions_on_day(
    subscriptions: Iterable[Subscription],
    day: datetime,
    horizon_occurrences: int = DEFAULT_HORIZON_OCCURRENCES,
    reference_now: datetime | None = None,
) -> list[Subscription]:
    """Active subscriptions billed on the given calendar day.

    Args:
        subscriptions: Subscription snapshot.
        day: Day to inspect; the time of day is ignored.
        horizon_occurrences: Steps projected per subscription.
        reference_now: Instant considered "now". If None, uses current time.

    Returns:
        Subscriptions with a projected occurrence on that day, in input order.
    """
    return [
        subscription
        for subscription, dates in occurrences_by_subscription(subscriptions, horizon_occurrences, reference_now)
        if any(is_same_day(billing_date, day) for billing_date in dates)
    ]


def occurrences_in_month(
    subscriptions: Iterable[Subscription],
    month: Month,
    horizon_occurrences: int = DEFAULT_HORIZON_OCCURRENCES,
    reference_now: datetime | None = None,
) -> list[tuple[datetime, Subscription]]:
    """Projected occurrences falling inside a month, sorted by date.

    Args:
        subscriptions: Subscription snapshot.
        month: Month in YYYY-MM format.
        horizon_occurrences: Steps projected per subscription.
        reference_now: Instant considered "now". If None, uses current time.

    Returns:
        List of (date, subscription) tuples. Same-day entries keep input order.
    """
    hits = [
        (billing_date, subscription)
        for subscription, dates in occurrences_by_subscription(subscriptions, horizon_occurrences, reference_now)
        for billing_date in dates
        if month_key(billing_date) == month
    ]
    return sorted(hits, key=lambda hit: hit[0])
