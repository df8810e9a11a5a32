"""Tests for cofre.domain.schedule pure functions."""

from datetime import datetime

from cofre.domain.models import Cycle
from cofre.domain.schedule import occurrences_by_subscription, occurrences_in_month, subscriptions_on_day

NOW = datetime(2024, 1, 10)


class TestSubscriptionsOnDay:
    """Tests for subscriptions_on_day."""

    def test_matches_projected_day(self, make_subscription) -> None:
        """Should find subscriptions billed on the day."""
        sub = make_subscription(billing_date=datetime(2024, 1, 15))

        assert subscriptions_on_day([sub], datetime(2024, 3, 15), reference_now=NOW) == [sub]
        assert subscriptions_on_day([sub], datetime(2024, 3, 16), reference_now=NOW) == []

    def test_ignores_time_of_day(self, make_subscription) -> None:
        """Should compare calendar days only."""
        sub = make_subscription(billing_date=datetime(2024, 1, 15, 6, 0))

        assert subscriptions_on_day([sub], datetime(2024, 2, 15, 23, 0), reference_now=NOW) == [sub]

    def test_paused_subscription_is_never_billed(self, make_subscription) -> None:
        """Should skip paused subscriptions."""
        sub = make_subscription(billing_date=datetime(2024, 1, 15), is_active=False)

        assert subscriptions_on_day([sub], datetime(2024, 1, 15), reference_now=NOW) == []

    def test_beyond_horizon(self, make_subscription) -> None:
        """Should not find days past the projection horizon."""
        sub = make_subscription(billing_date=datetime(2024, 1, 15))

        assert subscriptions_on_day([sub], datetime(2024, 4, 15), horizon_occurrences=2, reference_now=NOW) == []


class TestOccurrencesInMonth:
    """Tests for occurrences_in_month."""

    def test_sorted_by_date(self, make_subscription) -> None:
        """Should list the month's billings in date order."""
        late = make_subscription(id="a", billing_date=datetime(2024, 1, 25))
        early = make_subscription(id="b", billing_date=datetime(2024, 1, 12))
        annual = make_subscription(id="c", cycle=Cycle("annually"), billing_date=datetime(2024, 6, 1))

        hits = occurrences_in_month([late, early, annual], "2024-02", reference_now=NOW)

        assert [(d, s.id) for d, s in hits] == [
            (datetime(2024, 2, 12), "b"),
            (datetime(2024, 2, 25), "a"),
        ]

    def test_annual_renewal_month(self, make_subscription) -> None:
        """Should show annual subscriptions in their renewal month."""
        annual = make_subscription(id="c", cycle=Cycle("annually"), billing_date=datetime(2024, 6, 1))

        hits = occurrences_in_month([annual], "2025-06", reference_now=NOW)

        assert [d for d, _ in hits] == [datetime(2025, 6, 1)]


class TestOccurrencesBySubscription:
    """Tests for occurrences_by_subscription."""

    def test_pairs_active_subscriptions(self, make_subscription) -> None:
        """Should pair each active subscription with its dates."""
        active = make_subscription(id="a", billing_date=datetime(2024, 1, 15))
        paused = make_subscription(id="b", is_active=False)

        pairs = occurrences_by_subscription([active, paused], horizon_occurrences=1, reference_now=NOW)

        assert pairs == [(active, [datetime(2024, 1, 15), datetime(2024, 2, 15)])]
