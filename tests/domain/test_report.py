"""Tests for cofre.domain.report pure functions."""

from datetime import datetime
from decimal import Decimal

from cofre.domain.models import CategoryName, Cycle, Money
from cofre.domain.report import (
    category_breakdown,
    committed_subscriptions,
    forecast_window,
    ghost_subscriptions,
    monthly_charge_forecast,
    steady_state_forecast,
    top_category,
    total_annual_spend,
    total_monthly_spend,
)

NOW = datetime(2024, 1, 10)


class TestCommittedSubscriptions:
    """Tests for committed_subscriptions and ghost_subscriptions."""

    def test_excludes_paused_and_planned(self, make_subscription) -> None:
        """Should keep only active, non-ghost subscriptions."""
        active = make_subscription(id="a")
        paused = make_subscription(id="b", is_active=False)
        ghost = make_subscription(id="c", is_ghost=True)

        assert committed_subscriptions([active, paused, ghost]) == [active]

    def test_excludes_deactivated_ids(self, make_subscription) -> None:
        """Should leave out ids switched off in simulation."""
        a = make_subscription(id="a")
        b = make_subscription(id="b")

        assert committed_subscriptions([a, b], deactivated_ids={"b"}) == [a]

    def test_ghosts_must_be_active(self, make_subscription) -> None:
        """Should ignore paused planned subscriptions."""
        ghost = make_subscription(id="a", is_ghost=True)
        paused_ghost = make_subscription(id="b", is_ghost=True, is_active=False)

        assert ghost_subscriptions([ghost, paused_ghost]) == [ghost]


class TestTotals:
    """Tests for total_monthly_spend and total_annual_spend."""

    def test_mixed_cycles(self, make_subscription) -> None:
        """Should normalize annual plans to monthly amounts."""
        monthly = make_subscription(id="a", value=Money(Decimal("10")))
        annual = make_subscription(id="b", value=Money(Decimal("120")), cycle=Cycle("annually"))

        assert total_monthly_spend([monthly, annual]) == Decimal("20")
        assert total_annual_spend([monthly, annual]) == Decimal("240")

    def test_shared_subscription_uses_user_share(self, make_subscription) -> None:
        """Should only count the user's share."""
        sub = make_subscription(value=Money(Decimal("40")), shared_with_count=4)

        assert total_monthly_spend([sub]) == Decimal("10")

    def test_empty(self) -> None:
        """Should return zero for no subscriptions."""
        assert total_monthly_spend([]) == Decimal("0")
        assert total_annual_spend([]) == Decimal("0")


class TestCategoryBreakdown:
    """Tests for category_breakdown and top_category."""

    def test_groups_and_sorts_descending(self, make_subscription) -> None:
        """Should group by category with Other as fallback."""
        subs = [
            make_subscription(id="a", value=Money(Decimal("10")), category=CategoryName("Streaming")),
            make_subscription(id="b", value=Money(Decimal("5")), category=CategoryName("Streaming")),
            make_subscription(id="c", value=Money(Decimal("3")), category=None),
        ]

        breakdown = category_breakdown(subs)

        assert [(c.category, c.total, c.count) for c in breakdown] == [
            ("Streaming", Decimal("15"), 2),
            ("Other", Decimal("3"), 1),
        ]

    def test_ties_keep_first_seen_order(self, make_subscription) -> None:
        """Should keep insertion order between equal totals."""
        subs = [
            make_subscription(id="a", value=Money(Decimal("5")), category=CategoryName("Work")),
            make_subscription(id="b", value=Money(Decimal("5")), category=CategoryName("Games")),
        ]

        assert [c.category for c in category_breakdown(subs)] == ["Work", "Games"]

    def test_uses_monthly_equivalent(self, make_subscription) -> None:
        """Should spread annual plans across months."""
        subs = [
            make_subscription(id="a", value=Money(Decimal("240")), cycle=Cycle("annually"), category=CategoryName("Work")),
            make_subscription(id="b", value=Money(Decimal("15")), category=CategoryName("Games")),
        ]

        breakdown = category_breakdown(subs)

        assert breakdown[0].category == "Work"
        assert breakdown[0].total == Decimal("20")

    def test_total_matches_monthly_spend(self, make_subscription) -> None:
        """Should add up to the overall monthly spending."""
        subs = [
            make_subscription(id="a", value=Money(Decimal("12.50")), category=CategoryName("Work")),
            make_subscription(id="b", value=Money(Decimal("60")), cycle=Cycle("annually"), category=None),
            make_subscription(id="c", value=Money(Decimal("9.90")), category=CategoryName("Work")),
        ]

        assert sum(c.total for c in category_breakdown(subs)) == total_monthly_spend(subs)

    def test_top_category(self, make_subscription) -> None:
        """Should return the biggest category, or None when empty."""
        subs = [
            make_subscription(id="a", value=Money(Decimal("3")), category=CategoryName("Games")),
            make_subscription(id="b", value=Money(Decimal("8")), category=CategoryName("Wellness")),
        ]

        top = top_category(subs)

        assert top is not None
        assert top.category == "Wellness"
        assert top_category([]) is None


class TestForecastWindow:
    """Tests for forecast_window."""

    def test_starts_at_current_month(self) -> None:
        """Should list consecutive months from now."""
        assert forecast_window(datetime(2024, 11, 20), 3) == ["2024-11", "2024-12", "2025-01"]


class TestMonthlyChargeForecast:
    """Tests for monthly_charge_forecast."""

    def test_monthly_subscription_fills_every_month(self, make_subscription) -> None:
        """Should add the share to each of the twelve months."""
        sub = make_subscription(value=Money(Decimal("10")), billing_date=datetime(2024, 1, 15))

        forecast = monthly_charge_forecast([sub], reference_now=NOW)

        assert [b.month for b in forecast][:2] == ["2024-01", "2024-02"]
        assert len(forecast) == 12
        assert all(b.total == Decimal("10") for b in forecast)

    def test_annual_subscription_lands_in_renewal_month(self, make_subscription) -> None:
        """Should add the full share, not a twelfth, in the renewal month."""
        sub = make_subscription(
            value=Money(Decimal("120")),
            cycle=Cycle("annually"),
            shared_with_count=2,
            billing_date=datetime(2024, 3, 1),
        )

        forecast = {b.month: b.total for b in monthly_charge_forecast([sub], reference_now=NOW)}

        assert forecast["2024-03"] == Decimal("60")
        assert sum(forecast.values()) == Decimal("60")

    def test_walk_starts_at_stored_date(self, make_subscription) -> None:
        """Should count steps from a past billing date."""
        sub = make_subscription(value=Money(Decimal("10")), billing_date=datetime(2023, 6, 15))

        forecast = {b.month: b.total for b in monthly_charge_forecast([sub], reference_now=NOW)}

        assert forecast["2024-01"] == Decimal("10")
        assert forecast["2024-12"] == Decimal("10")

    def test_very_old_billing_date_never_reaches_window(self, make_subscription) -> None:
        """Should leave buckets empty when every step is before the window."""
        sub = make_subscription(value=Money(Decimal("10")), billing_date=datetime(2020, 1, 1))

        forecast = monthly_charge_forecast([sub], reference_now=NOW)

        assert all(b.total == Decimal("0") for b in forecast)

    def test_custom_window(self, make_subscription) -> None:
        """Should honour custom month and step counts."""
        sub = make_subscription(value=Money(Decimal("10")), billing_date=datetime(2024, 1, 15))

        forecast = monthly_charge_forecast([sub], reference_now=NOW, months=3, steps=2)

        assert [b.total for b in forecast] == [Decimal("10"), Decimal("10"), Decimal("0")]


class TestSteadyStateForecast:
    """Tests for steady_state_forecast."""

    def test_repeats_monthly_total(self, make_subscription) -> None:
        """Should carry the monthly-equivalent total in every bucket."""
        subs = [
            make_subscription(id="a", value=Money(Decimal("10"))),
            make_subscription(id="b", value=Money(Decimal("120")), cycle=Cycle("annually")),
        ]

        forecast = steady_state_forecast(subs, reference_now=NOW)

        assert len(forecast) == 6
        assert forecast[0].month == "2024-01"
        assert all(b.total == Decimal("20") for b in forecast)
