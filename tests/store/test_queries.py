"""Tests for cofre.store against a temporary SQLite database."""

import sqlite3
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from cofre.domain.models import CategoryName, Cycle
from cofre.store import (
    database_exists,
    delete_subscription,
    find_subscription_id,
    get_all_subscriptions,
    get_subscription,
    get_subscription_snapshot,
    init_database,
    insert_subscription,
    set_active,
    set_ghost,
    update_subscription,
)


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Initialized database in a temporary directory."""
    path = tmp_path / "cofre" / "cofre.db"
    init_database(path)
    return path


def _insert(db_path: Path, name: str = "Netflix", **kwargs) -> str:
    return insert_subscription(
        name=name,
        value=kwargs.pop("value", Decimal("39.90")),
        cycle=kwargs.pop("cycle", Cycle("monthly")),
        billing_date=kwargs.pop("billing_date", datetime(2024, 1, 15)),
        category=kwargs.pop("category", CategoryName("Streaming")),
        db_path=db_path,
        **kwargs,
    )


class TestSchema:
    """Tests for init_database."""

    def test_creates_database(self, tmp_path: Path) -> None:
        """Should create the file and its parent directory."""
        path = tmp_path / "nested" / "cofre.db"

        assert not database_exists(path)
        init_database(path)
        assert database_exists(path)

    def test_is_idempotent(self, db_path: Path) -> None:
        """Should run again on an existing database without losing rows."""
        _insert(db_path)

        init_database(db_path)

        assert len(get_all_subscriptions(db_path)) == 1

    def test_migrates_missing_created_at(self, tmp_path: Path) -> None:
        """Should add created_at to databases created before it existed."""
        path = tmp_path / "old.db"
        conn = sqlite3.connect(path)
        conn.execute(
            "CREATE TABLE subscriptions (id TEXT PRIMARY KEY, name TEXT NOT NULL, value TEXT NOT NULL, "
            "cycle TEXT NOT NULL, billing_date TEXT NOT NULL, category TEXT, "
            "is_active INTEGER NOT NULL DEFAULT 1, is_ghost INTEGER NOT NULL DEFAULT 0, "
            "shared_with_count INTEGER, description TEXT)"
        )
        conn.commit()
        conn.close()

        init_database(path)

        conn = sqlite3.connect(path)
        columns = [row[1] for row in conn.execute("PRAGMA table_info(subscriptions)")]
        conn.close()
        assert "created_at" in columns


class TestSubscriptionQueries:
    """Tests for subscription CRUD queries."""

    def test_insert_and_get(self, db_path: Path) -> None:
        """Should store values as text and return them unchanged."""
        sub_id = _insert(db_path, shared_with_count=2, description="family plan")

        row = get_subscription(sub_id, db_path)

        assert row is not None
        assert row["name"] == "Netflix"
        assert row["value"] == "39.90"
        assert row["billing_date"] == "2024-01-15T00:00:00"
        assert row["is_active"] == 1
        assert row["is_ghost"] == 0
        assert row["shared_with_count"] == 2
        assert row["description"] == "family plan"

    def test_insert_with_explicit_id(self, db_path: Path) -> None:
        """Should keep a provided id."""
        sub_id = _insert(db_path, subscription_id="imported-1")

        assert sub_id == "imported-1"
        assert get_subscription("imported-1", db_path) is not None

    def test_duplicate_id_raises(self, db_path: Path) -> None:
        """Should refuse two subscriptions with the same id."""
        _insert(db_path, subscription_id="same")

        with pytest.raises(sqlite3.IntegrityError):
            _insert(db_path, subscription_id="same")

    def test_snapshot_is_normalized(self, db_path: Path) -> None:
        """Should load Subscription records in insertion order."""
        _insert(db_path, name="First", value=Decimal("10.50"))
        _insert(db_path, name="Second", cycle=Cycle("annually"), is_ghost=True)

        snapshot = get_subscription_snapshot(db_path)

        assert [s.name for s in snapshot] == ["First", "Second"]
        assert snapshot[0].value == Decimal("10.50")
        assert snapshot[0].billing_date == datetime(2024, 1, 15)
        assert snapshot[1].cycle == "annually"
        assert snapshot[1].is_ghost is True
        assert snapshot[0].created_at is not None

    def test_get_missing(self, db_path: Path) -> None:
        """Should return None for unknown ids."""
        assert get_subscription("nope", db_path) is None

    def test_update_fields(self, db_path: Path) -> None:
        """Should change only the given columns."""
        sub_id = _insert(db_path)

        updated = update_subscription(sub_id, {"value": Decimal("45.00"), "name": "Netflix 4K"}, db_path)

        row = get_subscription(sub_id, db_path)
        assert updated is True
        assert row is not None
        assert row["value"] == "45.00"
        assert row["name"] == "Netflix 4K"
        assert row["category"] == "Streaming"

    def test_update_unknown_column(self, db_path: Path) -> None:
        """Should reject columns that cannot be updated."""
        sub_id = _insert(db_path)

        with pytest.raises(ValueError, match="created_at"):
            update_subscription(sub_id, {"created_at": "2020-01-01"}, db_path)

    def test_update_missing_id(self, db_path: Path) -> None:
        """Should report that nothing was updated."""
        assert update_subscription("nope", {"name": "X"}, db_path) is False

    def test_delete(self, db_path: Path) -> None:
        """Should delete once and report missing ids afterwards."""
        sub_id = _insert(db_path)

        assert delete_subscription(sub_id, db_path) is True
        assert delete_subscription(sub_id, db_path) is False
        assert get_all_subscriptions(db_path) == []

    def test_set_ghost_and_active(self, db_path: Path) -> None:
        """Should flip the stored flags."""
        sub_id = _insert(db_path, is_ghost=True)

        set_ghost(sub_id, False, db_path)
        set_active(sub_id, False, db_path)

        row = get_subscription(sub_id, db_path)
        assert row is not None
        assert row["is_ghost"] == 0
        assert row["is_active"] == 0


class TestFindSubscriptionId:
    """Tests for find_subscription_id."""

    def test_unique_prefix(self, db_path: Path) -> None:
        """Should resolve a unique prefix to the full id."""
        _insert(db_path, subscription_id="abc123")
        _insert(db_path, subscription_id="def456")

        assert find_subscription_id("abc", db_path) == "abc123"

    def test_ambiguous_prefix(self, db_path: Path) -> None:
        """Should refuse a prefix matching several ids."""
        _insert(db_path, subscription_id="abc123")
        _insert(db_path, subscription_id="abc456")

        assert find_subscription_id("abc", db_path) is None

    def test_exact_match_wins(self, db_path: Path) -> None:
        """Should accept a full id even if it prefixes another."""
        _insert(db_path, subscription_id="abc")
        _insert(db_path, subscription_id="abcd")

        assert find_subscription_id("abc", db_path) == "abc"

    def test_no_match(self, db_path: Path) -> None:
        """Should return None when nothing matches."""
        assert find_subscription_id("zzz", db_path) is None

    def test_wildcards_are_literal(self, db_path: Path) -> None:
        """Should not treat _ or % in the prefix as patterns."""
        _insert(db_path, subscription_id="abc123")

        assert find_subscription_id("a_c", db_path) is None
        assert find_subscription_id("%", db_path) is None
        assert find_subscription_id("ab", db_path) == "abc123"
