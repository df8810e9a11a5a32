"""Database query functions."""

import sqlite3
import uuid
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from cofre.domain.models import CategoryName, Cycle
from cofre.domain.subscriptions import Subscription, parse_subscription
from cofre.logs import get_logger
from cofre.store.schema import get_db_path

logger = get_logger(__name__)

SUBSCRIPTION_COLUMNS = (
    "id",
    "name",
    "value",
    "cycle",
    "billing_date",
    "category",
    "is_active",
    "is_ghost",
    "shared_with_count",
    "description",
    "created_at",
)

UPDATABLE_COLUMNS = frozenset(SUBSCRIPTION_COLUMNS) - {"id", "created_at"}


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def _to_column(key: str, value: Any) -> Any:
    """Convert a domain value to its stored representation."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if key in ("is_active", "is_ghost") and value is not None:
        return 1 if value else 0
    return value


def new_subscription_id() -> str:
    """Generate an opaque subscription id."""
    return uuid.uuid4().hex


def insert_subscription(
    name: str,
    value: Decimal,
    cycle: Cycle,
    billing_date: datetime,
    category: CategoryName | None = None,
    is_ghost: bool = False,
    shared_with_count: int | None = None,
    description: str | None = None,
    db_path: Path | None = None,
    subscription_id: str | None = None,
    is_active: bool = True,
) -> str:
    """Insert a new subscription.

    Args:
        name: Display name.
        value: Amount charged per cycle.
        cycle: Billing cycle.
        billing_date: Next or most recently known billing date.
        category: Optional category name.
        is_ghost: Whether the subscription is only planned.
        shared_with_count: Optional number of people sharing the cost.
        description: Optional free text.
        db_path: Path to the database file. If None, uses default location.
        subscription_id: Id to use. If None, a new one is generated.
        is_active: Whether the subscription starts active.

    Returns:
        Id of the inserted subscription.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    sub_id = subscription_id or new_subscription_id()
    row = {
        "id": sub_id,
        "name": name,
        "value": value,
        "cycle": cycle,
        "billing_date": billing_date,
        "category": category,
        "is_active": is_active,
        "is_ghost": is_ghost,
        "shared_with_count": shared_with_count,
        "description": description,
        "created_at": datetime.now(),
    }

    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            placeholders = ", ".join("?" for _ in SUBSCRIPTION_COLUMNS)
            cursor.execute(
                f"INSERT INTO subscriptions ({', '.join(SUBSCRIPTION_COLUMNS)}) VALUES ({placeholders})",
                [_to_column(col, row[col]) for col in SUBSCRIPTION_COLUMNS],
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise

    logger.debug("Inserted subscription %s (%s)", sub_id, name)
    return sub_id


def get_all_subscriptions(db_path: Path | None = None) -> list[dict[str, Any]]:
    """Get all subscriptions as raw rows.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        List of subscription dictionaries ordered by creation time.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {', '.join(SUBSCRIPTION_COLUMNS)} FROM subscriptions ORDER BY created_at, rowid")
        rows = cursor.fetchall()
        return [dict(row) for row in rows]


def get_subscription(subscription_id: str, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get a single subscription row.

    Args:
        subscription_id: Subscription id.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Subscription dictionary or None if not found.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            f"SELECT {', '.join(SUBSCRIPTION_COLUMNS)} FROM subscriptions WHERE id = ?",
            (subscription_id,),
        )
        row = cursor.fetchone()
        return dict(row) if row else None


def get_subscription_snapshot(db_path: Path | None = None, now: datetime | None = None) -> list[Subscription]:
    """Load every subscription and normalize it for the domain.

    Args:
        db_path: Path to the database file. If None, uses default location.
        now: Fallback instant for unparseable stored dates.

    Returns:
        List of Subscription records in creation order.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    rows = get_all_subscriptions(db_path)
    snapshot = [parse_subscription(row, now) for row in rows]
    logger.debug("Loaded snapshot of %d subscriptions", len(snapshot))
    return snapshot


def update_subscription(subscription_id: str, fields: dict[str, Any], db_path: Path | None = None) -> bool:
    """Update selected fields of a subscription.

    Args:
        subscription_id: Subscription id.
        fields: Column values to change. Unknown columns are rejected.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if a subscription was updated, False if the id was not found.

    Raises:
        ValueError: If fields names a column that cannot be updated.
        sqlite3.Error: If database operation fails.
    """
    unknown = set(fields) - UPDATABLE_COLUMNS
    if unknown:
        raise ValueError(f"Cannot update columns: {', '.join(sorted(unknown))}")

    if not fields:
        return get_subscription(subscription_id, db_path) is not None

    assignments = ", ".join(f"{col} = ?" for col in fields)
    params = [_to_column(col, value) for col, value in fields.items()]
    params.append(subscription_id)

    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(f"UPDATE subscriptions SET {assignments} WHERE id = ?", params)
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        updated = cursor.rowcount > 0

    if updated:
        logger.debug("Updated subscription %s: %s", subscription_id, ", ".join(fields))
    return updated


def delete_subscription(subscription_id: str, db_path: Path | None = None) -> bool:
    """Delete a subscription.

    Args:
        subscription_id: Subscription id.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if a subscription was deleted, False if the id was not found.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("DELETE FROM subscriptions WHERE id = ?", (subscription_id,))
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        return cursor.rowcount > 0


def set_ghost(subscription_id: str, is_ghost: bool, db_path: Path | None = None) -> bool:
    """Mark a subscription as planned or committed.

    Returns:
        True if the subscription exists.
    """
    return update_subscription(subscription_id, {"is_ghost": is_ghost}, db_path)


def set_active(subscription_id: str, is_active: bool, db_path: Path | None = None) -> bool:
    """Pause or resume a subscription.

    Returns:
        True if the subscription exists.
    """
    return update_subscription(subscription_id, {"is_active": is_active}, db_path)


def find_subscription_id(prefix: str, db_path: Path | None = None) -> str | None:
    """Resolve a full id from a unique prefix, as shown by 'cofre list'.

    Args:
        prefix: Full id or its leading characters.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The matching id, or None if no id or more than one id matches.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id FROM subscriptions WHERE substr(id, 1, length(?)) = ?", (prefix, prefix))
        matches = [row[0] for row in cursor.fetchall()]
    if len(matches) == 1:
        return matches[0]
    if prefix in matches:
        return prefix
    return None
