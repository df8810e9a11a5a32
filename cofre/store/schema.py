"""Database schema initialization and migrations."""

import os
import sqlite3
from pathlib import Path


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_db_path() -> Path:
    """Get the default database path (XDG compliant)."""
    return get_xdg_data_home() / "cofre" / "cofre.db"


def database_exists(db_path: Path | None = None) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check. If None, uses default location.

    Returns:
        True if database exists, False otherwise.
    """
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def init_database(db_path: Path | None = None) -> None:
    """Initialize the database with the required schema.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        # value is stored as TEXT so Decimal amounts round-trip exactly
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS subscriptions (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                value TEXT NOT NULL,
                cycle TEXT NOT NULL,
                billing_date TEXT NOT NULL,
                category TEXT,
                is_active INTEGER NOT NULL DEFAULT 1,
                is_ghost INTEGER NOT NULL DEFAULT 0,
                shared_with_count INTEGER,
                description TEXT
            )
        """
        )

        # Migrations for older databases
        cursor.execute("PRAGMA table_info(subscriptions)")
        columns = [row[1] for row in cursor.fetchall()]

        # Migration: Add 'created_at' column if missing
        if "created_at" not in columns:
            cursor.execute("ALTER TABLE subscriptions ADD COLUMN created_at TEXT")
            cursor.execute("UPDATE subscriptions SET created_at = datetime('now', 'localtime') WHERE created_at IS NULL")

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_sub_billing_date ON subscriptions(billing_date)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_sub_category ON subscriptions(category)")

        conn.commit()

    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()
