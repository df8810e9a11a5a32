"""Import command for loading subscriptions from CSV or JSON exports."""

import csv
import json
import sqlite3
import sys
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from cofre.commands.common import console, require_database
from cofre.domain.models import DEFAULT_CATEGORY
from cofre.domain.subscriptions import Subscription, parse_subscription, validate_subscription_input
from cofre.logs import get_logger
from cofre.store.queries import get_subscription, insert_subscription

logger = get_logger(__name__)


@dataclass
class ImportStats:
    """Statistics from importing subscriptions."""

    inserted: int = 0
    duplicates: int = 0
    skipped: list[tuple[int, str]] = field(default_factory=list)


def read_records(path: Path) -> list[dict[str, Any]]:
    """Read raw subscription records from a CSV or JSON file.

    JSON files may hold a list of records or an object with a
    "subscriptions" list.

    Raises:
        ValueError: If the file type is unsupported or the content is malformed.
        OSError: If the file cannot be read.
    """
    suffix = path.suffix.lower()

    if suffix == ".csv":
        with open(path, newline="", encoding="utf-8") as f:
            return [dict(row) for row in csv.DictReader(f)]

    if suffix == ".json":
        with open(path, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {path.name}: {e}") from e
        if isinstance(data, dict):
            data = data.get("subscriptions", [])
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of subscriptions in {path.name}")
        return [record for record in data if isinstance(record, dict)]

    raise ValueError(f"Unsupported file type '{path.suffix}'. Use .csv or .json")


def check_record(subscription: Subscription) -> str | None:
    """Validate a parsed record, returning the reason it should be skipped."""
    _, error = validate_subscription_input(
        subscription.name,
        Decimal(subscription.value),
        subscription.cycle,
        subscription.category or DEFAULT_CATEGORY,
        subscription.shared_with_count,
    )
    return error


def import_records(records: list[dict[str, Any]], db_path: Path, now: datetime | None = None) -> ImportStats:
    """Normalize, validate and insert raw records.

    Args:
        records: Raw records read from the file.
        db_path: Path to the database file.
        now: Fallback instant for missing dates.

    Returns:
        ImportStats with counts and skipped rows.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    stats = ImportStats()

    for line, record in enumerate(records, 1):
        sub = parse_subscription(record, now)

        error = check_record(sub)
        if error:
            logger.warning("Skipping record %d (%s): %s", line, sub.name or "unnamed", error)
            stats.skipped.append((line, error))
            continue

        if sub.id and get_subscription(sub.id, db_path) is not None:
            logger.debug("Record %d already imported as %s", line, sub.id)
            stats.duplicates += 1
            continue

        insert_subscription(
            name=sub.name,
            value=Decimal(sub.value),
            cycle=sub.cycle,
            billing_date=sub.billing_date,
            category=sub.category or DEFAULT_CATEGORY,
            is_ghost=sub.is_ghost,
            shared_with_count=sub.shared_with_count or 1,
            description=sub.description,
            db_path=db_path,
            subscription_id=sub.id or None,
            is_active=sub.is_active,
        )
        stats.inserted += 1

    return stats


def import_command(file_path: str, verbose: bool = False) -> None:
    """Import subscriptions from a CSV or JSON file."""
    db_path = require_database()
    path = Path(file_path).expanduser()

    if not path.exists():
        console.print(f"[red]File not found: {path}[/red]")
        sys.exit(1)

    try:
        records = read_records(path)
        stats = import_records(records, db_path)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Could not read {path}: {e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Imported {stats.inserted} subscriptions from {path.name}")
    if stats.duplicates:
        console.print(f"[dim]{stats.duplicates} already present[/dim]")
    if stats.skipped:
        console.print(f"[yellow]{len(stats.skipped)} records skipped[/yellow]")
        if verbose:
            for line, reason in stats.skipped:
                console.print(f"  [dim]#{line}: {reason}[/dim]")
