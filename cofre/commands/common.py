"""Helpers shared by the command modules."""

import sys
import tomllib
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from rich.console import Console

from cofre.config import Settings, get_config_path, load_settings
from cofre.dates import parse_date_string
from cofre.store.queries import find_subscription_id
from cofre.store.schema import get_db_path

console = Console()


def require_database() -> Path:
    """Return the database path, exiting if 'cofre init' was never run."""
    db_path = get_db_path()
    if not db_path.exists():
        console.print("[red]Database not found. Run 'cofre init' first.[/red]", style="bold")
        sys.exit(1)
    return db_path


def resolve_id(id_or_prefix: str, db_path: Path) -> str:
    """Resolve a subscription id prefix, exiting if it is unknown or ambiguous."""
    subscription_id = find_subscription_id(id_or_prefix, db_path)
    if subscription_id is None:
        console.print(f"[red]No single subscription matches id '{id_or_prefix}'[/red]")
        sys.exit(1)
    return subscription_id


def parse_amount(amount_str: str) -> Decimal | None:
    """Parse an amount typed by the user.

    Accepts a comma as decimal separator ("29,90").

    Returns:
        Decimal amount, or None if invalid.
    """
    text = amount_str.strip()
    if "," in text and "." not in text:
        text = text.replace(",", ".")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount


def parse_billing_date(raw_date: str) -> datetime:
    """Parse a billing date typed by the user.

    Accepts ISO, European (DD/MM/YYYY) and other common formats.

    Raises:
        ValueError: If the date cannot be parsed.
    """
    parsed = parse_date_string(raw_date)
    if parsed is None:
        raise ValueError(f"Could not parse date '{raw_date}'")
    return parsed


def get_settings() -> Settings:
    """Load settings, exiting if the config file is not valid TOML."""
    try:
        return load_settings()
    except tomllib.TOMLDecodeError as e:
        console.print(f"[red]Invalid config file {get_config_path()}: {e}[/red]")
        sys.exit(1)
