"""Pure functions for subscription records.

This module contains the functional core for the subscription entity:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Raw records (store rows, CSV rows, JSON exports) enter the domain through
parse_subscription, which is the only place heterogeneous field shapes are
normalized.
"""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from cofre.dates import to_datetime
from cofre.domain.models import (
    CATEGORIES,
    CYCLES,
    LEGACY_CATEGORY_LABELS,
    MONTHLY,
    ZERO,
    CategoryName,
    Cycle,
    Money,
)

MIN_NAME_LENGTH = 2


@dataclass(frozen=True)
class Subscription:
    """Immutable subscription record."""

    id: str
    name: str
    value: Money
    cycle: Cycle
    billing_date: datetime
    category: CategoryName | None = None
    is_active: bool = True
    is_ghost: bool = False
    shared_with_count: int | None = None
    description: str | None = None
    created_at: datetime | None = None


def coerce_money(value: Any) -> Money:
    """Coerce a raw amount into Money.

    Args:
        value: Number, Decimal, numeric string, or anything else.

    Returns:
        Money amount. Missing, non-numeric, NaN and infinite values become zero.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        # str() keeps 9.9 as 9.9 instead of its binary expansion
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return ZERO
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return ZERO
    else:
        return ZERO

    if not amount.is_finite():
        return ZERO
    return Money(amount)


def effective_shared_count(subscription: Subscription) -> Decimal:
    """Number of people splitting the subscription, at least one.

    Args:
        subscription: Subscription record.

    Returns:
        shared_with_count when it is a positive number, otherwise 1.
    """
    count = subscription.shared_with_count
    if isinstance(count, bool) or not isinstance(count, (int, float, Decimal)):
        return Decimal(1)
    try:
        count_decimal = Decimal(str(count))
    except InvalidOperation:
        return Decimal(1)
    if not count_decimal.is_finite() or count_decimal <= 0:
        return Decimal(1)
    return count_decimal


def coerce_bool(value: Any, default: bool = False) -> bool:
    """Interpret flags stored as bools, ints or strings."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal)):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "yes", "y", "1", "sim"):
            return True
        if text in ("false", "no", "n", "0", "nao", "não", ""):
            return False
    return default


def normalize_category(value: Any) -> CategoryName | None:
    """Map a raw category label to a CategoryName.

    Returns:
        Canonical name for known and legacy labels, the stripped label for
        unknown ones, or None when absent.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if text in LEGACY_CATEGORY_LABELS:
        return LEGACY_CATEGORY_LABELS[text]
    for category in CATEGORIES:
        if category.lower() == text.lower():
            return category
    return CategoryName(text)


def _parse_shared_count(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError):
        return None


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def parse_subscription(raw: Mapping[str, Any], now: datetime | None = None) -> Subscription:
    """Build a Subscription from a raw record.

    Accepts both the camelCase keys of store exports (billingDate, isActive,
    sharedWithCount, ...) and the snake_case keys of the local store.

    Args:
        raw: Raw record mapping.
        now: Fallback instant for missing or unparseable dates.

    Returns:
        Normalized Subscription. Never raises for malformed fields.
    """
    cycle_raw = _pick(raw, "cycle")
    cycle = Cycle(str(cycle_raw).strip().lower()) if cycle_raw is not None else MONTHLY

    created_raw = _pick(raw, "created_at", "createdAt")
    description = _pick(raw, "description")

    return Subscription(
        id=str(_pick(raw, "id") or ""),
        name=str(_pick(raw, "name") or "").strip(),
        value=coerce_money(_pick(raw, "value")),
        cycle=cycle,
        billing_date=to_datetime(_pick(raw, "billing_date", "billingDate"), now),
        category=normalize_category(_pick(raw, "category")),
        is_active=coerce_bool(_pick(raw, "is_active", "isActive"), default=True),
        is_ghost=coerce_bool(_pick(raw, "is_ghost", "isGhost"), default=False),
        shared_with_count=_parse_shared_count(_pick(raw, "shared_with_count", "sharedWithCount")),
        description=str(description) if description else None,
        created_at=to_datetime(created_raw, now) if created_raw is not None else None,
    )


def validate_subscription_input(
    name: str,
    value: Decimal,
    cycle: str,
    category: str,
    shared_with_count: int | None = None,
) -> tuple[bool, str | None]:
    """Validate user input for a new or edited subscription.

    Args:
        name: Display name.
        value: Total amount charged per cycle.
        cycle: Billing cycle.
        category: Category name.
        shared_with_count: Optional number of people sharing the cost.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if len(name.strip()) < MIN_NAME_LENGTH:
        return False, f"Name must have at least {MIN_NAME_LENGTH} characters"

    if value <= 0:
        return False, "Value must be positive"

    if cycle not in CYCLES:
        return False, f"Cycle must be one of: {', '.join(CYCLES)}"

    if category not in CATEGORIES:
        return False, f"Category must be one of: {', '.join(CATEGORIES)}"

    if shared_with_count is not None and shared_with_count < 1:
        return False, "Shared count must be at least 1"

    return True, None


def activate_ghost(subscription: Subscription) -> Subscription:
    """Turn a planned subscription into a committed one."""
    return replace(subscription, is_ghost=False)


def format_money(amount: Decimal, currency: str) -> str:
    """Format an amount with a currency prefix and two decimals."""
    return f"{currency} {amount:,.2f}"


def compose_share_message(
    subscription: Subscription,
    pix_key: str,
    currency: str,
) -> tuple[str | None, str | None]:
    """Compose the reminder sent to people sharing a subscription.

    Args:
        subscription: Subscription to remind about.
        pix_key: Payment key included at the end of the message.
        currency: Currency prefix for amounts.

    Returns:
        Tuple of (message, error_message).
    """
    people = effective_shared_count(subscription)
    if people <= 1:
        return None, f"'{subscription.name}' is not marked as shared"

    total = coerce_money(subscription.value)
    share = total / people
    payment_key = pix_key or "[YOUR PIX KEY HERE]"

    message = (
        "Reminder - Cofre Forte:\n"
        f"Subscription: {subscription.name}\n"
        f"Total value: {format_money(total, currency)}\n"
        f"Our share ({people} people): {format_money(share, currency)} each.\n"
        "\n"
        f"My Pix key is: {payment_key}"
    )
    return message, None
