"""Subscription management commands (add, edit, delete, activate, pause, share)."""

import sqlite3
import sys
from decimal import Decimal
from typing import Any

import typer

from cofre.commands.common import (
    console,
    get_settings,
    parse_amount,
    parse_billing_date,
    require_database,
    resolve_id,
)
from cofre.domain.models import CategoryName, Cycle
from cofre.domain.subscriptions import (
    compose_share_message,
    format_money,
    normalize_category,
    parse_subscription,
    validate_subscription_input,
)
from cofre.store.queries import (
    delete_subscription,
    get_subscription,
    insert_subscription,
    set_active,
    set_ghost,
    update_subscription,
)


def add_command(
    name: str,
    value: str,
    billing_date: str,
    cycle: str = "monthly",
    category: str = "Other",
    shared_with: int | None = None,
    ghost: bool = False,
    description: str | None = None,
) -> None:
    """Add a subscription.

    Args:
        name: Display name.
        value: Amount charged per cycle (e.g. 39.90 or 39,90).
        billing_date: Next billing date (YYYY-MM-DD, DD/MM/YYYY, ...).
        cycle: 'monthly' or 'annually'.
        category: Category name.
        shared_with: Number of people sharing the cost.
        ghost: Register as a planned subscription.
        description: Optional free text.
    """
    db_path = require_database()
    settings = get_settings()

    amount = parse_amount(value)
    if amount is None:
        console.print(f"[red]Invalid amount: {value}[/red]")
        sys.exit(1)

    try:
        date = parse_billing_date(billing_date)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)

    cycle_value = cycle.strip().lower()
    category_name = normalize_category(category) or CategoryName("Other")

    valid, error = validate_subscription_input(name, amount, cycle_value, category_name, shared_with)
    if not valid:
        console.print(f"[red]{error}[/red]")
        sys.exit(1)

    try:
        sub_id = insert_subscription(
            name=name.strip(),
            value=amount,
            cycle=Cycle(cycle_value),
            billing_date=date,
            category=category_name,
            is_ghost=ghost,
            shared_with_count=shared_with or 1,
            description=description,
            db_path=db_path,
        )
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    kind = "Planned subscription" if ghost else "Subscription"
    console.print(f"[green]✓[/green] {kind} added:")
    console.print(f"  ID: {sub_id[:8]}")
    console.print(f"  Name: {name.strip()}")
    console.print(f"  Value: {format_money(amount, settings.currency)} ({cycle_value})")
    console.print(f"  Next billing: {date:%Y-%m-%d}")
    console.print(f"  Category: {category_name}")
    if shared_with and shared_with > 1:
        console.print(f"  Shared with: {shared_with} people")


def edit_command(
    subscription_id: str,
    name: str | None = None,
    value: str | None = None,
    billing_date: str | None = None,
    cycle: str | None = None,
    category: str | None = None,
    shared_with: int | None = None,
    description: str | None = None,
) -> None:
    """Edit fields of an existing subscription."""
    db_path = require_database()

    try:
        sub_id = resolve_id(subscription_id, db_path)
        row = get_subscription(sub_id, db_path)
        if row is None:
            console.print(f"[red]Subscription {subscription_id} not found[/red]")
            sys.exit(1)
        current = parse_subscription(row)

        fields: dict[str, Any] = {}
        if name is not None:
            fields["name"] = name.strip()
        if value is not None:
            amount = parse_amount(value)
            if amount is None:
                console.print(f"[red]Invalid amount: {value}[/red]")
                sys.exit(1)
            fields["value"] = amount
        if billing_date is not None:
            fields["billing_date"] = parse_billing_date(billing_date)
        if cycle is not None:
            fields["cycle"] = cycle.strip().lower()
        if category is not None:
            fields["category"] = normalize_category(category) or CategoryName("Other")
        if shared_with is not None:
            fields["shared_with_count"] = shared_with
        if description is not None:
            fields["description"] = description or None

        if not fields:
            console.print("[yellow]Nothing to change[/yellow]")
            return

        valid, error = validate_subscription_input(
            fields.get("name", current.name),
            fields.get("value", Decimal(current.value)),
            fields.get("cycle", current.cycle),
            fields.get("category", current.category or CategoryName("Other")),
            fields.get("shared_with_count", current.shared_with_count),
        )
        if not valid:
            console.print(f"[red]{error}[/red]")
            sys.exit(1)

        update_subscription(sub_id, fields, db_path)
        console.print(f"[green]✓[/green] Updated {current.name}: {', '.join(fields)}")

    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def delete_command(subscription_id: str, yes: bool = False) -> None:
    """Delete a subscription after confirmation."""
    db_path = require_database()

    try:
        sub_id = resolve_id(subscription_id, db_path)
        row = get_subscription(sub_id, db_path)
        if row is None:
            console.print(f"[red]Subscription {subscription_id} not found[/red]")
            sys.exit(1)

        if not yes and not typer.confirm(f"Delete '{row['name']}'?", default=False):
            console.print("[dim]Cancelled[/dim]")
            return

        delete_subscription(sub_id, db_path)
        console.print(f"[green]✓[/green] Deleted {row['name']}")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def activate_command(subscription_id: str) -> None:
    """Turn a planned (ghost) subscription into a committed one."""
    db_path = require_database()

    try:
        sub_id = resolve_id(subscription_id, db_path)
        row = get_subscription(sub_id, db_path)
        if row is None:
            console.print(f"[red]Subscription {subscription_id} not found[/red]")
            sys.exit(1)

        if not row["is_ghost"]:
            console.print(f"[yellow]{row['name']} is already committed[/yellow]")
            return

        set_ghost(sub_id, False, db_path)
        console.print(f"[green]✓[/green] {row['name']} is now part of your monthly spending")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def toggle_active_command(subscription_id: str, active: bool) -> None:
    """Pause or resume a subscription."""
    db_path = require_database()

    try:
        sub_id = resolve_id(subscription_id, db_path)
        row = get_subscription(sub_id, db_path)
        if row is None:
            console.print(f"[red]Subscription {subscription_id} not found[/red]")
            sys.exit(1)

        set_active(sub_id, active, db_path)
        state = "resumed" if active else "paused"
        console.print(f"[green]✓[/green] {row['name']} {state}")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def share_command(subscription_id: str) -> None:
    """Print the payment reminder for a shared subscription."""
    db_path = require_database()
    settings = get_settings()

    try:
        sub_id = resolve_id(subscription_id, db_path)
        row = get_subscription(sub_id, db_path)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if row is None:
        console.print(f"[red]Subscription {subscription_id} not found[/red]")
        sys.exit(1)

    message, error = compose_share_message(parse_subscription(row), settings.pix_key, settings.currency)
    if error:
        console.print(f"[yellow]{error}[/yellow]")
        return

    console.print(message, markup=False, highlight=False)
