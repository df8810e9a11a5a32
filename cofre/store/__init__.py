"""Database store layer - provides persistence for the application.

This module re-exports all public database functions for easy importing.
"""

from cofre.store.queries import (
    delete_subscription,
    find_subscription_id,
    get_all_subscriptions,
    get_subscription,
    get_subscription_snapshot,
    insert_subscription,
    set_active,
    set_ghost,
    update_subscription,
)
from cofre.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "delete_subscription",
    "find_subscription_id",
    "get_all_subscriptions",
    "get_subscription",
    "get_subscription_snapshot",
    "insert_subscription",
    "set_active",
    "set_ghost",
    "update_subscription",
]
