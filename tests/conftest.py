"""Shared fixtures for cofre tests."""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import Any

import pytest

from cofre.domain.models import CategoryName, Cycle, Money
from cofre.domain.subscriptions import Subscription


def build_subscription(**overrides: Any) -> Subscription:
    """Build a Subscription with sensible defaults."""
    fields: dict[str, Any] = {
        "id": "sub-1",
        "name": "Netflix",
        "value": Money(Decimal("10")),
        "cycle": Cycle("monthly"),
        "billing_date": datetime(2024, 1, 15),
        "category": CategoryName("Streaming"),
        "is_active": True,
        "is_ghost": False,
        "shared_with_count": None,
    }
    fields.update(overrides)
    return Subscription(**fields)


@pytest.fixture
def make_subscription() -> Callable[..., Subscription]:
    """Factory fixture for Subscription records."""
    return build_subscription
