"""Domain type definitions for cofre.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in the record's currency unit, as a Decimal
- Month: Month in YYYY-MM format
- CategoryName: Name of a subscription category
- Cycle: Billing cycle literal ("monthly" or "annually")
"""

from decimal import Decimal
from typing import NewType

# Money amounts are Decimals to avoid floating point drift when summing shares
Money = NewType("Money", Decimal)

# Month is always in YYYY-MM format (e.g., "2025-01")
Month = NewType("Month", str)

# Category name for subscription grouping
CategoryName = NewType("CategoryName", str)

# Billing cycle. Anything other than MONTHLY is projected as annual.
Cycle = NewType("Cycle", str)

MONTHLY = Cycle("monthly")
ANNUALLY = Cycle("annually")
CYCLES: tuple[Cycle, ...] = (MONTHLY, ANNUALLY)

DEFAULT_CATEGORY = CategoryName("Other")
CATEGORIES: tuple[CategoryName, ...] = (
    CategoryName("Streaming"),
    CategoryName("Work"),
    CategoryName("Wellness"),
    CategoryName("Games"),
    DEFAULT_CATEGORY,
)

# Labels used by older exports of the web app
LEGACY_CATEGORY_LABELS: dict[str, CategoryName] = {
    "Trabalho": CategoryName("Work"),
    "Bem-estar": CategoryName("Wellness"),
    "Jogos": CategoryName("Games"),
    "Outro": DEFAULT_CATEGORY,
}

ZERO = Money(Decimal(0))
