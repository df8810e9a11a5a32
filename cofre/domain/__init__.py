"""Domain models and types for cofre.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Billing logic separated from storage and rendering
"""

from cofre.domain.models import CategoryName, Cycle, Money, Month

__all__ = ["Money", "Month", "CategoryName", "Cycle"]
