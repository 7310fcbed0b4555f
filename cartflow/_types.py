"""
Core types for cartflow.

Re-exports from kungfu + identifier and money aliases.
"""

from __future__ import annotations

# Re-export from kungfu
from kungfu import Result, Ok, Error, Option, Some, Nothing, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Identifiers
# ═══════════════════════════════════════════════════════════════════════════════

type ProductId = int
type StoreId = int
type LineId = int
type OrderId = int
type AddressId = int
type RuleId = int

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

type Money = int
"""Amount in minor currency units. Never a float."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "Option",
    "Some",
    "Nothing",
    "LazyCoroResult",
    # Identifiers
    "ProductId",
    "StoreId",
    "LineId",
    "OrderId",
    "AddressId",
    "RuleId",
    # Money
    "Money",
)
