"""
Lift — Helpers for lifting values into cartflow computations.

Re-exports from combinators.lift with the checkout error mapping on top.
"""

from __future__ import annotations

from collections.abc import Callable, Awaitable

from kungfu import LazyCoroResult

from combinators.lift import (
    pure,
    fail,
    from_result,
    catching_async,
)

from cartflow.errors import CheckoutError, ErrorKind


# ═══════════════════════════════════════════════════════════════════════════════
# Cartflow-specific helpers
# ═══════════════════════════════════════════════════════════════════════════════

def as_checkout_error(exc: Exception) -> CheckoutError:
    """Keep a raised CheckoutError as is, wrap anything else as a network failure."""
    if isinstance(exc, CheckoutError):
        return exc
    return CheckoutError(ErrorKind.NETWORK, str(exc) or type(exc).__name__)


def from_awaitable[T](
    awaitable_fn: Callable[[], Awaitable[T]],
    on_error: Callable[[Exception], CheckoutError] = as_checkout_error,
) -> LazyCoroResult[T, CheckoutError]:
    """
    Create LazyCoroResult from async function.

    Alias for catching_async with the checkout error mapping as default.
    """
    return catching_async(awaitable_fn, on_error=on_error)


__all__ = (
    # From combinators.lift
    "pure",
    "fail",
    "from_result",
    "catching_async",
    # Cartflow additions
    "as_checkout_error",
    "from_awaitable",
)
