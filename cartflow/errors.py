"""
Errors — one typed failure for every checkout operation.

Every operation returns ``Result[T, CheckoutError]``. The error is an
``Exception`` subclass only so graph nodes can raise it; the graph runner turns
it back into ``Error(...)`` before it reaches the caller.

    match cart.set_quantity(line_id, 0):
        case Ok(change):
            ...
        case Error(e) if e.category is ErrorCategory.VALIDATION:
            show_inline(e.message)
"""

from __future__ import annotations

from enum import Enum, auto

# ═══════════════════════════════════════════════════════════════════════════════
# Categories
# ═══════════════════════════════════════════════════════════════════════════════


class ErrorCategory(Enum):
    """How the UI reacts to a failure."""

    VALIDATION = auto()  # bad local input, caught before any network call
    INELIGIBLE = auto()  # business rule rejection
    TRANSPORT = auto()  # timeout / network, retry affordance
    AUTH = auto()  # session expired, dedicated state


# ═══════════════════════════════════════════════════════════════════════════════
# Kinds
# ═══════════════════════════════════════════════════════════════════════════════


class ErrorKind(Enum):
    # Cart
    OUT_OF_STOCK = ("out_of_stock", ErrorCategory.INELIGIBLE)
    INVALID_QUANTITY = ("invalid_quantity", ErrorCategory.VALIDATION)
    LINE_NOT_FOUND = ("line_not_found", ErrorCategory.VALIDATION)
    # Vouchers
    VOUCHER_INELIGIBLE = ("voucher_ineligible", ErrorCategory.INELIGIBLE)
    VOUCHER_EXPIRED = ("voucher_expired", ErrorCategory.INELIGIBLE)
    VOUCHER_ALREADY_USED = ("voucher_already_used", ErrorCategory.INELIGIBLE)
    VOUCHER_CODE_REQUIRED = ("voucher_code_required", ErrorCategory.VALIDATION)
    # Shipping
    NO_ADDRESS_SELECTED = ("no_address_selected", ErrorCategory.VALIDATION)
    NO_SHIPPING_AVAILABLE = ("no_shipping_available", ErrorCategory.INELIGIBLE)
    # Checkout
    CHECKOUT_BLOCKED = ("checkout_blocked", ErrorCategory.INELIGIBLE)
    # Orders
    ILLEGAL_TRANSITION = ("illegal_transition", ErrorCategory.INELIGIBLE)
    INVALID_PROOF = ("invalid_proof", ErrorCategory.VALIDATION)
    UPLOAD_FAILED = ("upload_failed", ErrorCategory.TRANSPORT)
    INVALID_REASON = ("invalid_reason", ErrorCategory.VALIDATION)
    PAYMENT_DEADLINE_PASSED = ("payment_deadline_passed", ErrorCategory.INELIGIBLE)
    # Re-entrancy gate
    BUSY = ("busy", ErrorCategory.VALIDATION)
    # Transport / backend
    TIMEOUT = ("timeout", ErrorCategory.TRANSPORT)
    NETWORK = ("network", ErrorCategory.TRANSPORT)
    REJECTED = ("rejected", ErrorCategory.INELIGIBLE)
    NOT_FOUND = ("not_found", ErrorCategory.INELIGIBLE)
    SERVER = ("server", ErrorCategory.TRANSPORT)
    BAD_RESPONSE = ("bad_response", ErrorCategory.TRANSPORT)
    SESSION_EXPIRED = ("session_expired", ErrorCategory.AUTH)

    def __init__(self, code: str, category: ErrorCategory) -> None:
        self.code = code
        self.category = category


# ═══════════════════════════════════════════════════════════════════════════════
# CheckoutError
# ═══════════════════════════════════════════════════════════════════════════════


class CheckoutError(Exception):
    def __init__(self, kind: ErrorKind, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status

    @property
    def code(self) -> str:
        return self.kind.code

    @property
    def category(self) -> ErrorCategory:
        return self.kind.category

    @property
    def retryable(self) -> bool:
        return self.kind.category is ErrorCategory.TRANSPORT

    def __repr__(self) -> str:
        return f"CheckoutError({self.kind.name}, {self.message!r})"


__all__ = (
    "ErrorCategory",
    "ErrorKind",
    "CheckoutError",
)
