"""
cartflow — cart, checkout and order orchestration for a grocery storefront.

    from cartflow import cart        # Cart aggregate + backend-synced session
    from cartflow import discount    # Store rules and vouchers
    from cartflow import shipping    # Nearest store, per-service cost
    from cartflow import checkout    # Preview graph, live recompute, placement
    from cartflow import order       # Order lifecycle state machine
    from cartflow import client      # The backend over HTTP
"""

from cartflow import command
from cartflow import graph
from cartflow import lift
from cartflow import money
from cartflow import cart
from cartflow import discount
from cartflow import shipping
from cartflow import order
from cartflow import checkout
from cartflow import client
from cartflow.config import Settings
from cartflow._logging import configure_logging, get_logger
from cartflow.errors import CheckoutError, ErrorCategory, ErrorKind
from cartflow._types import Money

__version__ = "0.1.0"

__all__ = (
    "command",
    "graph",
    "lift",
    "money",
    "cart",
    "discount",
    "shipping",
    "order",
    "checkout",
    "client",
    "Settings",
    "configure_logging",
    "get_logger",
    "CheckoutError",
    "ErrorCategory",
    "ErrorKind",
    "Money",
)
