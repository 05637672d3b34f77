"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.  ``InsufficientStock`` and
``StockItemNotFound`` come from the stock ledger and are re-exported here
because order creation and transitions raise them too.
"""

from __future__ import annotations

from modules.stock.exceptions import InsufficientStock, StockItemNotFound

__all__ = [
    "InsufficientStock",
    "InvalidOrderTransition",
    "OrderAccessDenied",
    "OrderNotFound",
    "OrderValidationError",
    "StaleOrderStatus",
    "StockItemNotFound",
]


class OrderNotFound(Exception):
    """The requested order does not exist."""


class OrderValidationError(Exception):
    """Malformed order input, unknown status or (strict mode) totals mismatch."""


class OrderAccessDenied(Exception):
    """The actor may not read or change this order.

    The message is deliberately generic so nothing about other sellers'
    orders leaks.
    """


class InvalidOrderTransition(Exception):
    """The target status is not reachable from the current one for this actor."""


class StaleOrderStatus(InvalidOrderTransition):
    """The order's status changed concurrently; re-read and re-submit."""
