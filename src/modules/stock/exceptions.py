"""Stock ledger exceptions.

Raised by the repository/service layer; views translate them into HTTP
responses.
"""

from __future__ import annotations


class StockItemNotFound(Exception):
    """The requested stock item does not exist or has been soft-deleted."""


class InsufficientStock(Exception):
    """Requested quantity exceeds what is on hand.

    Carries the product name and the quantity actually available so the
    caller can show a useful message.
    """

    def __init__(self, product_name: str, available: int) -> None:
        self.product_name = product_name
        self.available = available
        super().__init__(
            f"Insufficient stock for {product_name}. Available: {available}"
        )


class StockQuantityConflict(Exception):
    """The on-hand quantity changed between reading the item and editing it."""

    def __init__(self, product_name: str, expected: int) -> None:
        self.product_name = product_name
        self.expected = expected
        super().__init__(
            f"Quantity of {product_name} changed since it was read "
            f"(expected {expected}); reload and try again."
        )
