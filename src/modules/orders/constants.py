"""Order domain constants.

Status and payment choices, the representative transition table and the
stock side effect attached to each (old, new) status pair.  Every
transition decision goes through ``allowed_transitions`` and
``stock_effect``.
"""

from __future__ import annotations

import enum

from django.db import models

from modules.accounts.models import Role


class OrderStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    CONFIRMED = "Confirmed", "Confirmed"
    OUT_OF_WAREHOUSE = "Out of Warehouse", "Out of Warehouse"
    IN_TRANSIT = "In Transit", "In Transit"
    DELIVERED = "Delivered", "Delivered"
    PAID = "Paid", "Paid"
    COMPLETED = "Completed", "Completed"
    CANCELLED = "Cancelled", "Cancelled"


class PaymentMethod(models.TextChoices):
    CASH = "Cash", "Cash"
    CARD = "Card", "Card"
    MOBILE_PAYMENT = "Mobile Payment", "Mobile Payment"


# Linear workflow for representatives.  Admins may jump to any other status.
VALID_TRANSITIONS: dict[str, frozenset[str]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset(
        {OrderStatus.OUT_OF_WAREHOUSE, OrderStatus.CANCELLED}
    ),
    OrderStatus.OUT_OF_WAREHOUSE: frozenset(
        {OrderStatus.IN_TRANSIT, OrderStatus.CANCELLED}
    ),
    OrderStatus.IN_TRANSIT: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.PAID}),
    OrderStatus.PAID: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATES: frozenset[str] = frozenset(
    {OrderStatus.COMPLETED, OrderStatus.CANCELLED}
)

ORDER_NUMBER_MAX_RETRIES = 5


class StockEffect(enum.Enum):
    NONE = "none"
    RESTORE = "restore"
    DEDUCT = "deduct"


_STOCK_EFFECTS: dict[tuple[str, str], StockEffect] = {
    (OrderStatus.COMPLETED, OrderStatus.CANCELLED): StockEffect.RESTORE,
    (OrderStatus.CANCELLED, OrderStatus.COMPLETED): StockEffect.DEDUCT,
}


def allowed_transitions(status: str, role: str) -> frozenset[str]:
    """Statuses reachable from ``status`` for an actor with ``role``."""
    if role == Role.ADMIN:
        return frozenset(value for value in OrderStatus.values if value != status)
    return VALID_TRANSITIONS.get(status, frozenset())


def stock_effect(old_status: str, new_status: str) -> StockEffect:
    """Stock mutation that accompanies moving from ``old_status`` to ``new_status``."""
    return _STOCK_EFFECTS.get((old_status, new_status), StockEffect.NONE)
