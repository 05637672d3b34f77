"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created."""

    order_number: str = ""
    sold_by_id: int = 0
    status: str = ""
    total: str = "0"


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised on every status transition."""

    old_status: str = ""
    new_status: str = ""
    changed_by_id: int = 0


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when an order moves to Cancelled (in addition to OrderStatusChanged)."""

    previous_status: str = ""
    stock_restored: bool = False
