"""Customer service layer (Use Cases).

Orchestrates business logic for the Customer aggregate, delegating
persistence to the injected ``ICustomerRepository``.

Business rules enforced here:
- Telephone must be unique.
- Representatives only see and edit customers they added.
- Only admins delete customers or change ``current_credits``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.customers.exceptions import (
    CustomerAccessDenied,
    CustomerAlreadyExists,
    CustomerNotFound,
)
from modules.customers.models import Customer

if TYPE_CHECKING:
    from modules.accounts.principal import Principal
    from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)

ACCESS_DENIED_MESSAGE = "You are not allowed to access this customer."


class CustomerService:
    """Application service for Customer use-cases.

    Receives an ``ICustomerRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ICustomerRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_customer(self, actor: Principal, dto: CreateCustomerDTO) -> Customer:
        """Register a customer owned by ``actor``.

        Raises:
            CustomerAlreadyExists: if the telephone is already registered.
        """
        log = logger.bind(telephone=Customer.mask_telephone(dto.telephone))

        if self._repo.get_by_telephone(dto.telephone):
            log.warning("customer.duplicate_telephone")
            raise CustomerAlreadyExists("Customer with this telephone already exists.")

        customer = Customer(
            name=dto.name,
            telephone=dto.telephone,
            route=dto.route,
            credit_limit=dto.credit_limit,
            added_by_id=actor.id,
        )
        customer = self._repo.save(customer)
        log.info("customer.created", customer_id=str(customer.id), added_by=actor.id)
        return customer

    @transaction.atomic
    def update_customer(
        self, actor: Principal, id: str, dto: UpdateCustomerDTO
    ) -> Customer:
        """Update the supplied fields of a customer.

        ``current_credits`` is ignored unless ``actor`` is an admin.

        Raises:
            CustomerNotFound: if the customer does not exist.
            CustomerAccessDenied: if a representative targets another's customer.
            CustomerAlreadyExists: if the new telephone collides.
        """
        customer = self.get_customer(actor, id)
        log = logger.bind(customer_id=str(customer.id))

        if dto.telephone is not None and dto.telephone != customer.telephone:
            if self._repo.get_by_telephone(dto.telephone):
                log.warning("customer.duplicate_telephone")
                raise CustomerAlreadyExists(
                    "Customer with this telephone already exists."
                )

        for field in ("name", "telephone", "route", "credit_limit"):
            value = getattr(dto, field)
            if value is not None:
                setattr(customer, field, value)

        if dto.current_credits is not None:
            if actor.is_admin:
                customer.current_credits = dto.current_credits
            else:
                log.info("customer.credits_update_ignored", actor_id=actor.id)

        customer = self._repo.save(customer)
        log.info("customer.updated")
        return customer

    @transaction.atomic
    def delete_customer(self, actor: Principal, id: str) -> None:
        """Soft-delete a customer (admin only).

        Raises:
            CustomerAccessDenied: if ``actor`` is not an admin.
            CustomerNotFound: if the customer does not exist.
        """
        if not actor.is_admin:
            raise CustomerAccessDenied(ACCESS_DENIED_MESSAGE)
        if not self._repo.delete(id):
            raise CustomerNotFound(f"Customer {id} not found.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_customers(
        self, actor: Principal, filters: Optional[Dict[str, Any]] = None
    ) -> List[Customer]:
        """Admins see every customer; representatives only their own."""
        scoped = dict(filters or {})
        if not actor.is_admin:
            scoped["added_by_id"] = actor.id
        return self._repo.list(scoped)

    def get_customer(self, actor: Principal, id: str) -> Customer:
        """Retrieve a single customer by ID.

        Raises:
            CustomerNotFound: if the customer does not exist.
            CustomerAccessDenied: if a representative targets another's customer.
        """
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(f"Customer {id} not found.")
        if not actor.is_admin and customer.added_by_id != actor.id:
            logger.warning(
                "customer.access_denied", customer_id=str(id), actor_id=actor.id
            )
            raise CustomerAccessDenied(ACCESS_DENIED_MESSAGE)
        return customer
