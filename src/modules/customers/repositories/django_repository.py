"""Django ORM implementation of the Customer repository.

Methods return ``None`` for missing entities; the Service Layer decides
how to translate that into a domain exception.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.core.repositories.interfaces import translate_storage_errors
from modules.customers.models import Customer
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    @translate_storage_errors
    def get_by_id(self, id: str) -> Optional[Customer]:
        """Retrieve a live customer by primary key.

        Returns ``None`` for non-existent, soft-deleted or malformed IDs.
        """
        try:
            return Customer.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    @translate_storage_errors
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Customer]:
        """List live customers with optional Django ORM look-ups.

        Examples of valid filters::

            {"added_by_id": 3}
            {"route__iexact": "north"}
        """
        queryset = Customer.objects.alive().select_related("added_by")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @translate_storage_errors
    @transaction.atomic
    def save(self, entity: Customer) -> Customer:
        """Persist (create or update) a customer."""
        is_new = entity._state.adding
        entity.save()
        logger.info("customer.saved", customer_id=str(entity.id), is_new=is_new)
        return entity

    @translate_storage_errors
    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Soft-delete a customer by ID; ``False`` if no live customer matches."""
        customer = self.get_by_id(id)
        if not customer:
            return False
        customer.delete()
        logger.info("customer.soft_deleted", customer_id=str(id))
        return True

    @translate_storage_errors
    def get_by_telephone(self, telephone: str) -> Optional[Customer]:
        return Customer.objects.filter(telephone=telephone).first()
