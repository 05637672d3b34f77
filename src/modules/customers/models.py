"""Customer model: credit customers registered by representatives.

Business rules implemented:
- Telephone must be unique in the system (soft-deleted rows included).
- Representatives see and edit only the customers they added.
- ``current_credits`` (outstanding credit) is changed by admins only.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
- Telephone is masked in ``__str__`` and logs.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import SoftDeleteModel


class Customer(SoftDeleteModel):
    """Customer aggregate root."""

    name = models.CharField(max_length=255)
    route = models.CharField(max_length=255, blank=True, default="")
    telephone = models.CharField(max_length=20, unique=True)
    credit_limit = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    current_credits = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0")
    )
    added_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="customers",
    )

    class Meta:
        db_table = "customers"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="customers_created_idx"),
            models.Index(fields=["route"], name="customers_route_idx"),
        ]

    @staticmethod
    def mask_telephone(telephone: str) -> str:
        suffix = telephone[-4:] if telephone else "????"
        return f"***{suffix}"

    def __str__(self) -> str:
        return f"{self.name} ({self.mask_telephone(self.telephone)})"
