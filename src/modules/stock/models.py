"""Stock item model: the authoritative on-hand count per product.

Rules:
- ``quantity`` never goes below zero in a committed row (DB check constraint;
  decrements are conditional updates, see the repository).
- ``price`` is non-negative.
- Soft delete via ``deleted_at``; order line items keep their snapshots.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import SoftDeleteModel


class StockItem(SoftDeleteModel):
    name = models.CharField(max_length=255)
    barcode = models.CharField(max_length=64, blank=True, default="", db_index=True)
    description = models.TextField(blank=True, default="")
    category = models.CharField(max_length=100)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    quantity = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    image_url = models.CharField(max_length=500, blank=True, default="")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_items",
    )

    class Meta:
        db_table = "stock_items"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category"], name="stock_items_category_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name="stock_items_quantity_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="stock_items_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.quantity})"
