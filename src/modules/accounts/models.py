"""User model carrying the point-of-sale role."""

from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class Role(models.TextChoices):
    REPRESENTATIVE = "representative", "Representative"
    ADMIN = "admin", "Admin"


class User(AbstractUser):
    """Application user.

    ``role`` drives every authorization decision in the API: representatives
    sell and see their own orders/customers, admins manage everything.
    """

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.REPRESENTATIVE,
        db_index=True,
    )

    class Meta:
        db_table = "users"
        ordering = ["username"]

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"
