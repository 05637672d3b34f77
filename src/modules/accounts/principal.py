"""The acting identity passed to services.

Services never look at ``request.user`` directly; views build a
``Principal`` and hand it over as ``actor``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from modules.accounts.models import Role


@dataclass(frozen=True)
class Principal:
    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user: Any) -> Principal:
        return cls(id=user.pk, role=getattr(user, "role", Role.REPRESENTATIVE))
