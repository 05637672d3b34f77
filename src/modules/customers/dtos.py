"""Customer DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer and the Service layer.
DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

import re
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

TELEPHONE_RE = re.compile(r"^\+?[0-9]{7,15}$")


def _normalize_telephone(value: str) -> str:
    """Drop spaces, dashes and parentheses; keep a leading ``+``."""
    cleaned = re.sub(r"[\s\-()]", "", value)
    if not TELEPHONE_RE.match(cleaned):
        raise ValueError("Invalid telephone number.")
    return cleaned


class CreateCustomerDTO(BaseModel):
    """Immutable DTO for customer creation requests."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, max_length=255)
    telephone: str
    route: str = ""
    credit_limit: Decimal = Field(default=Decimal("0"), ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Customer name is required.")
        return v.strip()

    @field_validator("telephone")
    @classmethod
    def normalize_telephone(cls, v: str) -> str:
        return _normalize_telephone(v)


class UpdateCustomerDTO(BaseModel):
    """Immutable DTO for customer update requests.

    All fields are optional; only supplied fields are updated.
    ``current_credits`` is honoured for admins only.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    telephone: str | None = None
    route: str | None = None
    credit_limit: Decimal | None = Field(default=None, ge=0)
    current_credits: Decimal | None = None

    @field_validator("telephone")
    @classmethod
    def normalize_telephone(cls, v: str | None) -> str | None:
        return _normalize_telephone(v) if v is not None else v
