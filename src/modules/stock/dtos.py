"""Stock item DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateStockItemDTO(BaseModel):
    """Input for stock item creation.

    ``price`` and ``quantity`` must be non-negative; ``name`` and
    ``category`` are required.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    category: str
    price: Decimal = Field(ge=0)
    quantity: int = Field(default=0, ge=0)
    barcode: str = ""
    description: str = ""
    image_url: str = ""

    @field_validator("name", "category")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field must not be empty.")
        return v.strip()

    @field_validator("barcode")
    @classmethod
    def strip_barcode(cls, v: str) -> str:
        return v.strip()


class UpdateStockItemDTO(BaseModel):
    """Partial update: only supplied (non-``None``) fields are applied."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    category: str | None = None
    price: Decimal | None = Field(default=None, ge=0)
    quantity: int | None = Field(default=None, ge=0)
    barcode: str | None = None
    description: str | None = None
    image_url: str | None = None

    @field_validator("name", "category")
    @classmethod
    def must_not_be_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Field must not be empty.")
        return v.strip() if v is not None else v
