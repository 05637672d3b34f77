"""User DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.accounts.models import Role


class CreateUserDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str = Field(min_length=1, max_length=150)
    password: str = Field(min_length=8)
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    role: Role = Role.REPRESENTATIVE


class UpdateUserDTO(BaseModel):
    """All fields optional; only supplied fields are applied."""

    model_config = ConfigDict(frozen=True)

    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: Role | None = None
    is_active: bool | None = None
    password: str | None = Field(default=None, min_length=8)


class RegisterUserDTO(BaseModel):
    """Public self-registration; the account is always a representative."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(min_length=1, max_length=150)
    password: str = Field(min_length=8)
    email: str = ""

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required.")
        return v


class ChangeUsernameDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str = Field(min_length=1, max_length=150)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required.")
        return v


class ChangePasswordDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)
