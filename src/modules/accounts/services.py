"""User management use-cases: admin user management, registration and self-service profile."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction
from django.db.models import ProtectedError

from modules.accounts.exceptions import (
    CannotDeleteSelf,
    InvalidCurrentPassword,
    UserAlreadyExists,
    UserInUse,
    UserNotFound,
)
from modules.accounts.models import Role, User

if TYPE_CHECKING:
    from modules.accounts.dtos import (
        ChangePasswordDTO,
        ChangeUsernameDTO,
        CreateUserDTO,
        RegisterUserDTO,
        UpdateUserDTO,
    )
    from modules.accounts.principal import Principal
    from modules.accounts.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class UserService:
    def __init__(self, repository: IUserRepository) -> None:
        self._repo = repository

    @transaction.atomic
    def create_user(self, dto: CreateUserDTO) -> User:
        """Create a user with a hashed password.

        Raises:
            UserAlreadyExists: if the username is taken.
        """
        if self._repo.get_by_username(dto.username):
            logger.warning("user.duplicate_username", username=dto.username)
            raise UserAlreadyExists("Username already registered.")

        user = User(
            username=dto.username,
            email=dto.email,
            first_name=dto.first_name,
            last_name=dto.last_name,
            role=dto.role,
        )
        user.set_password(dto.password)
        user = self._repo.save(user)
        logger.info("user.created", user_id=user.pk, role=user.role)
        return user

    @transaction.atomic
    def update_user(self, id: int, dto: UpdateUserDTO) -> User:
        user = self.get_user(id)
        for field in ("email", "first_name", "last_name", "role", "is_active"):
            value = getattr(dto, field)
            if value is not None:
                setattr(user, field, value)
        if dto.password:
            user.set_password(dto.password)
        user = self._repo.save(user)
        logger.info("user.updated", user_id=user.pk)
        return user

    @transaction.atomic
    def register(self, dto: RegisterUserDTO) -> User:
        """Self-registration: always creates a representative account.

        Raises:
            UserAlreadyExists: if the username is taken.
        """
        if self._repo.get_by_username(dto.username):
            logger.warning("user.duplicate_username", username=dto.username)
            raise UserAlreadyExists("Username already registered.")

        user = User(username=dto.username, email=dto.email, role=Role.REPRESENTATIVE)
        user.set_password(dto.password)
        user = self._repo.save(user)
        logger.info("user.registered", user_id=user.pk)
        return user

    @transaction.atomic
    def change_username(self, actor: Principal, dto: ChangeUsernameDTO) -> User:
        """Rename the acting user.

        Raises:
            UserAlreadyExists: if another account already uses the name.
        """
        user = self.get_user(actor.id)
        holder = self._repo.get_by_username(dto.username)
        if holder and holder.pk != user.pk:
            raise UserAlreadyExists("Username already taken.")
        user.username = dto.username
        user = self._repo.save(user)
        logger.info("user.username_changed", user_id=user.pk)
        return user

    @transaction.atomic
    def change_password(self, actor: Principal, dto: ChangePasswordDTO) -> None:
        """Replace the acting user's password after checking the current one.

        Raises:
            InvalidCurrentPassword: if ``current_password`` does not match.
        """
        user = self.get_user(actor.id)
        if not user.check_password(dto.current_password):
            logger.warning("user.password_change_rejected", user_id=user.pk)
            raise InvalidCurrentPassword("Current password is incorrect.")
        user.set_password(dto.new_password)
        self._repo.save(user)
        logger.info("user.password_changed", user_id=user.pk)

    def get_user(self, id: int) -> User:
        user = self._repo.get_by_id(id)
        if not user:
            raise UserNotFound(f"User {id} not found.")
        return user

    def list_users(self) -> List[User]:
        return self._repo.list()

    @transaction.atomic
    def delete_user(self, actor: Principal, id: int) -> None:
        """Delete a user account.

        Raises:
            UserNotFound: if the user does not exist.
            CannotDeleteSelf: if the acting admin targets their own account.
            UserInUse: if orders still reference the user (deactivate instead).
        """
        user = self.get_user(id)
        if user.pk == actor.id:
            raise CannotDeleteSelf("You cannot delete your own account.")
        try:
            self._repo.delete(user.pk)
        except ProtectedError as exc:
            logger.warning("user.delete_protected", user_id=user.pk)
            raise UserInUse(
                "User has recorded sales; deactivate the account instead."
            ) from exc
