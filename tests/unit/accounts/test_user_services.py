"""Unit tests for UserService and the Principal value object."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from modules.accounts.dtos import (
    ChangePasswordDTO,
    ChangeUsernameDTO,
    CreateUserDTO,
    RegisterUserDTO,
    UpdateUserDTO,
)
from modules.accounts.exceptions import (
    CannotDeleteSelf,
    InvalidCurrentPassword,
    UserAlreadyExists,
    UserInUse,
    UserNotFound,
)
from modules.accounts.models import Role, User
from modules.accounts.principal import Principal
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.accounts.services import UserService
from modules.orders.models import Order

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return UserService(repository=UserDjangoRepository())


class TestPrincipal:
    def test_from_user(self, admin_user, rep_user):
        assert Principal.from_user(admin_user) == Principal(
            id=admin_user.pk, role=Role.ADMIN
        )
        assert Principal.from_user(admin_user).is_admin
        assert not Principal.from_user(rep_user).is_admin


class TestCreateUser:
    def test_password_is_hashed(self, service):
        user = service.create_user(
            CreateUserDTO(username="rep.east", password="s3cretpass")
        )
        assert user.role == Role.REPRESENTATIVE
        assert user.password != "s3cretpass"
        assert user.check_password("s3cretpass")

    def test_duplicate_username(self, service, rep_user):
        with pytest.raises(UserAlreadyExists):
            service.create_user(CreateUserDTO(username="rep", password="whatever1"))

    def test_short_password_rejected(self):
        with pytest.raises(ValidationError):
            CreateUserDTO(username="x", password="short")

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            CreateUserDTO(username="x", password="longenough", role="owner")


class TestUpdateUser:
    def test_promote_and_reset_password(self, service, rep_user):
        user = service.update_user(
            rep_user.pk, UpdateUserDTO(role=Role.ADMIN, password="newpassword")
        )
        assert user.role == Role.ADMIN
        assert user.check_password("newpassword")

    def test_deactivate(self, service, rep_user):
        user = service.update_user(rep_user.pk, UpdateUserDTO(is_active=False))
        assert user.is_active is False

    def test_missing_user(self, service):
        with pytest.raises(UserNotFound):
            service.update_user(999999, UpdateUserDTO(first_name="Nobody"))


class TestDeleteUser:
    def test_delete(self, service, admin, rep_user):
        service.delete_user(admin, rep_user.pk)
        assert not User.objects.filter(pk=rep_user.pk).exists()

    def test_cannot_delete_self(self, service, admin, admin_user):
        with pytest.raises(CannotDeleteSelf):
            service.delete_user(admin, admin_user.pk)

    def test_user_with_orders_is_protected(self, service, admin, rep_user):
        Order.objects.create(
            sold_by=rep_user, subtotal=Decimal("1"), total=Decimal("1")
        )
        with pytest.raises(UserInUse):
            service.delete_user(admin, rep_user.pk)
        assert User.objects.filter(pk=rep_user.pk).exists()

    def test_missing_user(self, service, admin):
        with pytest.raises(UserNotFound):
            service.delete_user(admin, "abc")


class TestRegister:
    def test_registers_representative(self, service):
        user = service.register(
            RegisterUserDTO(username="  rep.east ", password="longenough")
        )
        user.refresh_from_db()
        assert user.username == "rep.east"
        assert user.role == Role.REPRESENTATIVE
        assert user.check_password("longenough")

    def test_duplicate_username(self, service, rep_user):
        with pytest.raises(UserAlreadyExists):
            service.register(RegisterUserDTO(username="rep", password="longenough"))

    @pytest.mark.parametrize(
        "data",
        [
            {"username": "   ", "password": "longenough"},
            {"username": "x", "password": "short"},
        ],
    )
    def test_invalid_registration_payload(self, data):
        with pytest.raises(ValidationError):
            RegisterUserDTO(**data)


class TestChangeUsername:
    def test_renames_and_trims(self, service, rep, rep_user):
        user = service.change_username(rep, ChangeUsernameDTO(username="  rep.west  "))
        rep_user.refresh_from_db()
        assert user.username == rep_user.username == "rep.west"

    def test_keeping_own_name_is_allowed(self, service, rep):
        user = service.change_username(rep, ChangeUsernameDTO(username="rep"))
        assert user.username == "rep"

    def test_name_taken_by_someone_else(self, service, rep, admin_user):
        with pytest.raises(UserAlreadyExists):
            service.change_username(rep, ChangeUsernameDTO(username="boss"))

    def test_blank_username_rejected(self):
        with pytest.raises(ValidationError):
            ChangeUsernameDTO(username="   ")


class TestChangePassword:
    def test_changes_password(self, service, rep, rep_user):
        service.change_password(
            rep,
            ChangePasswordDTO(current_password="testpass123", new_password="fresh1"),
        )
        rep_user.refresh_from_db()
        assert rep_user.check_password("fresh1")

    def test_wrong_current_password(self, service, rep, rep_user):
        with pytest.raises(InvalidCurrentPassword):
            service.change_password(
                rep,
                ChangePasswordDTO(current_password="nope", new_password="fresh1"),
            )
        rep_user.refresh_from_db()
        assert rep_user.check_password("testpass123")

    def test_new_password_minimum_length(self):
        with pytest.raises(ValidationError):
            ChangePasswordDTO(current_password="testpass123", new_password="five5")
