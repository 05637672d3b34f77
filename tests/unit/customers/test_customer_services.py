"""Unit tests for CustomerService.

Covers:
- Telephone uniqueness (including soft-deleted customers).
- Representative scoping vs admin visibility.
- Admin-only delete and ``current_credits`` changes.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
from modules.customers.exceptions import (
    CustomerAccessDenied,
    CustomerAlreadyExists,
    CustomerNotFound,
)
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.services import CustomerService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return CustomerService(repository=CustomerDjangoRepository())


@pytest.fixture()
def rep_customer(rep_user):
    return Customer.objects.create(
        name="Perera Stores",
        route="North",
        telephone="0771234501",
        credit_limit=Decimal("50000"),
        added_by=rep_user,
    )


def _create_dto(**overrides) -> CreateCustomerDTO:
    data = {"name": "Silva Mini Mart", "telephone": "077 123 4502", "route": "North"}
    data.update(overrides)
    return CreateCustomerDTO(**data)


class TestCreateCustomer:
    def test_create_sets_owner_and_normalizes_telephone(self, service, rep, rep_user):
        customer = service.create_customer(rep, _create_dto())

        assert customer.added_by_id == rep_user.pk
        assert customer.telephone == "0771234502"
        assert customer.current_credits == Decimal("0")

    def test_duplicate_telephone_rejected(self, service, rep, rep_customer):
        with pytest.raises(CustomerAlreadyExists):
            service.create_customer(rep, _create_dto(telephone="0771234501"))

    def test_soft_deleted_telephone_still_reserved(self, service, rep, rep_customer):
        rep_customer.delete()
        with pytest.raises(CustomerAlreadyExists):
            service.create_customer(rep, _create_dto(telephone="0771234501"))


class TestReadCustomers:
    def test_representative_lists_own_customers(
        self, service, rep, other_rep, rep_customer
    ):
        assert [c.id for c in service.list_customers(rep)] == [rep_customer.id]
        assert service.list_customers(other_rep) == []

    def test_admin_lists_everything(self, service, admin, rep_customer):
        assert [c.id for c in service.list_customers(admin)] == [rep_customer.id]

    def test_other_representative_cannot_read(self, service, other_rep, rep_customer):
        with pytest.raises(CustomerAccessDenied):
            service.get_customer(other_rep, str(rep_customer.id))

    def test_missing_customer(self, service, admin):
        with pytest.raises(CustomerNotFound):
            service.get_customer(admin, str(uuid4()))

    def test_soft_deleted_customer_not_found(self, service, admin, rep_customer):
        rep_customer.delete()
        with pytest.raises(CustomerNotFound):
            service.get_customer(admin, str(rep_customer.id))


class TestUpdateCustomer:
    def test_owner_updates_fields(self, service, rep, rep_customer):
        updated = service.update_customer(
            rep,
            str(rep_customer.id),
            UpdateCustomerDTO(route="South", credit_limit=Decimal("60000")),
        )
        assert updated.route == "South"
        assert updated.credit_limit == Decimal("60000")
        assert updated.name == "Perera Stores"

    def test_representative_credit_change_is_ignored(self, service, rep, rep_customer):
        updated = service.update_customer(
            rep,
            str(rep_customer.id),
            UpdateCustomerDTO(current_credits=Decimal("1200")),
        )
        assert updated.current_credits == Decimal("0")

    def test_admin_changes_credits(self, service, admin, rep_customer):
        updated = service.update_customer(
            admin,
            str(rep_customer.id),
            UpdateCustomerDTO(current_credits=Decimal("1200")),
        )
        rep_customer.refresh_from_db()
        assert rep_customer.current_credits == Decimal("1200")
        assert updated.current_credits == Decimal("1200")

    def test_telephone_collision(self, service, admin, rep_customer, other_rep_user):
        other = Customer.objects.create(
            name="Fernando Traders", telephone="0771234503", added_by=other_rep_user
        )
        with pytest.raises(CustomerAlreadyExists):
            service.update_customer(
                admin, str(other.id), UpdateCustomerDTO(telephone="0771234501")
            )

    def test_keeping_own_telephone_is_fine(self, service, rep, rep_customer):
        updated = service.update_customer(
            rep, str(rep_customer.id), UpdateCustomerDTO(telephone="0771234501")
        )
        assert updated.telephone == "0771234501"

    def test_other_representative_cannot_update(
        self, service, other_rep, rep_customer
    ):
        with pytest.raises(CustomerAccessDenied):
            service.update_customer(
                other_rep, str(rep_customer.id), UpdateCustomerDTO(name="Mine now")
            )


class TestDeleteCustomer:
    def test_admin_soft_deletes(self, service, admin, rep_customer):
        service.delete_customer(admin, str(rep_customer.id))
        assert Customer.objects.get(id=rep_customer.id).is_deleted

    def test_representative_cannot_delete_even_own(self, service, rep, rep_customer):
        with pytest.raises(CustomerAccessDenied):
            service.delete_customer(rep, str(rep_customer.id))
        assert not Customer.objects.get(id=rep_customer.id).is_deleted

    def test_delete_missing(self, service, admin):
        with pytest.raises(CustomerNotFound):
            service.delete_customer(admin, str(uuid4()))
