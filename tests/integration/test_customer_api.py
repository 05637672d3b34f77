"""Integration tests for the customer API."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.customers.models import Customer

pytestmark = pytest.mark.integration

URL = "/api/v1/customers/"


@pytest.fixture()
def rep_customer(rep_user):
    return Customer.objects.create(
        name="Perera Stores",
        route="North",
        telephone="0771234501",
        credit_limit=Decimal("50000"),
        added_by=rep_user,
    )


@pytest.fixture()
def other_customer(other_rep_user):
    return Customer.objects.create(
        name="Fernando Traders",
        route="South",
        telephone="0771234503",
        added_by=other_rep_user,
    )


class TestCustomerCreate:
    def test_create(self, rep_client, rep_user):
        response = rep_client.post(
            URL,
            {"name": "Silva Mini Mart", "telephone": "077-123-4502", "route": "North"},
            format="json",
        )
        assert response.status_code == 201
        data = response.json()
        assert data["telephone"] == "0771234502"
        assert data["added_by"] == rep_user.pk
        assert data["added_by_username"] == "rep"

    def test_duplicate_telephone_returns_409(self, rep_client, rep_customer):
        response = rep_client.post(
            URL, {"name": "Copy", "telephone": "0771234501"}, format="json"
        )
        assert response.status_code == 409

    def test_invalid_telephone_returns_400(self, rep_client):
        response = rep_client.post(
            URL, {"name": "Shop", "telephone": "call me"}, format="json"
        )
        assert response.status_code == 400


class TestCustomerScoping:
    def test_representative_lists_own(self, rep_client, rep_customer, other_customer):
        response = rep_client.get(URL)
        names = [row["name"] for row in response.json()["results"]]
        assert names == ["Perera Stores"]

    def test_admin_lists_all(self, admin_client, rep_customer, other_customer):
        response = admin_client.get(URL)
        assert response.json()["count"] == 2

    def test_route_filter(self, admin_client, rep_customer, other_customer):
        response = admin_client.get(URL, {"route": "south"})
        assert [row["name"] for row in response.json()["results"]] == [
            "Fernando Traders"
        ]

    def test_other_representative_gets_403(self, rep_client, other_customer):
        response = rep_client.get(f"{URL}{other_customer.id}/")
        assert response.status_code == 403


class TestCustomerUpdate:
    def test_representative_credit_change_ignored(self, rep_client, rep_customer):
        response = rep_client.patch(
            f"{URL}{rep_customer.id}/",
            {"route": "East", "current_credits": "500.00"},
            format="json",
        )
        assert response.status_code == 200
        rep_customer.refresh_from_db()
        assert rep_customer.route == "East"
        assert rep_customer.current_credits == Decimal("0")

    def test_admin_sets_credits(self, admin_client, rep_customer):
        response = admin_client.patch(
            f"{URL}{rep_customer.id}/", {"current_credits": "500.00"}, format="json"
        )
        assert response.status_code == 200
        assert Decimal(response.json()["current_credits"]) == Decimal("500.00")

    def test_telephone_collision_returns_409(
        self, admin_client, rep_customer, other_customer
    ):
        response = admin_client.patch(
            f"{URL}{other_customer.id}/", {"telephone": "0771234501"}, format="json"
        )
        assert response.status_code == 409


class TestCustomerDelete:
    def test_representative_cannot_delete(self, rep_client, rep_customer):
        response = rep_client.delete(f"{URL}{rep_customer.id}/")
        assert response.status_code == 403

    def test_admin_deletes(self, admin_client, rep_customer):
        response = admin_client.delete(f"{URL}{rep_customer.id}/")
        assert response.status_code == 204
        assert Customer.objects.get(id=rep_customer.id).is_deleted

    def test_deleted_customer_404(self, admin_client, rep_customer):
        rep_customer.delete()
        response = admin_client.get(f"{URL}{rep_customer.id}/")
        assert response.status_code == 404
