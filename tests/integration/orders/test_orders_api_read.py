"""Integration tests for order read endpoints: list, retrieve, summary, overview."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal

import pytest
from django.utils import timezone

from modules.orders.constants import OrderStatus
from modules.orders.models import Order

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


def _order(seller, total="10.00", status=OrderStatus.COMPLETED, created_at=None):
    order = Order.objects.create(
        sold_by=seller, subtotal=Decimal(total), total=Decimal(total), status=status
    )
    if created_at is not None:
        Order.objects.filter(id=order.id).update(created_at=created_at)
    return order


class TestListOrders:
    def test_list_is_paginated(self, rep_client, rep_user):
        for _ in range(3):
            _order(rep_user)

        response = rep_client.get(URL)

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert len(data["results"]) == 3
        assert "items" in data["results"][0]

    def test_page_size(self, rep_client, rep_user):
        for _ in range(5):
            _order(rep_user)
        response = rep_client.get(URL, {"page_size": 2})
        assert len(response.json()["results"]) == 2
        assert response.json()["next"] is not None

    def test_representative_seller_filter_ignored(
        self, rep_client, rep_user, other_rep_user
    ):
        own = _order(rep_user)
        _order(other_rep_user)

        response = rep_client.get(URL, {"seller": other_rep_user.pk})

        ids = [row["id"] for row in response.json()["results"]]
        assert ids == [str(own.id)]

    def test_admin_seller_filter(self, admin_client, rep_user, other_rep_user):
        _order(rep_user)
        theirs = _order(other_rep_user)

        response = admin_client.get(URL, {"seller": other_rep_user.pk})

        ids = [row["id"] for row in response.json()["results"]]
        assert ids == [str(theirs.id)]

    def test_date_filter(self, admin_client, rep_user):
        day = date(2024, 5, 20)
        inside = _order(
            rep_user,
            created_at=timezone.make_aware(datetime.combine(day, time(12))),
        )
        _order(rep_user)

        response = admin_client.get(URL, {"date": "2024-05-20"})

        ids = [row["id"] for row in response.json()["results"]]
        assert ids == [str(inside.id)]

    def test_invalid_date_returns_400(self, admin_client):
        response = admin_client.get(URL, {"date": "20-05-2024"})
        assert response.status_code == 400


class TestRetrieveOrder:
    def test_owner_retrieves(self, rep_client, rep_user):
        order = _order(rep_user)
        response = rep_client.get(f"{URL}{order.id}/")
        assert response.status_code == 200
        assert response.json()["order_number"] == order.order_number

    def test_repeated_retrieval_returns_same_body(self, rep_client, widget):
        created = rep_client.post(
            URL,
            {
                "items": [{"product_id": str(widget.id), "quantity": 1, "price": "5"}],
                "subtotal": "5",
                "total": "5",
            },
            format="json",
        ).json()

        first = rep_client.get(f"{URL}{created['id']}/")
        second = rep_client.get(f"{URL}{created['id']}/")

        assert first.status_code == second.status_code == 200
        assert first.json() == second.json()

    def test_other_representative_gets_403(self, other_rep_client, rep_user):
        order = _order(rep_user)
        response = other_rep_client.get(f"{URL}{order.id}/")
        assert response.status_code == 403
        assert response.json()["detail"] == (
            "You do not have permission to access this order."
        )

    def test_missing_order_404(self, rep_client):
        response = rep_client.get(f"{URL}00000000-0000-0000-0000-000000000000/")
        assert response.status_code == 404


class TestSummary:
    def test_admin_summary(self, admin_client, rep_user):
        _order(rep_user, total="10.00")
        _order(rep_user, total="5.25")
        _order(rep_user, total="100.00", status=OrderStatus.CANCELLED)

        response = admin_client.get(f"{URL}summary/")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert Decimal(data["total_value"]) == Decimal("15.25")
        assert data["date"] is None

    def test_summary_for_date(self, admin_client, rep_user):
        _order(rep_user)
        response = admin_client.get(f"{URL}summary/", {"date": "2020-01-01"})
        data = response.json()
        assert data["count"] == 0
        assert data["date"] == "2020-01-01"

    def test_representative_forbidden(self, rep_client):
        response = rep_client.get(f"{URL}summary/")
        assert response.status_code == 403


class TestOverview:
    def test_admin_overview(self, admin_client, rep_user):
        _order(rep_user, total="10.00")

        response = admin_client.get(f"{URL}overview/")

        assert response.status_code == 200
        data = response.json()
        assert data["today"]["count"] == 1
        assert data["week"]["count"] == 1
        assert Decimal(data["week"]["total_value"]) == Decimal("10.00")

    def test_representative_forbidden(self, rep_client):
        assert rep_client.get(f"{URL}overview/").status_code == 403
