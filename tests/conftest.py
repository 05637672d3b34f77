from decimal import Decimal

import pytest

from rest_framework.test import APIClient

from modules.accounts.models import Role, User
from modules.accounts.principal import Principal
from modules.stock.models import StockItem


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users and principals
# ---------------------------------------------------------------------------


@pytest.fixture()
def rep_user():
    return User.objects.create_user(
        username="rep", password="testpass123", role=Role.REPRESENTATIVE
    )


@pytest.fixture()
def other_rep_user():
    return User.objects.create_user(
        username="other_rep", password="testpass123", role=Role.REPRESENTATIVE
    )


@pytest.fixture()
def admin_user():
    return User.objects.create_user(
        username="boss", password="testpass123", role=Role.ADMIN
    )


@pytest.fixture()
def rep(rep_user):
    return Principal.from_user(rep_user)


@pytest.fixture()
def other_rep(other_rep_user):
    return Principal.from_user(other_rep_user)


@pytest.fixture()
def admin(admin_user):
    return Principal.from_user(admin_user)


@pytest.fixture()
def rep_client(rep_user):
    client = APIClient()
    client.force_authenticate(user=rep_user)
    return client


@pytest.fixture()
def other_rep_client(other_rep_user):
    client = APIClient()
    client.force_authenticate(user=other_rep_user)
    return client


@pytest.fixture()
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------


@pytest.fixture()
def widget():
    """Stock item ``Widget``: 10 on hand at 5.00."""
    return StockItem.objects.create(
        name="Widget",
        barcode="1111111111111",
        category="Hardware",
        price=Decimal("5.00"),
        quantity=10,
    )


@pytest.fixture()
def gadget():
    """Stock item ``Gadget``: 3 on hand at 12.50."""
    return StockItem.objects.create(
        name="Gadget",
        barcode="2222222222222",
        category="Electronics",
        price=Decimal("12.50"),
        quantity=3,
    )
