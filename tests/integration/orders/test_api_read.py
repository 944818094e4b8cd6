"""Integration tests for order read endpoints (by id, all, by user, by status)."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.repositories.django_repository import OrderDjangoRepository

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


def _order(user_id=1, status=OrderStatus.PENDING):
    return OrderDjangoRepository().create(
        {
            "user_id": user_id,
            "status": status,
            "total_amount": Decimal("9.99"),
            "items": [
                {
                    "product_id": 101,
                    "product_name": "Product A",
                    "quantity": 1,
                    "unit_price": Decimal("9.99"),
                }
            ],
        }
    )


@pytest.fixture(autouse=True)
def _offline(fake_collaborators):
    """Reads never need the collaborators; fail loudly if they are used."""
    users, catalog = fake_collaborators
    yield
    assert users.calls == []
    assert catalog.call_count == 0


class TestRetrieve:
    def test_returns_order(self, auth_client):
        order = _order()

        response = auth_client.get(f"{URL}{order.id}/")

        assert response.status_code == 200
        assert response.json()["id"] == str(order.id)
        assert len(response.json()["items"]) == 1

    def test_unknown_id_returns_404(self, auth_client):
        response = auth_client.get(f"{URL}{uuid4()}/")

        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_malformed_id_returns_404(self, auth_client):
        assert auth_client.get(f"{URL}not-a-uuid/").status_code == 404


class TestList:
    def test_lists_all_orders(self, auth_client):
        _order(user_id=1)
        _order(user_id=2)

        response = auth_client.get(URL)

        assert response.status_code == 200
        assert len(response.json()) == 2

    def test_empty_list(self, auth_client):
        response = auth_client.get(URL)
        assert response.status_code == 200
        assert response.json() == []

    def test_anonymous_returns_401(self, api_client):
        assert api_client.get(URL).status_code == 401


class TestByUser:
    def test_filters_by_user(self, auth_client):
        mine = _order(user_id=1)
        _order(user_id=2)

        response = auth_client.get(f"{URL}user/1/")

        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == [str(mine.id)]

    def test_no_orders_returns_empty_list(self, auth_client):
        response = auth_client.get(f"{URL}user/42/")
        assert response.status_code == 200
        assert response.json() == []


class TestByStatus:
    def test_filters_by_status_case_insensitive(self, auth_client):
        shipped = _order(status=OrderStatus.SHIPPED)
        _order(status=OrderStatus.PENDING)

        response = auth_client.get(f"{URL}status/shipped/")

        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == [str(shipped.id)]

    def test_no_match_returns_empty_list(self, auth_client):
        _order(status=OrderStatus.PENDING)

        response = auth_client.get(f"{URL}status/DELIVERED/")

        assert response.status_code == 200
        assert response.json() == []

    def test_unknown_status_returns_400(self, auth_client):
        response = auth_client.get(f"{URL}status/ARCHIVED/")

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_request"
