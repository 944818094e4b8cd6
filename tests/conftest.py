import pytest

from django.contrib.auth import get_user_model

from rest_framework.test import APIClient

from tests.fakes import InMemoryProductRepository, InMemoryUserRepository


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def auth_client():
    """APIClient authenticated as a regular Django user."""
    client = APIClient()
    user = get_user_model().objects.create_user(
        username="apiuser", password="testpass123"
    )
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def users():
    """User directory knowing users 1 and 2."""
    return InMemoryUserRepository({1, 2})


@pytest.fixture()
def catalog():
    """Catalog with product A (9.99, stock 10) and product B (5.00, stock 1)."""
    return (
        InMemoryProductRepository()
        .add(101, "Product A", "9.99", 10)
        .add(102, "Product B", "5.00", 1)
    )


@pytest.fixture()
def fake_collaborators(monkeypatch, users, catalog):
    """Route the API views to the in-memory collaborators."""
    monkeypatch.setattr("modules.orders.views.UserHttpRepository", lambda: users)
    monkeypatch.setattr("modules.orders.views.ProductHttpRepository", lambda: catalog)
    return users, catalog


@pytest.fixture()
def collaborators_up(monkeypatch):
    """Make the health endpoint see both collaborators as reachable."""
    monkeypatch.setattr("modules.core.http.HttpRepository.ping", lambda self: True)


@pytest.fixture()
def collaborators_down(monkeypatch):
    """Make the health endpoint see both collaborators as unreachable."""
    monkeypatch.setattr("modules.core.http.HttpRepository.ping", lambda self: False)
