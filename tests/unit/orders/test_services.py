"""Unit tests for OrderService.create_order.

Covers:
- Pricing: exact Decimal totals and per-line snapshots.
- Stock reservation: one write per line, in request order.
- Validation before any collaborator call (empty items, quantity <= 0).
- User / product look-up failures and their error kinds.
- Non-compensating partial failure: earlier stock writes are kept.
- Persistence failure after stock was reserved.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import (
    DependencyUnavailable,
    InsufficientStock,
    InvalidOrderRequest,
    ProductNotFound,
    UserNotFound,
)
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def service(users, catalog):
    return OrderService(
        order_repository=OrderDjangoRepository(),
        user_repository=users,
        product_repository=catalog,
    )


def _dto(user_id=1, *lines):
    return CreateOrderDTO(
        user_id=user_id,
        items=[CreateOrderItemDTO(product_id=p, quantity=q) for p, q in lines],
    )


@pytest.fixture()
def order_dto():
    """2 x Product A + 1 x Product B for user 1."""
    return _dto(1, (101, 2), (102, 1))


# ===========================================================================
# create_order: Happy Path
# ===========================================================================


class TestCreateOrderSuccess:
    def test_reference_scenario(self, service, catalog, order_dto):
        order = service.create_order(order_dto)

        assert order.total_amount == Decimal("24.98")
        assert order.status == OrderStatus.PENDING
        assert catalog.stock_of(101) == 8
        assert catalog.stock_of(102) == 0

    def test_persists_exactly_one_order(self, service, order_dto):
        order = service.create_order(order_dto)

        assert Order.objects.count() == 1
        assert Order.objects.get().id == order.id

    def test_snapshots_name_and_price_per_line(self, service, order_dto):
        order = service.create_order(order_dto)
        items = list(order.items.all())

        assert [i.product_id for i in items] == [101, 102]
        assert [i.product_name for i in items] == ["Product A", "Product B"]
        assert [i.unit_price for i in items] == [Decimal("9.99"), Decimal("5.00")]
        assert [i.subtotal for i in items] == [Decimal("19.98"), Decimal("5.00")]

    def test_total_equals_sum_of_subtotals(self, service, catalog):
        catalog.add(103, "Product C", "0.10", 100).add(104, "Product D", "0.20", 100)
        order = service.create_order(_dto(1, (103, 3), (104, 7), (101, 1)))

        expected = Decimal("0.10") * 3 + Decimal("0.20") * 7 + Decimal("9.99")
        assert order.total_amount == expected == Decimal("11.69")
        assert sum(i.subtotal for i in order.items.all()) == order.total_amount

    def test_stock_writes_follow_request_order(self, service, catalog):
        service.create_order(_dto(1, (102, 1), (101, 3)))

        assert catalog.writes == [(102, 0), (101, 7)]
        assert catalog.reads == [102, 101]

    def test_sets_order_date(self, service, order_dto):
        order = service.create_order(order_dto)
        assert order.order_date is not None
        assert order.user_id == 1

    def test_duplicate_product_lines_see_previous_decrement(self, service, catalog):
        order = service.create_order(_dto(1, (101, 4), (101, 5)))

        assert catalog.writes == [(101, 6), (101, 1)]
        assert order.items.count() == 2
        assert order.total_amount == Decimal("89.91")

    def test_prices_are_rounded_to_cents_before_totalling(self, service, catalog):
        catalog.add(103, "Fraction", "0.125", 10)
        order = service.create_order(_dto(1, (103, 1), (103, 1)))
        items = list(order.items.all())

        assert [i.unit_price for i in items] == [Decimal("0.13"), Decimal("0.13")]
        assert [i.subtotal for i in items] == [Decimal("0.13"), Decimal("0.13")]
        assert order.total_amount == sum(i.subtotal for i in items) == Decimal("0.26")

    def test_rounded_price_times_quantity(self, service, catalog):
        catalog.add(103, "Fraction", "0.333", 10)
        order = service.create_order(_dto(1, (103, 3)))

        assert order.items.get().subtotal == Decimal("0.99")
        assert order.total_amount == Decimal("0.99")


# ===========================================================================
# create_order: Request Validation
# ===========================================================================


class TestCreateOrderRequestValidation:
    def test_empty_items_raises_without_external_calls(self, service, users, catalog):
        with pytest.raises(InvalidOrderRequest, match="at least one item"):
            service.create_order(CreateOrderDTO(user_id=1, items=[]))

        assert users.calls == []
        assert catalog.call_count == 0

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_raises_without_external_calls(
        self, service, users, catalog, quantity
    ):
        with pytest.raises(InvalidOrderRequest):
            service.create_order(_dto(1, (101, 1), (102, quantity)))

        assert users.calls == []
        assert catalog.call_count == 0
        assert Order.objects.count() == 0


# ===========================================================================
# create_order: User Validation
# ===========================================================================


class TestCreateOrderUserValidation:
    def test_unknown_user_raises_without_product_calls(self, service, catalog):
        with pytest.raises(UserNotFound):
            service.create_order(_dto(999, (101, 1)))

        assert catalog.call_count == 0

    def test_unknown_user_is_an_invalid_request(self, service):
        with pytest.raises(InvalidOrderRequest):
            service.create_order(_dto(999, (101, 1)))

    def test_user_service_down_raises_dependency_unavailable(
        self, service, users, catalog
    ):
        users.available = False

        with pytest.raises(DependencyUnavailable) as exc_info:
            service.create_order(_dto(1, (101, 1)))

        assert exc_info.value.service == "user-service"
        assert catalog.call_count == 0


# ===========================================================================
# create_order: Product Validation
# ===========================================================================


class TestCreateOrderProductValidation:
    def test_unknown_product_raises(self, service):
        with pytest.raises(ProductNotFound):
            service.create_order(_dto(1, (555, 1)))
        assert Order.objects.count() == 0

    def test_product_service_down_raises_dependency_unavailable(
        self, service, catalog
    ):
        catalog.available = False

        with pytest.raises(DependencyUnavailable):
            service.create_order(_dto(1, (101, 1)))
        assert Order.objects.count() == 0

    def test_insufficient_stock_carries_context(self, service, catalog):
        with pytest.raises(InsufficientStock) as exc_info:
            service.create_order(_dto(1, (102, 3)))

        exc = exc_info.value
        assert (exc.product_id, exc.available, exc.requested) == (102, 1, 3)
        assert catalog.writes == []

    def test_missing_stock_is_insufficient(self, service, catalog):
        catalog.add(103, "No Stock Info", "1.00", None)

        with pytest.raises(InsufficientStock) as exc_info:
            service.create_order(_dto(1, (103, 1)))

        assert exc_info.value.available is None

    def test_exact_stock_is_sufficient(self, service, catalog):
        service.create_order(_dto(1, (101, 10)))
        assert catalog.stock_of(101) == 0

    def test_price_above_maximum_rejected_before_stock_write(self, service, catalog):
        catalog.add(203, "Huge", "99999999999.99", 5)

        with pytest.raises(InvalidOrderRequest, match="maximum amount"):
            service.create_order(_dto(1, (203, 2)))

        assert catalog.writes == []
        assert Order.objects.count() == 0

    def test_total_above_maximum_stops_before_that_line_is_written(
        self, service, catalog
    ):
        catalog.add(203, "Big", "6000000000.00", 5)

        with pytest.raises(InvalidOrderRequest):
            service.create_order(_dto(1, (101, 1), (203, 1), (203, 1)))

        assert catalog.writes == [(101, 9), (203, 4)]
        assert Order.objects.count() == 0

    def test_total_at_maximum_is_accepted(self, service, catalog):
        catalog.add(203, "Max", "9999999999.99", 5)
        order = service.create_order(_dto(1, (203, 1)))
        assert order.total_amount == Decimal("9999999999.99")


# ===========================================================================
# create_order: Partial Failure (no compensation)
# ===========================================================================


class TestCreateOrderPartialFailure:
    def test_earlier_stock_writes_are_not_rolled_back(self, service, catalog):
        catalog.add(102, "Product B", "5.00", 0)

        with pytest.raises(InsufficientStock) as exc_info:
            service.create_order(_dto(1, (101, 2), (102, 1)))

        assert exc_info.value.product_id == 102
        assert catalog.stock_of(101) == 8
        assert Order.objects.count() == 0

    def test_failed_stock_write_stops_the_workflow(self, service, catalog):
        catalog.fail_writes_for.add(102)

        with pytest.raises(DependencyUnavailable):
            service.create_order(_dto(1, (101, 1), (102, 1), (101, 1)))

        assert catalog.writes == [(101, 9)]
        assert catalog.reads == [101, 102]
        assert Order.objects.count() == 0

    def test_persistence_failure_surfaces_as_dependency_unavailable(
        self, service, catalog, order_dto
    ):
        with patch.object(
            OrderDjangoRepository, "create", side_effect=DatabaseError("disk full")
        ):
            with pytest.raises(DependencyUnavailable) as exc_info:
                service.create_order(order_dto)

        assert exc_info.value.service == "order-store"
        assert catalog.stock_of(101) == 8
        assert catalog.stock_of(102) == 0

    def test_invalid_decimal_on_persist_surfaces_as_dependency_unavailable(
        self, service, order_dto
    ):
        with patch.object(
            OrderDjangoRepository, "create", side_effect=InvalidOperation()
        ):
            with pytest.raises(DependencyUnavailable) as exc_info:
                service.create_order(order_dto)

        assert exc_info.value.service == "order-store"
