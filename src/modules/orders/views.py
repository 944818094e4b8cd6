"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.

Creation errors never map to 404: a missing user or product is a bad
request (400), an unreachable collaborator is 503.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import (
    DependencyUnavailable,
    IllegalStatusTransition,
    InsufficientStock,
    InvalidOrderRequest,
    OrderNotFound,
)
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderSerializer,
    UpdateOrderStatusSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.http_repository import ProductHttpRepository
from modules.users.repositories.http_repository import UserHttpRepository


def _error(exc: Exception, code: str, http_status: int) -> Response:
    return Response({"detail": str(exc), "code": code}, status=http_status)


def _not_found(exc: OrderNotFound) -> Response:
    return _error(exc, "not_found", status.HTTP_404_NOT_FOUND)


def _illegal_transition(exc: IllegalStatusTransition) -> Response:
    return _error(exc, "illegal_transition", status.HTTP_409_CONFLICT)


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            user_repository=UserHttpRepository(),
            product_repository=ProductHttpRepository(),
        )

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        data = create_serializer.validated_data
        dto = CreateOrderDTO(
            user_id=data["user_id"],
            items=[
                CreateOrderItemDTO(
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                )
                for item in data["items"]
            ],
        )

        try:
            order = self._service.create_order(dto)
        except InsufficientStock as exc:
            return Response(
                {
                    "detail": str(exc),
                    "code": "insufficient_stock",
                    "product_id": exc.product_id,
                    "available": exc.available,
                    "requested": exc.requested,
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        except InvalidOrderRequest as exc:
            return _error(exc, "invalid_request", status.HTTP_400_BAD_REQUEST)
        except DependencyUnavailable as exc:
            return _error(
                exc, "dependency_unavailable", status.HTTP_503_SERVICE_UNAVAILABLE
            )

        out = OrderSerializer(order)
        return Response(out.data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/"""
        orders = self._service.list_orders()
        return Response(OrderSerializer(orders, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk)
        except OrderNotFound as exc:
            return _not_found(exc)
        return Response(OrderSerializer(order).data)

    @action(detail=False, methods=["get"], url_path=r"user/(?P<user_id>\d+)")
    def by_user(self, request: Request, user_id: str | None = None) -> Response:
        """GET /api/v1/orders/user/{user_id}/"""
        orders = self._service.list_orders_by_user(int(user_id))
        return Response(OrderSerializer(orders, many=True).data)

    @action(
        detail=False, methods=["get"], url_path=r"status/(?P<status_label>[^/.]+)"
    )
    def by_status(
        self, request: Request, status_label: str | None = None
    ) -> Response:
        """GET /api/v1/orders/status/{status}/"""
        try:
            orders = self._service.list_orders_by_status(status_label)
        except InvalidOrderRequest as exc:
            return _error(exc, "invalid_request", status.HTTP_400_BAD_REQUEST)
        return Response(OrderSerializer(orders, many=True).data)

    # ------------------------------------------------------------------
    # Status Update
    # ------------------------------------------------------------------

    @action(detail=True, methods=["put", "patch"], url_path="status")
    def change_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT|PATCH /api/v1/orders/{pk}/status/"""
        status_serializer = UpdateOrderStatusSerializer(data=request.data)
        status_serializer.is_valid(raise_exception=True)

        try:
            order = self._service.update_status(
                order_id=pk,
                new_status=status_serializer.validated_data["status"],
            )
        except OrderNotFound as exc:
            return _not_found(exc)
        except IllegalStatusTransition as exc:
            return _illegal_transition(exc)
        except InvalidOrderRequest as exc:
            return _error(exc, "invalid_request", status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/"""
        try:
            self._service.delete_order(pk)
        except OrderNotFound as exc:
            return _not_found(exc)
        except IllegalStatusTransition as exc:
            return _illegal_transition(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
