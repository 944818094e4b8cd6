"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
Creation and deletion are wrapped in ``transaction.atomic()`` so the
Order aggregate (Order + OrderItems) is written or removed as one unit.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items atomically.

        ``data`` keys:
        - ``user_id`` (required)
        - ``items`` (required): list of dicts with ``product_id``,
          ``product_name``, ``quantity``, ``unit_price``
        - ``status``, ``order_date``, ``total_amount`` (optional; model
          defaults apply when omitted)
        """
        order = Order(user_id=data["user_id"])
        for field in ("status", "order_date", "total_amount"):
            if data.get(field) is not None:
                setattr(order, field, data[field])
        order.save()

        items = data.get("items", [])
        for position, item_data in enumerate(items):
            OrderItem(
                order=order,
                position=position,
                product_id=item_data["product_id"],
                product_name=item_data["product_name"],
                quantity=item_data["quantity"],
                unit_price=item_data["unit_price"],
            ).save()

        logger.info("order.persisted", order_id=str(order.id), item_count=len(items))

        return self.get_by_id(str(order.id)) or order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its items prefetched.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Order.objects.prefetch_related("items").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders (newest first) with optional filters.

        Supported filter keys:
        - ``status``
        - ``user_id``
        """
        queryset = Order.objects.prefetch_related("items")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order."""
        entity.save()
        logger.info("order.saved", order_id=str(entity.id), status=entity.status)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Delete an order and, by cascade, its items."""
        order = self.get_by_id(id)
        if not order:
            return False
        order.delete()
        logger.info("order.deleted", order_id=str(id))
        return True
