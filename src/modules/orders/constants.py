"""Order domain constants.

Defines status choices and the terminal states of the order state
machine.  Any non-terminal order may move to any status (including
skipping intermediate ones); terminal orders are frozen.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models

from modules.orders.exceptions import InvalidOrderStatus


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    CONFIRMED = "CONFIRMED", "Confirmed"
    SHIPPED = "SHIPPED", "Shipped"
    DELIVERED = "DELIVERED", "Delivered"
    CANCELLED = "CANCELLED", "Cancelled"


INITIAL_STATUS: str = OrderStatus.PENDING

TERMINAL_STATES: set[str] = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

# Money columns are DecimalField(max_digits=12, decimal_places=2)
CENTS = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999999.99")


def parse_status(label: str | None) -> OrderStatus:
    """Map a client-supplied label onto ``OrderStatus`` (case-insensitive).

    Raises:
        InvalidOrderStatus: the label is empty or not a known status.
    """
    normalized = (label or "").strip().upper()
    try:
        return OrderStatus(normalized)
    except ValueError:
        raise InvalidOrderStatus(f"Unknown order status: {label!r}.") from None
