"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses:

- ``InvalidOrderRequest`` and subclasses -> 400
- ``InsufficientStock`` -> 400
- ``DependencyUnavailable`` -> 503
- ``OrderNotFound`` -> 404
- ``IllegalStatusTransition`` -> 409
"""

from __future__ import annotations

from typing import Optional

from modules.core.exceptions import DependencyUnavailable

__all__ = [
    "DependencyUnavailable",
    "IllegalStatusTransition",
    "InsufficientStock",
    "InvalidOrderRequest",
    "InvalidOrderStatus",
    "OrderNotFound",
    "ProductNotFound",
    "UserNotFound",
]


class InvalidOrderRequest(Exception):
    """Malformed input or a reference to an entity that does not exist."""


class UserNotFound(InvalidOrderRequest):
    """The user referenced by the order does not exist."""


class ProductNotFound(InvalidOrderRequest):
    """A product referenced by an order item does not exist."""


class InvalidOrderStatus(InvalidOrderRequest):
    """The supplied status label is not a recognized order status."""


class InsufficientStock(Exception):
    """Not enough stock to fulfil one line of the order."""

    def __init__(
        self, product_id: int, available: Optional[int], requested: int
    ) -> None:
        self.product_id = product_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}."
        )


class OrderNotFound(Exception):
    """The requested order does not exist."""


class IllegalStatusTransition(Exception):
    """The order is DELIVERED or CANCELLED and can no longer change."""
