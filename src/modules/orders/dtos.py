"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: input for a single order line item.
- ``CreateOrderDTO``: input for order creation (nested items).

DTOs only enforce *shape*.  Business validation (at least one item,
positive quantities) belongs to ``OrderService.create_order`` so that it
runs before any collaborator is called, whatever the entry point.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single order item in a creation request.

    The client sends ``product_id`` and ``quantity``.
    ``product_name`` and ``unit_price`` are resolved by the Service Layer
    from the product catalog.
    """

    model_config = ConfigDict(frozen=True)

    product_id: int
    quantity: int


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    Items are processed in the order given here.  The same product may
    appear on several lines.
    """

    model_config = ConfigDict(frozen=True)

    user_id: int
    items: List[CreateOrderItemDTO]
