"""Order and OrderItem models.

Business rules implemented:
- ``user_id`` and ``product_id`` reference records owned by other
  services; they are plain integers, not foreign keys.
- OrderItem snapshots product name and price at creation time
  (``product_name`` / ``unit_price``) so later catalog changes never
  rewrite historical orders.
- OrderItem subtotal is always ``quantity * unit_price`` (calculated on save).
- ``total_amount`` is computed once, at creation, from the item subtotals.
- DELIVERED and CANCELLED orders are terminal (enforced at service layer).
- Items are hard-deleted together with their order (CASCADE).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import INITIAL_STATUS, TERMINAL_STATES, OrderStatus


class Order(BaseModel):
    """Order aggregate root.

    ``order_date`` is the business timestamp of the purchase and never
    changes after creation.
    """

    user_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField(
        db_index=True
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=INITIAL_STATUS,
    )
    order_date: models.DateTimeField = models.DateTimeField(
        default=timezone.now,
        editable=False,
    )
    total_amount: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    class Meta:
        db_table = "orders"
        ordering = ["-order_date", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-order_date"], name="orders_order_date_idx"),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"


class OrderItem(BaseModel):
    """Line item of an Order.

    ``position`` keeps the order in which the caller listed the items.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    position: models.PositiveIntegerField = models.PositiveIntegerField(default=0)
    product_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField()
    product_name: models.CharField = models.CharField(max_length=255)
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    unit_price: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
    )
    subtotal: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        editable=False,
    )

    class Meta:
        db_table = "order_items"
        ordering = ["position"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.quantity is not None and self.quantity < 1:
            raise ValidationError({"quantity": "Quantity must be at least 1."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.subtotal = self.unit_price * self.quantity
        super().save(*args, **kwargs)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.product_name} x{self.quantity} (${self.subtotal})"
