"""Order service layer (Use Cases).

Orchestrates order creation across three independently owned stores
(user directory, product catalog, order store) and the order status
state machine.

Business rules enforced:
- An order has at least one item and every quantity is positive;
  checked before any collaborator is called.
- The user must exist in the user directory.
- Every product must exist and have ``stock >= quantity``.
- Name and price are snapshotted per line; money is ``Decimal`` only,
  prices are rounded to cents before pricing and no amount may exceed
  ``MAX_AMOUNT``.
- Stock is written back to the catalog line by line, in request order.
- DELIVERED and CANCELLED orders can be neither changed nor deleted.

There is no distributed transaction.  The first failure aborts the
workflow, and stock already written for earlier lines is **not**
restored.  Two concurrent orders for the same product may both pass the
stock check (read-modify-write on the catalog).  Both gaps are known;
callers that retry a failed creation may decrement stock twice.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

import structlog
from django.db import DatabaseError
from django.utils import timezone

from modules.orders.constants import (
    CENTS,
    INITIAL_STATUS,
    MAX_AMOUNT,
    parse_status,
)
from modules.orders.exceptions import (
    DependencyUnavailable,
    IllegalStatusTransition,
    InsufficientStock,
    InvalidOrderRequest,
    OrderNotFound,
    ProductNotFound,
    UserNotFound,
)

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository
    from modules.users.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)

ORDER_STORE = "order-store"


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        user_repository: IUserRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._user_repo = user_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Validate, price, reserve stock and persist a new order.

        Steps (first failure aborts):
        1. Reject an empty item list or a non-positive quantity.
        2. Resolve the user.
        3. For each item, in request order:
           - Resolve the product.
           - Check ``stock >= quantity``.
           - Snapshot name/price (rounded to cents), compute the subtotal
             and check the running total against ``MAX_AMOUNT``.
           - Write ``stock - quantity`` back to the catalog.
        4. Persist order + items with status PENDING.

        Raises:
            InvalidOrderRequest: empty items or quantity <= 0, or an
                amount above ``MAX_AMOUNT``.
            UserNotFound: the user does not exist.
            ProductNotFound: a product does not exist.
            InsufficientStock: not enough stock for a line.
            DependencyUnavailable: a collaborator or the order store failed.
        """
        log = logger.bind(user_id=dto.user_id, item_count=len(dto.items))
        log.info("order.creation_started")

        # 1. Validate request
        if not dto.items:
            raise InvalidOrderRequest("Order must have at least one item.")
        for item_dto in dto.items:
            if item_dto.quantity <= 0:
                raise InvalidOrderRequest(
                    f"Quantity for product {item_dto.product_id} must be at least 1."
                )

        # 2. Validate user
        user = self._user_repo.get_by_id(dto.user_id)
        if user is None:
            raise UserNotFound(f"User {dto.user_id} not found.")

        # 3. Price and reserve each line
        repo_items = []
        total_amount = Decimal("0.00")

        for item_dto in dto.items:
            product = self._product_repo.get_by_id(item_dto.product_id)
            if product is None:
                raise ProductNotFound(f"Product {item_dto.product_id} not found.")
            if product.stock is None or product.stock < item_dto.quantity:
                log.warning(
                    "order.insufficient_stock",
                    product_id=product.id,
                    available=product.stock,
                    requested=item_dto.quantity,
                )
                raise InsufficientStock(
                    product_id=product.id,
                    available=product.stock,
                    requested=item_dto.quantity,
                )

            unit_price = product.price.quantize(CENTS, rounding=ROUND_HALF_UP)
            subtotal = unit_price * item_dto.quantity
            total_amount += subtotal
            if unit_price > MAX_AMOUNT or total_amount > MAX_AMOUNT:
                raise InvalidOrderRequest(
                    f"Order total exceeds the maximum amount of {MAX_AMOUNT}."
                )
            repo_items.append(
                {
                    "product_id": product.id,
                    "product_name": product.name,
                    "quantity": item_dto.quantity,
                    "unit_price": unit_price,
                }
            )

            # Not compensated if a later line fails
            remaining = product.stock - item_dto.quantity
            self._product_repo.update_stock(product.id, remaining)
            log.info(
                "order.stock_reserved",
                product_id=product.id,
                quantity=item_dto.quantity,
                remaining=remaining,
            )

        # 4. Persist order + items
        try:
            order = self._order_repo.create(
                {
                    "user_id": dto.user_id,
                    "status": INITIAL_STATUS,
                    "order_date": timezone.now(),
                    "total_amount": total_amount,
                    "items": repo_items,
                }
            )
        except (DatabaseError, InvalidOperation) as exc:
            log.error(
                "order.persist_failed_after_stock_reserved",
                reserved=[(i["product_id"], i["quantity"]) for i in repo_items],
            )
            raise DependencyUnavailable(
                ORDER_STORE, "Order could not be saved; stock was already reserved."
            ) from exc

        log.info(
            "order.created",
            order_id=str(order.id),
            total_amount=str(order.total_amount),
        )
        return order

    def update_status(self, order_id: UUID | str, new_status: str) -> Order:
        """Move an order to *new_status*.

        Any non-terminal order may move to any status, terminal ones
        included.  The terminal guard runs before the label is parsed,
        so a frozen order always reports ``IllegalStatusTransition``.

        Raises:
            OrderNotFound: order does not exist.
            IllegalStatusTransition: order is DELIVERED or CANCELLED.
            InvalidOrderStatus: *new_status* is not a known label.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(
            order_id=str(order_id),
            current_status=order.status,
            new_status=new_status,
        )

        if order.is_terminal:
            log.warning("order.invalid_transition")
            raise IllegalStatusTransition(
                f"Cannot change an order in status {order.status}."
            )

        target = parse_status(new_status)

        order.status = target
        self._order_repo.save(order)

        log.info("order.status_updated")
        return order

    def delete_order(self, order_id: UUID | str) -> None:
        """Delete a non-terminal order together with its items.

        Raises:
            OrderNotFound: order does not exist.
            IllegalStatusTransition: order is DELIVERED or CANCELLED.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        if order.is_terminal:
            logger.warning(
                "order.delete_not_allowed",
                order_id=str(order_id),
                status=order.status,
            )
            raise IllegalStatusTransition(
                f"Cannot delete an order in status {order.status}."
            )

        self._order_repo.delete(str(order.id))
        logger.info("order.removed", order_id=str(order_id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: UUID | str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self) -> List[Order]:
        """Return every order, newest first."""
        return list(self._order_repo.list())

    def list_orders_by_user(self, user_id: int) -> List[Order]:
        """Return the orders of one user; the user is not re-validated."""
        return list(self._order_repo.list({"user_id": user_id}))

    def list_orders_by_status(self, status: Optional[str]) -> List[Order]:
        """Return the orders in *status* (case-insensitive label).

        Raises:
            InvalidOrderStatus: *status* is not a known label.
        """
        return list(self._order_repo.list({"status": parse_status(status)}))
