"""Product repository interface.

Covers the two catalog operations the order workflow needs: reading a
product (price + stock) and writing a new absolute stock quantity.

The catalog offers no conditional decrement, so a read followed by a
write is **not** atomic across concurrent orders.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from modules.products.dtos import ProductDTO


class IProductRepository(ABC):
    """Repository contract for the remote product catalog."""

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[ProductDTO]:
        """Return the product, or ``None`` if the catalog does not know it.

        Raises:
            DependencyUnavailable: the catalog could not be reached.
        """

    @abstractmethod
    def update_stock(self, id: int, stock: int) -> None:
        """Overwrite the stock quantity of a product.

        Raises:
            DependencyUnavailable: the write was not acknowledged.
        """
