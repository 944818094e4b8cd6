"""HTTP implementation of the Product repository.

- ``GET {PRODUCT_SERVICE_URL}/api/v1/products/{id}``: 200 -> ``ProductDTO``,
  404 -> ``None``.
- ``PATCH {PRODUCT_SERVICE_URL}/api/v1/products/{id}/stock`` with
  ``{"stock": n}``: any 2xx is an acknowledgement.

Everything else raises ``DependencyUnavailable``.
"""

from __future__ import annotations

from typing import Optional

import httpx
import structlog
from django.conf import settings

from modules.core.http import HttpRepository
from modules.products.dtos import ProductDTO, StockUpdateDTO
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductHttpRepository(HttpRepository, IProductRepository):
    """Product look-ups and stock writes against the remote catalog."""

    service_name = "product-service"

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        super().__init__(base_url or settings.PRODUCT_SERVICE_URL, http_client)

    def get_by_id(self, id: int) -> Optional[ProductDTO]:
        response = self._request("GET", f"/api/v1/products/{id}")
        if response.status_code == httpx.codes.NOT_FOUND:
            logger.info("product.not_found", product_id=id)
            return None
        if response.status_code != httpx.codes.OK:
            raise self._unexpected(response)
        return self._parse(ProductDTO, response)

    def update_stock(self, id: int, stock: int) -> None:
        body = StockUpdateDTO(stock=stock)
        response = self._request(
            "PATCH",
            f"/api/v1/products/{id}/stock",
            json=body.model_dump(),
        )
        if not response.is_success:
            raise self._unexpected(response)
        logger.info("product.stock_written", product_id=id, stock=stock)
