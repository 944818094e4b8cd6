"""Product DTOs.

Framework-agnostic view of a product as published by the remote product
catalog, using Pydantic v2.  ``price`` is parsed as ``Decimal`` (the JSON
body is decoded with ``parse_float=Decimal``) so money never passes
through binary floating point.

- ``ProductDTO``: catalog record used for pricing and stock checks.
- ``StockUpdateDTO``: body of a stock write.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ProductDTO(BaseModel):
    """Immutable catalog record.

    ``stock`` may be absent in the catalog payload; the order service
    treats a missing stock as insufficient.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    name: str
    price: Decimal
    stock: Optional[int] = None

    @field_validator("price")
    @classmethod
    def price_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        return v


class StockUpdateDTO(BaseModel):
    """Immutable body for ``PATCH /products/{id}/stock``."""

    model_config = ConfigDict(frozen=True)

    stock: int

    @field_validator("stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v
