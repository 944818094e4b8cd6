"""Product repositories package."""

from modules.products.repositories.http_repository import ProductHttpRepository
from modules.products.repositories.interfaces import IProductRepository

__all__ = ["IProductRepository", "ProductHttpRepository"]
