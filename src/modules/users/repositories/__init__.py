"""User repositories package."""

from modules.users.repositories.http_repository import UserHttpRepository
from modules.users.repositories.interfaces import IUserRepository

__all__ = ["IUserRepository", "UserHttpRepository"]
