"""HTTP implementation of the User repository.

``GET {USER_SERVICE_URL}/api/v1/users/{id}``:

- 200 -> ``UserDTO``
- 404 -> ``None``
- anything else, or no answer -> ``DependencyUnavailable``
"""

from __future__ import annotations

from typing import Optional

import httpx
import structlog
from django.conf import settings

from modules.core.http import HttpRepository
from modules.users.dtos import UserDTO
from modules.users.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class UserHttpRepository(HttpRepository, IUserRepository):
    """User look-ups against the remote user directory."""

    service_name = "user-service"

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        super().__init__(base_url or settings.USER_SERVICE_URL, http_client)

    def get_by_id(self, id: int) -> Optional[UserDTO]:
        response = self._request("GET", f"/api/v1/users/{id}")
        if response.status_code == httpx.codes.NOT_FOUND:
            logger.info("user.not_found", user_id=id)
            return None
        if response.status_code != httpx.codes.OK:
            raise self._unexpected(response)
        return self._parse(UserDTO, response)
