"""User repository interface.

The Service Layer depends exclusively on this contract (DIP).  The
concrete implementation talks to the remote user directory over HTTP.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from modules.users.dtos import UserDTO


class IUserRepository(ABC):
    """Read-only look-up contract for the user directory."""

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[UserDTO]:
        """Return the user, or ``None`` when the directory does not know it.

        Raises:
            DependencyUnavailable: the directory could not be reached.
        """
