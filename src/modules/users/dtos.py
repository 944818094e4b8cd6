"""User DTOs.

The user directory belongs to another service; this module only needs
to know that a user exists.  Unknown fields in the payload are ignored.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class UserDTO(BaseModel):
    """Immutable view of a user record returned by the user directory."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    active: Optional[bool] = None
