"""Cross-module exceptions.

``DependencyUnavailable`` is raised whenever a collaborator (user
directory, product catalog, order store) cannot give a definitive answer.
It is deliberately distinct from the *not found* exceptions: the caller
cannot tell whether the referenced entity exists.
"""

from __future__ import annotations


class DependencyUnavailable(Exception):
    """A downstream service failed, timed out, or answered unexpectedly."""

    def __init__(self, service: str, message: str | None = None) -> None:
        self.service = service
        super().__init__(message or f"Service '{service}' is unavailable.")
