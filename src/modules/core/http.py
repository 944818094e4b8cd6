"""Outbound HTTP plumbing for collaborator services.

The user directory and the product catalog are owned by other teams and
reached over HTTP only.  ``HttpRepository`` wraps a shared ``httpx.Client``
and turns every transport problem into ``DependencyUnavailable`` so the
Service Layer never sees an ``httpx`` exception.

Timeouts are applied here (``SERVICE_TIMEOUT_SECONDS``); there is no
retry policy.  A failed call surfaces immediately to the caller.
"""

from __future__ import annotations

import threading
from decimal import Decimal
from typing import Any, Optional, Type, TypeVar

import httpx
import structlog
from django.conf import settings
from pydantic import BaseModel

from modules.core.exceptions import DependencyUnavailable
from modules.core.middleware import correlation_id_var

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

# Reuse one connection pool across requests handled by this worker
_http_client: httpx.Client | None = None
_http_client_lock = threading.Lock()


def get_http_client() -> httpx.Client:
    global _http_client
    if _http_client is None:
        with _http_client_lock:
            if _http_client is None:
                _http_client = httpx.Client(
                    timeout=settings.SERVICE_TIMEOUT_SECONDS
                )
    return _http_client


class HttpRepository:
    """Base class for repositories backed by a remote JSON API."""

    service_name: str = "remote"
    health_path: str = "/actuator/health"

    def __init__(
        self,
        base_url: str,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http_client

    @property
    def client(self) -> httpx.Client:
        if self._http is None:
            self._http = get_http_client()
        return self._http

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self._base_url}{path}"
        headers = kwargs.pop("headers", {})
        cid = correlation_id_var.get()
        if cid:
            headers.setdefault("X-Request-ID", cid)

        log = logger.bind(service=self.service_name, method=method, url=url)
        try:
            response = self.client.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as exc:
            log.error("http.timeout")
            raise DependencyUnavailable(
                self.service_name, f"Service '{self.service_name}' timed out."
            ) from exc
        except httpx.RequestError as exc:
            log.error("http.request_failed", error=repr(exc))
            raise DependencyUnavailable(self.service_name) from exc

        log.debug("http.response", status_code=response.status_code)
        return response

    def _unexpected(self, response: httpx.Response) -> DependencyUnavailable:
        logger.error(
            "http.unexpected_status",
            service=self.service_name,
            url=str(response.request.url),
            status_code=response.status_code,
        )
        return DependencyUnavailable(
            self.service_name,
            f"Service '{self.service_name}' answered HTTP {response.status_code}.",
        )

    def _parse(self, model: Type[M], response: httpx.Response) -> M:
        """Validate a JSON body into *model*; money stays ``Decimal``."""
        try:
            return model.model_validate(response.json(parse_float=Decimal))
        except ValueError as exc:
            logger.error(
                "http.invalid_payload",
                service=self.service_name,
                model=model.__name__,
                error=str(exc),
            )
            raise DependencyUnavailable(
                self.service_name,
                f"Service '{self.service_name}' returned an invalid payload.",
            ) from exc

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    def ping(self) -> bool:
        """Return ``True`` when the service answers its health endpoint."""
        try:
            response = self._request("GET", self.health_path)
        except DependencyUnavailable:
            return False
        return response.is_success
