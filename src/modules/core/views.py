import time
from typing import Any, Dict

import structlog
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from modules.products.repositories.http_repository import ProductHttpRepository
from modules.users.repositories.http_repository import UserHttpRepository

logger = structlog.get_logger()


def health_check(request: HttpRequest) -> JsonResponse:
    services: Dict[str, Dict[str, Any]] = {}
    overall_healthy = True

    # Check database
    try:
        start = time.monotonic()
        conn = connections["default"]
        conn.ensure_connection()
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        services["database"] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except Exception:
        services["database"] = {"status": "down"}
        overall_healthy = False
        logger.error("health_check_db_failure")

    # Check collaborators (user directory, product catalog)
    for repository in (UserHttpRepository(), ProductHttpRepository()):
        start = time.monotonic()
        if repository.ping():
            services[repository.service_name] = {
                "status": "up",
                "response_time_ms": round((time.monotonic() - start) * 1000, 2),
            }
        else:
            services[repository.service_name] = {"status": "down"}
            overall_healthy = False
            logger.error("health_check_dependency_failure", service=repository.service_name)

    status_code = 200 if overall_healthy else 503

    logger.info(
        "health_check_completed", status="healthy" if overall_healthy else "unhealthy"
    )

    return JsonResponse(
        {
            "status": "healthy" if overall_healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=status_code,
    )
