import time
from typing import Any, Dict

import structlog
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from modules.core.backends import get_backends
from modules.core.exceptions import StorageFailure

logger = structlog.get_logger()


def health_check(request: HttpRequest) -> JsonResponse:
    services: Dict[str, Dict[str, Any]] = {}
    overall_healthy = True
    backends = get_backends()

    # Check the product store
    try:
        start = time.monotonic()
        backends.products.ping()
        services["store"] = {
            "status": "up",
            "backend": backends.settings.store_backend,
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except StorageFailure as exc:
        services["store"] = {"status": "down", "backend": backends.settings.store_backend}
        overall_healthy = False
        logger.error("health_check_store_failure", error=exc.message)

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
