"""``/health/`` probe.

Each component reports ``{"ok": bool, ...}``. Redis-backed components are
optional: an empty URL means the deployment runs without them and they are
reported as skipped. The overall status is ``ok`` when every component
passes, ``down`` when none does and ``degraded`` otherwise.
"""

from __future__ import annotations

import logging
from typing import Any

import redis
from django.conf import settings
from django.db import connection
from django.db import transaction
from django.http import JsonResponse

from txoko import __version__

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 0.5


def _failure(component: str, exc: Exception) -> dict[str, Any]:
    logger.warning("Health check for %s failed: %s", component, exc)
    return {"ok": False, "error": str(exc)}


def check_db() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except Exception as exc:  # noqa: BLE001
        return _failure("db", exc)
    return {"ok": True}


def check_redis(url: str | None, component: str = "redis") -> dict[str, Any]:
    """Ping ``url``; an unset URL means the feature runs without Redis."""
    if not url:
        return {"ok": True, "skipped": True}
    client = redis.Redis.from_url(
        url,
        socket_timeout=PROBE_TIMEOUT,
        socket_connect_timeout=PROBE_TIMEOUT,
    )
    try:
        client.ping()
    except Exception as exc:  # noqa: BLE001
        return _failure(component, exc)
    return {"ok": True}


def overall_status(components: dict[str, dict[str, Any]]) -> str:
    passed = [c.get("ok", False) for c in components.values()]
    if all(passed):
        return "ok"
    return "degraded" if any(passed) else "down"


@transaction.non_atomic_requests
def health(request):
    components = {
        "db": check_db(),
        "redis": check_redis(settings.REDIS_URL),
        "realtime": check_redis(settings.SOCKETIO_REDIS_URL, "realtime"),
    }
    status = overall_status(components)
    return JsonResponse(
        {"status": status, "version": __version__, "components": components},
        status=200 if status == "ok" else 503,
    )
