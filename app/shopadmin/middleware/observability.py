from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.shopadmin.core.db_timing import begin_request_timing, elapsed_ms, end_request_timing
from app.shopadmin.core.logging import log_json

logger = logging.getLogger("shopadmin.request")


def route_template(request: Request) -> str:
    """The matched path template, so metrics labels do not explode per id."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def _log_level(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


def build_request_log_payload(
    *,
    request: Request,
    response: Response | None,
    latency_ms: float,
    db_time_ms: float | None,
) -> dict:
    state = request.state
    return {
        "event": "http_request",
        "trace_id": getattr(state, "trace_id", ""),
        "admin_id": getattr(state, "admin_id", None),
        # The resolved scope wins over the account's home store.
        "store_id": getattr(state, "effective_store_id", None) or getattr(state, "store_id", None),
        "role": getattr(state, "role", None),
        "route": route_template(request),
        "method": request.method,
        "status_code": response.status_code if response is not None else 500,
        "latency_ms": round(latency_ms, 2),
        "db_time_ms": None if db_time_ms is None else round(db_time_ms, 2),
        "error_code": getattr(state, "error_code", None),
        "error_class": getattr(state, "error_class", None),
    }


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        timing = begin_request_timing()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            latency_ms = (time.perf_counter() - started) * 1000
            db_time_ms = elapsed_ms()
            end_request_timing(timing)
            payload = build_request_log_payload(
                request=request, response=response, latency_ms=latency_ms, db_time_ms=db_time_ms
            )
            log_json(logger, payload, level=_log_level(payload["status_code"]))
            request.app.state.metrics.record_http_request(
                route=payload["route"],
                method=payload["method"],
                status_code=payload["status_code"],
                latency_ms=latency_ms,
            )
