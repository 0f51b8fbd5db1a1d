from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

import requests

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import TransportError
from .tracing import TRACE_HEADER, TraceContext

logger = logging.getLogger(__name__)

RETRYABLE_METHODS = frozenset({"GET", "HEAD"})

ResponseHook = Callable[[requests.Response], None]


@dataclass
class LastOperation:
    method: str
    path: str
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass
class HttpClient:
    """Thin JSON transport: trace header, bounded retries for reads, typed errors."""

    config: ClientConfig
    trace: TraceContext | None = None
    session: requests.Session | None = None
    after_response: ResponseHook | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        self.session = self.session or requests.Session()
        self.trace = self.trace or TraceContext()

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | list[Any] | None:
        method = method.upper()
        started = time.monotonic()
        try:
            response = self._send(
                method,
                f"{self.config.api_base_url.rstrip('/')}/{path.lstrip('/')}",
                headers={"Accept": "application/json", **(headers or {}), TRACE_HEADER: self.trace.ensure()},
                json_body=json_body,
                params={key: value for key, value in (params or {}).items() if value is not None} or None,
            )
        except requests.RequestException as exc:
            self._record(method, path, started, "transport_error")
            raise TransportError(
                code="TRANSPORT_ERROR",
                message=str(exc),
                details={"type": type(exc).__name__},
                trace_id=self.trace.trace_id,
                status_code=0,
            ) from exc

        if self.after_response:
            self.after_response(response)
        self.trace.update_from_headers(response.headers)
        if response.ok:
            self._record(method, path, started, "success")
            return response.json() if response.content else None

        payload = _error_payload(response)
        self.trace.update_from_payload(payload)
        self._record(method, path, started, "error")
        raise map_error(response.status_code, payload, self.trace.trace_id)

    def _send(self, method: str, url: str, *, headers, json_body, params) -> requests.Response:
        # A repeated write could apply twice, so only reads are retried.
        retries = self.config.retries if method in RETRYABLE_METHODS else 0
        attempt = 0
        while True:
            last_attempt = attempt >= retries
            try:
                response = self.session.request(
                    method=method,
                    url=url,
                    headers=headers,
                    json=json_body,
                    params=params,
                    timeout=(self.config.connect_timeout_seconds, self.config.read_timeout_seconds),
                    verify=self.config.verify_ssl,
                )
            except requests.RequestException:
                if last_attempt:
                    raise
                logger.warning("request_retry", extra={"url": url, "attempt": attempt + 1, "reason": "transport"})
            else:
                if response.status_code < 500 or last_attempt:
                    return response
                logger.warning(
                    "request_retry", extra={"url": url, "attempt": attempt + 1, "status": response.status_code}
                )
            time.sleep(self.config.retry_backoff_seconds * (2**attempt))
            attempt += 1

    def _record(self, method: str, path: str, started: float, result: str) -> None:
        self.last_operation = LastOperation(
            method=method,
            path=path,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
            trace_id=self.trace.trace_id,
        )


def _error_payload(response: requests.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {"message": response.text}
    return payload if isinstance(payload, dict) else {"message": str(payload)}
