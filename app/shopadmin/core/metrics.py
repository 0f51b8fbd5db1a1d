from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


@dataclass
class MetricsSnapshot:
    content: bytes
    content_type: str


class Metrics:
    """Per-application Prometheus registry; each app built by create_app owns one."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._registry = None
        self._http_requests_total = None
        self._http_request_duration_ms = None
        self._access_denied_total = None
        self._image_upload_failures_total = None
        if self.enabled:
            self._initialize_registry()

    def _initialize_registry(self) -> None:
        self._registry = CollectorRegistry()
        self._http_requests_total = Counter(
            "http_requests_total",
            "HTTP requests by route/method/status.",
            ["route", "method", "status"],
            registry=self._registry,
        )
        self._http_request_duration_ms = Histogram(
            "http_request_duration_ms",
            "HTTP request latency in milliseconds.",
            ["route", "method", "status"],
            buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000),
            registry=self._registry,
        )
        self._access_denied_total = Counter(
            "access_denied_total",
            "Requests rejected by the access policy or store scope.",
            ["code"],
            registry=self._registry,
        )
        self._image_upload_failures_total = Counter(
            "image_upload_failures_total",
            "Failed uploads to the image storage provider.",
            registry=self._registry,
        )

    def record_http_request(self, *, route: str, method: str, status_code: int, latency_ms: float) -> None:
        if not self.enabled:
            return
        labels = {"route": route, "method": method, "status": str(status_code)}
        self._http_requests_total.labels(**labels).inc()
        self._http_request_duration_ms.labels(**labels).observe(latency_ms)

    def increment_access_denied(self, code: str) -> None:
        if not self.enabled:
            return
        self._access_denied_total.labels(code=code).inc()

    def increment_image_upload_failure(self, count: int = 1) -> None:
        if not self.enabled:
            return
        self._image_upload_failures_total.inc(count)

    def render(self) -> MetricsSnapshot:
        if not self.enabled:
            return MetricsSnapshot(content=b"metrics_disabled\n", content_type="text/plain")
        return MetricsSnapshot(content=generate_latest(self._registry), content_type=CONTENT_TYPE_LATEST)


def get_metrics(request: Request) -> Metrics:
    return request.app.state.metrics
