from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Mapping

TRACE_HEADER = "X-Trace-ID"
# Error bodies use snake_case, /health uses camelCase.
_PAYLOAD_KEYS = ("trace_id", "traceId")


@dataclass
class TraceContext:
    """Trace id shared by every request of one session until it is reset."""

    trace_id: str | None = None

    def ensure(self) -> str:
        if not self.trace_id:
            self.trace_id = str(uuid.uuid4())
        return self.trace_id

    def reset(self) -> None:
        self.trace_id = None

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        trace_id = headers.get(TRACE_HEADER)
        if trace_id:
            self.trace_id = trace_id

    def update_from_payload(self, payload: Mapping[str, object]) -> None:
        for key in _PAYLOAD_KEYS:
            trace_id = payload.get(key)
            if isinstance(trace_id, str) and trace_id:
                self.trace_id = trace_id
                return
