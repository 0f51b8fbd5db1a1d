from __future__ import annotations

import time
from contextvars import ContextVar, Token

_elapsed_ms: ContextVar[float | None] = ContextVar("shopadmin_db_elapsed_ms", default=None)


def begin_request_timing() -> Token:
    return _elapsed_ms.set(0.0)


def end_request_timing(token: Token) -> None:
    _elapsed_ms.reset(token)


def timing_active() -> bool:
    return _elapsed_ms.get() is not None


def record_query(started_at: float) -> None:
    current = _elapsed_ms.get()
    if current is None:
        return
    _elapsed_ms.set(current + (time.perf_counter() - started_at) * 1000)


def elapsed_ms() -> float | None:
    return _elapsed_ms.get()
