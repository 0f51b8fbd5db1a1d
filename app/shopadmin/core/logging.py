from __future__ import annotations

import json
import logging

QUIET_LOGGERS = ("uvicorn.access", "botocore", "urllib3")


def configure_logging(level: str = "INFO") -> None:
    """One JSON document per line; request logs come from the observability middleware."""
    logging.basicConfig(level=level.upper(), format="%(message)s")
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_json(logger: logging.Logger, payload: dict, *, level: int = logging.INFO) -> None:
    if not logger.isEnabledFor(level):
        return
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))
