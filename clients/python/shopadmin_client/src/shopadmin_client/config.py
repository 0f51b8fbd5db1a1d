from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable

from dotenv import load_dotenv

ENV_PREFIX = "SHOPADMIN_"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    api_base_url: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    retries: int = 2
    retry_backoff_seconds: float = 0.3
    verify_ssl: bool = True


# field -> (parser, lower bound, bound is exclusive)
_NUMERIC_FIELDS: dict[str, tuple[Callable[[str], float], float, bool]] = {
    "connect_timeout_seconds": (float, 0, True),
    "read_timeout_seconds": (float, 0, True),
    "retries": (int, 0, False),
    "retry_backoff_seconds": (float, 0, False),
}


def _env_name(field: str) -> str:
    return f"{ENV_PREFIX}{field.upper()}"


def _read_number(field: str, parser, lower: float, exclusive: bool):
    name = _env_name(field)
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = parser(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"Invalid {name}: expected {parser.__name__}, got {raw!r}") from exc
    if value < lower or (exclusive and value == lower):
        comparison = ">" if exclusive else ">="
        raise ConfigError(f"Invalid {name}: expected {comparison} {lower}, got {value}")
    return value


def _read_bool(field: str) -> bool | None:
    raw = os.getenv(_env_name(field))
    if raw is None:
        return None
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_config(env_file: str | None = None) -> ClientConfig:
    """Build a ClientConfig from ``SHOPADMIN_*`` variables, reading ``env_file`` first when given."""
    load_dotenv(env_file)

    api_base_url = (os.getenv(_env_name("api_base_url")) or "").strip().rstrip("/")
    if not api_base_url:
        raise ConfigError(f"Missing required config value: {_env_name('api_base_url')}")

    values: dict[str, object] = {"api_base_url": api_base_url}
    for field, (parser, lower, exclusive) in _NUMERIC_FIELDS.items():
        value = _read_number(field, parser, lower, exclusive)
        if value is not None:
            values[field] = value
    verify_ssl = _read_bool("verify_ssl")
    if verify_ssl is not None:
        values["verify_ssl"] = verify_ssl
    return ClientConfig(**values)
