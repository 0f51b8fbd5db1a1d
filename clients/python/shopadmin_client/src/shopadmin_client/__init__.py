from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    SessionError,
    TransportError,
    ValidationError,
)
from .http_client import HttpClient
from .models import AdminProfile, AdminRole, AdminSession, BulkUpdateResult, Product, ProductPage
from .session import ApiSession
from .tracing import TraceContext

__all__ = [
    "AdminProfile",
    "AdminRole",
    "AdminSession",
    "ApiError",
    "ApiSession",
    "AuthError",
    "BulkUpdateResult",
    "ClientConfig",
    "ConfigError",
    "ConflictError",
    "ForbiddenError",
    "HttpClient",
    "NotFoundError",
    "Product",
    "ProductPage",
    "ServerError",
    "SessionError",
    "TraceContext",
    "TransportError",
    "ValidationError",
    "load_config",
]
