from __future__ import annotations

from dataclasses import dataclass

from .clients.auth import AuthClient
from .clients.products import ProductsClient
from .config import ClientConfig
from .exceptions import SessionError
from .http_client import HttpClient
from .models import AdminSession
from .tracing import TraceContext


@dataclass
class ApiSession:
    config: ClientConfig
    trace: TraceContext | None = None
    admin: AdminSession | None = None
    store_id: str | None = None

    def __post_init__(self) -> None:
        self.trace = self.trace or TraceContext()

    def _http(self) -> HttpClient:
        return HttpClient(config=self.config, trace=self.trace)

    @property
    def token(self) -> str | None:
        return self.admin.token if self.admin else None

    def login(self, email: str, password: str) -> AdminSession:
        self.admin = AuthClient(http=self._http()).login(email, password)
        self.store_id = None
        return self.admin

    def select_store(self, store_id: str | None) -> None:
        """Pick the store a super_admin acts on; other roles stay on their own."""
        if self.admin is None:
            raise SessionError("login required")
        if not self.admin.is_super_admin and store_id not in (None, self.admin.store_id):
            raise SessionError("only a super_admin can switch stores")
        self.store_id = store_id

    def auth_client(self) -> AuthClient:
        return AuthClient(http=self._http(), access_token=self.token)

    def products_client(self) -> ProductsClient:
        if self.admin is None:
            raise SessionError("login required")
        return ProductsClient(http=self._http(), access_token=self.token, store_id=self.store_id)

    def clear(self) -> None:
        self.admin = None
        self.store_id = None
        self.trace.reset()
