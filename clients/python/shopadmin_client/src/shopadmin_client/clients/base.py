from __future__ import annotations

from dataclasses import dataclass

from ..http_client import HttpClient


@dataclass
class BaseClient:
    http: HttpClient
    access_token: str | None = None
    store_id: str | None = None

    def _auth_headers(self) -> dict[str, str]:
        if self.access_token:
            return {"Authorization": f"Bearer {self.access_token}"}
        return {}

    def _request(self, method: str, path: str, *, params: dict | None = None, **kwargs):
        headers = {**self._auth_headers(), **kwargs.pop("headers", {})}
        query = dict(params or {})
        # Only a super_admin's storeId is honoured; other roles are pinned by the server.
        if self.store_id and "storeId" not in query:
            query["storeId"] = self.store_id
        return self.http.request(method, path, headers=headers, params=query, **kwargs)
