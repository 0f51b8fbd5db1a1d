from __future__ import annotations

from ..models import AdminProfile, AdminSession
from .base import BaseClient


class AuthClient(BaseClient):
    def login(self, email: str, password: str) -> AdminSession:
        data = self.http.request("POST", "/admin/login", json_body={"email": email, "password": password})
        return AdminSession.model_validate(data)

    def profile(self) -> AdminProfile:
        return AdminProfile.model_validate(self._request("GET", "/admin/profile"))

    def change_password(self, current_password: str, new_password: str) -> None:
        self._request(
            "PUT",
            "/admin/profile/password",
            json_body={"currentPassword": current_password, "newPassword": new_password},
        )
