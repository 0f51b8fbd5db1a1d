import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field

from app.shopadmin.schemas.common import ApiModel

AdminRole = Literal["super_admin", "store_admin", "manager"]
AdminStatus = Literal["active", "inactive", "suspended"]


class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AdminOut(ApiModel):
    id: uuid.UUID
    name: str
    email: str
    role: str
    status: str
    store_id: uuid.UUID | None = None
    store_name: str | None = None
    permissions: list[str] = Field(default_factory=list)
    avatar: str | None = None
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LoginResponse(AdminOut):
    token: str


class AdminCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=150)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: AdminRole = "manager"
    status: AdminStatus = "active"
    permissions: list[str] | None = None
    avatar: str | None = None


class AdminUpdate(ApiModel):
    name: str | None = Field(default=None, min_length=1, max_length=150)
    email: EmailStr | None = None
    role: AdminRole | None = None
    status: AdminStatus | None = None
    permissions: list[str] | None = None
    avatar: str | None = None


class ProfileUpdate(ApiModel):
    name: str | None = Field(default=None, min_length=1, max_length=150)
    email: EmailStr | None = None
    avatar: str | None = None


class PasswordChange(ApiModel):
    current_password: str = Field(..., min_length=1)
    new_password: str
