import uuid
from datetime import datetime
from typing import Literal

from pydantic import Field

from app.shopadmin.schemas.common import ApiModel

StoreStatus = Literal["active", "inactive", "suspended"]


class StoreCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    status: StoreStatus = "active"


class StoreUpdate(ApiModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    status: StoreStatus | None = None


class StoreOut(ApiModel):
    id: uuid.UUID
    name: str
    slug: str
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
