import uuid
from datetime import datetime
from typing import Literal

from pydantic import Field

from app.shopadmin.schemas.common import ApiModel, UtcDatetime

CouponType = Literal["percentage", "fixed"]
BannerPosition = Literal["hero", "sidebar", "footer", "popup"]


class CouponCreate(ApiModel):
    code: str = Field(..., min_length=1, max_length=50)
    type: CouponType
    value: float = Field(..., gt=0)
    min_order_amount: float | None = Field(default=None, ge=0)
    max_discount: float | None = Field(default=None, ge=0)
    usage_limit: int | None = Field(default=None, ge=1)
    expiry_date: UtcDatetime
    is_active: bool = True


class CouponUpdate(ApiModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    type: CouponType | None = None
    value: float | None = Field(default=None, gt=0)
    min_order_amount: float | None = Field(default=None, ge=0)
    max_discount: float | None = Field(default=None, ge=0)
    usage_limit: int | None = Field(default=None, ge=1)
    expiry_date: UtcDatetime | None = None
    is_active: bool | None = None


class CouponOut(ApiModel):
    id: uuid.UUID
    store_id: uuid.UUID
    code: str
    type: str
    value: float
    min_order_amount: float | None = None
    max_discount: float | None = None
    usage_limit: int | None = None
    used_count: int
    expiry_date: UtcDatetime
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BannerCreate(ApiModel):
    title: str = Field(..., min_length=1, max_length=255)
    image: str = Field(..., min_length=1)
    link: str | None = None
    position: BannerPosition = "hero"
    sort_order: int = 0
    is_active: bool = True
    start_date: UtcDatetime | None = None
    end_date: UtcDatetime | None = None


class BannerUpdate(ApiModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    image: str | None = Field(default=None, min_length=1)
    link: str | None = None
    position: BannerPosition | None = None
    sort_order: int | None = None
    is_active: bool | None = None
    start_date: UtcDatetime | None = None
    end_date: UtcDatetime | None = None


class BannerOut(ApiModel):
    id: uuid.UUID
    store_id: uuid.UUID
    title: str
    image: str
    link: str | None = None
    position: str
    sort_order: int
    is_active: bool
    start_date: datetime | None = None
    end_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
