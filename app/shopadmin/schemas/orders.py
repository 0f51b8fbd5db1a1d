import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field

from app.shopadmin.schemas.common import ApiModel

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]


class ShippingAddress(ApiModel):
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    postal_code: str = ""
    country: str = Field(..., min_length=1)
    phone: str | None = None


class OrderItemIn(ApiModel):
    product: uuid.UUID
    quantity: int = Field(..., ge=1)


class OrderItemOut(ApiModel):
    product: uuid.UUID
    name: str
    image: str | None = None
    price: float
    quantity: int


class OrderCreate(ApiModel):
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    items: list[OrderItemIn] = Field(..., min_length=1)
    shipping_address: ShippingAddress
    payment_method: str = "cod"
    tax_price: float = Field(default=0, ge=0)
    shipping_price: float = Field(default=0, ge=0)


class OrderUpdate(ApiModel):
    status: OrderStatus | None = None
    is_paid: bool | None = None
    is_delivered: bool | None = None
    shipping_address: ShippingAddress | None = None


class OrderOut(ApiModel):
    id: uuid.UUID
    store_id: uuid.UUID
    order_number: str
    customer_name: str
    customer_email: str
    items: list[OrderItemOut]
    shipping_address: dict
    payment_method: str
    items_price: float
    tax_price: float
    shipping_price: float
    total_price: float
    status: str
    is_paid: bool
    paid_at: datetime | None = None
    is_delivered: bool
    delivered_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
