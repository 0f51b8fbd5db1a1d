from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MANAGER_GRANTABLE_KINDS = frozenset({"products", "categories", "orders", "coupons", "banners", "uploads"})
DEFAULT_MANAGER_KINDS = frozenset({"products", "categories", "orders"})


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class AdminRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    STORE_ADMIN = "store_admin"
    MANAGER = "manager"


class AdminProfile(WireModel):
    id: str
    name: str
    email: str
    role: AdminRole
    status: str = "active"
    store_id: Optional[str] = None
    store_name: Optional[str] = None
    permissions: list[str] = Field(default_factory=list)
    avatar: Optional[str] = None


class AdminSession(WireModel):
    """The logged-in admin, validated once from the login response.

    Screens consult this object instead of re-reading loose fields from
    storage, so a malformed login payload fails here and nowhere else.
    """

    model_config = ConfigDict(frozen=True)

    token: str
    id: str
    name: str
    email: str
    role: AdminRole
    store_id: Optional[str] = None
    permissions: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("token")
    @classmethod
    def _token_present(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("token must not be empty")
        return value

    @property
    def is_super_admin(self) -> bool:
        return self.role is AdminRole.SUPER_ADMIN

    def can(self, kind: str, default_manager_kinds: frozenset[str] = DEFAULT_MANAGER_KINDS) -> bool:
        """Whether the role grants at least read access to ``kind``.

        A hint for hiding navigation; the server still decides every call.
        """
        if self.role is AdminRole.SUPER_ADMIN:
            return True
        if self.role is AdminRole.STORE_ADMIN:
            return kind in MANAGER_GRANTABLE_KINDS or kind in {"stores", "admins"}
        granted = self.permissions or default_manager_kinds
        return kind in (granted & MANAGER_GRANTABLE_KINDS)


class Product(WireModel):
    id: str
    store_id: str
    name: str
    description: str = ""
    brand: str = ""
    sku: Optional[str] = None
    price: float
    discount_price: Optional[float] = None
    category: Optional[str] = None
    category_name: Optional[str] = None
    images: list[str] = Field(default_factory=list)
    featured: bool = False
    status: str
    stock_quantity: int
    low_stock_threshold: int = 5


class ProductPage(WireModel):
    items: list[Product]
    page: int
    limit: Optional[int] = None
    total_pages: int
    total_count: int


class BulkUpdateResult(WireModel):
    matched_count: int
    modified_count: int
