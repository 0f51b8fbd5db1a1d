import uuid
from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, ConfigDict, Field

from app.shopadmin.schemas.common import ApiModel

ProductStatus = Literal["draft", "active", "inactive", "out_of_stock"]


class ProductCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    brand: str = ""
    sku: str | None = Field(default=None, max_length=100)
    price: float = Field(..., ge=0)
    discount_price: float | None = Field(default=None, ge=0)
    category: uuid.UUID | None = None
    images: list[str] = Field(default_factory=list)
    attributes: dict = Field(default_factory=dict)
    featured: bool = False
    status: ProductStatus = "draft"
    stock_quantity: int = Field(default=0, ge=0)
    low_stock_threshold: int = Field(default=5, ge=0)


class ProductUpdate(ApiModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    brand: str | None = None
    sku: str | None = Field(default=None, max_length=100)
    price: float | None = Field(default=None, ge=0)
    discount_price: float | None = Field(default=None, ge=0)
    category: uuid.UUID | None = None
    images: list[str] | None = None
    attributes: dict | None = None
    featured: bool | None = None
    status: ProductStatus | None = None
    stock_quantity: int | None = Field(default=None, ge=0)
    low_stock_threshold: int | None = Field(default=None, ge=0)


class ProductOut(ApiModel):
    id: uuid.UUID
    store_id: uuid.UUID
    name: str
    description: str
    brand: str
    sku: str | None = None
    price: float
    discount_price: float | None = None
    category: uuid.UUID | None = Field(default=None, validation_alias=AliasChoices("category_id", "category"))
    category_name: str | None = None
    images: list[str] = Field(default_factory=list)
    attributes: dict = Field(default_factory=dict)
    featured: bool
    status: str
    stock_quantity: int
    low_stock_threshold: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StockUpdate(ApiModel):
    quantity: int = Field(..., ge=0)
    operation: str


class BulkUpdateFields(ApiModel):
    # Only these fields may be changed in bulk; anything else is rejected.
    model_config = ConfigDict(extra="forbid")

    status: ProductStatus | None = None
    featured: bool | None = None
    price: float | None = Field(default=None, ge=0)
    discount_price: float | None = Field(default=None, ge=0)
    brand: str | None = None
    category: uuid.UUID | None = None


class BulkUpdateRequest(ApiModel):
    product_ids: list[uuid.UUID] = Field(..., min_length=1, max_length=500)
    updates: BulkUpdateFields


class BulkUpdateResult(ApiModel):
    matched_count: int
    modified_count: int


class StatsOverview(ApiModel):
    total_products: int
    active_products: int
    draft_products: int
    out_of_stock_products: int
    featured_products: int
    total_value: float
    average_price: float
    low_stock_products: int


class CategoryBreakdownItem(ApiModel):
    category_id: uuid.UUID | None = None
    name: str | None = None
    count: int


class ProductStats(ApiModel):
    overview: StatsOverview
    category_breakdown: list[CategoryBreakdownItem]


class CategoryCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: str = ""
    image: str | None = None
    parent: uuid.UUID | None = None
    sort_order: int = 0
    is_active: bool = True


class CategoryUpdate(ApiModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: str | None = None
    image: str | None = None
    parent: uuid.UUID | None = None
    sort_order: int | None = None
    is_active: bool | None = None


class CategoryOut(ApiModel):
    id: uuid.UUID
    store_id: uuid.UUID
    name: str
    slug: str
    description: str
    image: str | None = None
    parent: uuid.UUID | None = Field(default=None, validation_alias=AliasChoices("parent_id", "parent"))
    sort_order: int
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CategoryTreeNode(CategoryOut):
    children: list["CategoryTreeNode"] = Field(default_factory=list)


class CategoryReorderItem(ApiModel):
    id: uuid.UUID
    sort_order: int


class CategoryReorderResult(ApiModel):
    updated_count: int


class CategoryDeleteResult(ApiModel):
    id: uuid.UUID
    policy: str
    deleted_categories: int
    deleted_products: int
    detached_products: int
