import uuid

from fastapi import APIRouter, Depends, Query, status

from app.shopadmin.core.deps import AccessScope, require_access
from app.shopadmin.core.pagination import PageParams, page_envelope, page_params
from app.shopadmin.core.policy import Action
from app.shopadmin.db.session import get_db
from app.shopadmin.schemas.catalog import (
    BulkUpdateRequest,
    BulkUpdateResult,
    ProductCreate,
    ProductOut,
    ProductStats,
    ProductUpdate,
    StockUpdate,
)
from app.shopadmin.schemas.common import DeleteResponse, Page
from app.shopadmin.schemas.errors import ERROR_RESPONSES
from app.shopadmin.services.catalog import ProductService

router = APIRouter(prefix="/products", responses=ERROR_RESPONSES)

_read = require_access("products", Action.READ)
_update = require_access("products", Action.UPDATE)


@router.get("", response_model=Page[ProductOut])
def list_products(
    search: str | None = Query(default=None),
    keyword: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    category: uuid.UUID | None = Query(default=None),
    featured: bool | None = Query(default=None),
    min_price: float | None = Query(default=None, alias="minPrice", ge=0),
    max_price: float | None = Query(default=None, alias="maxPrice", ge=0),
    in_stock: bool | None = Query(default=None, alias="inStock"),
    sort_by: str | None = Query(default=None, alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder", pattern="^(asc|desc)$"),
    page: PageParams = Depends(page_params),
    scope: AccessScope = Depends(_read),
    db=Depends(get_db),
):
    rows, total = ProductService(db).list_products(
        scope,
        page=page,
        search=search or keyword,
        sort_by=sort_by,
        sort_order=sort_order,
        status=status_filter,
        category_id=category,
        featured=featured,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
    )
    return page_envelope(rows, total, page)


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    scope: AccessScope = Depends(require_access("products", Action.CREATE)),
    db=Depends(get_db),
):
    return ProductService(db).create_product(scope, payload)


@router.get("/featured", response_model=Page[ProductOut])
def featured_products(
    page: PageParams = Depends(page_params),
    scope: AccessScope = Depends(_read),
    db=Depends(get_db),
):
    rows, total = ProductService(db).featured_products(scope, page=page)
    return page_envelope(rows, total, page)


@router.get("/search", response_model=Page[ProductOut])
def search_products(
    q: str = Query(..., min_length=1),
    page: PageParams = Depends(page_params),
    scope: AccessScope = Depends(_read),
    db=Depends(get_db),
):
    rows, total = ProductService(db).search_products(scope, q, page=page)
    return page_envelope(rows, total, page)


@router.get("/stats", response_model=ProductStats)
def product_stats(scope: AccessScope = Depends(_read), db=Depends(get_db)):
    return ProductService(db).stats(scope)


@router.get("/category/{category_id}", response_model=Page[ProductOut])
def products_by_category(
    category_id: uuid.UUID,
    page: PageParams = Depends(page_params),
    scope: AccessScope = Depends(_read),
    db=Depends(get_db),
):
    rows, total = ProductService(db).products_in_category(scope, category_id, page=page)
    return page_envelope(rows, total, page)


@router.put("/bulk/update", response_model=BulkUpdateResult)
def bulk_update_products(
    payload: BulkUpdateRequest,
    scope: AccessScope = Depends(_update),
    db=Depends(get_db),
):
    return ProductService(db).bulk_update(scope, payload.product_ids, payload.updates)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: uuid.UUID, scope: AccessScope = Depends(_read), db=Depends(get_db)):
    return ProductService(db).get_product(scope, product_id)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    scope: AccessScope = Depends(_update),
    db=Depends(get_db),
):
    return ProductService(db).update_product(scope, product_id, payload)


@router.put("/{product_id}/stock", response_model=ProductOut)
def update_product_stock(
    product_id: uuid.UUID,
    payload: StockUpdate,
    scope: AccessScope = Depends(_update),
    db=Depends(get_db),
):
    return ProductService(db).update_stock(scope, product_id, quantity=payload.quantity, operation=payload.operation)


@router.delete("/{product_id}", response_model=DeleteResponse)
def delete_product(
    product_id: uuid.UUID,
    scope: AccessScope = Depends(require_access("products", Action.DELETE)),
    db=Depends(get_db),
):
    ProductService(db).delete_product(scope, product_id)
    return {"id": str(product_id), "deleted": True}
