import uuid

from fastapi import APIRouter, Depends, Query, status

from app.shopadmin.core.config import Settings
from app.shopadmin.core.deps import AccessScope, get_settings, require_access
from app.shopadmin.core.pagination import PageParams, page_envelope, page_params
from app.shopadmin.core.policy import Action
from app.shopadmin.db.session import get_db
from app.shopadmin.schemas.catalog import (
    CategoryCreate,
    CategoryDeleteResult,
    CategoryOut,
    CategoryReorderItem,
    CategoryReorderResult,
    CategoryTreeNode,
    CategoryUpdate,
    ProductOut,
)
from app.shopadmin.schemas.common import Page
from app.shopadmin.schemas.errors import ERROR_RESPONSES
from app.shopadmin.services.catalog import CategoryService, ProductService

router = APIRouter(prefix="/categories", responses=ERROR_RESPONSES)

_read = require_access("categories", Action.READ)
_update = require_access("categories", Action.UPDATE)


def _category_service(db=Depends(get_db), settings: Settings = Depends(get_settings)) -> CategoryService:
    return CategoryService(db, settings.CATEGORY_DELETE_POLICY)


def _to_tree_node(node: dict) -> CategoryTreeNode:
    base = CategoryOut.model_validate(node["category"]).model_dump()
    return CategoryTreeNode(**base, children=[_to_tree_node(child) for child in node["children"]])


@router.get("", response_model=Page[CategoryOut])
def list_categories(
    search: str | None = Query(default=None),
    parent: str | None = Query(default=None),
    is_active: bool | None = Query(default=None, alias="isActive"),
    page: PageParams = Depends(page_params),
    scope: AccessScope = Depends(_read),
    service: CategoryService = Depends(_category_service),
):
    rows, total = service.list_categories(scope, page=page, search=search, parent=parent, is_active=is_active)
    return page_envelope(rows, total, page)


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    scope: AccessScope = Depends(require_access("categories", Action.CREATE)),
    service: CategoryService = Depends(_category_service),
):
    return service.create_category(scope, payload)


@router.get("/tree", response_model=list[CategoryTreeNode])
def category_tree(scope: AccessScope = Depends(_read), service: CategoryService = Depends(_category_service)):
    return [_to_tree_node(node) for node in service.tree(scope)]


@router.put("/reorder", response_model=CategoryReorderResult)
def reorder_categories(
    items: list[CategoryReorderItem],
    scope: AccessScope = Depends(_update),
    service: CategoryService = Depends(_category_service),
):
    return {"updated_count": service.reorder(scope, items)}


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(
    category_id: uuid.UUID,
    scope: AccessScope = Depends(_read),
    service: CategoryService = Depends(_category_service),
):
    return service.get_category(scope, category_id)


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: uuid.UUID,
    payload: CategoryUpdate,
    scope: AccessScope = Depends(_update),
    service: CategoryService = Depends(_category_service),
):
    return service.update_category(scope, category_id, payload)


@router.delete("/{category_id}", response_model=CategoryDeleteResult)
def delete_category(
    category_id: uuid.UUID,
    scope: AccessScope = Depends(require_access("categories", Action.DELETE)),
    service: CategoryService = Depends(_category_service),
):
    return service.delete_category(scope, category_id)


@router.get("/{category_id}/products", response_model=Page[ProductOut])
def category_products(
    category_id: uuid.UUID,
    page: PageParams = Depends(page_params),
    scope: AccessScope = Depends(_read),
    db=Depends(get_db),
):
    rows, total = ProductService(db).products_in_category(scope, category_id, page=page)
    return page_envelope(rows, total, page)
