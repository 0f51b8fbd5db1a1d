import uuid

from fastapi import APIRouter, Depends, Query, status

from app.shopadmin.core.deps import AccessScope, require_access
from app.shopadmin.core.pagination import PageParams, page_envelope, page_params
from app.shopadmin.core.policy import Action
from app.shopadmin.db.session import get_db
from app.shopadmin.schemas.common import DeleteResponse, Page
from app.shopadmin.schemas.errors import ERROR_RESPONSES
from app.shopadmin.schemas.stores import StoreCreate, StoreOut, StoreUpdate
from app.shopadmin.services.stores import StoreService

router = APIRouter(prefix="/stores", responses=ERROR_RESPONSES)


@router.get("", response_model=Page[StoreOut])
def list_stores(
    search: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    page: PageParams = Depends(page_params),
    scope: AccessScope = Depends(require_access("stores", Action.READ)),
    db=Depends(get_db),
):
    rows, total = StoreService(db).list_stores(scope, page=page, search=search, status=status_filter)
    return page_envelope(rows, total, page)


@router.post("", response_model=StoreOut, status_code=status.HTTP_201_CREATED)
def create_store(
    payload: StoreCreate,
    scope: AccessScope = Depends(require_access("stores", Action.CREATE)),
    db=Depends(get_db),
):
    return StoreService(db).create_store(scope, payload)


@router.get("/{store_id}", response_model=StoreOut)
def get_store(
    store_id: uuid.UUID,
    scope: AccessScope = Depends(require_access("stores", Action.READ)),
    db=Depends(get_db),
):
    return StoreService(db).get_store(scope, store_id)


@router.put("/{store_id}", response_model=StoreOut)
def update_store(
    store_id: uuid.UUID,
    payload: StoreUpdate,
    scope: AccessScope = Depends(require_access("stores", Action.UPDATE)),
    db=Depends(get_db),
):
    return StoreService(db).update_store(scope, store_id, payload)


@router.delete("/{store_id}", response_model=DeleteResponse)
def delete_store(
    store_id: uuid.UUID,
    scope: AccessScope = Depends(require_access("stores", Action.DELETE)),
    db=Depends(get_db),
):
    StoreService(db).delete_store(scope, store_id)
    return {"id": str(store_id), "deleted": True}
