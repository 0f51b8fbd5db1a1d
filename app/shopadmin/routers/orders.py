import uuid

from fastapi import APIRouter, Depends, Query, status

from app.shopadmin.core.deps import AccessScope, require_access
from app.shopadmin.core.pagination import PageParams, page_envelope, page_params
from app.shopadmin.core.policy import Action
from app.shopadmin.db.session import get_db
from app.shopadmin.schemas.common import DeleteResponse, Page
from app.shopadmin.schemas.errors import ERROR_RESPONSES
from app.shopadmin.schemas.orders import OrderCreate, OrderOut, OrderUpdate
from app.shopadmin.services.orders import OrderService

router = APIRouter(prefix="/orders", responses=ERROR_RESPONSES)


@router.get("", response_model=Page[OrderOut])
def list_orders(
    search: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    is_paid: bool | None = Query(default=None, alias="isPaid"),
    is_delivered: bool | None = Query(default=None, alias="isDelivered"),
    page: PageParams = Depends(page_params),
    scope: AccessScope = Depends(require_access("orders", Action.READ)),
    db=Depends(get_db),
):
    rows, total = OrderService(db).list_orders(
        scope, page=page, search=search, status=status_filter, is_paid=is_paid, is_delivered=is_delivered
    )
    return page_envelope(rows, total, page)


@router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    scope: AccessScope = Depends(require_access("orders", Action.CREATE)),
    db=Depends(get_db),
):
    return OrderService(db).create_order(scope, payload)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: uuid.UUID,
    scope: AccessScope = Depends(require_access("orders", Action.READ)),
    db=Depends(get_db),
):
    return OrderService(db).get_order(scope, order_id)


@router.put("/{order_id}", response_model=OrderOut)
def update_order(
    order_id: uuid.UUID,
    payload: OrderUpdate,
    scope: AccessScope = Depends(require_access("orders", Action.UPDATE)),
    db=Depends(get_db),
):
    return OrderService(db).update_order(scope, order_id, payload)


@router.delete("/{order_id}", response_model=DeleteResponse)
def delete_order(
    order_id: uuid.UUID,
    scope: AccessScope = Depends(require_access("orders", Action.DELETE)),
    db=Depends(get_db),
):
    OrderService(db).delete_order(scope, order_id)
    return {"id": str(order_id), "deleted": True}
