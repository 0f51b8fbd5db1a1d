import uuid

from fastapi import APIRouter, Depends, Query, status

from app.shopadmin.core.deps import AccessScope, require_access
from app.shopadmin.core.pagination import PageParams, page_envelope, page_params
from app.shopadmin.core.policy import Action
from app.shopadmin.db.session import get_db
from app.shopadmin.schemas.common import DeleteResponse, Page
from app.shopadmin.schemas.errors import ERROR_RESPONSES
from app.shopadmin.schemas.promotions import CouponCreate, CouponOut, CouponUpdate
from app.shopadmin.services.promotions import CouponService

router = APIRouter(prefix="/coupons", responses=ERROR_RESPONSES)


@router.get("", response_model=Page[CouponOut])
def list_coupons(
    search: str | None = Query(default=None),
    is_active: bool | None = Query(default=None, alias="isActive"),
    coupon_type: str | None = Query(default=None, alias="type"),
    page: PageParams = Depends(page_params),
    scope: AccessScope = Depends(require_access("coupons", Action.READ)),
    db=Depends(get_db),
):
    rows, total = CouponService(db).list_coupons(
        scope, page=page, search=search, is_active=is_active, coupon_type=coupon_type
    )
    return page_envelope(rows, total, page)


@router.post("", response_model=CouponOut, status_code=status.HTTP_201_CREATED)
def create_coupon(
    payload: CouponCreate,
    scope: AccessScope = Depends(require_access("coupons", Action.CREATE)),
    db=Depends(get_db),
):
    return CouponService(db).create_coupon(scope, payload)


@router.get("/{coupon_id}", response_model=CouponOut)
def get_coupon(
    coupon_id: uuid.UUID,
    scope: AccessScope = Depends(require_access("coupons", Action.READ)),
    db=Depends(get_db),
):
    return CouponService(db).get_coupon(scope, coupon_id)


@router.put("/{coupon_id}", response_model=CouponOut)
def update_coupon(
    coupon_id: uuid.UUID,
    payload: CouponUpdate,
    scope: AccessScope = Depends(require_access("coupons", Action.UPDATE)),
    db=Depends(get_db),
):
    return CouponService(db).update_coupon(scope, coupon_id, payload)


@router.delete("/{coupon_id}", response_model=DeleteResponse)
def delete_coupon(
    coupon_id: uuid.UUID,
    scope: AccessScope = Depends(require_access("coupons", Action.DELETE)),
    db=Depends(get_db),
):
    CouponService(db).delete_coupon(scope, coupon_id)
    return {"id": str(coupon_id), "deleted": True}
