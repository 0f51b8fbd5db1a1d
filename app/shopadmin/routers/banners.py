import uuid

from fastapi import APIRouter, Depends, Query, status

from app.shopadmin.core.deps import AccessScope, require_access
from app.shopadmin.core.pagination import PageParams, page_envelope, page_params
from app.shopadmin.core.policy import Action
from app.shopadmin.db.session import get_db
from app.shopadmin.schemas.common import DeleteResponse, Page
from app.shopadmin.schemas.errors import ERROR_RESPONSES
from app.shopadmin.schemas.promotions import BannerCreate, BannerOut, BannerUpdate
from app.shopadmin.services.promotions import BannerService

router = APIRouter(prefix="/banners", responses=ERROR_RESPONSES)


@router.get("", response_model=Page[BannerOut])
def list_banners(
    search: str | None = Query(default=None),
    position: str | None = Query(default=None),
    is_active: bool | None = Query(default=None, alias="isActive"),
    page: PageParams = Depends(page_params),
    scope: AccessScope = Depends(require_access("banners", Action.READ)),
    db=Depends(get_db),
):
    rows, total = BannerService(db).list_banners(
        scope, page=page, search=search, position=position, is_active=is_active
    )
    return page_envelope(rows, total, page)


@router.post("", response_model=BannerOut, status_code=status.HTTP_201_CREATED)
def create_banner(
    payload: BannerCreate,
    scope: AccessScope = Depends(require_access("banners", Action.CREATE)),
    db=Depends(get_db),
):
    return BannerService(db).create_banner(scope, payload)


@router.get("/{banner_id}", response_model=BannerOut)
def get_banner(
    banner_id: uuid.UUID,
    scope: AccessScope = Depends(require_access("banners", Action.READ)),
    db=Depends(get_db),
):
    return BannerService(db).get_banner(scope, banner_id)


@router.put("/{banner_id}", response_model=BannerOut)
def update_banner(
    banner_id: uuid.UUID,
    payload: BannerUpdate,
    scope: AccessScope = Depends(require_access("banners", Action.UPDATE)),
    db=Depends(get_db),
):
    return BannerService(db).update_banner(scope, banner_id, payload)


@router.delete("/{banner_id}", response_model=DeleteResponse)
def delete_banner(
    banner_id: uuid.UUID,
    scope: AccessScope = Depends(require_access("banners", Action.DELETE)),
    db=Depends(get_db),
):
    BannerService(db).delete_banner(scope, banner_id)
    return {"id": str(banner_id), "deleted": True}
