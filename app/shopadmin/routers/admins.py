import uuid

from fastapi import APIRouter, Depends, Query, Request, status

from app.shopadmin.core.config import Settings
from app.shopadmin.core.deps import (
    AccessScope,
    build_access_scope,
    get_access_policy,
    get_current_admin,
    get_principal,
    get_settings,
    require_access,
)
from app.shopadmin.core.pagination import PageParams, page_envelope, page_params
from app.shopadmin.core.policy import AccessPolicy, Action
from app.shopadmin.core.principal import Principal
from app.shopadmin.db.session import get_db
from app.shopadmin.schemas.admins import (
    AdminCreate,
    AdminOut,
    AdminUpdate,
    LoginRequest,
    LoginResponse,
    PasswordChange,
    ProfileUpdate,
)
from app.shopadmin.schemas.common import DeleteResponse, Page
from app.shopadmin.schemas.errors import ERROR_RESPONSES
from app.shopadmin.services.admins import AdminService
from app.shopadmin.services.audit import AuditEventPayload, AuditService
from app.shopadmin.services.auth import AuthService

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("/admin/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    request: Request,
    db=Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    admin, token = AuthService(db, settings).login(payload.email, payload.password)
    AuditService(db).record_event(
        AuditEventPayload(
            store_id=str(admin.store_id) if admin.store_id else None,
            admin_id=str(admin.id),
            trace_id=getattr(request.state, "trace_id", None),
            actor=admin.email,
            action="auth.login",
            entity_type="admin",
            entity_id=str(admin.id),
        )
    )
    return {**AdminOut.model_validate(admin).model_dump(), "token": token}


@router.get("/admin/profile", response_model=AdminOut)
def get_profile(admin=Depends(get_current_admin)):
    return admin


@router.put("/admin/profile", response_model=AdminOut)
def update_profile(
    payload: ProfileUpdate,
    admin=Depends(get_current_admin),
    db=Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return AuthService(db, settings).update_profile(
        admin, name=payload.name, email=payload.email, avatar=payload.avatar
    )


@router.put("/admin/profile/password")
def change_password(
    payload: PasswordChange,
    admin=Depends(get_current_admin),
    db=Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    AuthService(db, settings).change_password(admin, payload.current_password, payload.new_password)
    return {"message": "Password updated"}


@router.get("/admin", response_model=Page[AdminOut])
def list_admins(
    search: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    role: str | None = Query(default=None),
    page: PageParams = Depends(page_params),
    scope: AccessScope = Depends(require_access("admins", Action.READ)),
    db=Depends(get_db),
    policy: AccessPolicy = Depends(get_access_policy),
):
    rows, total = AdminService(db, policy).list_admins(scope, page=page, search=search, status=status_filter, role=role)
    return page_envelope(rows, total, page)


@router.post("/admin", response_model=AdminOut, status_code=status.HTTP_201_CREATED)
def create_admin(
    payload: AdminCreate,
    scope: AccessScope = Depends(require_access("admins", Action.CREATE)),
    db=Depends(get_db),
    policy: AccessPolicy = Depends(get_access_policy),
):
    return AdminService(db, policy).create_admin(scope, payload)


@router.get("/admin/{admin_id}", response_model=AdminOut)
def get_admin(
    admin_id: uuid.UUID,
    scope: AccessScope = Depends(require_access("admins", Action.READ)),
    db=Depends(get_db),
    policy: AccessPolicy = Depends(get_access_policy),
):
    return AdminService(db, policy).get_admin(scope, admin_id)


@router.put("/admin/{admin_id}", response_model=AdminOut)
def update_admin(
    admin_id: uuid.UUID,
    payload: AdminUpdate,
    scope: AccessScope = Depends(require_access("admins", Action.UPDATE)),
    db=Depends(get_db),
    policy: AccessPolicy = Depends(get_access_policy),
):
    return AdminService(db, policy).update_admin(scope, admin_id, payload)


@router.delete("/admin/{admin_id}", response_model=DeleteResponse)
def delete_admin(
    admin_id: uuid.UUID,
    request: Request,
    requested_store_id: str | None = Query(default=None, alias="storeId"),
    principal: Principal = Depends(get_principal),
    db=Depends(get_db),
    policy: AccessPolicy = Depends(get_access_policy),
):
    # Self-delete is refused for every role, before any role grant is consulted.
    policy.ensure_not_self(principal, admin_id)
    scope = build_access_scope(
        request, principal, policy, kind="admins", action=Action.DELETE, requested_store_id=requested_store_id
    )
    AdminService(db, policy).delete_admin(scope, admin_id)
    return {"id": str(admin_id), "deleted": True}
