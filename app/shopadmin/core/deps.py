import uuid
from dataclasses import dataclass

from fastapi import Depends, Query, Request
from jose import JWTError
from pydantic import ValidationError

from app.shopadmin.core.config import Settings
from app.shopadmin.core.error_catalog import AppError, ErrorCatalog
from app.shopadmin.core.policy import AccessPolicy, Action
from app.shopadmin.core.principal import Principal
from app.shopadmin.core.scope import UNSCOPED_KINDS, parse_id, resolve_store_scope
from app.shopadmin.core.security import TokenData, bearer_scheme, decode_token
from app.shopadmin.db.session import get_db
from app.shopadmin.repos.admins import AdminRepository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_access_policy(request: Request) -> AccessPolicy:
    return request.app.state.access_policy


def get_trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", "")


def get_token_data(
    token: str | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> TokenData:
    if not token:
        raise AppError(ErrorCatalog.INVALID_TOKEN, message="Not authorized, no token")
    try:
        return TokenData(**decode_token(token, settings))
    except (JWTError, ValidationError, TypeError) as exc:
        raise AppError(ErrorCatalog.INVALID_TOKEN) from exc


def get_current_admin(token_data: TokenData = Depends(get_token_data), db=Depends(get_db)):
    admin_id = parse_id(token_data.sub)
    if admin_id is None:
        raise AppError(ErrorCatalog.INVALID_TOKEN)
    admin = AdminRepository(db).get_by_id(admin_id)
    if admin is None:
        raise AppError(ErrorCatalog.INVALID_TOKEN)
    if admin.status != "active":
        raise AppError(ErrorCatalog.ACCOUNT_INACTIVE)
    return admin


def get_principal(request: Request, admin=Depends(get_current_admin)) -> Principal:
    try:
        principal = Principal.from_admin(admin)
    except ValueError as exc:
        raise AppError(ErrorCatalog.INVALID_TOKEN) from exc
    request.state.admin_id = principal.id
    request.state.store_id = principal.store_id
    request.state.role = principal.role.value
    return principal


@dataclass(frozen=True)
class AccessScope:
    principal: Principal
    store_id: uuid.UUID | None
    kind: str
    trace_id: str


def build_access_scope(
    request: Request,
    principal: Principal,
    policy: AccessPolicy,
    *,
    kind: str,
    action: Action,
    requested_store_id: str | None,
) -> AccessScope:
    """Policy gate first, then tenant resolution."""
    policy.ensure_allowed(principal, action, kind)
    effective_store_id = resolve_store_scope(
        principal, requested_store_id, allow_unscoped=kind in UNSCOPED_KINDS
    )
    if effective_store_id is not None:
        request.state.effective_store_id = str(effective_store_id)
    return AccessScope(principal=principal, store_id=effective_store_id, kind=kind, trace_id=get_trace_id(request))


def require_access(kind: str, action: Action):
    def dependency(
        request: Request,
        requested_store_id: str | None = Query(default=None, alias="storeId"),
        principal: Principal = Depends(get_principal),
        policy: AccessPolicy = Depends(get_access_policy),
    ) -> AccessScope:
        return build_access_scope(
            request, principal, policy, kind=kind, action=action, requested_store_id=requested_store_id
        )

    return dependency


__all__ = [
    "AccessScope",
    "build_access_scope",
    "get_access_policy",
    "get_current_admin",
    "get_principal",
    "get_settings",
    "get_token_data",
    "get_trace_id",
    "require_access",
]
