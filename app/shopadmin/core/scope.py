import uuid

from app.shopadmin.core.error_catalog import AppError, ErrorCatalog
from app.shopadmin.core.principal import Principal

# Resource kinds a super_admin may act on without naming a store.
UNSCOPED_KINDS = frozenset({"stores", "admins"})


def parse_id(value) -> uuid.UUID | None:
    if value is None or value == "":
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def resolve_store_scope(
    principal: Principal,
    requested_store_id: str | None,
    *,
    allow_unscoped: bool = False,
) -> uuid.UUID | None:
    """Return the store id every downstream query must be filtered by.

    ``None`` means unscoped and is only returned for a super_admin acting on
    a kind that may run store-agnostically.
    """
    if principal.is_super_admin:
        if requested_store_id:
            store_id = parse_id(requested_store_id)
            if store_id is None:
                raise AppError(
                    ErrorCatalog.VALIDATION_ERROR,
                    details={"field": "storeId", "value": requested_store_id},
                    message="storeId is not a valid id",
                )
            return store_id
        if allow_unscoped:
            return None
        raise AppError(ErrorCatalog.STORE_SCOPE_REQUIRED, details={"field": "storeId"})

    own_store_id = parse_id(principal.store_id)
    if own_store_id is None:
        raise AppError(ErrorCatalog.STORE_SCOPE_MISMATCH, details={"reason": "principal has no store"})
    if requested_store_id and parse_id(requested_store_id) != own_store_id:
        raise AppError(ErrorCatalog.STORE_SCOPE_MISMATCH, details={"storeId": requested_store_id})
    return own_store_id

