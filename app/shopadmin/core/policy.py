"""Role based access policy for the admin API.

The role → resource grants below are closed: a kind or action missing from
a role's grant is denied. Managers additionally carry a per-account list of
resource kinds; the effective manager grant is that list intersected with
``MANAGER_GRANTABLE_KINDS``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from app.shopadmin.core.error_catalog import AppError, ErrorCatalog
from app.shopadmin.core.principal import Principal, Role


class Action(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


ALL_ACTIONS = frozenset(Action)

RESOURCE_KINDS = frozenset(
    {"stores", "admins", "products", "categories", "orders", "coupons", "banners", "uploads"}
)
MANAGER_GRANTABLE_KINDS = frozenset({"products", "categories", "orders", "coupons", "banners", "uploads"})

ROLE_GRANTS: dict[Role, dict[str, frozenset[Action]]] = {
    Role.SUPER_ADMIN: {kind: ALL_ACTIONS for kind in RESOURCE_KINDS},
    Role.STORE_ADMIN: {
        **{kind: ALL_ACTIONS for kind in MANAGER_GRANTABLE_KINDS},
        "stores": frozenset({Action.READ}),
        "admins": frozenset({Action.READ, Action.CREATE, Action.UPDATE}),
    },
    Role.MANAGER: {kind: ALL_ACTIONS for kind in MANAGER_GRANTABLE_KINDS},
}

ROLE_CHANGE_IGNORE = "ignore"
ROLE_CHANGE_REJECT = "reject"
ROLE_CHANGE_POLICIES = frozenset({ROLE_CHANGE_IGNORE, ROLE_CHANGE_REJECT})

CATEGORY_DELETE_BLOCK = "block"
CATEGORY_DELETE_CASCADE = "cascade"
CATEGORY_DELETE_ORPHAN = "orphan"
CATEGORY_DELETE_POLICIES = frozenset({CATEGORY_DELETE_BLOCK, CATEGORY_DELETE_CASCADE, CATEGORY_DELETE_ORPHAN})


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: str


def _manager_kinds(principal: Principal, default_permissions: Iterable[str]) -> frozenset[str]:
    granted = principal.permissions or frozenset(default_permissions)
    return frozenset(granted) & MANAGER_GRANTABLE_KINDS


class AccessPolicy:
    def __init__(
        self,
        *,
        manager_default_permissions: Iterable[str] = ("products", "categories", "orders"),
        role_change_policy: str = ROLE_CHANGE_IGNORE,
    ) -> None:
        if role_change_policy not in ROLE_CHANGE_POLICIES:
            raise ValueError(f"unknown role change policy: {role_change_policy!r}")
        self.manager_default_permissions = frozenset(manager_default_permissions)
        self.role_change_policy = role_change_policy

    @classmethod
    def from_settings(cls, settings) -> "AccessPolicy":
        return cls(
            manager_default_permissions=settings.manager_default_permissions,
            role_change_policy=settings.ROLE_CHANGE_POLICY,
        )

    def authorize(self, principal: Principal, action: Action | str, kind: str) -> AccessDecision:
        action = Action(action)
        if kind not in RESOURCE_KINDS:
            return AccessDecision(False, "unknown_resource_kind")
        grants = ROLE_GRANTS.get(principal.role, {})
        if action not in grants.get(kind, frozenset()):
            return AccessDecision(False, "role_not_granted")
        if principal.role is Role.MANAGER and kind not in _manager_kinds(principal, self.manager_default_permissions):
            return AccessDecision(False, "manager_permission_missing")
        return AccessDecision(True, "role_grant")

    def ensure_allowed(self, principal: Principal, action: Action | str, kind: str) -> None:
        decision = self.authorize(principal, action, kind)
        if not decision.allowed:
            raise AppError(
                ErrorCatalog.PERMISSION_DENIED,
                details={"action": Action(action).value, "resource": kind, "reason": decision.reason},
            )

    @staticmethod
    def ensure_not_self(principal: Principal, target_id) -> None:
        if str(target_id) == principal.id:
            raise AppError(ErrorCatalog.SELF_DELETE_FORBIDDEN)

    def filter_role_change(self, principal: Principal, current_role: str | None, requested_role: str | None) -> str | None:
        """Return the role to persist, or ``None`` to leave it untouched."""
        if requested_role is None or requested_role == current_role:
            return None
        if principal.is_super_admin:
            return requested_role
        if self.role_change_policy == ROLE_CHANGE_REJECT:
            raise AppError(ErrorCatalog.ROLE_CHANGE_FORBIDDEN, details={"requested_role": requested_role})
        return None


def sanitize_permissions(kinds: Iterable[str] | None) -> list[str] | None:
    if kinds is None:
        return None
    normalized = sorted({kind.strip().lower() for kind in kinds if kind and kind.strip()})
    unknown = [kind for kind in normalized if kind not in RESOURCE_KINDS]
    if unknown:
        raise AppError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"field": "permissions", "unknown": unknown},
            message="Unknown permission names",
        )
    return normalized
