from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    SUPER_ADMIN = "super_admin"
    STORE_ADMIN = "store_admin"
    MANAGER = "manager"


@dataclass(frozen=True)
class Principal:
    """The authenticated admin acting on a request.

    Built from the stored account on every request, so a role, store or
    status change takes effect on the next call without reissuing tokens.
    """

    id: str
    role: Role
    store_id: str | None
    permissions: frozenset[str] = field(default_factory=frozenset)
    email: str = ""
    name: str = ""

    @property
    def is_super_admin(self) -> bool:
        return self.role is Role.SUPER_ADMIN

    @classmethod
    def from_admin(cls, admin) -> "Principal":
        return cls(
            id=str(admin.id),
            role=Role(admin.role),
            store_id=str(admin.store_id) if admin.store_id else None,
            permissions=frozenset(admin.permissions or ()),
            email=admin.email,
            name=admin.name,
        )
