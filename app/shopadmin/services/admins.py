import logging

from app.shopadmin.core.error_catalog import AppError, ErrorCatalog, invalid_reference, not_found
from app.shopadmin.core.policy import AccessPolicy, sanitize_permissions
from app.shopadmin.core.principal import Role
from app.shopadmin.core.security import get_password_hash
from app.shopadmin.db.models import Admin
from app.shopadmin.repos.admins import AdminRepository
from app.shopadmin.repos.stores import StoreRepository
from app.shopadmin.services.audit import record_scoped_event

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, db, policy: AccessPolicy):
        self.db = db
        self.policy = policy
        self.repo = AdminRepository(db)

    def list_admins(self, scope, *, page, search=None, status=None, role=None):
        return self.repo.list_scoped(
            scope.store_id,
            clauses=self.repo.filter_clauses(status=status, role=role),
            search=search,
            offset=page.offset,
            limit=page.limit,
        )

    def get_admin(self, scope, admin_id):
        admin = self.repo.get_scoped(admin_id, scope.store_id)
        if admin is None:
            raise not_found("Admin")
        return admin

    def create_admin(self, scope, payload):
        principal = scope.principal
        role = self.policy.filter_role_change(principal, Role.MANAGER.value, payload.role) or Role.MANAGER.value

        store_id = None
        if role != Role.SUPER_ADMIN.value:
            store_id = scope.store_id
            if store_id is None:
                raise AppError(ErrorCatalog.STORE_SCOPE_REQUIRED, details={"field": "storeId"})
            if StoreRepository(self.db).get_by_id(store_id) is None:
                raise invalid_reference("storeId", store_id)

        email = payload.email.strip().lower()
        if self.repo.email_taken(email):
            raise AppError(ErrorCatalog.CONFLICT, details={"field": "email"}, message="Email already in use")

        admin = Admin(
            store_id=store_id,
            name=payload.name.strip(),
            email=email,
            hashed_password=get_password_hash(payload.password),
            role=role,
            status=payload.status,
            permissions=sanitize_permissions(payload.permissions) or [],
            avatar=payload.avatar,
        )
        self.repo.add(admin)
        self.db.commit()
        record_scoped_event(self.db, scope, action="admin.create", entity_type="admin", entity_id=admin.id)
        return admin

    def update_admin(self, scope, admin_id, payload):
        admin = self.get_admin(scope, admin_id)
        changes = payload.model_dump(exclude_unset=True)

        if "role" in changes:
            new_role = self.policy.filter_role_change(scope.principal, admin.role, changes.pop("role"))
            if new_role is not None:
                if new_role == Role.SUPER_ADMIN.value:
                    admin.store_id = None
                elif admin.store_id is None:
                    if scope.store_id is None:
                        raise AppError(ErrorCatalog.STORE_SCOPE_REQUIRED, details={"field": "storeId"})
                    admin.store_id = scope.store_id
                admin.role = new_role
        if "email" in changes and changes["email"] is not None:
            email = changes.pop("email").strip().lower()
            if self.repo.email_taken(email, exclude_id=admin.id):
                raise AppError(ErrorCatalog.CONFLICT, details={"field": "email"}, message="Email already in use")
            admin.email = email
        if "permissions" in changes:
            admin.permissions = sanitize_permissions(changes.pop("permissions")) or []
        for field in ("name", "status", "avatar"):
            if field in changes and changes[field] is not None:
                setattr(admin, field, changes[field])

        self.db.commit()
        record_scoped_event(self.db, scope, action="admin.update", entity_type="admin", entity_id=admin.id)
        return admin

    def delete_admin(self, scope, admin_id) -> None:
        self.policy.ensure_not_self(scope.principal, admin_id)
        admin = self.get_admin(scope, admin_id)
        self.repo.delete(admin)
        self.db.commit()
        record_scoped_event(self.db, scope, action="admin.delete", entity_type="admin", entity_id=admin_id)
