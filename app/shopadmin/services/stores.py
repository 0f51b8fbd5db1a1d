from sqlalchemy import func, select

from app.shopadmin.core.error_catalog import AppError, ErrorCatalog, invalid_reference, not_found
from app.shopadmin.core.text import slugify
from app.shopadmin.db.models import Admin, Banner, Category, Coupon, Order, Product, Store
from app.shopadmin.repos.stores import StoreRepository
from app.shopadmin.services.audit import record_scoped_event

_OWNED_MODELS = (Admin, Category, Product, Order, Coupon, Banner)


class StoreService:
    def __init__(self, db):
        self.db = db
        self.repo = StoreRepository(db)

    def list_stores(self, scope, *, page, search=None, status=None):
        return self.repo.list_scoped(
            scope.store_id,
            clauses=self.repo.filter_clauses(status=status),
            search=search,
            offset=page.offset,
            limit=page.limit,
            sort_by="name",
            sort_order="asc",
        )

    def get_store(self, scope, store_id):
        store = self.repo.get_scoped(store_id, scope.store_id)
        if store is None:
            raise not_found("Store")
        return store

    def create_store(self, scope, payload):
        slug = payload.slug or slugify(payload.name)
        if self.repo.name_or_slug_taken(name=payload.name, slug=slug):
            raise AppError(ErrorCatalog.CONFLICT, details={"fields": ["name", "slug"]}, message="Store already exists")
        store = Store(name=payload.name.strip(), slug=slug, status=payload.status)
        self.repo.add(store)
        self.db.commit()
        record_scoped_event(self.db, scope, action="store.create", entity_type="store", entity_id=store.id)
        return store

    def update_store(self, scope, store_id, payload):
        store = self.get_store(scope, store_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if self.repo.name_or_slug_taken(name=changes.get("name"), slug=changes.get("slug"), exclude_id=store.id):
            raise AppError(ErrorCatalog.CONFLICT, details={"fields": ["name", "slug"]}, message="Store already exists")
        for field, value in changes.items():
            setattr(store, field, value.strip() if field == "name" else value)
        self.db.commit()
        record_scoped_event(self.db, scope, action="store.update", entity_type="store", entity_id=store.id)
        return store

    def delete_store(self, scope, store_id) -> None:
        store = self.get_store(scope, store_id)
        owned = {
            model.__tablename__: self.db.execute(
                select(func.count()).select_from(model).where(model.store_id == store.id)
            ).scalar_one()
            for model in _OWNED_MODELS
        }
        owned = {name: count for name, count in owned.items() if count}
        if owned:
            raise AppError(ErrorCatalog.STORE_NOT_EMPTY, details={"owned": owned})
        self.repo.delete(store)
        self.db.commit()
        record_scoped_event(self.db, scope, action="store.delete", entity_type="store", entity_id=store_id)


def ensure_store_exists(db, store_id) -> None:
    if store_id is None:
        raise AppError(ErrorCatalog.STORE_SCOPE_REQUIRED, details={"field": "storeId"})
    if db.get(Store, store_id) is None:
        raise invalid_reference("storeId", store_id)
