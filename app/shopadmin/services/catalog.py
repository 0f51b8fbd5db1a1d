import logging
import uuid

from sqlalchemy import select

from app.shopadmin.core.error_catalog import AppError, ErrorCatalog, invalid_reference, not_found
from app.shopadmin.core.policy import (
    CATEGORY_DELETE_BLOCK,
    CATEGORY_DELETE_CASCADE,
    CATEGORY_DELETE_ORPHAN,
    CATEGORY_DELETE_POLICIES,
)
from app.shopadmin.core.text import slugify
from app.shopadmin.db.models import Category, Product
from app.shopadmin.repos.categories import CategoryRepository
from app.shopadmin.repos.products import ProductRepository
from app.shopadmin.services.audit import record_scoped_event
from app.shopadmin.services.stock import apply_stock_operation
from app.shopadmin.services.stores import ensure_store_exists

logger = logging.getLogger(__name__)

# Product fields whose JSON name differs from the column.
_PRODUCT_FIELD_COLUMNS = {"category": "category_id"}
_BULK_NULLABLE_FIELDS = frozenset({"discount_price", "category"})


def _require_category(db, category_id, store_id, *, field: str = "category"):
    # Locks the referenced row so it cannot disappear before the write commits.
    stmt = (
        select(Category)
        .where(Category.id == category_id, Category.store_id == store_id)
        .with_for_update()
    )
    category = db.execute(stmt).scalars().first()
    if category is None:
        raise invalid_reference(field, category_id)
    return category


class ProductService:
    def __init__(self, db):
        self.db = db
        self.repo = ProductRepository(db)

    def list_products(self, scope, *, page, search=None, sort_by=None, sort_order="desc", **filters):
        return self.repo.list_scoped(
            scope.store_id,
            clauses=self.repo.filter_clauses(**filters),
            search=search,
            offset=page.offset,
            limit=page.limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    def featured_products(self, scope, *, page):
        return self.list_products(scope, page=page, status="active", featured=True)

    def search_products(self, scope, query: str, *, page):
        return self.list_products(scope, page=page, search=query, status="active")

    def products_in_category(self, scope, category_id, *, page):
        if CategoryRepository(self.db).get_scoped(category_id, scope.store_id) is None:
            raise not_found("Category")
        return self.list_products(scope, page=page, category_id=category_id)

    def stats(self, scope) -> dict:
        return {
            "overview": self.repo.stats_overview(scope.store_id),
            "category_breakdown": self.repo.category_breakdown(scope.store_id),
        }

    def get_product(self, scope, product_id, *, for_update: bool = False):
        product = self.repo.get_scoped(product_id, scope.store_id, for_update=for_update)
        if product is None:
            raise not_found("Product")
        return product

    def create_product(self, scope, payload):
        ensure_store_exists(self.db, scope.store_id)
        data = payload.model_dump()
        category_id = data.pop("category")
        if category_id is not None:
            _require_category(self.db, category_id, scope.store_id)
        product = Product(store_id=scope.store_id, category_id=category_id, **data)
        self.repo.add(product)
        self.db.commit()
        record_scoped_event(self.db, scope, action="product.create", entity_type="product", entity_id=product.id)
        return product

    def update_product(self, scope, product_id, payload):
        product = self.get_product(scope, product_id, for_update=True)
        changes = payload.model_dump(exclude_unset=True)
        if "category" in changes and changes["category"] is not None:
            _require_category(self.db, changes["category"], scope.store_id)
        for field, value in changes.items():
            column = _PRODUCT_FIELD_COLUMNS.get(field, field)
            if value is None and column not in ("category_id", "discount_price", "sku"):
                continue
            setattr(product, column, value)
        self.db.commit()
        record_scoped_event(self.db, scope, action="product.update", entity_type="product", entity_id=product.id)
        return product

    def delete_product(self, scope, product_id) -> None:
        product = self.get_product(scope, product_id)
        self.repo.delete(product)
        self.db.commit()
        record_scoped_event(self.db, scope, action="product.delete", entity_type="product", entity_id=product_id)

    def update_stock(self, scope, product_id, *, quantity: int, operation: str):
        product = self.get_product(scope, product_id, for_update=True)
        try:
            change = apply_stock_operation(product.stock_quantity, product.status, operation, quantity)
        except AppError:
            self.db.rollback()
            raise
        product.stock_quantity = change.quantity
        product.status = change.status
        self.db.commit()
        record_scoped_event(
            self.db,
            scope,
            action="product.stock",
            entity_type="product",
            entity_id=product.id,
            metadata={"operation": operation, "quantity": quantity, "stock": change.quantity},
        )
        return product

    def bulk_update(self, scope, product_ids, updates) -> dict:
        changes = updates.model_dump(exclude_unset=True)
        if not changes:
            raise AppError(ErrorCatalog.VALIDATION_ERROR, details={"field": "updates"}, message="No updates provided")
        invalid_nulls = [field for field, value in changes.items() if value is None and field not in _BULK_NULLABLE_FIELDS]
        if invalid_nulls:
            raise AppError(
                ErrorCatalog.VALIDATION_ERROR,
                details={"fields": invalid_nulls},
                message="Fields cannot be null",
            )
        if changes.get("category") is not None:
            _require_category(self.db, changes["category"], scope.store_id)

        columns = {_PRODUCT_FIELD_COLUMNS.get(field, field): value for field, value in changes.items()}
        # Ids from other stores simply do not match the scoped query.
        products = self.repo.list_by_ids(set(product_ids), scope.store_id, for_update=True)
        modified = 0
        for product in products:
            dirty = False
            for column, value in columns.items():
                if getattr(product, column) != value:
                    setattr(product, column, value)
                    dirty = True
            if dirty:
                modified += 1
        self.db.commit()
        record_scoped_event(
            self.db,
            scope,
            action="product.bulk_update",
            entity_type="product",
            metadata={"matched": len(products), "modified": modified, "fields": sorted(changes)},
        )
        return {"matched_count": len(products), "modified_count": modified}


class CategoryService:
    def __init__(self, db, delete_policy: str = CATEGORY_DELETE_BLOCK):
        if delete_policy not in CATEGORY_DELETE_POLICIES:
            raise ValueError(f"unknown category delete policy: {delete_policy!r}")
        self.db = db
        self.delete_policy = delete_policy
        self.repo = CategoryRepository(db)

    def list_categories(self, scope, *, page, search=None, parent=None, is_active=None):
        root_only = parent in ("root", "null", "none")
        parent_id = None
        if parent and not root_only:
            try:
                parent_id = uuid.UUID(parent)
            except ValueError as exc:
                raise AppError(
                    ErrorCatalog.VALIDATION_ERROR, details={"field": "parent", "value": parent}
                ) from exc
        return self.repo.list_scoped(
            scope.store_id,
            clauses=self.repo.filter_clauses(parent_id=parent_id, root_only=root_only, is_active=is_active),
            search=search,
            offset=page.offset,
            limit=page.limit,
            sort_order="asc",
        )

    def tree(self, scope) -> list[dict]:
        categories = self.repo.list_all(scope.store_id)
        nodes = {category.id: {"category": category, "children": []} for category in categories}
        roots = []
        for category in categories:
            node = nodes[category.id]
            parent = nodes.get(category.parent_id)
            if parent is None:
                roots.append(node)
            else:
                parent["children"].append(node)
        return roots

    def get_category(self, scope, category_id, *, for_update: bool = False):
        category = self.repo.get_scoped(category_id, scope.store_id, for_update=for_update)
        if category is None:
            raise not_found("Category")
        return category

    def _ensure_slug_free(self, slug: str, store_id, *, exclude_id=None) -> None:
        if self.repo.slug_taken(slug, store_id, exclude_id=exclude_id):
            raise AppError(ErrorCatalog.CONFLICT, details={"field": "slug", "value": slug}, message="Slug already in use")

    def create_category(self, scope, payload):
        ensure_store_exists(self.db, scope.store_id)
        data = payload.model_dump()
        parent_id = data.pop("parent")
        if parent_id is not None:
            _require_category(self.db, parent_id, scope.store_id, field="parent")
        data["slug"] = data["slug"] or slugify(data["name"])
        self._ensure_slug_free(data["slug"], scope.store_id)
        category = Category(store_id=scope.store_id, parent_id=parent_id, **data)
        self.repo.add(category)
        self.db.commit()
        record_scoped_event(self.db, scope, action="category.create", entity_type="category", entity_id=category.id)
        return category

    def update_category(self, scope, category_id, payload):
        category = self.get_category(scope, category_id, for_update=True)
        changes = payload.model_dump(exclude_unset=True)

        if "parent" in changes:
            parent_id = changes.pop("parent")
            if parent_id is not None:
                _require_category(self.db, parent_id, scope.store_id, field="parent")
                self._ensure_not_descendant(category, parent_id, scope.store_id)
            category.parent_id = parent_id
        if changes.get("slug"):
            self._ensure_slug_free(changes["slug"], scope.store_id, exclude_id=category.id)
        for field, value in changes.items():
            if value is None and field != "image":
                continue
            setattr(category, field, value)

        self.db.commit()
        record_scoped_event(self.db, scope, action="category.update", entity_type="category", entity_id=category.id)
        return category

    def _ensure_not_descendant(self, category, parent_id, store_id) -> None:
        current = parent_id
        seen = set()
        while current is not None and current not in seen:
            if current == category.id:
                raise AppError(
                    ErrorCatalog.VALIDATION_ERROR,
                    details={"field": "parent", "value": str(parent_id)},
                    message="A category cannot be its own ancestor",
                )
            seen.add(current)
            ancestor = self.repo.get_scoped(current, store_id)
            current = ancestor.parent_id if ancestor is not None else None

    def _descendant_ids(self, category_id, store_id) -> list:
        found = []
        frontier = [category_id]
        while frontier:
            children = []
            for parent_id in frontier:
                children.extend(child.id for child in self.repo.children_of(parent_id, store_id))
            found.extend(children)
            frontier = children
        return found

    def delete_category(self, scope, category_id) -> dict:
        category = self.get_category(scope, category_id, for_update=True)
        store_id = category.store_id
        result = {
            "id": category.id,
            "policy": self.delete_policy,
            "deleted_categories": 0,
            "deleted_products": 0,
            "detached_products": 0,
        }

        if self.delete_policy == CATEGORY_DELETE_BLOCK:
            children = self.repo.children_of(category.id, store_id)
            product_count = self.repo.product_count([category.id], store_id)
            if children or product_count:
                self.db.rollback()
                raise AppError(
                    ErrorCatalog.CATEGORY_NOT_EMPTY,
                    details={"subcategories": len(children), "products": product_count},
                )
        elif self.delete_policy == CATEGORY_DELETE_CASCADE:
            descendant_ids = self._descendant_ids(category.id, store_id)
            result["deleted_products"] = self.repo.delete_products([category.id, *descendant_ids], store_id)
            # Deepest first so no row ever points at a deleted parent.
            for descendant_id in reversed(descendant_ids):
                self.repo.delete(self.repo.get_scoped(descendant_id, store_id))
            result["deleted_categories"] += len(descendant_ids)
        elif self.delete_policy == CATEGORY_DELETE_ORPHAN:
            result["detached_products"] = self.repo.detach_products([category.id], store_id)
            for child in self.repo.children_of(category.id, store_id):
                child.parent_id = category.parent_id
            self.db.flush()

        self.repo.delete(category)
        result["deleted_categories"] += 1
        self.db.commit()
        record_scoped_event(
            self.db,
            scope,
            action="category.delete",
            entity_type="category",
            entity_id=category_id,
            metadata={key: value for key, value in result.items() if key != "id"},
        )
        return result

    def reorder(self, scope, items) -> int:
        ids = [item.id for item in items]
        categories = {
            category.id: category
            for category in self.db.execute(
                self.repo.scoped(select(Category).where(Category.id.in_(ids)), scope.store_id).with_for_update()
            ).scalars()
        }
        missing = [str(category_id) for category_id in ids if category_id not in categories]
        if missing:
            self.db.rollback()
            raise AppError(ErrorCatalog.NOT_FOUND, details={"ids": missing}, message="Category not found")
        for item in items:
            categories[item.id].sort_order = item.sort_order
        self.db.commit()
        return len(items)
