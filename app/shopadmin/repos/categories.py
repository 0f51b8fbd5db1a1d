from sqlalchemy import func, select, update

from app.shopadmin.db.models import Category, Product
from app.shopadmin.repos.base import StoreScopedRepository


class CategoryRepository(StoreScopedRepository):
    model = Category
    search_fields = ("name", "description")
    sort_fields = {
        "name": Category.name,
        "sort_order": Category.sort_order,
        "created_at": Category.created_at,
    }
    default_sort = "sort_order"

    def list_all(self, store_id):
        stmt = self.scoped(select(Category), store_id).order_by(Category.sort_order.asc(), Category.name.asc())
        return self.db.execute(stmt).scalars().all()

    def children_of(self, category_id, store_id):
        stmt = self.scoped(select(Category).where(Category.parent_id == category_id), store_id)
        return self.db.execute(stmt).scalars().all()

    def slug_taken(self, slug: str, store_id, *, exclude_id=None) -> bool:
        stmt = select(func.count()).select_from(Category).where(Category.store_id == store_id, Category.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        return self.db.execute(stmt).scalar_one() > 0

    def product_count(self, category_ids, store_id) -> int:
        if not category_ids:
            return 0
        stmt = select(func.count()).select_from(Product).where(
            Product.store_id == store_id, Product.category_id.in_(list(category_ids))
        )
        return self.db.execute(stmt).scalar_one()

    def detach_products(self, category_ids, store_id) -> int:
        stmt = (
            update(Product)
            .where(Product.store_id == store_id, Product.category_id.in_(list(category_ids)))
            .values(category_id=None)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount

    def delete_products(self, category_ids, store_id) -> int:
        products = self.db.execute(
            select(Product).where(Product.store_id == store_id, Product.category_id.in_(list(category_ids)))
        ).scalars().all()
        for product in products:
            self.db.delete(product)
        self.db.flush()
        return len(products)

    @staticmethod
    def filter_clauses(*, parent_id=None, root_only: bool = False, is_active: bool | None = None):
        clauses = []
        if root_only:
            clauses.append(Category.parent_id.is_(None))
        elif parent_id is not None:
            clauses.append(Category.parent_id == parent_id)
        if is_active is not None:
            clauses.append(Category.is_active.is_(is_active))
        return clauses
