from sqlalchemy import func, or_, select

from app.shopadmin.db.models import Store
from app.shopadmin.repos.base import StoreScopedRepository


class StoreRepository(StoreScopedRepository):
    model = Store
    search_fields = ("name", "slug")
    sort_fields = {"name": Store.name, "created_at": Store.created_at}

    def _store_column(self):
        # A store is its own tenant boundary.
        return Store.id

    def get_by_id(self, store_id):
        return self.db.get(Store, store_id)

    def name_or_slug_taken(self, *, name: str | None, slug: str | None, exclude_id=None) -> bool:
        conditions = []
        if name:
            conditions.append(func.lower(Store.name) == name.strip().lower())
        if slug:
            conditions.append(Store.slug == slug)
        if not conditions:
            return False
        stmt = select(func.count()).select_from(Store).where(or_(*conditions))
        if exclude_id is not None:
            stmt = stmt.where(Store.id != exclude_id)
        return self.db.execute(stmt).scalar_one() > 0

    @staticmethod
    def filter_clauses(*, status: str | None = None):
        if status:
            return [func.lower(Store.status) == status.strip().lower()]
        return []
