import uuid

from sqlalchemy import func, or_, select


class StoreScopedRepository:
    """Query helpers that always filter by ``store_id`` before anything else.

    A ``store_id`` of ``None`` means unscoped and must only reach here for a
    super_admin on a kind allowed to run without a store.
    """

    model = None
    search_fields: tuple = ()
    sort_fields: dict = {}
    default_sort = "created_at"

    def __init__(self, db):
        self.db = db

    def _store_column(self):
        return self.model.store_id

    def scoped(self, stmt, store_id: uuid.UUID | None):
        if store_id is None:
            return stmt
        return stmt.where(self._store_column() == store_id)

    def search_clause(self, search: str | None):
        if not search or not search.strip():
            return None
        term = search.strip()
        columns = [getattr(self.model, name) for name in self.search_fields]
        # Wildcards in the term match literally.
        return or_(*(column.icontains(term, autoescape=True) for column in columns))

    def get_scoped(self, entity_id, store_id: uuid.UUID | None, *, for_update: bool = False):
        stmt = self.scoped(select(self.model).where(self.model.id == entity_id), store_id)
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalars().first()

    def list_scoped(
        self,
        store_id: uuid.UUID | None,
        *,
        clauses=(),
        search: str | None = None,
        offset: int = 0,
        limit: int | None = None,
        sort_by: str | None = None,
        sort_order: str = "desc",
    ):
        stmt = self.scoped(select(self.model), store_id)
        count_stmt = self.scoped(select(func.count()).select_from(self.model), store_id)

        predicates = [clause for clause in clauses if clause is not None]
        search_filter = self.search_clause(search)
        if search_filter is not None:
            predicates.append(search_filter)
        for predicate in predicates:
            stmt = stmt.where(predicate)
            count_stmt = count_stmt.where(predicate)

        sort_column = self.sort_fields.get(sort_by or self.default_sort)
        if sort_column is None:
            sort_column = getattr(self.model, self.default_sort)
        stmt = stmt.order_by(sort_column.asc() if sort_order == "asc" else sort_column.desc(), self.model.id)

        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)

        rows = self.db.execute(stmt).scalars().all()
        total = self.db.execute(count_stmt).scalar_one()
        return rows, total

    def count_scoped(self, store_id: uuid.UUID | None, *clauses) -> int:
        stmt = self.scoped(select(func.count()).select_from(self.model), store_id)
        for clause in clauses:
            stmt = stmt.where(clause)
        return self.db.execute(stmt).scalar_one()

    def add(self, entity):
        self.db.add(entity)
        self.db.flush()
        return entity

    def delete(self, entity) -> None:
        self.db.delete(entity)
        self.db.flush()
