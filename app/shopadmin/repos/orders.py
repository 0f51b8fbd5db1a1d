from sqlalchemy import func, select

from app.shopadmin.db.models import Order
from app.shopadmin.repos.base import StoreScopedRepository


class OrderRepository(StoreScopedRepository):
    model = Order
    search_fields = ("order_number", "customer_name", "customer_email")
    sort_fields = {"total_price": Order.total_price, "created_at": Order.created_at}

    def count_for_store(self, store_id) -> int:
        return self.db.execute(select(func.count()).select_from(Order).where(Order.store_id == store_id)).scalar_one()

    @staticmethod
    def filter_clauses(*, status: str | None = None, is_paid: bool | None = None, is_delivered: bool | None = None):
        clauses = []
        if status:
            clauses.append(Order.status == status.strip().lower())
        if is_paid is not None:
            clauses.append(Order.is_paid.is_(is_paid))
        if is_delivered is not None:
            clauses.append(Order.is_delivered.is_(is_delivered))
        return clauses
