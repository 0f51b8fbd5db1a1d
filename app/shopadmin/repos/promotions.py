from sqlalchemy import func, select

from app.shopadmin.db.models import Banner, Coupon
from app.shopadmin.repos.base import StoreScopedRepository


class CouponRepository(StoreScopedRepository):
    model = Coupon
    search_fields = ("code",)
    sort_fields = {"code": Coupon.code, "expiry_date": Coupon.expiry_date, "created_at": Coupon.created_at}

    def code_taken(self, code: str, store_id, *, exclude_id=None) -> bool:
        stmt = select(func.count()).select_from(Coupon).where(Coupon.store_id == store_id, Coupon.code == code)
        if exclude_id is not None:
            stmt = stmt.where(Coupon.id != exclude_id)
        return self.db.execute(stmt).scalar_one() > 0

    @staticmethod
    def filter_clauses(*, is_active: bool | None = None, coupon_type: str | None = None):
        clauses = []
        if is_active is not None:
            clauses.append(Coupon.is_active.is_(is_active))
        if coupon_type:
            clauses.append(Coupon.type == coupon_type.strip().lower())
        return clauses


class BannerRepository(StoreScopedRepository):
    model = Banner
    search_fields = ("title",)
    sort_fields = {"sort_order": Banner.sort_order, "created_at": Banner.created_at}
    default_sort = "sort_order"

    @staticmethod
    def filter_clauses(*, position: str | None = None, is_active: bool | None = None):
        clauses = []
        if position:
            clauses.append(Banner.position == position.strip().lower())
        if is_active is not None:
            clauses.append(Banner.is_active.is_(is_active))
        return clauses
