from app.shopadmin.core.error_catalog import AppError, ErrorCatalog, not_found
from app.shopadmin.db.models import Banner, Coupon
from app.shopadmin.repos.promotions import BannerRepository, CouponRepository
from app.shopadmin.services.audit import record_scoped_event
from app.shopadmin.services.stores import ensure_store_exists

MAX_PERCENTAGE = 100


def _validate_coupon(coupon_type: str, value: float) -> None:
    if coupon_type == "percentage" and value > MAX_PERCENTAGE:
        raise AppError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"field": "value", "max": MAX_PERCENTAGE},
            message="Percentage discount cannot exceed 100",
        )


def _validate_banner_window(start_date, end_date) -> None:
    if start_date is not None and end_date is not None and start_date > end_date:
        raise AppError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"field": "endDate"},
            message="endDate must not be before startDate",
        )


class CouponService:
    def __init__(self, db):
        self.db = db
        self.repo = CouponRepository(db)

    def list_coupons(self, scope, *, page, search=None, is_active=None, coupon_type=None):
        return self.repo.list_scoped(
            scope.store_id,
            clauses=self.repo.filter_clauses(is_active=is_active, coupon_type=coupon_type),
            search=search,
            offset=page.offset,
            limit=page.limit,
        )

    def get_coupon(self, scope, coupon_id):
        coupon = self.repo.get_scoped(coupon_id, scope.store_id)
        if coupon is None:
            raise not_found("Coupon")
        return coupon

    def _ensure_code_free(self, code: str, store_id, *, exclude_id=None) -> None:
        if self.repo.code_taken(code, store_id, exclude_id=exclude_id):
            raise AppError(ErrorCatalog.CONFLICT, details={"field": "code", "value": code}, message="Coupon code already exists")

    def create_coupon(self, scope, payload):
        ensure_store_exists(self.db, scope.store_id)
        data = payload.model_dump()
        data["code"] = data["code"].strip().upper()
        _validate_coupon(data["type"], data["value"])
        self._ensure_code_free(data["code"], scope.store_id)
        coupon = Coupon(store_id=scope.store_id, **data)
        self.repo.add(coupon)
        self.db.commit()
        record_scoped_event(self.db, scope, action="coupon.create", entity_type="coupon", entity_id=coupon.id)
        return coupon

    def update_coupon(self, scope, coupon_id, payload):
        coupon = self.get_coupon(scope, coupon_id)
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("code"):
            changes["code"] = changes["code"].strip().upper()
            self._ensure_code_free(changes["code"], scope.store_id, exclude_id=coupon.id)
        _validate_coupon(changes.get("type") or coupon.type, changes.get("value") or coupon.value)
        for field, value in changes.items():
            if value is None and field not in ("min_order_amount", "max_discount", "usage_limit"):
                continue
            setattr(coupon, field, value)
        self.db.commit()
        record_scoped_event(self.db, scope, action="coupon.update", entity_type="coupon", entity_id=coupon.id)
        return coupon

    def delete_coupon(self, scope, coupon_id) -> None:
        coupon = self.get_coupon(scope, coupon_id)
        self.repo.delete(coupon)
        self.db.commit()
        record_scoped_event(self.db, scope, action="coupon.delete", entity_type="coupon", entity_id=coupon_id)


class BannerService:
    def __init__(self, db):
        self.db = db
        self.repo = BannerRepository(db)

    def list_banners(self, scope, *, page, search=None, position=None, is_active=None):
        return self.repo.list_scoped(
            scope.store_id,
            clauses=self.repo.filter_clauses(position=position, is_active=is_active),
            search=search,
            offset=page.offset,
            limit=page.limit,
            sort_order="asc",
        )

    def get_banner(self, scope, banner_id):
        banner = self.repo.get_scoped(banner_id, scope.store_id)
        if banner is None:
            raise not_found("Banner")
        return banner

    def create_banner(self, scope, payload):
        ensure_store_exists(self.db, scope.store_id)
        data = payload.model_dump()
        _validate_banner_window(data["start_date"], data["end_date"])
        banner = Banner(store_id=scope.store_id, **data)
        self.repo.add(banner)
        self.db.commit()
        record_scoped_event(self.db, scope, action="banner.create", entity_type="banner", entity_id=banner.id)
        return banner

    def update_banner(self, scope, banner_id, payload):
        banner = self.get_banner(scope, banner_id)
        changes = payload.model_dump(exclude_unset=True)
        _validate_banner_window(
            changes["start_date"] if "start_date" in changes else banner.start_date,
            changes["end_date"] if "end_date" in changes else banner.end_date,
        )
        for field, value in changes.items():
            if value is None and field not in ("link", "start_date", "end_date"):
                continue
            setattr(banner, field, value)
        self.db.commit()
        record_scoped_event(self.db, scope, action="banner.update", entity_type="banner", entity_id=banner.id)
        return banner

    def delete_banner(self, scope, banner_id) -> None:
        banner = self.get_banner(scope, banner_id)
        self.repo.delete(banner)
        self.db.commit()
        record_scoped_event(self.db, scope, action="banner.delete", entity_type="banner", entity_id=banner_id)
