from sqlalchemy import case, func, select

from app.shopadmin.db.models import Category, Product
from app.shopadmin.repos.base import StoreScopedRepository


class ProductRepository(StoreScopedRepository):
    model = Product
    search_fields = ("name", "description", "brand", "sku")
    sort_fields = {
        "name": Product.name,
        "price": Product.price,
        "stock": Product.stock_quantity,
        "created_at": Product.created_at,
    }

    def list_by_ids(self, product_ids, store_id, *, for_update: bool = False):
        if not product_ids:
            return []
        stmt = self.scoped(select(Product).where(Product.id.in_(list(product_ids))), store_id)
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalars().all()

    @staticmethod
    def filter_clauses(
        *,
        status: str | None = None,
        category_id=None,
        featured: bool | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        in_stock: bool | None = None,
    ):
        clauses = []
        if status:
            clauses.append(Product.status == status.strip().lower())
        if category_id is not None:
            clauses.append(Product.category_id == category_id)
        if featured is not None:
            clauses.append(Product.featured.is_(featured))
        if min_price is not None:
            clauses.append(Product.price >= min_price)
        if max_price is not None:
            clauses.append(Product.price <= max_price)
        if in_stock is True:
            clauses.append(Product.stock_quantity > 0)
        elif in_stock is False:
            clauses.append(Product.stock_quantity <= 0)
        return clauses

    def stats_overview(self, store_id) -> dict:
        stmt = self.scoped(
            select(
                func.count(Product.id),
                func.sum(case((Product.status == "active", 1), else_=0)),
                func.sum(case((Product.status == "draft", 1), else_=0)),
                func.sum(case((Product.status == "out_of_stock", 1), else_=0)),
                func.sum(case((Product.featured.is_(True), 1), else_=0)),
                func.sum(Product.price * Product.stock_quantity),
                func.avg(Product.price),
                func.sum(
                    case(
                        (
                            (Product.stock_quantity > 0) & (Product.stock_quantity <= Product.low_stock_threshold),
                            1,
                        ),
                        else_=0,
                    )
                ),
            ),
            store_id,
        )
        row = self.db.execute(stmt).one()
        return {
            "total_products": row[0] or 0,
            "active_products": int(row[1] or 0),
            "draft_products": int(row[2] or 0),
            "out_of_stock_products": int(row[3] or 0),
            "featured_products": int(row[4] or 0),
            "total_value": round(float(row[5] or 0), 2),
            "average_price": round(float(row[6] or 0), 2),
            "low_stock_products": int(row[7] or 0),
        }

    def category_breakdown(self, store_id) -> list[dict]:
        stmt = (
            select(Product.category_id, Category.name, func.count(Product.id))
            .join(Category, Category.id == Product.category_id, isouter=True)
            .where(Product.store_id == store_id)
            .group_by(Product.category_id, Category.name)
            .order_by(func.count(Product.id).desc())
        )
        return [
            {"category_id": category_id, "name": name, "count": count}
            for category_id, name, count in self.db.execute(stmt).all()
        ]
