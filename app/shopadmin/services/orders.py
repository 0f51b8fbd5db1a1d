from sqlalchemy import select

from app.shopadmin.core.error_catalog import invalid_reference, not_found
from app.shopadmin.core.text import generate_order_number
from app.shopadmin.db.models import Order, Product, utcnow
from app.shopadmin.repos.orders import OrderRepository
from app.shopadmin.services.audit import record_scoped_event
from app.shopadmin.services.stores import ensure_store_exists


def _unit_price(product) -> float:
    if product.discount_price is not None and product.discount_price < product.price:
        return float(product.discount_price)
    return float(product.price)


class OrderService:
    def __init__(self, db):
        self.db = db
        self.repo = OrderRepository(db)

    def list_orders(self, scope, *, page, search=None, **filters):
        return self.repo.list_scoped(
            scope.store_id,
            clauses=self.repo.filter_clauses(**filters),
            search=search,
            offset=page.offset,
            limit=page.limit,
        )

    def get_order(self, scope, order_id, *, for_update: bool = False):
        order = self.repo.get_scoped(order_id, scope.store_id, for_update=for_update)
        if order is None:
            raise not_found("Order")
        return order

    def create_order(self, scope, payload):
        ensure_store_exists(self.db, scope.store_id)
        product_ids = {item.product for item in payload.items}
        products = {
            product.id: product
            for product in self.db.execute(
                select(Product)
                .where(Product.id.in_(product_ids), Product.store_id == scope.store_id)
                .with_for_update()
            ).scalars()
        }
        items = []
        for item in payload.items:
            product = products.get(item.product)
            if product is None:
                raise invalid_reference("items.product", item.product)
            items.append(
                {
                    "product": str(product.id),
                    "name": product.name,
                    "image": product.images[0] if product.images else None,
                    "price": _unit_price(product),
                    "quantity": item.quantity,
                }
            )

        items_price = round(sum(item["price"] * item["quantity"] for item in items), 2)
        order = Order(
            store_id=scope.store_id,
            order_number=generate_order_number(),
            customer_name=payload.customer_name.strip(),
            customer_email=payload.customer_email.strip().lower(),
            items=items,
            shipping_address=payload.shipping_address.model_dump(),
            payment_method=payload.payment_method,
            items_price=items_price,
            tax_price=payload.tax_price,
            shipping_price=payload.shipping_price,
            total_price=round(items_price + payload.tax_price + payload.shipping_price, 2),
        )
        self.repo.add(order)
        self.db.commit()
        record_scoped_event(self.db, scope, action="order.create", entity_type="order", entity_id=order.id)
        return order

    def update_order(self, scope, order_id, payload):
        order = self.get_order(scope, order_id, for_update=True)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        now = utcnow()

        if "status" in changes:
            order.status = changes["status"]
            if order.status == "delivered":
                changes.setdefault("is_delivered", True)
        if "is_paid" in changes:
            if changes["is_paid"] and not order.is_paid:
                order.paid_at = now
            elif not changes["is_paid"]:
                order.paid_at = None
            order.is_paid = changes["is_paid"]
        if "is_delivered" in changes:
            if changes["is_delivered"] and not order.is_delivered:
                order.delivered_at = now
            elif not changes["is_delivered"]:
                order.delivered_at = None
            order.is_delivered = changes["is_delivered"]
        if "shipping_address" in changes:
            order.shipping_address = changes["shipping_address"]

        self.db.commit()
        record_scoped_event(
            self.db,
            scope,
            action="order.update",
            entity_type="order",
            entity_id=order.id,
            metadata={"fields": sorted(changes)},
        )
        return order

    def delete_order(self, scope, order_id) -> None:
        order = self.get_order(scope, order_id)
        self.repo.delete(order)
        self.db.commit()
        record_scoped_event(self.db, scope, action="order.delete", entity_type="order", entity_id=order_id)
