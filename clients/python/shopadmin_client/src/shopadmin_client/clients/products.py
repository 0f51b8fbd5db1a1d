from __future__ import annotations

from ..models import BulkUpdateResult, Product, ProductPage
from .base import BaseClient


class ProductsClient(BaseClient):
    def list(
        self,
        *,
        page: int = 1,
        limit: int | None = None,
        search: str | None = None,
        status: str | None = None,
        category: str | None = None,
    ) -> ProductPage:
        params = {"page": page, "limit": limit, "search": search, "status": status, "category": category}
        return ProductPage.model_validate(self._request("GET", "/products", params=params))

    def get(self, product_id: str) -> Product:
        return Product.model_validate(self._request("GET", f"/products/{product_id}"))

    def update_stock(self, product_id: str, quantity: int, operation: str = "set") -> Product:
        data = self._request(
            "PUT",
            f"/products/{product_id}/stock",
            json_body={"quantity": quantity, "operation": operation},
        )
        return Product.model_validate(data)

    def bulk_update(self, product_ids: list[str], updates: dict) -> BulkUpdateResult:
        data = self._request(
            "PUT",
            "/products/bulk/update",
            json_body={"productIds": list(product_ids), "updates": updates},
        )
        return BulkUpdateResult.model_validate(data)
