from .auth import AuthClient
from .products import ProductsClient

__all__ = ["AuthClient", "ProductsClient"]
