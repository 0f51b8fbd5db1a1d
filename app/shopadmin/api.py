from fastapi import APIRouter

from app.shopadmin.routers.admins import router as admins_router
from app.shopadmin.routers.banners import router as banners_router
from app.shopadmin.routers.categories import router as categories_router
from app.shopadmin.routers.coupons import router as coupons_router
from app.shopadmin.routers.health import metrics_router
from app.shopadmin.routers.health import router as health_router
from app.shopadmin.routers.orders import router as orders_router
from app.shopadmin.routers.products import router as products_router
from app.shopadmin.routers.stores import router as stores_router
from app.shopadmin.routers.uploads import router as uploads_router


def build_api_router(*, metrics_enabled: bool = True) -> APIRouter:
    api_router = APIRouter()
    api_router.include_router(health_router, tags=["ops"])
    api_router.include_router(admins_router, tags=["admins"])
    api_router.include_router(stores_router, tags=["stores"])
    api_router.include_router(products_router, tags=["products"])
    api_router.include_router(categories_router, tags=["categories"])
    api_router.include_router(orders_router, tags=["orders"])
    api_router.include_router(coupons_router, tags=["coupons"])
    api_router.include_router(banners_router, tags=["banners"])
    api_router.include_router(uploads_router, tags=["uploads"])
    if metrics_enabled:
        api_router.include_router(metrics_router, tags=["ops"])
    return api_router
