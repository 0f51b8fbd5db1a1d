from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.shopadmin.api import build_api_router
from app.shopadmin.core.config import Settings, get_settings
from app.shopadmin.core.errors import setup_exception_handlers
from app.shopadmin.core.logging import configure_logging
from app.shopadmin.core.metrics import Metrics
from app.shopadmin.core.policy import AccessPolicy, CATEGORY_DELETE_POLICIES
from app.shopadmin.db.session import build_engine, build_session_factory
from app.shopadmin.middleware.observability import ObservabilityMiddleware
from app.shopadmin.middleware.tenant import TenantContextMiddleware
from app.shopadmin.middleware.trace import TRACE_HEADER, TraceIdMiddleware
from app.shopadmin.services.images import ImageStorageService


@asynccontextmanager
async def _lifespan(app: FastAPI):
    yield
    app.state.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application from one settings object; nothing below reads the environment."""
    settings = settings or get_settings()
    if settings.CATEGORY_DELETE_POLICY not in CATEGORY_DELETE_POLICIES:
        raise ValueError(f"unknown category delete policy: {settings.CATEGORY_DELETE_POLICY!r}")

    configure_logging(settings.LOG_LEVEL)
    app = FastAPI(title=settings.APP_NAME, lifespan=_lifespan)
    app.state.settings = settings
    app.state.engine = build_engine(settings.DATABASE_URL)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.metrics = Metrics(enabled=settings.METRICS_ENABLED)
    app.state.access_policy = AccessPolicy.from_settings(settings)
    app.state.image_service = ImageStorageService(settings, metrics=app.state.metrics)

    app.add_middleware(TenantContextMiddleware)
    app.add_middleware(TraceIdMiddleware)
    app.add_middleware(ObservabilityMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[TRACE_HEADER],
    )
    setup_exception_handlers(app)
    app.include_router(build_api_router(metrics_enabled=settings.METRICS_ENABLED))
    return app


app = create_app()
