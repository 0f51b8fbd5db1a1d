import importlib
from pathlib import Path

from fastapi.testclient import TestClient

from app.main import create_app
from app.shopadmin.core.config import Settings


def test_module_level_app_builds_every_route():
    main = importlib.import_module("app.main")

    paths = {route.path for route in main.app.routes}
    assert "/stores/{store_id}" in paths
    assert "/admin/{admin_id}" in paths
    assert "/health" in paths


def test_store_routes_take_store_id_from_query_alias():
    app = create_app(Settings(DATABASE_URL="sqlite+pysqlite:///:memory:"))
    operation = app.openapi()["paths"]["/stores/{store_id}"]["get"]

    params = {(param["name"], param["in"]) for param in operation["parameters"]}
    assert ("store_id", "path") in params
    assert ("storeId", "query") in params


def test_injected_database_url_is_used(tmp_path: Path):
    database_url = f"sqlite+pysqlite:///{tmp_path / 'injected.db'}"

    app = create_app(Settings(DATABASE_URL=database_url))

    assert str(app.state.engine.url) == database_url
    assert app.state.session_factory.kw["bind"] is app.state.engine


def test_each_app_owns_its_metrics_registry(tmp_path: Path):
    first = create_app(Settings(DATABASE_URL=f"sqlite+pysqlite:///{tmp_path / 'a.db'}"))
    second = create_app(Settings(DATABASE_URL=f"sqlite+pysqlite:///{tmp_path / 'b.db'}", METRICS_ENABLED=False))

    assert first.state.metrics is not second.state.metrics
    assert first.state.image_service.metrics is first.state.metrics
    with TestClient(first) as client:
        client.get("/health")
        body = client.get("/metrics").text
    assert 'route="/health"' in body
    assert "/metrics" not in {route.path for route in second.routes}
