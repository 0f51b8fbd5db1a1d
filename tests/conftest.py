import os
from contextlib import ExitStack
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from alembic import command
from alembic.config import Config

from app.main import create_app
from app.shopadmin.core.config import Settings
from tests.db_utils import postgres_test_database

TEST_SECRET_KEY = "test-secret"


def _run_migrations(database_url: str):
    config = Config("alembic.ini")
    config.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(config, "head")


def _settings_for(database_url: str, **overrides) -> Settings:
    return Settings(DATABASE_URL=database_url, SECRET_KEY=TEST_SECRET_KEY, **overrides)


@pytest.fixture()
def client(tmp_path: Path):
    base_url = os.getenv("TEST_DATABASE_URL", "")

    with ExitStack() as stack:
        if base_url.startswith("postgres"):
            database_url = stack.enter_context(postgres_test_database(base_url))
        else:
            database_url = f"sqlite+pysqlite:///{tmp_path / 'test.db'}"

        _run_migrations(database_url)
        app = create_app(_settings_for(database_url))

        with TestClient(app) as client:
            yield client


@pytest.fixture()
def db_session(client):
    db = client.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
