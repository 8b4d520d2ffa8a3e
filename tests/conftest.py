"""Pytest configuration and fixtures."""

from dataclasses import replace

import pytest

from config import load_config
from database import open_store
from services import BackgroundLoop, LocationCatalog, build_services, run_coroutine_sync
from web import create_app

TEST_LOCATIONS = {
    "alpha": {"name": "Alpha Station", "prize": "Coffee", "emoji": "☕"},
    "beta": {"name": "Beta Station", "prize": "Cake", "emoji": "🍰"},
}


@pytest.fixture
def catalog():
    return LocationCatalog.from_mapping(TEST_LOCATIONS)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "promotion.sqlite")


@pytest.fixture
def test_config(db_path):
    return replace(
        load_config(),
        database_path=db_path,
        db_pool_size=4,
        log_retention=1000,
        recent_logs_limit=100,
        locations_file=None,
    )


@pytest.fixture
async def store(db_path):
    """Migrated store on a fresh database file."""
    promotion_store = await open_store(db_path, pool_size=4)
    yield promotion_store
    await promotion_store.close()


@pytest.fixture
async def services(catalog, store):
    return await build_services(catalog, store, log_retention=1000, recent_logs_limit=100)


@pytest.fixture
def app_services(catalog, db_path):
    """Services living on a background loop, as they do behind the WSGI server."""
    background = BackgroundLoop()
    background.start()

    async def _build():
        promotion_store = await open_store(db_path, pool_size=4)
        return await build_services(catalog, promotion_store, log_retention=1000, recent_logs_limit=100)

    built = run_coroutine_sync(_build())
    yield built
    run_coroutine_sync(built.close())
    background.stop()


@pytest.fixture
def app(test_config, app_services):
    flask_app = create_app(test_config, app_services, testing=True)
    yield flask_app


@pytest.fixture
def client(app):
    return app.test_client()
