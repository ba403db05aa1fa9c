"""
pytest configuration and fixtures for the employee service tests.
Each test gets its own SQLite database file.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from src.empservice.app import create_app
from src.empservice.config import Config, DatabaseInfo
from src.empservice.utils.database import Database


THEA = {
    "firstname": "Thea",
    "lastname": "Queen",
    "doj": "2014-10-19T23:08:24Z",
    "skills": "Go,C,Ruby",
}


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'employees.db'}"


@pytest.fixture
def config(db_url) -> Config:
    return Config(title="Employee Service (test)", database=DatabaseInfo(url=db_url))


@pytest.fixture
def app(config):
    return create_app(config)


@pytest.fixture
def client(app):
    """TestClient with the app lifespan running (table created)."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def lenient_client(app):
    """Like ``client`` but returns 500 responses instead of re-raising server errors."""
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest_asyncio.fixture
async def database(config):
    """An opened Database for exercising the crud layer directly."""
    db = Database(config.database)
    await db.open()
    yield db
    await db.close()


@pytest.fixture
def thea() -> dict:
    return dict(THEA)
