"""
Pytest configuration file for test setup and fixtures.
"""

import sys
from pathlib import Path

import pytest

# Ensure the src directory is in the Python path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """
    Remove database-related variables before each test, keep a developer's
    ``.env`` file from leaking into the run, and drop any process-wide handle
    a test left behind.
    """
    for key in ("DATABASE_URL", "DATABASE_LOGGING", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("authdb.config.load_dotenv", lambda *a, **kw: None)

    yield

    from authdb import db as db_module

    db_module.close_db()


@pytest.fixture
def memory_db():
    """An in-memory database with the auth schema created."""
    from authdb.db import open_database

    database = open_database(":memory:")
    database.create_schema()

    yield database

    database.close()
