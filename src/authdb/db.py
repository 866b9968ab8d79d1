"""
Connection bootstrap for the auth database.

Responsibilities
----------------
1. Resolving where the SQLite file lives (``DATABASE_URL`` override, falling
   back to ``<cwd>/dev_db/auth.db``).
2. Creating the containing directory when it does not exist yet.
3. Opening the file through a SQLAlchemy engine bound to the ``authdb.models``
   schema, with SQL statement logging toggled by ``DATABASE_LOGGING``.
4. Publishing a single ``Database`` handle for the rest of the process.

Directory creation failures surface as ``OSError`` and open failures as
``StorageOpenError``. Neither is retried; initialization is all-or-nothing.
"""

from __future__ import annotations

import atexit
import os
from pathlib import Path
from typing import Optional

from sqlalchemy import MetaData, create_engine, event, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from authdb.config import Settings, load_settings
from authdb.errors import StorageOpenError
from authdb.models import Base
from authdb.util.logging import logger

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MEMORY_PATH = ":memory:"
DEFAULT_DB_DIR = "dev_db"
DEFAULT_DB_FILE = "auth.db"


# ---------------------------------------------------------------------------
# Handle
# ---------------------------------------------------------------------------


class Database:
    """An opened auth database: engine, bound schema and session factory."""

    def __init__(
        self,
        path: str,
        engine: Engine,
        metadata: MetaData,
        logging_enabled: bool = False,
    ):
        self.path = path
        self.engine = engine
        self.metadata = metadata
        self.logging_enabled = logging_enabled
        self._sessionmaker = sessionmaker(bind=engine)
        self._closed = False

    def session(self) -> Session:
        return self._sessionmaker()

    def create_schema(self) -> None:
        """Create the tables of the bound schema that do not exist yet."""
        self.metadata.create_all(self.engine)
        logger.info("Database schema ready at %s", self.path)

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            return conn.execute(text("SELECT 1")).scalar_one() == 1

    def close(self) -> None:
        if self._closed:
            return
        self.engine.dispose()
        self._closed = True
        logger.debug("Closed database at %s", self.path)

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self):
        return f"Database(path={self.path}, logging_enabled={self.logging_enabled})"


# ---------------------------------------------------------------------------
# Initialization steps
# ---------------------------------------------------------------------------


def resolve_db_path(override: Optional[str], cwd: Optional[str] = None) -> str:
    """Return *override* verbatim unless it is missing or blank.

    Blank values fall back to ``<cwd>/dev_db/auth.db`` as an absolute path.
    """
    if override and override.strip():
        return override
    base = cwd if cwd is not None else os.getcwd()
    return os.path.abspath(os.path.join(base, DEFAULT_DB_DIR, DEFAULT_DB_FILE))


def ensure_db_dir(path: str) -> None:
    """Create the parent directory of *path* (and its ancestors) if missing."""
    if path == MEMORY_PATH:
        return
    directory = os.path.dirname(path)
    if not directory or os.path.isdir(directory):
        return
    logger.info("Creating database directory %s", directory)
    Path(directory).mkdir(parents=True, exist_ok=True)


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _create_engine(path: str, logging_enabled: bool) -> Engine:
    if path == MEMORY_PATH:
        # A single shared connection, otherwise every session gets its own
        # empty in-memory database.
        engine = create_engine(
            "sqlite:///:memory:",
            echo=logging_enabled,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        # Built without URL parsing so "?" and "%xx" stay part of the file name.
        engine = create_engine(URL.create("sqlite", database=path), echo=logging_enabled)
    event.listen(engine, "connect", _enable_foreign_keys)
    return engine


def open_database(
    path: str,
    metadata: Optional[MetaData] = None,
    logging_enabled: bool = False,
) -> Database:
    """Open (creating if absent) the SQLite file at *path* and wrap it.

    The file is read once here so a corrupt or unreadable file fails now
    rather than on first use.
    """
    engine = _create_engine(path, logging_enabled)
    try:
        with engine.connect() as conn:
            conn.exec_driver_sql("PRAGMA schema_version")
    except DBAPIError as exc:
        engine.dispose()
        reason = str(exc.orig) if exc.orig is not None else str(exc)
        logger.error("Failed to open database at %s: %s", path, reason)
        raise StorageOpenError(path, reason) from exc

    return Database(
        path,
        engine,
        metadata if metadata is not None else Base.metadata,
        logging_enabled=logging_enabled,
    )


# ---------------------------------------------------------------------------
# Process-wide handle
# ---------------------------------------------------------------------------

_db: Database | None = None
_atexit_registered = False


def init_db(settings: Optional[Settings] = None) -> Database:
    """Build and publish the process-wide handle, or return the existing one."""
    global _db, _atexit_registered
    if _db is not None:
        return _db

    if settings is None:
        settings = load_settings()

    path = resolve_db_path(settings.database_url)
    logger.info("Using database at %s", path)

    try:
        ensure_db_dir(path)
    except OSError as exc:
        logger.error("Could not create database directory for %s: %s", path, exc)
        raise

    logger.debug(
        "SQL statement logging %s",
        "enabled" if settings.database_logging else "disabled",
    )
    _db = open_database(path, logging_enabled=settings.database_logging)

    if not _atexit_registered:
        atexit.register(close_db)
        _atexit_registered = True

    return _db


def get_db() -> Database:
    if _db is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _db


def close_db() -> None:
    """Dispose and forget the process-wide handle, if one was published."""
    global _db
    if _db is None:
        return
    _db.close()
    _db = None
