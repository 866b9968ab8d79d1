"""
Startup configuration for the auth database.

Values are read once from the process environment (a ``.env`` file is loaded
first for local development; variables already set in the environment win)
and frozen into a ``Settings`` instance that is handed to ``init_db``.

Environment variables
---------------------
``DATABASE_URL``      – Path of the SQLite file. Blank or unset falls back to
                        ``<cwd>/dev_db/auth.db``.
``DATABASE_LOGGING``  – ``"true"`` turns on SQL statement logging. Any other
                        value, including ``"True"`` or ``"1"``, leaves it off.
``LOG_LEVEL``         – Level of the ``authdb`` logger (default: ``INFO``).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str] = None
    database_logging: bool = False
    log_level: str = "INFO"


def parse_flag(value: Optional[str]) -> bool:
    """Return True only for the exact string ``"true"``."""
    return value == "true"


def load_settings(env_path: str | Path | None = None) -> Settings:
    load_dotenv(dotenv_path=env_path)

    return Settings(
        database_url=os.environ.get("DATABASE_URL"),
        database_logging=parse_flag(os.environ.get("DATABASE_LOGGING")),
        log_level=os.environ.get("LOG_LEVEL") or "INFO",
    )
