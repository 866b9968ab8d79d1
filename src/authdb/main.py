import sys
from typing import Optional

from authdb import db
from authdb.config import load_settings
from authdb.util.healthcheck import healthcheck
from authdb.util.logging import logger, set_level


def initialize() -> None:
    settings = load_settings()
    set_level(settings.log_level)

    database = db.init_db(settings)
    logger.info("Creating tables...")
    database.create_schema()


def main(argv: Optional[list[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    command = args[0] if args else "init"

    if command == "healthcheck":
        healthcheck()
    elif command == "init":
        initialize()
    else:
        logger.error("Unknown command %r (expected 'init' or 'healthcheck').", command)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
