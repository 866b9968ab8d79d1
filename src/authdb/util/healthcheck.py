import sys

from authdb import db
from authdb.util.logging import logger


def healthcheck() -> None:
    try:
        database = db.init_db()
        if not database.ping():
            raise Exception("Database did not answer SELECT 1.")
        logger.info("Healthcheck passed.")
        sys.exit(0)
    except Exception as e:
        logger.error("Healthcheck failed: %s", e, exc_info=True)
        sys.exit(1)
