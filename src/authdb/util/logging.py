import logging
import os

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DEFAULT_LEVEL = "INFO"

logger = logging.getLogger("authdb")

if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(_handler)


def set_level(name: str | None) -> str:
    """Apply *name* to the package logger, falling back to INFO when unknown.

    Returns the level name that was applied.
    """
    level = (name or _DEFAULT_LEVEL).strip().upper()
    if level not in logging.getLevelNamesMapping():
        logger.setLevel(_DEFAULT_LEVEL)
        logger.warning("Unknown log level %r, using %s.", name, _DEFAULT_LEVEL)
        return _DEFAULT_LEVEL
    logger.setLevel(level)
    return level


set_level(os.getenv("LOG_LEVEL"))
