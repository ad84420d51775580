import logging
import os
from logging.handlers import RotatingFileHandler

from config_paths import LOG_PATH, LOG_LEVEL_DEFAULT

LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 3
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_level(level=None) -> int:
    """Env var wins over config; unknown names fall back to the default."""
    name = os.environ.get("CURLEW_LOG_LEVEL") or level or LOG_LEVEL_DEFAULT
    value = logging.getLevelName(str(name).strip().upper())
    if isinstance(value, int):
        return value
    return logging.getLevelName(LOG_LEVEL_DEFAULT)


def configure_logging(path=LOG_PATH, level=None):
    """Attach a rotating file handler to the root logger.

    curses owns the terminal, so nothing is written to stderr. Calling this
    twice replaces the previous handler instead of stacking another one.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_curlew", False):
            root.removeHandler(handler)
            handler.close()

    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        handler = RotatingFileHandler(
            path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
        )
    except OSError:
        handler = logging.NullHandler()

    handler._curlew = True
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(resolve_level(level))
    return handler
