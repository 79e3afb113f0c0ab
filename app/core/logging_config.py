from __future__ import annotations

import logging
import logging.handlers
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Request lines come from the app middleware, so uvicorn's access log is muted too.
_LIBRARY_LEVELS = {
    "sqlalchemy.engine": logging.WARNING,
    "aiohttp.access": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    "passlib": logging.ERROR,
}


def _file_handler(log_dir: str, filename: str) -> logging.Handler:
    os.makedirs(log_dir, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        filename=os.path.join(log_dir, filename),
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )


def configure_logging(*, log_dir: str, level: str = "INFO", filename: str = "senda.log") -> None:
    """Console + rotating file on the root logger; safe to call more than once."""

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name, lib_level in _LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(lib_level)

    if root.handlers:
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in (logging.StreamHandler(), _file_handler(log_dir, filename)):
        handler.setFormatter(formatter)
        root.addHandler(handler)
