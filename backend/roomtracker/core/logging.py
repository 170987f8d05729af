# backend/roomtracker/core/logging.py

import logging
import os
import sys

DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Third-party loggers that only matter when something breaks
QUIET_LOGGERS = ("jose", "httpx", "uvicorn.access")


def setup_logging() -> None:
    """
    Send application logs to stdout at ``LOG_LEVEL`` (default INFO).

    Under uvicorn the root logger may already have a handler; then only the
    level is applied.
    """
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name)
