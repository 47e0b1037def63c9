# app/utils/logger.py
"""
Logging for the visitor pass portal.

Everything goes to the console and to logs/portal.log. Workflow actions
forwarded upstream (approve, reject, route, suspend ...) are also written to
logs/actions.log, a plain-text companion to the action_log table that
survives a wiped database. The upstream HTTP client libraries are capped at
WARNING: a single visitor list load issues a dozen requests.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from app.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_DIR = settings.LOG_DIR or os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs"
)

ACTION_LOGGER = "app.services.action_service"
HTTP_CLIENT_LOGGERS = ("httpx", "httpcore", "urllib3")

_FORMAT = logging.Formatter(
    fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

_configured = False


def _rotating_file(filename: str, backups: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=os.path.join(LOG_DIR, filename),
        maxBytes=5 * 1024 * 1024,
        backupCount=backups,
        encoding="utf-8",
    )
    handler.setFormatter(_FORMAT)
    return handler


def _configure_logging():
    global _configured
    if _configured:
        return
    _configured = True
    os.makedirs(LOG_DIR, exist_ok=True)

    console = logging.StreamHandler()
    console.setFormatter(_FORMAT)

    portal_file = _rotating_file("portal.log", backups=5)

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    root.addHandler(console)
    root.addHandler(portal_file)

    # Audit lines are kept longer than general output
    actions_file = _rotating_file("actions.log", backups=20)
    actions_file.setLevel(logging.INFO)
    logging.getLogger(ACTION_LOGGER).addHandler(actions_file)

    for name in HTTP_CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Named logger for a portal module: get_logger(__name__) at module top."""
    _configure_logging()
    return logging.getLogger(name)
