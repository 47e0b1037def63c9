"""Unit tests for logging setup."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import logging
from logging.handlers import RotatingFileHandler

from app.utils.logger import ACTION_LOGGER, HTTP_CLIENT_LOGGERS, get_logger


def file_names(logger):
    return [os.path.basename(h.baseFilename) for h in logger.handlers if isinstance(h, RotatingFileHandler)]


class TestLogger:
    def test_workflow_actions_get_their_own_file(self):
        get_logger(__name__)
        assert file_names(logging.getLogger(ACTION_LOGGER)) == ["actions.log"]
        assert "portal.log" in file_names(logging.getLogger())

    def test_setup_runs_once(self):
        get_logger("a")
        before = len(logging.getLogger().handlers)
        get_logger("b")
        assert len(logging.getLogger().handlers) == before

    def test_http_clients_are_quiet(self):
        get_logger(__name__)
        for name in HTTP_CLIENT_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
