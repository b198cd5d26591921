"""
Tests for setup_logging.
"""

from __future__ import annotations

import inspect
import logging
import sys

import pytest
import structlog

from sigil.config import LoggingConfig
from sigil.telemetry.logging import setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestSetupLogging:
    def test_single_stderr_handler(self, restore_logging):
        setup_logging(LoggingConfig(level="debug", format="json"))
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.handlers[0].stream is sys.stderr
        assert root.level == logging.DEBUG

    def test_configured_from_logging_config_only(self):
        assert list(inspect.signature(setup_logging).parameters) == ["config"]

    def test_unknown_level_falls_back_to_info(self, restore_logging):
        setup_logging(LoggingConfig(level="chatty"))
        assert logging.getLogger().level == logging.INFO

    def test_json_output(self, restore_logging, capsys: pytest.CaptureFixture[str]):
        setup_logging(LoggingConfig(format="json"))
        structlog.get_logger().bind(system="ipc").warning("ipc_request_timeout", timeout_ms=5)
        err = capsys.readouterr().err
        assert '"event": "ipc_request_timeout"' in err
        assert '"system": "ipc"' in err
