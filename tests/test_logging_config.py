"""
Tests for logging configuration.
"""

import json
import logging
import os
import sys
from unittest.mock import MagicMock, patch

import pytest

from pubsub_destination.logging_config import JsonFormatter, setup_global_logging


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after the test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)
    for h in handlers:
        root_logger.addHandler(h)
    root_logger.setLevel(level)


class TestJsonFormatter:
    """Test JSON log formatting."""

    def test_formats_record_as_json(self):
        record = logging.LogRecord(
            "pubsub_destination", logging.ERROR, __file__, 1, "publish failed", None, None
        )
        record.extra_fields = {"topic_id": "orders", "status_code": 429}

        entry = json.loads(JsonFormatter().format(record))

        assert entry["severity"] == "ERROR"
        assert entry["name"] == "pubsub_destination"
        assert entry["message"] == "publish failed"
        assert entry["topic_id"] == "orders"
        assert entry["status_code"] == 429
        assert "timestamp" in entry

    def test_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            exc_info = sys.exc_info()
        record = logging.LogRecord(
            "pubsub_destination", logging.ERROR, __file__, 1, "close failed", None, exc_info
        )

        entry = json.loads(JsonFormatter().format(record))

        assert "RuntimeError: boom" in entry["exception"]


class TestSetupGlobalLogging:
    """Test environment-dependent logging setup."""

    def test_local_uses_json_formatter(self, restore_root_logger):
        with patch.dict(os.environ, {}, clear=True):
            setup_global_logging(logging.DEBUG)

        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)
        assert restore_root_logger.level == logging.DEBUG

    def test_cloud_run_uses_cloud_logging(self, restore_root_logger):
        mock_client = MagicMock()
        with patch.dict(os.environ, {"K_SERVICE": "pubsub-destination"}), patch(
            "google.cloud.logging.Client", return_value=mock_client
        ):
            setup_global_logging()

        mock_client.setup_logging.assert_called_once_with(log_level=logging.INFO)

    def test_cloud_run_falls_back_to_json(self, restore_root_logger):
        with patch.dict(os.environ, {"K_SERVICE": "pubsub-destination"}), patch(
            "google.cloud.logging.Client", side_effect=Exception("no credentials")
        ):
            setup_global_logging()

        assert isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)
