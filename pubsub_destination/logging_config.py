"""
Logging configuration for the Pub/Sub destination.

The adapter only logs through module loggers; hosts that do not configure
logging themselves can call setup_global_logging():
- Cloud Run: google-cloud-logging with trace correlation
- Local/Test: Python logging to stdout with JSON formatting
"""

import json
import logging
import os
from datetime import UTC, datetime


class JsonFormatter(logging.Formatter):
    """
    JSON log formatter.

    Keeps local logs structured like the entries Cloud Logging produces.
    Structured context passed as extra={"extra_fields": {...}} is merged
    into the top level of the entry.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_object = {
            "timestamp": datetime.now(UTC).isoformat(),
            "severity": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "extra_fields") and isinstance(record.extra_fields, dict):
            log_object.update(record.extra_fields)

        if record.exc_info:
            log_object["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_object, default=str)


def setup_global_logging(level: int = logging.INFO) -> None:
    """
    Configure root logging based on environment.

    Cloud Run is detected through the K_SERVICE env var. If Cloud Logging
    cannot be initialized there, falls back to the local JSON setup.
    """
    if os.getenv("K_SERVICE") is not None:
        try:
            import google.cloud.logging

            client = google.cloud.logging.Client()
            client.setup_logging(log_level=level)
            logging.info("Cloud Logging initialized for Cloud Run.")
            return
        except Exception as e:
            _setup_json_logging(level)
            logging.warning(f"Cloud Logging setup failed, using JSON logging: {e}")
            return

    _setup_json_logging(level)


def _setup_json_logging(level: int) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    # Replace existing handlers to avoid duplicate logs
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
