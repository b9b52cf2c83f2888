"""
Logging configuration for Cloud Run and local environments.

Automatically detects Cloud Run environment and configures appropriate logging:
- Cloud Run: google-cloud-logging with trace correlation
- Local/Test: Standard Python logging to stdout with JSON formatting
"""

import json
import logging
import os
from datetime import UTC, datetime


# Attributes every LogRecord has; anything else came in through ``extra=``
_RESERVED_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}

# Never written to the log, even if passed in ``extra=``
_REDACTED_KEYS = {"access_token", "app_secret", "client_secret", "code"}


class JsonFormatter(logging.Formatter):
    """
    Custom JSON log formatter.

    Ensures that logs in local development are structured JSON,
    similar to what Google Cloud Logging expects. Context passed with
    ``extra=`` becomes top-level fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_object = {
            "timestamp": datetime.now(UTC).isoformat(),
            "severity": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            log_object[key] = "[redacted]" if key in _REDACTED_KEYS else value

        if record.exc_info:
            log_object["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_object, default=str)


def setup_global_logging() -> None:
    """
    Configure global logging based on environment.

    When running in Cloud Run (K_SERVICE env var is set):
    - Uses google-cloud-logging for structured logs with trace correlation.

    When running locally or in tests:
    - Uses standard Python logging with the JSON formatter on stdout.
    - LOG_LEVEL sets the root level (default INFO).
    """
    is_cloud_run = os.getenv("K_SERVICE") is not None
    level = os.getenv("LOG_LEVEL", "INFO").upper()

    if is_cloud_run:
        try:
            import google.cloud.logging

            client = google.cloud.logging.Client()
            client.setup_logging(log_level=getattr(logging, level, logging.INFO))
            logging.info("Cloud Logging initialized for Cloud Run.")
        except Exception as e:
            # Fallback for Cloud Logging import/initialization errors
            logging.basicConfig(
                level=level,
                format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            )
            logging.warning(f"Cloud Logging setup failed, using basic config: {e}")
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())

        root_logger = logging.getLogger()
        root_logger.addHandler(handler)
        root_logger.setLevel(level)

        # Remove default handlers to avoid duplicate logs
        if len(root_logger.handlers) > 1:
            for h in root_logger.handlers[:-1]:
                root_logger.removeHandler(h)
