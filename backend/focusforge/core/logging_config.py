"""
Logging setup for FocusForge API.

One JSON object per line in deployed environments, a compact text format in
debug. Every record carries the request's correlation id; progression code
adds user_id / quest_id / power_up_id through `extra=`.
Call setup_logging() once at startup (in lifespan); the Celery worker calls it too.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from focusforge.core.config import get_settings

# Attributes copied from `extra=` into the JSON line when present
CONTEXT_FIELDS = (
    "user_id",
    "quest_id",
    "power_up_id",
    "path",
    "method",
    "status_code",
)

NOISY_LOGGERS = (
    "uvicorn.access",
    "httpx",
    "httpcore",
    "hpack",
    "h2",
    "h11",
    "watchfiles",
    "celery.redirected",
)


class CorrelationIDFilter(logging.Filter):
    """Stamp records with the correlation id of the request being served ("-" outside one)."""

    def filter(self, record: logging.LogRecord) -> bool:
        # Imported lazily: middleware imports identity, which must not pull logging setup
        from focusforge.core.middleware import get_correlation_id

        record.correlation_id = get_correlation_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """Structured formatter for log aggregation."""

    def __init__(self, service: str = "focusforge-api", environment: str = "development"):
        super().__init__()
        self.service = service
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service,
            "environment": self.environment,
        }

        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id and correlation_id != "-":
            entry["correlation_id"] = correlation_id

        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(level: Optional[str] = None) -> None:
    """Replace root handlers with a single stdout handler."""
    settings = get_settings()
    log_level = (level or settings.log_level or ("DEBUG" if settings.debug else "INFO")).upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIDFilter())
    if settings.debug:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-7s %(name)s [%(correlation_id)s] %(message)s",
                datefmt="%H:%M:%S",
            )
        )
    else:
        handler.setFormatter(
            JSONFormatter(service=settings.app_name, environment=settings.environment)
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
