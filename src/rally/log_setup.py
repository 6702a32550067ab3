"""
Logging setup for Rally scripts and services.

Library modules only ever call logging.getLogger(__name__); the process
entry point calls configure_logging() once to decide where records go.

Two formats, picked by settings.log_format:
- console: timestamped human-readable lines for development
- json:    one JSON object per line for log shippers
"""

import json
import logging
import sys
from datetime import datetime, timezone

from rally.config import Settings, settings as default_settings

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JsonFormatter(logging.Formatter):
    """Render each record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(settings: Settings | None = None) -> logging.Handler:
    """
    Configure the root logger from settings.

    Replaces any handlers already on the root logger, so calling it twice
    does not duplicate output. Returns the installed handler.
    """
    settings = settings or default_settings

    handler = logging.StreamHandler(sys.stderr)
    if settings.log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    logging.basicConfig(level=settings.log_level, handlers=[handler], force=True)
    return handler
