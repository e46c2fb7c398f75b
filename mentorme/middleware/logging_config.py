"""
Logging setup for the API process.

Production writes one JSON object per line; development and tests get a
plain single-line format. LOG_LEVEL overrides the default level.
"""

import json
import logging
import os
import sys

READABLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Set by middleware.timing, the program service and utils.uploads
_EXTRA_FIELDS = (
    "request_id",
    "method",
    "path",
    "status",
    "duration_ms",
    "remote_addr",
    "program_id",
    "document_count",
)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, including the request/program extras."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key))
            for key in _EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(app):
    """Install a single stderr handler on the root logger for ``app``."""
    structured = not (app.config.get("DEBUG") or app.config.get("TESTING"))
    level_name = os.getenv("LOG_LEVEL", "INFO" if structured else "DEBUG").upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        JSONFormatter() if structured else logging.Formatter(READABLE_FORMAT, "%H:%M:%S")
    )

    # Tests build several apps in one process
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    app.logger.setLevel(level)

    for noisy in ("werkzeug", "sqlalchemy.engine", "flask_limiter"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
