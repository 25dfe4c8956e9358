"""
Structured logging utilities for comprehensive application logging
"""

import json
import logging
import sys
from datetime import datetime, timezone

from .config import LoggingSettings


# Operator-visible channel for journey audit gaps (status stored, step missing)
AUDIT_GAP_LOGGER = "clinicqueue.audit_gap"
# Best-effort notification / activity log failures
SIDE_EFFECTS_LOGGER = "clinicqueue.side_effects"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "process": record.process,
            "thread": record.thread,
        }

        # Add exception info if present
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Add extra fields if present
        if hasattr(record, "extra_data"):
            log_obj.update(record.extra_data)

        return json.dumps(log_obj, default=str)


def configure_logging(settings: LoggingSettings) -> None:
    """Configure the ``clinicqueue`` logger tree from settings."""
    root = logging.getLogger("clinicqueue")
    root.setLevel(settings.level)
    root.handlers.clear()

    handler: logging.Handler
    if settings.file_path:
        handler = logging.FileHandler(settings.file_path)
    else:
        handler = logging.StreamHandler(sys.stdout)

    if settings.format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    root.addHandler(handler)

