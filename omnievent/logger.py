"""Logging setup for OmniEvent.

Library modules log through logging.getLogger(__name__) and strategies
through "strategy.<class name>" loggers. Applications call configure_logging()
once to attach a console handler in text or JSON form.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from typing import Optional

from omnievent.configs.settings import Settings, get_settings

# ---------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------


class JsonFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k in ("strategy",):
            if hasattr(record, k):
                base[k] = getattr(record, k)

        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(base, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Format log records as human-readable text."""

    def format(self, record: logging.LogRecord) -> str:
        s = f"{record.levelname} {record.name} {record.getMessage()}"
        if record.exc_info:
            s += "\n" + self.formatException(record.exc_info)
        return s


# ---------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------

_HANDLER_NAME = "omnievent-console"


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Attach a console handler to the root logger.

    Safe to call more than once; the handler is replaced, not duplicated.

    Args:
        settings: Settings to read LOG_LEVEL and LOG_FORMAT from. Defaults to
            get_settings().

    Returns:
        The root logger
    """
    settings = settings or get_settings()
    root = logging.getLogger()

    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JsonFormatter() if settings.LOG_FORMAT == "json" else TextFormatter())
    root.addHandler(handler)

    level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL.upper()
    root.setLevel(level)
    return root
