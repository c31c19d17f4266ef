"""Logging setup for the command-line entry point.

Library modules only create loggers with ``logging.getLogger(__name__)``;
handlers are installed here, by the CLI, and nowhere else.
"""

from __future__ import annotations

import json
import logging
import sys

_PACKAGE_LOGGER = "gitpilot"
_TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"


class JsonLogFormatter(logging.Formatter):
    """Formats each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: str = "warning", *, json_format: bool = False) -> logging.Logger:
    """Attach one stderr handler to the ``gitpilot`` logger and set its level."""
    logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonLogFormatter() if json_format else logging.Formatter(_TEXT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False
    return logger
