"""Logging setup for scripts and applications embedding the client.

The library itself only emits records on ``supastorage.*`` loggers; call
``setup_logging`` from an entry point to route them somewhere.
"""

import json
import logging
from logging.config import dictConfig

LIBRARY_LOGGER = "supastorage"
STARTUP_LOGGER = "supastorage.startup"


def setup_logging(level: str = "INFO", *, json_output: bool = True) -> None:
    """Attach console handlers to the library loggers.

    Args:
        level: Level for both library loggers.
        json_output: Emit request records as JSON lines; plain text otherwise.
    """
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": JsonFormatter,
                },
                "plain": {
                    "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
                },
            },
            "handlers": {
                "requests_console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json" if json_output else "plain",
                },
                "startup_console": {
                    "class": "logging.StreamHandler",
                    "formatter": "plain",
                },
            },
            "loggers": {
                LIBRARY_LOGGER: {
                    "handlers": ["requests_console"],
                    "level": level,
                    "propagate": False,
                },
                STARTUP_LOGGER: {
                    "handlers": ["startup_console"],
                    "level": level,
                    "propagate": False,
                },
            },
        }
    )


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra={"extra": {...}}`` fields are merged in."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "extra") and isinstance(record.extra, dict):
            payload.update(record.extra)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)
