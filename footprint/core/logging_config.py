"""
Process-wide logging setup.

Everything goes to stdout so the container platform captures it next to the
gunicorn access log. Call `configure_logging()` once at startup.
"""
from __future__ import annotations

import logging.config

from footprint.core.config import settings


def configure_logging(level: str | None = None) -> None:
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "footprint": {
                "handlers": ["stdout"],
                "level": (level or settings.LOG_LEVEL).upper(),
                "propagate": False,
            },
        },
    })
