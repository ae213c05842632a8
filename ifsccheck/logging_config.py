"""
logging_config.py - Logging Setup
=================================
One place to configure logging for the CLI, the console and the HTTP server.

Log lines look like:

    14:30:45 [INFO] Processed 20 out of 45

The uvicorn loggers share the same handler and format; uvicorn's per-request
access log is kept at WARNING.

Usage:
------
    configure_logging()                 # INFO
    configure_logging(logging.DEBUG)    # --debug
"""

from __future__ import annotations

import logging
from logging.config import dictConfig


def configure_logging(level: int = logging.INFO) -> None:
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s [%(levelname)s] %(message)s",
                    "datefmt": "%H:%M:%S",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                }
            },
            "loggers": {
                "": {"handlers": ["console"], "level": level},
                "uvicorn": {"handlers": ["console"], "level": level, "propagate": False},
                "uvicorn.access": {"handlers": ["console"], "level": logging.WARNING, "propagate": False},
            },
        }
    )
