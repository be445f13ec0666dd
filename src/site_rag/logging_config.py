"""Logging setup shared by the command-line scripts."""
from __future__ import annotations

import logging
import logging.config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Route all ``site_rag`` loggers to stderr with a single line format."""
    if isinstance(level, str):
        level = level.upper()

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"plain": {"format": LOG_FORMAT}},
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "plain",
                },
            },
            "root": {
                "level": "WARNING",
                "handlers": ["default"],
            },
            "loggers": {
                "site_rag": {"level": level, "propagate": True},
                "httpx": {"level": "WARNING"},
            },
        }
    )
