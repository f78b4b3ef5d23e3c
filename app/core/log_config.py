"""Logging configuration."""

import logging.config

from app.config import settings


def build_logging_config(level: str | None = None) -> dict:
    level = level or settings.log_level
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
            },
        },
        "handlers": {
            "default": {
                "formatter": "detailed" if settings.debug else "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "app": {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "sqlalchemy": {"handlers": ["default"], "level": "WARNING", "propagate": False},
        },
    }


def configure_logging(level: str | None = None) -> None:
    """Apply the logging configuration once at start-up."""
    logging.config.dictConfig(build_logging_config(level))
