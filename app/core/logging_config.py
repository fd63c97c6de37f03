"""Logging setup for the API process and CLI scripts."""

import logging
import logging.config
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


class HealthCheckFilter(logging.Filter):
    """Drop uvicorn access log lines for the health endpoint."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "uvicorn.access":
            message = record.getMessage()
            if "/health" in message and "GET" in message:
                return False
        return True


def get_logging_config(settings: "Settings") -> dict[str, Any]:
    """Build a dictConfig for the app and uvicorn loggers."""
    handlers: dict[str, dict[str, Any]] = {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": "ext://sys.stdout",
        },
        "access": {
            "class": "logging.StreamHandler",
            "formatter": "access",
            "stream": "ext://sys.stdout",
            "filters": ["health_check_filter"],
        },
    }
    app_handlers = ["default"]
    if settings.LOG_FILE:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "default",
            "filename": settings.LOG_FILE,
            "encoding": "utf-8",
        }
        app_handlers.append("file")
    if settings.LOG_ERROR_FILE:
        handlers["error_file"] = {
            "class": "logging.FileHandler",
            "formatter": "default",
            "filename": settings.LOG_ERROR_FILE,
            "encoding": "utf-8",
            "level": "ERROR",
        }
        app_handlers.append("error_file")

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"health_check_filter": {"()": HealthCheckFilter}},
        "formatters": {
            "default": {"format": LOG_FORMAT, "datefmt": LOG_DATE_FORMAT},
            "access": {"format": "%(message)s"},
        },
        "handlers": handlers,
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.error": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
            "app": {"handlers": app_handlers, "level": settings.LOG_LEVEL, "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": ["default"]},
    }


def configure_logging(settings: "Settings") -> None:
    """Apply the logging configuration once at process start."""
    logging.config.dictConfig(get_logging_config(settings))
