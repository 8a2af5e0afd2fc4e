import json
import logging
import logging.config
import sys

from core.config import configs


class JsonFormatter(logging.Formatter):
    """
    Formatter for logging in JSON format.
    """

    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record)


def _library_loggers(handler: str, access_level: str) -> dict:
    """Loggers of third-party libraries that are too chatty at DEBUG."""
    return {
        "uvicorn": {"level": "INFO", "handlers": [handler], "propagate": False},
        "uvicorn.access": {"level": access_level, "handlers": [handler], "propagate": False},
        "uvicorn.error": {"level": "INFO", "handlers": [handler], "propagate": False},
        "httpx": {"level": "WARNING", "handlers": [handler], "propagate": False},
        "httpcore": {"level": "WARNING", "handlers": [handler], "propagate": False},
        "PIL": {"level": "WARNING", "handlers": [handler], "propagate": False},
    }


# -----------------------------------------------------------------------------
# Development Logging Configuration
# -----------------------------------------------------------------------------
# Console-friendly, readable text format.
DEV_LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "default",
        },
    },
    "loggers": {
        # Root Logger: Catches everything not caught by specific loggers
        "root": {
            "level": configs.LOG_LEVEL,
            "handlers": ["console"],
        },
        # Application Logger
        "geotag": {
            "level": configs.LOG_LEVEL,
            "handlers": ["console"],
            "propagate": False,
        },
        **_library_loggers("console", access_level="INFO"),
    },
}

# -----------------------------------------------------------------------------
# Production Logging Configuration
# -----------------------------------------------------------------------------
# JSON structured, machine-parsable, suitable for aggregation.
PROD_LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": JsonFormatter,
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        },
    },
    "handlers": {
        "console_json": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "json",
        },
    },
    "loggers": {
        "root": {
            "level": configs.LOG_LEVEL,
            "handlers": ["console_json"],
        },
        "geotag": {
            "level": configs.LOG_LEVEL,
            "handlers": ["console_json"],
            "propagate": False,
        },
        **_library_loggers("console_json", access_level="WARNING"),
    },
}


def setup_logging():
    """
    Set up logging configuration based on the environment.
    """
    env = configs.ENVIRONMENT.lower()

    if env == "production":
        log_config = PROD_LOGGING_CONFIG
    else:
        log_config = DEV_LOGGING_CONFIG

    logging.config.dictConfig(log_config)

    logger = logging.getLogger("geotag")
    logger.info(f"Logging setup complete for {env} environment with level {configs.LOG_LEVEL}")
