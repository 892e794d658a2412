"""Centralized logging configuration for lexdesk services.

Provides consistent, configurable logging with environment-based control
over verbosity, format and SQL logging.
"""

import logging
import logging.config
import os
from typing import TYPE_CHECKING, Any, Dict, Optional
from enum import Enum

if TYPE_CHECKING:
    from .settings import LexdeskSettings


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogVerbosity(str, Enum):
    """Log verbosity modes."""
    QUIET = "QUIET"      # Only errors and critical
    NORMAL = "NORMAL"    # Warnings and above
    VERBOSE = "VERBOSE"  # Info level logging
    DEBUG = "DEBUG"      # Full debug logging


class LogFormat(str, Enum):
    """Log format options."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


FORMAT_STRINGS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
}


def get_log_level_from_verbosity(verbosity: str) -> str:
    """Map verbosity mode to log level."""
    verbosity_map = {
        LogVerbosity.QUIET: LogLevel.ERROR.value,
        LogVerbosity.NORMAL: LogLevel.WARNING.value,
        LogVerbosity.VERBOSE: LogLevel.INFO.value,
        LogVerbosity.DEBUG: LogLevel.DEBUG.value,
    }
    try:
        return verbosity_map[LogVerbosity(verbosity.upper())]
    except ValueError:
        return LogLevel.WARNING.value


class LoggingConfig:
    """Centralized logging configuration manager."""

    # Modules that emit one line per query; kept at WARNING unless SQL logging is on
    SQL_MODULES = [
        "lexdesk.features.tenancy.services.query_executor",
        "lexdesk.database.connection",
    ]

    # Third-party modules that should only log errors
    ERROR_ONLY_MODULES = [
        "httpx",
        "httpcore",
        "asyncio",
    ]

    @classmethod
    def build_config(
        cls,
        log_verbosity: str = "NORMAL",
        log_format: str = "simple",
        enable_sql_logging: bool = False,
        log_level: str = "",
    ) -> Dict[str, Any]:
        """Build a ``logging.config.dictConfig`` dictionary."""
        effective_log_level = (log_level or get_log_level_from_verbosity(log_verbosity)).upper()

        try:
            format_string = FORMAT_STRINGS[LogFormat(log_format.lower())]
        except ValueError:
            format_string = FORMAT_STRINGS[LogFormat.SIMPLE]

        logging_config: Dict[str, Any] = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": format_string,
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": effective_log_level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": effective_log_level,
                "handlers": ["console"],
            },
            "loggers": {}
        }

        for module in cls.ERROR_ONLY_MODULES:
            logging_config["loggers"][module] = {
                "level": "ERROR",
                "handlers": ["console"],
                "propagate": False,
            }

        sql_level = "DEBUG" if enable_sql_logging else "WARNING"
        for module in cls.SQL_MODULES + ["asyncpg"]:
            logging_config["loggers"][module] = {
                "level": sql_level,
                "handlers": ["console"],
                "propagate": False,
            }

        return logging_config

    @classmethod
    def configure(cls, settings: Optional["LexdeskSettings"] = None) -> None:
        """Configure logging from settings, or from environment variables.

        Without settings, reads ``LOG_LEVEL`` (overrides verbosity when set),
        ``LOG_VERBOSITY``, ``LOG_FORMAT`` and ``ENABLE_SQL_LOGGING``.
        """
        if settings is not None:
            logging_config = cls.build_config(
                log_verbosity=settings.log_verbosity,
                log_format=settings.log_format,
                enable_sql_logging=settings.enable_sql_logging,
                log_level=settings.log_level or "",
            )
        else:
            logging_config = cls.build_config(
                log_verbosity=os.getenv("LOG_VERBOSITY", "NORMAL"),
                log_format=os.getenv("LOG_FORMAT", "simple"),
                enable_sql_logging=os.getenv("ENABLE_SQL_LOGGING", "false").lower() == "true",
                log_level=os.getenv("LOG_LEVEL", ""),
            )
        logging.config.dictConfig(logging_config)

        logger = logging.getLogger(__name__)
        logger.debug(f"Logging configured: level={logging_config['root']['level']}")

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a logger for the given module name."""
        return logging.getLogger(name)


def setup_logging() -> None:
    """Setup logging configuration from environment variables.

    Call once at application startup.
    """
    LoggingConfig.configure()


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger."""
    return LoggingConfig.get_logger(name)
