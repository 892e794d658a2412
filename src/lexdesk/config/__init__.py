"""Configuration for lexdesk: settings, logging and constants."""

from .settings import LexdeskSettings, get_settings
from .logging_config import LoggingConfig, setup_logging, get_logger

__all__ = [
    "LexdeskSettings",
    "get_settings",
    "LoggingConfig",
    "setup_logging",
    "get_logger",
]
