"""Shared infrastructure (logging, configuration files)."""

from .logging_utils import StructuredLogger, get_module_logger
from .logging_config import configure_logging
from .config_loader import ConfigLoader

__all__ = [
    "StructuredLogger",
    "get_module_logger",
    "configure_logging",
    "ConfigLoader",
]
