"""arborlog: hierarchical loggers, appenders, filters and layouts."""

from arborlog.context import (
    LoggerContext,
    close_default_context,
    configure,
    get_default_context,
    get_logger,
    get_root_logger,
    reset_configuration,
    shutdown,
)
from arborlog.core.configurator import ConfigurationBuilder
from arborlog.core.hierarchy import Hierarchy
from arborlog.core.logger import Logger, RootLogger
from arborlog.core.mdc import MDC, NDC
from arborlog.errors import ArborError, ConfigurationError
from arborlog.models import Level, LoggingEvent

__version__ = "0.1.0"

__all__ = [
    "ArborError",
    "ConfigurationBuilder",
    "ConfigurationError",
    "Hierarchy",
    "Level",
    "Logger",
    "LoggerContext",
    "LoggingEvent",
    "MDC",
    "NDC",
    "RootLogger",
    "close_default_context",
    "configure",
    "get_default_context",
    "get_logger",
    "get_root_logger",
    "reset_configuration",
    "shutdown",
]
