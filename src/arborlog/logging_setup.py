"""Stdlib logging for arborlog's own output.

Two channels are configured independently. The ``arborlog`` logger carries
the framework's internal debug messages and is quiet by default. The
``arborlog.diagnostics`` channel carries configuration and dispatch
diagnostics (see :mod:`arborlog.core.diagnostics`), has its own level and
format, and does not propagate. Both write to stderr so neither mixes with
appenders writing to stdout.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys

from arborlog.config import LogConfig
from arborlog.models.enums import DiagnosticSeverity

PACKAGE_LOGGER = "arborlog"
DIAGNOSTICS_LOGGER = "arborlog.diagnostics"


def parse_level(name: str, default: int) -> int:
    """Map a stdlib level name, or a diagnostic severity such as ``notice``."""
    try:
        return DiagnosticSeverity(name.lower()).logging_level
    except ValueError:
        level = logging.getLevelName(name.upper())
        return level if isinstance(level, int) else default


def setup_logging(log_config: LogConfig, *, verbose: bool = False) -> None:
    """Configure the framework and diagnostics channels.

    Args:
        log_config: Logging settings from ArborSettings.
        verbose: If True, the framework channel logs at DEBUG.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_logger.handlers:
        return

    level = logging.DEBUG if verbose else parse_level(log_config.level, logging.WARNING)
    package_logger.setLevel(level)
    _add_handlers(package_logger, log_config, log_config.format)

    setup_diagnostics(log_config)


def setup_diagnostics(log_config: LogConfig) -> logging.Logger:
    """(Re)configure the ``arborlog.diagnostics`` channel alone.

    With ``diagnostics`` disabled the channel gets a NullHandler, so
    anomalies reported through the default sink are dropped silently.
    """
    channel = logging.getLogger(DIAGNOSTICS_LOGGER)
    for handler in list(channel.handlers):
        channel.removeHandler(handler)
        handler.close()
    channel.propagate = False

    if not log_config.diagnostics:
        channel.addHandler(logging.NullHandler())
        return channel

    channel.setLevel(parse_level(log_config.diagnostics_level, logging.INFO))
    _add_handlers(channel, log_config, log_config.diagnostics_format)
    return channel


def _add_handlers(target: logging.Logger, log_config: LogConfig, fmt: str) -> None:
    formatter = logging.Formatter(fmt)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_config.file:
        if log_config.file_max_bytes > 0:
            handlers.append(logging.handlers.RotatingFileHandler(
                log_config.file,
                maxBytes=log_config.file_max_bytes,
                backupCount=log_config.file_backups,
                encoding="utf-8",
            ))
        else:
            handlers.append(logging.FileHandler(log_config.file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        target.addHandler(handler)
