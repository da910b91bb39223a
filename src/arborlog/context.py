"""Caller-held logging context and the lazily built process-wide default.

Libraries should accept a :class:`LoggerContext` (or a logger taken from
one). Only the application's outermost layer needs the default context
returned by :func:`get_default_context`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from arborlog.config import ArborSettings
from arborlog.core.configurator import ConfigurationBuilder, default_configuration
from arborlog.core.diagnostics import DiagnosticSink, log_diagnostic
from arborlog.core.hierarchy import Hierarchy
from arborlog.core.logger import Logger, RootLogger
from arborlog.core.sources import load_configuration

logger = logging.getLogger(__name__)


class LoggerContext:
    """A hierarchy plus the builder and settings used to configure it.

    The first :meth:`get_logger` or :meth:`get_root_logger` call on an
    unconfigured context configures it: from ``settings.source.path`` when
    set, otherwise from the default configuration.
    """

    def __init__(
        self,
        hierarchy: Hierarchy | None = None,
        *,
        builder: ConfigurationBuilder | None = None,
        settings: ArborSettings | None = None,
        diagnostics: DiagnosticSink | None = None,
    ):
        self.diagnostics: DiagnosticSink = diagnostics or log_diagnostic
        self.hierarchy = hierarchy or Hierarchy(self.diagnostics)
        self.builder = builder or ConfigurationBuilder(diagnostics=self.diagnostics)
        self.settings = settings or ArborSettings()

    def __enter__(self) -> LoggerContext:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()

    @property
    def is_configured(self) -> bool:
        return self.hierarchy.configured

    def configure(self, configuration: Mapping[str, Any] | str | Path | None = None) -> None:
        """(Re)configure the hierarchy.

        ``configuration`` may be a configuration tree or the path of a
        TOML, JSON or XML file. Without one, the settings decide. A file
        that cannot be read raises :class:`~arborlog.errors.ConfigurationError`
        and leaves the current configuration in place.
        """
        if configuration is None:
            if self.settings.source.path:
                configuration = self.settings.source.path
            else:
                defaults = self.settings.defaults
                configuration = default_configuration(defaults.root_level, defaults.appender, defaults.layout)

        if isinstance(configuration, (str, Path)):
            configuration = load_configuration(configuration, self.diagnostics)
            logger.info("Loaded configuration with sections: %s", ", ".join(configuration))

        self.builder.configure(self.hierarchy, configuration)

    def _ensure_configured(self) -> None:
        if not self.hierarchy.configured:
            self.configure()

    def get_logger(self, name: str) -> Logger:
        self._ensure_configured()
        return self.hierarchy.get_logger(name)

    def get_root_logger(self) -> RootLogger:
        self._ensure_configured()
        return self.hierarchy.get_root_logger()

    def exists(self, name: str) -> bool:
        return self.hierarchy.exists(name)

    def current_loggers(self) -> list[Logger]:
        return self.hierarchy.current_loggers()

    def reset_configuration(self) -> None:
        """Close every appender and return the hierarchy to unconfigured."""
        self.hierarchy.reset()

    def shutdown(self) -> None:
        """Close every appender. Loggers and levels stay in place."""
        self.hierarchy.shutdown()


_default_context: LoggerContext | None = None


def get_default_context() -> LoggerContext:
    """The process-wide context, created on first use."""
    global _default_context
    if _default_context is None:
        _default_context = LoggerContext(settings=ArborSettings.load(Path.cwd()))
    return _default_context


def close_default_context() -> None:
    """Shut down and discard the process-wide context, if one exists."""
    global _default_context
    if _default_context is not None:
        _default_context.shutdown()
        _default_context = None


def get_logger(name: str) -> Logger:
    return get_default_context().get_logger(name)


def get_root_logger() -> RootLogger:
    return get_default_context().get_root_logger()


def configure(configuration: Mapping[str, Any] | str | Path | None = None) -> None:
    get_default_context().configure(configuration)


def reset_configuration() -> None:
    get_default_context().reset_configuration()


def shutdown() -> None:
    get_default_context().shutdown()
