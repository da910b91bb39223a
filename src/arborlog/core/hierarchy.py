"""The logger hierarchy: registry of named loggers under a single root."""

from __future__ import annotations

import logging

from arborlog.core.appender import Appender
from arborlog.core.diagnostics import DiagnosticSink, log_diagnostic
from arborlog.core.logger import ROOT_LOGGER_NAME, Logger, RootLogger
from arborlog.core.renderers import RendererMap
from arborlog.models.enums import Level

logger = logging.getLogger(__name__)

DEFAULT_ROOT_LEVEL = Level.DEBUG


class Hierarchy:
    """Owns the root logger, every named logger and the hierarchy threshold.

    Loggers are created on demand by :meth:`get_logger`. Creating
    ``"foo.bar"`` also creates ``"foo"`` if needed, so the registry always
    forms one connected tree whatever order names are requested in.
    """

    def __init__(self, diagnostics: DiagnosticSink | None = None):
        self.diagnostics: DiagnosticSink = diagnostics or log_diagnostic
        self.renderer_map = RendererMap()
        self._root = RootLogger(DEFAULT_ROOT_LEVEL, hierarchy=self)
        self._loggers: dict[str, Logger] = {ROOT_LOGGER_NAME: self._root}
        self._threshold = Level.ALL
        self._configured = False
        self._pool: dict[int, Appender] = {}
        self.generation = 0

    @property
    def root(self) -> RootLogger:
        return self._root

    def get_root_logger(self) -> RootLogger:
        return self._root

    def get_logger(self, name: str) -> Logger:
        """Return the logger called ``name``, creating it and its ancestors."""
        if not name:
            return self._root
        existing = self._loggers.get(name)
        if existing is not None:
            return existing

        parent: Logger = self._root
        for index, char in enumerate(name):
            if char == "." and index > 0:
                parent = self._child(name[:index], parent)
        return self._child(name, parent)

    def _child(self, name: str, parent: Logger) -> Logger:
        node = self._loggers.get(name)
        if node is None:
            node = Logger(name, hierarchy=self)
            node.set_parent(parent)
            self._loggers[name] = node
        return node

    def exists(self, name: str) -> bool:
        return name in self._loggers

    def current_loggers(self) -> list[Logger]:
        """Every named logger, root excluded, in creation order."""
        return [node for node in self._loggers.values() if node is not self._root]

    def all_loggers(self) -> list[Logger]:
        """The root followed by every named logger."""
        return list(self._loggers.values())

    def appenders(self) -> list[Appender]:
        """Each distinct appender attached anywhere in the tree."""
        seen: dict[int, Appender] = {}
        for node in self._loggers.values():
            for appender in node.appenders:
                seen.setdefault(id(appender), appender)
        return list(seen.values())

    def register_appender(self, appender: Appender) -> None:
        """Take ownership of ``appender`` so shutdown and reset close it,
        attached or not."""
        self._pool.setdefault(id(appender), appender)

    # ── Threshold ────────────────────────────────────────────────

    @property
    def threshold(self) -> Level:
        return self._threshold

    @threshold.setter
    def threshold(self, level: Level) -> None:
        self._threshold = level

    # ── Lifecycle ────────────────────────────────────────────────

    @property
    def configured(self) -> bool:
        return self._configured

    def mark_configured(self) -> None:
        self._configured = True
        self.generation += 1

    def shutdown(self) -> None:
        """Close every attached or registered appender. Loggers stay in place."""
        for appender in self.appenders():
            appender.close()
        for appender in self._pool.values():
            appender.close()

    def reset(self) -> None:
        """Return to the unconfigured state.

        Closes every appender, drops every named logger, restores the root to
        the default level and the threshold to ``ALL``. Safe to call
        repeatedly, including before any configuration.
        """
        self.shutdown()
        for node in self._loggers.values():
            node.remove_all_appenders()
        self._root.set_level(DEFAULT_ROOT_LEVEL)
        self._root.additive = True
        self._loggers = {ROOT_LOGGER_NAME: self._root}
        self._pool.clear()
        self._threshold = Level.ALL
        self.renderer_map.clear()
        if self._configured:
            logger.debug("Hierarchy reset after configuration generation %d", self.generation)
        self._configured = False

