"""Logger nodes and the event dispatch protocol.

A logger's effective level is its own level, or the nearest ancestor's. An
enabled log call builds one :class:`LoggingEvent`, hands it to the logger's
appenders, then offers the same event to the parent while additivity holds.
A logger that is not enabled for the call does not build an event but still
forwards the call upward, so each ancestor applies its own effective level.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from arborlog.core.appender import Appender
from arborlog.core.diagnostics import Diagnostic, DiagnosticSink, log_diagnostic
from arborlog.models.enums import DiagnosticSeverity, Level
from arborlog.models.event import LoggingEvent

if TYPE_CHECKING:
    from arborlog.core.hierarchy import Hierarchy

ROOT_LOGGER_NAME = "root"


class Logger:
    """A named node in the logger hierarchy."""

    def __init__(self, name: str, *, hierarchy: Hierarchy | None = None):
        self._name = name
        self._hierarchy = hierarchy
        self._level: Level | None = None
        self._parent: Logger | None = None
        self._appenders: dict[str, Appender] = {}
        self.additive = True

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._name!r} level={self._level}>"

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> Logger | None:
        return self._parent

    @property
    def hierarchy(self) -> Hierarchy | None:
        return self._hierarchy

    def set_parent(self, parent: Logger) -> None:
        self._parent = parent

    # ── Logging ──────────────────────────────────────────────────

    def log(self, level: Level, message: Any, exc: BaseException | None = None) -> None:
        self._log(level, message, exc, self._name)

    def _log(self, level: Level, message: Any, exc: BaseException | None, origin: str) -> None:
        # ``origin`` is the logger the call was made on; an ancestor that
        # ends up building the event still records it under that name.
        event = None
        if self.is_enabled_for(level):
            event = self._make_event(origin, level, message, exc)
            self.call_appenders(event)

        if self._parent is not None and self.additive:
            if event is not None:
                self._parent.log_event(event)
            else:
                self._parent._log(level, message, exc, origin)

    def log_event(self, event: LoggingEvent) -> None:
        """Dispatch an event that was already built further down the tree."""
        if self.is_enabled_for(event.level):
            self.call_appenders(event)

        if self._parent is not None and self.additive:
            self._parent.log_event(event)

    def call_appenders(self, event: LoggingEvent) -> None:
        for appender in list(self._appenders.values()):
            appender.do_append(event)

    def trace(self, message: Any, exc: BaseException | None = None) -> None:
        self.log(Level.TRACE, message, exc)

    def debug(self, message: Any, exc: BaseException | None = None) -> None:
        self.log(Level.DEBUG, message, exc)

    def info(self, message: Any, exc: BaseException | None = None) -> None:
        self.log(Level.INFO, message, exc)

    def warn(self, message: Any, exc: BaseException | None = None) -> None:
        self.log(Level.WARN, message, exc)

    warning = warn

    def error(self, message: Any, exc: BaseException | None = None) -> None:
        self.log(Level.ERROR, message, exc)

    def fatal(self, message: Any, exc: BaseException | None = None) -> None:
        self.log(Level.FATAL, message, exc)

    def assert_log(self, assertion: bool = True, message: str = "") -> None:
        """Log ``message`` at ERROR when ``assertion`` is false."""
        if not assertion:
            self.error(message)

    def _make_event(self, origin: str, level: Level, message: Any, exc: BaseException | None) -> LoggingEvent:
        renderers = self._hierarchy.renderer_map if self._hierarchy is not None else None
        return LoggingEvent(origin, level, message, exc, renderers=renderers)

    # ── Levels ───────────────────────────────────────────────────

    @property
    def level(self) -> Level | None:
        """The level set on this logger, or None when it inherits."""
        return self._level

    @level.setter
    def level(self, level: Level | None) -> None:
        self.set_level(level)

    def set_level(self, level: Level | None) -> None:
        self._level = level

    def get_effective_level(self) -> Level | None:
        """Own level, else the nearest ancestor's.

        Always defined for loggers attached to a hierarchy; a detached logger
        without a level in its chain yields None.
        """
        logger: Logger | None = self
        while logger is not None:
            if logger._level is not None:
                return logger._level
            logger = logger._parent
        return None

    def is_enabled_for(self, level: Level) -> bool:
        hierarchy = self._hierarchy
        if hierarchy is not None and not level.is_at_least(hierarchy.threshold):
            return False
        effective = self.get_effective_level()
        return effective is not None and level.is_at_least(effective)

    def is_trace_enabled(self) -> bool:
        return self.is_enabled_for(Level.TRACE)

    def is_debug_enabled(self) -> bool:
        return self.is_enabled_for(Level.DEBUG)

    def is_info_enabled(self) -> bool:
        return self.is_enabled_for(Level.INFO)

    def is_warn_enabled(self) -> bool:
        return self.is_enabled_for(Level.WARN)

    def is_error_enabled(self) -> bool:
        return self.is_enabled_for(Level.ERROR)

    def is_fatal_enabled(self) -> bool:
        return self.is_enabled_for(Level.FATAL)

    # ── Appenders ────────────────────────────────────────────────

    @property
    def appenders(self) -> list[Appender]:
        """Attached appenders in attachment order."""
        return list(self._appenders.values())

    def add_appender(self, appender: Appender) -> None:
        """Attach ``appender``, closing any other appender of the same name."""
        previous = self._appenders.get(appender.name)
        if previous is not None and previous is not appender:
            previous.close()
            del self._appenders[appender.name]
        self._appenders[appender.name] = appender

    def get_appender(self, name: str) -> Appender | None:
        return self._appenders.get(name)

    def is_attached(self, appender: Appender) -> bool:
        return self._appenders.get(appender.name) is appender

    def remove_appender(self, appender: Appender | str) -> None:
        """Detach and close an appender given by instance or name."""
        name = appender.name if isinstance(appender, Appender) else appender
        attached = self._appenders.pop(name, None)
        if attached is None:
            self._report(f"Cannot remove appender [{name}]: not attached to logger [{self._name}].",
                         DiagnosticSeverity.NOTICE)
            return
        attached.close()

    def remove_all_appenders(self) -> None:
        for name in list(self._appenders):
            self.remove_appender(name)

    # ── Diagnostics ──────────────────────────────────────────────

    @property
    def diagnostics(self) -> DiagnosticSink:
        if self._hierarchy is not None:
            return self._hierarchy.diagnostics
        return log_diagnostic

    def _report(self, message: str, severity: DiagnosticSeverity = DiagnosticSeverity.WARNING) -> None:
        self.diagnostics(Diagnostic(message, severity, source=f"logger:{self._name}"))


class RootLogger(Logger):
    """The root of a hierarchy: always has a level, never has a parent."""

    def __init__(self, level: Level | None = None, *, hierarchy: Hierarchy | None = None):
        super().__init__(ROOT_LOGGER_NAME, hierarchy=hierarchy)
        self._level = Level.ALL if level is None else level

    def get_effective_level(self) -> Level:
        return self._level

    def set_level(self, level: Level | None) -> None:
        if level is None:
            self._report("Cannot set the root logger's level to None.")
            return
        self._level = level

    def set_parent(self, parent: Logger) -> None:
        self._report("The root logger cannot have a parent.")
