"""Appender base contract: threshold, filter chain, layout and lifecycle."""

from __future__ import annotations

from typing import ClassVar

from arborlog.core.filters import Filter
from arborlog.core.layouts import Layout, SimpleLayout
from arborlog.core.options import Configurable
from arborlog.models.enums import DiagnosticSeverity, FilterDecision, Level
from arborlog.models.event import LoggingEvent


class Appender(Configurable):
    """A named destination for logging events.

    Subclasses implement :meth:`append`. Everything else, the closed check,
    threshold, filter chain and error containment, happens in
    :meth:`do_append`, which is what loggers call for every event.
    """

    requires_layout: ClassVar[bool] = True

    def __init__(self, name: str = ""):
        super().__init__()
        self.name = name
        self._closed = False
        self._filter: Filter | None = None
        self._threshold: Level | None = None
        self._layout: Layout | None = self.default_layout() if self.requires_layout else None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}{' closed' if self._closed else ''}>"

    # ── Per-event gate ───────────────────────────────────────────

    def do_append(self, event: LoggingEvent) -> None:
        if self._closed:
            return
        if not event.level.is_at_least(self.threshold):
            return
        try:
            link = self._filter
            while link is not None:
                decision = link.decide(event)
                if decision is FilterDecision.DENY:
                    return
                if decision is FilterDecision.ACCEPT:
                    break
                link = link.next
            self.append(event)
        except Exception as exc:
            self._warn(f"Failed writing event: {exc!r}", DiagnosticSeverity.ERROR)

    def append(self, event: LoggingEvent) -> None:
        raise NotImplementedError

    # ── Threshold ────────────────────────────────────────────────

    @property
    def threshold(self) -> Level:
        return Level.ALL if self._threshold is None else self._threshold

    @threshold.setter
    def threshold(self, value: Level | str | int | None) -> None:
        if value is None:
            self._threshold = None
            return
        parsed = Level.parse(value)
        if parsed is None:
            self._warn(f"Invalid value given for 'threshold' property: [{value}]. Property not changed.")
            return
        self._threshold = parsed

    def is_as_severe_as_threshold(self, level: Level) -> bool:
        return level.is_at_least(self.threshold)

    # ── Filters ──────────────────────────────────────────────────

    @property
    def filter(self) -> Filter | None:
        """Head of the filter chain."""
        return self._filter

    def add_filter(self, filter: Filter) -> None:
        if self._filter is None:
            self._filter = filter
        else:
            self._filter.add_next(filter)

    def clear_filters(self) -> None:
        self._filter = None

    # ── Layout ───────────────────────────────────────────────────

    def default_layout(self) -> Layout:
        return SimpleLayout()

    @property
    def layout(self) -> Layout | None:
        return self._layout

    @layout.setter
    def layout(self, layout: Layout) -> None:
        if self.requires_layout:
            self._layout = layout

    def render(self, event: LoggingEvent) -> str:
        if self._layout is None:
            return event.rendered_message or ""
        return self._layout.format(event)

    # ── Lifecycle ────────────────────────────────────────────────

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release resources. Safe to call more than once; never reopens."""
        if self._closed:
            return
        self._closed = True
        self.release()

    def release(self) -> None:
        """Hook for subclasses holding external resources."""

    def _diagnostic_source(self) -> str:
        return f"{type(self).__name__}:{self.name}" if self.name else type(self).__name__


class WriterAppender(Appender):
    """Appender that writes formatted text somewhere.

    The layout header goes out before the first event and the footer on
    close, provided something was written.
    """

    def __init__(self, name: str = ""):
        super().__init__(name)
        self._started = False

    def append(self, event: LoggingEvent) -> None:
        if not self._started:
            self._started = True
            header = self._layout.header() if self._layout else None
            if header:
                self.write(header)
        self.write(self.render(event))

    def release(self) -> None:
        if self._started:
            footer = self._layout.footer() if self._layout else None
            if footer:
                self.write(footer)
        self._started = False

    def write(self, text: str) -> None:
        raise NotImplementedError

