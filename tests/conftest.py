"""Shared test fixtures for arborlog."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from arborlog.context import close_default_context
from arborlog.core.appenders import MemoryAppender
from arborlog.core.diagnostics import DiagnosticCollector
from arborlog.core.hierarchy import Hierarchy
from arborlog.core.layouts import PatternLayout
from arborlog.core.mdc import MDC, NDC
from arborlog.models.enums import Level
from arborlog.models.event import LoggingEvent


@pytest.fixture(autouse=True)
def _clean_contexts():
    """Keep diagnostic contexts and the default context from leaking between tests."""
    MDC.clear()
    NDC.clear()
    yield
    MDC.clear()
    NDC.clear()
    close_default_context()


@pytest.fixture
def collector() -> DiagnosticCollector:
    """A diagnostic sink that records everything it receives."""
    return DiagnosticCollector()


@pytest.fixture
def hierarchy(collector: DiagnosticCollector) -> Hierarchy:
    """A fresh hierarchy reporting into ``collector``."""
    return Hierarchy(collector)


@pytest.fixture
def memory() -> MemoryAppender:
    """A memory appender printing only the message."""
    appender = MemoryAppender("memory")
    appender.layout = PatternLayout("%m%n")
    return appender


@pytest.fixture
def make_event() -> Callable[..., LoggingEvent]:
    """Factory for events outside any logger."""
    def _make(message="hello", level: Level = Level.INFO, logger_name: str = "test", **kwargs) -> LoggingEvent:
        return LoggingEvent(logger_name, level, message, **kwargs)
    return _make


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a configuration file under tmp_path and return its path."""
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content)
        return path
    return _write


@pytest.fixture
def framework_logging():
    """Restore the stdlib arborlog loggers that setup_logging configures."""
    names = ("arborlog", "arborlog.diagnostics")
    saved = {}
    for name in names:
        target = logging.getLogger(name)
        saved[name] = (list(target.handlers), target.level, target.propagate)
    yield
    for name in names:
        target = logging.getLogger(name)
        handlers, level, propagate = saved[name]
        for handler in list(target.handlers):
            target.removeHandler(handler)
            if handler not in handlers:
                handler.close()
        for handler in handlers:
            target.addHandler(handler)
        target.setLevel(level)
        target.propagate = propagate
