"""Enums used across arborlog."""

from __future__ import annotations

import logging
from enum import Enum, IntEnum
from typing import Any


class Level(IntEnum):
    """Ordered logging severity.

    Members are the process-wide interned levels; equality and ordering follow
    the integer rank. ``ALL`` and ``OFF`` bound the scale.
    """

    ALL = -2147483647
    TRACE = 5000
    DEBUG = 10000
    INFO = 20000
    WARN = 30000
    ERROR = 40000
    FATAL = 50000
    OFF = 2147483647

    def __str__(self) -> str:
        return self.name

    def __format__(self, format_spec: str) -> str:
        return format(self.name, format_spec)

    @property
    def rank(self) -> int:
        return int(self)

    @property
    def syslog_equivalent(self) -> int:
        return _SYSLOG_TABLE[self]

    def is_at_least(self, other: Level) -> bool:
        """True when this level is as severe as ``other`` or more."""
        return int(self) >= int(other)

    @classmethod
    def from_name(cls, name: Any, default: Level | None = None) -> Level | None:
        """Case-insensitive lookup by name; unknown names give ``default``."""
        if not isinstance(name, str):
            return default
        return cls.__members__.get(name.strip().upper(), default)

    @classmethod
    def from_rank(cls, rank: Any, default: Level | None = None) -> Level | None:
        """Lookup by exact rank; unknown ranks give ``default``."""
        if isinstance(rank, bool) or not isinstance(rank, int):
            return default
        try:
            return cls(rank)
        except ValueError:
            return default

    @classmethod
    def parse(cls, value: Any, default: Level | None = None) -> Level | None:
        """Convert a level, rank or name to a Level. Never raises."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls.from_rank(value, default)
        return cls.from_name(value, default)


_SYSLOG_ALERT, _SYSLOG_ERR, _SYSLOG_WARNING, _SYSLOG_INFO, _SYSLOG_DEBUG = 1, 3, 4, 6, 7

# RFC 5424 priorities
_SYSLOG_TABLE = {
    Level.ALL: _SYSLOG_DEBUG,
    Level.TRACE: _SYSLOG_DEBUG,
    Level.DEBUG: _SYSLOG_DEBUG,
    Level.INFO: _SYSLOG_INFO,
    Level.WARN: _SYSLOG_WARNING,
    Level.ERROR: _SYSLOG_ERR,
    Level.FATAL: _SYSLOG_ALERT,
    Level.OFF: _SYSLOG_ALERT,
}


class FilterDecision(IntEnum):
    """Outcome of a single filter in a chain."""

    DENY = -1
    NEUTRAL = 0
    ACCEPT = 1


class ComponentKind(str, Enum):
    """Kinds of pluggable components resolved through the registry."""

    APPENDER = "appender"
    LAYOUT = "layout"
    FILTER = "filter"
    RENDERER = "renderer"


class DiagnosticSeverity(str, Enum):
    """Severity of a non-fatal diagnostic emitted by the framework."""

    NOTICE = "notice"
    WARNING = "warning"
    ERROR = "error"

    @property
    def logging_level(self) -> int:
        return {
            "notice": logging.INFO,
            "warning": logging.WARNING,
            "error": logging.ERROR,
        }[self.value]
