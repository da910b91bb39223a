"""String-keyed factories for configurable components.

Configuration names components by key (``class = "echo"``); the registry maps
each key to a factory. Applications add their own appenders, layouts, filters
and renderers by registering them on the registry handed to the builder.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from arborlog.core.appenders import (
    ConsoleAppender,
    EchoAppender,
    FileAppender,
    MemoryAppender,
    NullAppender,
)
from arborlog.core.filters import DenyAllFilter, LevelMatchFilter, LevelRangeFilter, StringMatchFilter
from arborlog.core.layouts import Layout, PatternLayout, SimpleLayout, TTCCLayout
from arborlog.core.renderers import DefaultRenderer
from arborlog.models.enums import ComponentKind

Factory = Callable[..., Any]


class ComponentRegistry:
    """Case-insensitive mapping of ``(kind, key)`` to factory."""

    def __init__(self) -> None:
        self._factories: dict[ComponentKind, dict[str, Factory]] = {kind: {} for kind in ComponentKind}

    def register(self, kind: ComponentKind, key: str, factory: Factory) -> None:
        self._factories[ComponentKind(kind)][key.strip().lower()] = factory

    def resolve(self, kind: ComponentKind, key: Any) -> Factory | None:
        if not isinstance(key, str):
            return None
        return self._factories[ComponentKind(kind)].get(key.strip().lower())

    def create(self, kind: ComponentKind, key: Any, *args: Any) -> Any | None:
        """Instantiate the component registered under ``key``, or None."""
        factory = self.resolve(kind, key)
        if factory is None:
            return None
        return factory(*args)

    def keys(self, kind: ComponentKind) -> list[str]:
        return sorted(self._factories[ComponentKind(kind)])

    def copy(self) -> ComponentRegistry:
        clone = ComponentRegistry()
        for kind, factories in self._factories.items():
            clone._factories[kind] = dict(factories)
        return clone


_BUILTINS: dict[ComponentKind, dict[str, Factory]] = {
    ComponentKind.APPENDER: {
        "echo": EchoAppender,
        "console": ConsoleAppender,
        "file": FileAppender,
        "memory": MemoryAppender,
        "null": NullAppender,
    },
    ComponentKind.LAYOUT: {
        "raw": Layout,
        "simple": SimpleLayout,
        "pattern": PatternLayout,
        "ttcc": TTCCLayout,
    },
    ComponentKind.FILTER: {
        "denyall": DenyAllFilter,
        "levelmatch": LevelMatchFilter,
        "levelrange": LevelRangeFilter,
        "stringmatch": StringMatchFilter,
    },
    ComponentKind.RENDERER: {
        "default": DefaultRenderer,
    },
}


def default_registry() -> ComponentRegistry:
    """A fresh registry holding every built-in component."""
    registry = ComponentRegistry()
    for kind, factories in _BUILTINS.items():
        for key, factory in factories.items():
            registry.register(kind, key, factory)
    return registry
