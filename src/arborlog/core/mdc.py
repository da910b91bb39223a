"""Mapped and nested diagnostic contexts.

Both are backed by :mod:`contextvars`, so values are local to the current
thread or asyncio task. Events read them lazily on first access.
"""

from __future__ import annotations

from contextvars import ContextVar
from types import MappingProxyType
from typing import Any, Mapping

_mdc: ContextVar[Mapping[str, Any]] = ContextVar("arborlog_mdc", default=MappingProxyType({}))
_ndc: ContextVar[tuple[str, ...]] = ContextVar("arborlog_ndc", default=())


class MDC:
    """Key/value context attached to every event created in this context."""

    @staticmethod
    def put(key: str, value: Any) -> None:
        current = dict(_mdc.get())
        current[key] = value
        _mdc.set(MappingProxyType(current))

    @staticmethod
    def get(key: str, default: Any = "") -> Any:
        return _mdc.get().get(key, default)

    @staticmethod
    def remove(key: str) -> None:
        current = dict(_mdc.get())
        current.pop(key, None)
        _mdc.set(MappingProxyType(current))

    @staticmethod
    def get_map() -> dict[str, Any]:
        return dict(_mdc.get())

    @staticmethod
    def clear() -> None:
        _mdc.set(MappingProxyType({}))


class NDC:
    """Stack of context messages; rendered space-separated."""

    @staticmethod
    def push(message: str) -> None:
        _ndc.set((*_ndc.get(), str(message)))

    @staticmethod
    def pop() -> str:
        stack = _ndc.get()
        if not stack:
            return ""
        _ndc.set(stack[:-1])
        return stack[-1]

    @staticmethod
    def peek() -> str:
        stack = _ndc.get()
        return stack[-1] if stack else ""

    @staticmethod
    def get() -> str:
        return " ".join(_ndc.get())

    @staticmethod
    def depth() -> int:
        return len(_ndc.get())

    @staticmethod
    def clear() -> None:
        _ndc.set(())
