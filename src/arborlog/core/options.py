"""Option handling for configurable components.

Appenders, layouts and filters declare their settable options in an
``options`` table mapping the attribute name to a converter. Configuration
parameters may use camelCase (``conversionPattern``) or snake_case names.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from arborlog.core.diagnostics import Diagnostic, DiagnosticSink, log_diagnostic
from arborlog.models.enums import DiagnosticSeverity, Level

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def to_snake_case(name: str) -> str:
    return _CAMEL_RE.sub(r"_\1", name).lower()


# ── Converters ───────────────────────────────────────────────────
# Each raises ValueError when the value cannot be converted.


def boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    raise ValueError(f"not a boolean: {value!r}")


def integer(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ValueError(f"not an integer: {value!r}")


def string(value: Any) -> str:
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValueError(f"not a string: {value!r}")


def level(value: Any) -> Level:
    parsed = Level.parse(value)
    if parsed is None:
        raise ValueError(f"not a level: {value!r}")
    return parsed


# ── Base class ───────────────────────────────────────────────────


class Configurable:
    """Base for components whose options are set from configuration."""

    options: ClassVar[Mapping[str, Callable[[Any], Any]]] = {}

    def __init__(self) -> None:
        self.diagnostics: DiagnosticSink = log_diagnostic

    def set_option(self, name: str, value: Any) -> bool:
        """Convert and assign one option. Returns False if it was skipped."""
        attr = to_snake_case(name)
        converter = self.options.get(attr)
        if converter is None:
            self._warn(f"Nonexistent option [{name}] specified on [{type(self).__name__}]. Skipping.")
            return False
        try:
            converted = converter(value)
        except (TypeError, ValueError):
            self._warn(f"Invalid value given for '{name}' property: [{value}]. Property not changed.")
            return False
        setattr(self, attr, converted)
        return True

    def set_options(self, params: Mapping[str, Any]) -> None:
        for name, value in params.items():
            self.set_option(name, value)

    def activate_options(self) -> None:
        """Hook called once all options are set."""

    def _warn(self, message: str, severity: DiagnosticSeverity = DiagnosticSeverity.WARNING) -> None:
        self.diagnostics(Diagnostic(message, severity, source=self._diagnostic_source()))

    def _diagnostic_source(self) -> str:
        return type(self).__name__
