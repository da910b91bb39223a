"""Non-fatal diagnostic channel.

Configuration anomalies and dispatch-time misuse are reported here instead of
being raised. A sink is any callable taking a :class:`Diagnostic`; hierarchies
and builders receive one at construction so tests can capture diagnostics
deterministically.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from arborlog.models.enums import DiagnosticSeverity

logger = logging.getLogger("arborlog.diagnostics")


@dataclass(frozen=True)
class Diagnostic:
    """A single anomaly report."""

    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    source: str = ""

    def __str__(self) -> str:
        if self.source:
            return f"[{self.source}] {self.message}"
        return self.message


DiagnosticSink = Callable[[Diagnostic], None]


def log_diagnostic(diagnostic: Diagnostic) -> None:
    """Default sink: forward to the stdlib ``arborlog.diagnostics`` logger."""
    logger.log(diagnostic.severity.logging_level, "%s", diagnostic)


@dataclass
class DiagnosticCollector:
    """Sink that keeps every diagnostic it receives, in order."""

    diagnostics: list[Diagnostic] = field(default_factory=list)

    def __call__(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def __len__(self) -> int:
        return len(self.diagnostics)

    @property
    def messages(self) -> list[str]:
        return [d.message for d in self.diagnostics]

    def of_severity(self, severity: DiagnosticSeverity) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == severity]

    def clear(self) -> None:
        self.diagnostics.clear()
