from arborlog.models.enums import ComponentKind, DiagnosticSeverity, FilterDecision, Level
from arborlog.models.event import LocationInfo, LoggingEvent

__all__ = [
    "ComponentKind",
    "DiagnosticSeverity",
    "FilterDecision",
    "Level",
    "LocationInfo",
    "LoggingEvent",
]
