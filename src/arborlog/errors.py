"""Exception hierarchy for arborlog.

Only unrecoverable conditions are raised. Everything a configuration pass or
a log call can recover from is reported through the diagnostic channel
(see :mod:`arborlog.core.diagnostics`) instead.
"""

from __future__ import annotations


class ArborError(Exception):
    """Base class for all arborlog errors."""


class ConfigurationError(ArborError):
    """The configuration source could not be obtained or parsed at all.

    No partial hierarchy can be derived from the source, so the caller decides
    whether to retry, fall back or abort.
    """

    def __init__(self, message: str, *, source: str | None = None):
        super().__init__(message)
        self.message = message
        self.source = source
