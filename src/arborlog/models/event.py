"""Logging event value type and caller location."""

from __future__ import annotations

import os
import sys
import threading
import time
import traceback
from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING, Any

from arborlog.core.mdc import MDC, NDC
from arborlog.models.enums import Level

if TYPE_CHECKING:
    from arborlog.core.renderers import RendererMap

# Reference point for relative timestamps (%r in pattern layouts).
START_TIME = time.time()

LOCATION_INFO_NA = "NA"

_LOGGER_MODULE = "arborlog.core.logger"


@dataclass(frozen=True)
class LocationInfo:
    """Where a log call was issued from."""

    file_name: str = LOCATION_INFO_NA
    line_number: int | str = LOCATION_INFO_NA
    class_name: str = LOCATION_INFO_NA
    method_name: str = LOCATION_INFO_NA

    @property
    def full_info(self) -> str:
        return f"{self.class_name}.{self.method_name}({self.file_name}:{self.line_number})"

    @classmethod
    def from_stack(cls) -> LocationInfo:
        """Locate the frame that called into the outermost logger method."""
        frame = sys._getframe(1)
        caller = None
        while frame is not None:
            if frame.f_globals.get("__name__") == _LOGGER_MODULE:
                caller = frame.f_back
            frame = frame.f_back
        if caller is None:
            return cls()
        frame = caller

        code = frame.f_code
        method = code.co_name
        owner = frame.f_locals.get("self")
        if owner is not None:
            class_name = type(owner).__name__
        elif isinstance(frame.f_locals.get("cls"), type):
            class_name = frame.f_locals["cls"].__name__
        else:
            class_name = "main"
        if method == "<module>":
            method = "main"
        return cls(
            file_name=code.co_filename,
            line_number=frame.f_lineno,
            class_name=class_name,
            method_name=method,
        )


@dataclass(frozen=True, eq=False)
class LoggingEvent:
    """Immutable snapshot of an accepted log call.

    Core fields are fixed at construction. Derived fields (rendered message,
    caller location, diagnostic contexts, exception text) are computed on
    first access and cached on the instance.
    """

    logger_name: str
    level: Level
    message: Any
    exc: BaseException | None = None
    timestamp: float = field(default_factory=time.time)
    thread_name: str = field(default_factory=lambda: threading.current_thread().name)
    process_id: int = field(default_factory=os.getpid)
    renderers: RendererMap | None = field(default=None, repr=False)

    @property
    def relative_time(self) -> float:
        """Seconds elapsed between process start and this event."""
        return self.timestamp - START_TIME

    @cached_property
    def rendered_message(self) -> str | None:
        if self.message is None:
            return None
        if isinstance(self.message, str):
            return self.message
        if self.renderers is not None:
            return self.renderers.find_and_render(self.message)
        return str(self.message)

    @cached_property
    def location(self) -> LocationInfo:
        # Resolved lazily; only meaningful while the log call is still on the stack.
        return LocationInfo.from_stack()

    @cached_property
    def ndc(self) -> str:
        return NDC.get()

    @cached_property
    def mdc(self) -> dict[str, Any]:
        return MDC.get_map()

    @cached_property
    def exception_text(self) -> str:
        if self.exc is None:
            return ""
        return "".join(traceback.format_exception(type(self.exc), self.exc, self.exc.__traceback__))
