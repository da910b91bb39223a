"""Layouts render events into text for writer appenders."""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import datetime

from arborlog.core import options as opt
from arborlog.core.options import Configurable
from arborlog.models.event import LoggingEvent


class Layout(Configurable):
    """Base layout: the rendered message, nothing else."""

    content_type = "text/plain"

    def format(self, event: LoggingEvent) -> str:
        return event.rendered_message or ""

    def header(self) -> str | None:
        return None

    def footer(self) -> str | None:
        return None


class SimpleLayout(Layout):
    """``LEVEL - message`` followed by a newline."""

    def format(self, event: LoggingEvent) -> str:
        return f"{event.level} - {event.rendered_message or ''}\n"


# ── Pattern layout ───────────────────────────────────────────────

DATE_FORMAT_SPECIALS = {
    "ISO8601": None,
    "ABSOLUTE": "%H:%M:%S",
    "DATE": "%d %b %Y %H:%M:%S.%f",
}

_TOKEN_RE = re.compile(
    r"%(?P<left>-)?(?P<min>\d+)?(?:\.(?P<max>\d+))?(?P<word>[a-zA-Z]+)(?:\{(?P<option>[^}]*)\})?"
    r"|%%"
)

Converter = Callable[[LoggingEvent, "str | None"], str]


def _logger_name(event: LoggingEvent, option: str | None) -> str:
    name = event.logger_name
    if option and option.isdigit() and int(option) > 0:
        return ".".join(name.split(".")[-int(option):])
    return name


def _date(event: LoggingEvent, option: str | None) -> str:
    moment = datetime.fromtimestamp(event.timestamp)
    fmt = DATE_FORMAT_SPECIALS.get(option, option) if option else None
    if fmt is None:
        return moment.isoformat(timespec="seconds")
    if "%f" in fmt:
        # milliseconds rather than microseconds
        fmt = fmt.replace("%f", f"{moment.microsecond // 1000:03d}")
    return moment.strftime(fmt)


def _mdc(event: LoggingEvent, option: str | None) -> str:
    if option:
        return str(event.mdc.get(option, ""))
    return ", ".join(f"{k}={v}" for k, v in event.mdc.items())


_CONVERTERS: dict[str, Converter] = {
    "m": lambda e, _: e.rendered_message or "",
    "n": lambda e, _: "\n",
    "p": lambda e, _: e.level.name,
    "c": _logger_name,
    "d": _date,
    "r": lambda e, _: str(int(e.relative_time * 1000)),
    "t": lambda e, _: e.thread_name,
    "P": lambda e, _: str(e.process_id),
    "F": lambda e, _: e.location.file_name,
    "L": lambda e, _: str(e.location.line_number),
    "M": lambda e, _: e.location.method_name,
    "C": lambda e, _: e.location.class_name,
    "l": lambda e, _: e.location.full_info,
    "x": lambda e, _: e.ndc,
    "X": _mdc,
    "e": lambda e, _: e.exception_text,
}

_ALIASES = {
    "msg": "m",
    "message": "m",
    "newline": "n",
    "le": "p",
    "level": "p",
    "lo": "c",
    "logger": "c",
    "date": "d",
    "relative": "r",
    "thread": "t",
    "pid": "P",
    "file": "F",
    "line": "L",
    "method": "M",
    "class": "C",
    "location": "l",
    "ndc": "x",
    "mdc": "X",
    "ex": "e",
    "exception": "e",
}


class PatternLayout(Layout):
    """Renders events through a conversion pattern such as ``%d [%p] %c: %m%n``.

    Each ``%word{option}`` token maps to a converter. A leading ``-N`` pads
    to ``N`` characters, left-aligned; ``N`` alone right-aligns; ``.N``
    truncates to the last ``N`` characters. Unknown words are kept verbatim.
    """

    DEFAULT_CONVERSION_PATTERN = "%m%n"

    options = {"conversion_pattern": opt.string}

    def __init__(self, conversion_pattern: str | None = None):
        super().__init__()
        self.conversion_pattern = conversion_pattern or self.DEFAULT_CONVERSION_PATTERN
        self._parts: list[str | tuple] | None = None

    def activate_options(self) -> None:
        self._parts = self._compile(self.conversion_pattern)

    def format(self, event: LoggingEvent) -> str:
        if self._parts is None:
            self.activate_options()
        out = []
        for part in self._parts:
            if isinstance(part, str):
                out.append(part)
                continue
            converter, option, left, min_width, max_width = part
            text = converter(event, option)
            if max_width is not None and len(text) > max_width:
                text = text[-max_width:]
            if min_width is not None:
                text = text.ljust(min_width) if left else text.rjust(min_width)
            out.append(text)
        return "".join(out)

    def _compile(self, pattern: str) -> list[str | tuple]:
        parts: list[str | tuple] = []
        pos = 0
        for match in _TOKEN_RE.finditer(pattern):
            if match.start() > pos:
                parts.append(pattern[pos:match.start()])
            pos = match.end()
            if match.group(0) == "%%":
                parts.append("%")
                continue
            word = match.group("word")
            converter = _CONVERTERS.get(_ALIASES.get(word, word))
            if converter is None:
                self._warn(f"Invalid keyword '%{word}' in conversion pattern. Ignoring keyword.")
                parts.append(match.group(0))
                continue
            parts.append((
                converter,
                match.group("option"),
                bool(match.group("left")),
                int(match.group("min")) if match.group("min") else None,
                int(match.group("max")) if match.group("max") else None,
            ))
        if pos < len(pattern):
            parts.append(pattern[pos:])
        return parts


class TTCCLayout(PatternLayout):
    """Time, thread, category and context: ``%r [%t] %p %c %x - %m%n``."""

    TTCC_PATTERN = "%r [%t] %p %c %x - %m%n"

    options = {}

    def __init__(self) -> None:
        super().__init__(self.TTCC_PATTERN)
