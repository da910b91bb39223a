"""Built-in appenders."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import IO

from arborlog.core import options as opt
from arborlog.core.appender import Appender, WriterAppender
from arborlog.models.enums import DiagnosticSeverity
from arborlog.models.event import LoggingEvent

logger = logging.getLogger(__name__)


class EchoAppender(WriterAppender):
    """Writes to standard output."""

    options = {"html_line_breaks": opt.boolean}

    def __init__(self, name: str = "", html_line_breaks: bool = False):
        super().__init__(name)
        self.html_line_breaks = html_line_breaks

    def write(self, text: str) -> None:
        if self.html_line_breaks:
            text = text.replace("\n", "<br />\n")
        # Looked up per write so redirected stdout is honoured.
        sys.stdout.write(text)


class ConsoleAppender(WriterAppender):
    """Writes to stdout or stderr, chosen by ``target``."""

    TARGETS = ("stdout", "stderr")

    options = {"target": opt.string}

    def __init__(self, name: str = "", target: str = "stdout"):
        super().__init__(name)
        self.target = target

    def activate_options(self) -> None:
        if self.target.lower() not in self.TARGETS:
            self._warn(f"Invalid value given for 'target' property: [{self.target}]. Reverting to stdout.")
            self.target = "stdout"
        self.target = self.target.lower()

    def write(self, text: str) -> None:
        stream = sys.stderr if self.target == "stderr" else sys.stdout
        stream.write(text)
        stream.flush()


class FileAppender(WriterAppender):
    """Appends to a file, opened on the first write.

    Each write is flushed immediately. Processes sharing a file rely on the
    operating system's append semantics.
    """

    options = {"file": opt.string}

    def __init__(self, name: str = "", file: str | None = None, append: bool = True):
        super().__init__(name)
        self.file = file
        self.append_mode = append
        self._fp: IO[str] | None = None

    # ``append`` is both the config option and the Appender hook name.
    def set_option(self, name: str, value) -> bool:
        if opt.to_snake_case(name) == "append":
            try:
                self.append_mode = opt.boolean(value)
            except ValueError:
                self._warn(f"Invalid value given for '{name}' property: [{value}]. Property not changed.")
                return False
            return True
        return super().set_option(name, value)

    def activate_options(self) -> None:
        if not self.file:
            self._warn("Required parameter 'file' not set. Closing appender.")
            self.close()

    def write(self, text: str) -> None:
        if self._fp is None:
            self._fp = self._open()
            if self._fp is None:
                return
        self._fp.write(text)
        self._fp.flush()

    def _open(self) -> IO[str] | None:
        if not self.file:
            self._warn("Required parameter 'file' not set. Closing appender.")
            self.close()
            return None
        path = Path(self.file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            return open(path, "a" if self.append_mode else "w", encoding="utf-8")
        except OSError as exc:
            self._warn(f"Failed opening target file [{path}]: {exc}. Closing appender.", DiagnosticSeverity.ERROR)
            self.close()
            return None

    def release(self) -> None:
        super().release()
        if self._fp is not None:
            self._fp.close()
            self._fp = None
            logger.debug("Closed log file %s", self.file)


class MemoryAppender(WriterAppender):
    """Keeps events and their formatted text in memory."""

    def __init__(self, name: str = ""):
        super().__init__(name)
        self.events: list[LoggingEvent] = []
        self.lines: list[str] = []

    def append(self, event: LoggingEvent) -> None:
        self.events.append(event)
        super().append(event)

    def write(self, text: str) -> None:
        self.lines.append(text)

    @property
    def output(self) -> str:
        return "".join(self.lines)

    def clear(self) -> None:
        self.events.clear()
        self.lines.clear()


class NullAppender(Appender):
    """Discards every event."""

    requires_layout = False

    def append(self, event: LoggingEvent) -> None:
        pass
