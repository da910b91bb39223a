"""Filter chains attached to appenders.

A filter inspects an event and returns a :class:`FilterDecision`. Filters
form a singly-linked chain evaluated in declaration order: ``DENY`` and
``ACCEPT`` end the evaluation, ``NEUTRAL`` hands the event to the next link.
Falling off the end of the chain accepts the event.
"""

from __future__ import annotations

from arborlog.core import options as opt
from arborlog.core.options import Configurable
from arborlog.models.enums import FilterDecision, Level
from arborlog.models.event import LoggingEvent


class Filter(Configurable):
    """Base filter; neutral on every event."""

    def __init__(self) -> None:
        super().__init__()
        self.next: Filter | None = None

    def decide(self, event: LoggingEvent) -> FilterDecision:
        return FilterDecision.NEUTRAL

    def add_next(self, filter: Filter) -> None:
        """Append ``filter`` at the tail of the chain starting here."""
        if self.next is None:
            self.next = filter
        else:
            self.next.add_next(filter)

    def chain(self) -> list[Filter]:
        """This filter and every filter linked after it."""
        links = []
        current: Filter | None = self
        while current is not None:
            links.append(current)
            current = current.next
        return links


class DenyAllFilter(Filter):
    """Drops every event. Usually placed last in a chain."""

    def decide(self, event: LoggingEvent) -> FilterDecision:
        return FilterDecision.DENY


class LevelMatchFilter(Filter):
    """Matches events of exactly one level."""

    options = {"level_to_match": opt.level, "accept_on_match": opt.boolean}

    def __init__(self, level_to_match: Level | None = None, accept_on_match: bool = True):
        super().__init__()
        self.level_to_match = level_to_match
        self.accept_on_match = accept_on_match

    def decide(self, event: LoggingEvent) -> FilterDecision:
        if self.level_to_match is None or event.level != self.level_to_match:
            return FilterDecision.NEUTRAL
        return FilterDecision.ACCEPT if self.accept_on_match else FilterDecision.DENY


class LevelRangeFilter(Filter):
    """Denies events outside ``[level_min, level_max]``.

    Events inside the range are accepted when ``accept_on_match`` is set,
    otherwise passed on to the next filter.
    """

    options = {"level_min": opt.level, "level_max": opt.level, "accept_on_match": opt.boolean}

    def __init__(
        self,
        level_min: Level | None = None,
        level_max: Level | None = None,
        accept_on_match: bool = True,
    ):
        super().__init__()
        self.level_min = level_min
        self.level_max = level_max
        self.accept_on_match = accept_on_match

    def decide(self, event: LoggingEvent) -> FilterDecision:
        if self.level_min is not None and not event.level.is_at_least(self.level_min):
            return FilterDecision.DENY
        if self.level_max is not None and event.level > self.level_max:
            return FilterDecision.DENY
        return FilterDecision.ACCEPT if self.accept_on_match else FilterDecision.NEUTRAL


class StringMatchFilter(Filter):
    """Matches events whose rendered message contains a substring."""

    options = {"string_to_match": opt.string, "accept_on_match": opt.boolean}

    def __init__(self, string_to_match: str | None = None, accept_on_match: bool = True):
        super().__init__()
        self.string_to_match = string_to_match
        self.accept_on_match = accept_on_match

    def decide(self, event: LoggingEvent) -> FilterDecision:
        message = event.rendered_message
        if not self.string_to_match or message is None:
            return FilterDecision.NEUTRAL
        if self.string_to_match in message:
            return FilterDecision.ACCEPT if self.accept_on_match else FilterDecision.DENY
        return FilterDecision.NEUTRAL
