"""Object rendering: turning non-string messages into text."""

from __future__ import annotations

import pprint
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Renderer(Protocol):
    def render(self, obj: Any) -> str: ...


class DefaultRenderer:
    """Pretty-prints any object."""

    def render(self, obj: Any) -> str:
        if isinstance(obj, str):
            return obj
        return pprint.pformat(obj)


class RendererMap:
    """Associates rendered classes with renderers.

    Classes may be registered as types or by name, either the bare qualified
    name (``"Fruit"``) or the module-qualified one (``"shop.models.Fruit"``).
    Lookup walks the MRO of the message's type, so a renderer registered for a
    base class also covers its subclasses.
    """

    def __init__(self, default: Renderer | None = None):
        self._map: dict[str, Renderer] = {}
        self.default_renderer: Renderer = default or DefaultRenderer()

    def __len__(self) -> int:
        return len(self._map)

    def add_renderer(self, rendered: type | str, renderer: Renderer) -> None:
        self._map[_key(rendered)] = renderer

    def get_by_class(self, cls: type) -> Renderer | None:
        for klass in cls.__mro__:
            for key in (f"{klass.__module__}.{klass.__qualname__}", klass.__qualname__):
                renderer = self._map.get(key)
                if renderer is not None:
                    return renderer
        return None

    def get_by_object(self, obj: Any) -> Renderer | None:
        return self.get_by_class(type(obj))

    def find_and_render(self, obj: Any) -> str:
        renderer = self.get_by_object(obj) or self.default_renderer
        return renderer.render(obj)

    def clear(self) -> None:
        self._map.clear()


def _key(rendered: type | str) -> str:
    if isinstance(rendered, type):
        return f"{rendered.__module__}.{rendered.__qualname__}"
    return rendered
