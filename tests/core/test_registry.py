"""Tests for the component registry."""

from __future__ import annotations

from arborlog.core.appenders import EchoAppender, MemoryAppender
from arborlog.core.layouts import TTCCLayout
from arborlog.core.registry import ComponentRegistry, default_registry
from arborlog.models.enums import ComponentKind


class TestDefaultRegistry:
    def test_builtin_keys(self):
        registry = default_registry()
        assert registry.keys(ComponentKind.APPENDER) == ["console", "echo", "file", "memory", "null"]
        assert registry.keys(ComponentKind.LAYOUT) == ["pattern", "raw", "simple", "ttcc"]
        assert registry.keys(ComponentKind.FILTER) == ["denyall", "levelmatch", "levelrange", "stringmatch"]
        assert registry.keys(ComponentKind.RENDERER) == ["default"]

    def test_case_insensitive(self):
        registry = default_registry()
        assert registry.resolve(ComponentKind.APPENDER, "Echo") is EchoAppender
        assert registry.resolve("layout", " TTCC ") is TTCCLayout

    def test_create_passes_arguments(self):
        appender = default_registry().create(ComponentKind.APPENDER, "memory", "buffer")
        assert isinstance(appender, MemoryAppender)
        assert appender.name == "buffer"

    def test_unknown_and_non_string_keys(self):
        registry = default_registry()
        assert registry.resolve(ComponentKind.FILTER, "nope") is None
        assert registry.resolve(ComponentKind.FILTER, None) is None
        assert registry.create(ComponentKind.FILTER, 42) is None

    def test_fresh_instance_each_time(self):
        default_registry().register(ComponentKind.APPENDER, "custom", MemoryAppender)
        assert default_registry().resolve(ComponentKind.APPENDER, "custom") is None


class TestComponentRegistry:
    def test_register_custom(self):
        registry = ComponentRegistry()
        registry.register(ComponentKind.APPENDER, "Buffer", MemoryAppender)
        assert registry.resolve(ComponentKind.APPENDER, "buffer") is MemoryAppender
        assert registry.keys(ComponentKind.LAYOUT) == []

    def test_copy_is_independent(self):
        original = default_registry()
        clone = original.copy()
        clone.register(ComponentKind.LAYOUT, "extra", TTCCLayout)
        assert original.resolve(ComponentKind.LAYOUT, "extra") is None
        assert clone.resolve(ComponentKind.LAYOUT, "ttcc") is TTCCLayout
