"""Tests for Logger dispatch, levels and appender attachment."""

from __future__ import annotations

from arborlog.core.appenders import MemoryAppender
from arborlog.core.layouts import PatternLayout
from arborlog.core.logger import Logger, RootLogger
from arborlog.models.enums import DiagnosticSeverity, Level


def _memory(name: str) -> MemoryAppender:
    appender = MemoryAppender(name)
    appender.layout = PatternLayout("%c:%m%n")
    return appender


class TestEffectiveLevel:
    def test_inherits_from_nearest_ancestor(self, hierarchy):
        hierarchy.get_root_logger().set_level(Level.ERROR)
        hierarchy.get_logger("x").set_level(Level.WARN)

        assert hierarchy.get_logger("x").level is Level.WARN
        assert hierarchy.get_logger("x.y").get_effective_level() is Level.WARN
        assert hierarchy.get_root_logger().get_effective_level() is Level.ERROR

    def test_own_level_wins(self, hierarchy):
        hierarchy.get_logger("a").set_level(Level.ERROR)
        child = hierarchy.get_logger("a.b")
        child.level = Level.TRACE
        assert child.get_effective_level() is Level.TRACE

    def test_unset_level_falls_back_to_root(self, hierarchy):
        assert hierarchy.get_logger("a.b.c").get_effective_level() is Level.DEBUG

    def test_clearing_level_inherits_again(self, hierarchy):
        node = hierarchy.get_logger("a")
        node.set_level(Level.FATAL)
        node.set_level(None)
        assert node.level is None
        assert node.get_effective_level() is Level.DEBUG

    def test_detached_logger_has_no_effective_level(self):
        node = Logger("loose")
        assert node.get_effective_level() is None
        assert not node.is_enabled_for(Level.FATAL)


class TestEnabled:
    def test_level_checks(self, hierarchy):
        node = hierarchy.get_logger("svc")
        node.set_level(Level.INFO)
        assert node.is_info_enabled()
        assert node.is_error_enabled()
        assert not node.is_debug_enabled()
        assert not node.is_trace_enabled()

    def test_hierarchy_threshold_applies(self, hierarchy):
        node = hierarchy.get_logger("svc")
        node.set_level(Level.ALL)
        hierarchy.threshold = Level.ERROR
        assert not node.is_warn_enabled()
        assert node.is_fatal_enabled()


class TestDispatch:
    def test_appenders_receive_enabled_events(self, hierarchy):
        node = hierarchy.get_logger("app")
        appender = _memory("m")
        node.add_appender(appender)

        node.info("started")
        node.trace("noise")

        assert appender.output == "app:started\n"

    def test_additive_delivery_is_bottom_up(self, hierarchy):
        order: list[str] = []

        class Recording(MemoryAppender):
            def append(self, event):
                order.append(self.name)
                super().append(event)

        hierarchy.get_root_logger().add_appender(Recording("root"))
        hierarchy.get_logger("a").add_appender(Recording("a"))
        hierarchy.get_logger("a.b").add_appender(Recording("a.b"))

        hierarchy.get_logger("a.b").warn("w")

        assert order == ["a.b", "a", "root"]

    def test_one_event_shared_along_the_chain(self, hierarchy):
        root_app, child_app = _memory("r"), _memory("c")
        hierarchy.get_root_logger().add_appender(root_app)
        hierarchy.get_logger("a").add_appender(child_app)

        hierarchy.get_logger("a").info("x")

        assert root_app.events[0] is child_app.events[0]

    def test_same_appender_at_two_levels_receives_two_calls(self, hierarchy):
        shared = _memory("shared")
        hierarchy.get_root_logger().add_appender(shared)
        hierarchy.get_logger("a").add_appender(shared)

        hierarchy.get_logger("a").info("twice")

        assert len(shared.events) == 2

    def test_additivity_off_stops_at_node(self, hierarchy):
        root_app, mid_app = _memory("root"), _memory("mid")
        hierarchy.get_root_logger().add_appender(root_app)
        mid = hierarchy.get_logger("a.b")
        mid.add_appender(mid_app)
        mid.additive = False

        hierarchy.get_logger("a.b.c").error("deep")
        hierarchy.get_logger("a").error("shallow")

        assert mid_app.output == "a.b.c:deep\n"
        assert root_app.output == "a:shallow\n"

    def test_disabled_child_still_forwards_to_enabled_parent(self, hierarchy):
        root_app = _memory("root")
        hierarchy.get_root_logger().add_appender(root_app)
        hierarchy.get_root_logger().set_level(Level.DEBUG)
        child = hierarchy.get_logger("quiet")
        child.set_level(Level.ERROR)
        child_app = _memory("child")
        child.add_appender(child_app)

        child.info("passes through")

        assert child_app.events == []
        assert root_app.output == "quiet:passes through\n"

    def test_ancestor_level_applies_to_built_events(self, hierarchy):
        hierarchy.get_root_logger().set_level(Level.ERROR)
        root_app = _memory("root")
        hierarchy.get_root_logger().add_appender(root_app)
        child = hierarchy.get_logger("loud")
        child.set_level(Level.DEBUG)
        child.add_appender(_memory("child"))

        child.info("child only")

        assert root_app.events == []

    def test_threshold_blocks_every_appender(self, hierarchy):
        appender = _memory("m")
        appender.threshold = Level.ALL
        hierarchy.get_root_logger().add_appender(appender)
        hierarchy.get_logger("a").set_level(Level.ALL)
        hierarchy.threshold = Level.WARN

        hierarchy.get_logger("a").info("hidden")
        hierarchy.get_logger("a").warn("shown")

        assert appender.output == "a:shown\n"

    def test_failing_appender_does_not_stop_siblings(self, hierarchy, collector):
        class Broken(MemoryAppender):
            def write(self, text):
                raise OSError("disk gone")

        broken = Broken("broken")
        broken.diagnostics = collector
        healthy = _memory("healthy")
        hierarchy.get_root_logger().add_appender(broken)
        hierarchy.get_root_logger().add_appender(healthy)

        hierarchy.get_root_logger().info("still here")

        assert healthy.output == "root:still here\n"
        assert collector.of_severity(DiagnosticSeverity.ERROR)

    def test_assert_log(self, hierarchy):
        appender = _memory("m")
        hierarchy.get_root_logger().add_appender(appender)
        root = hierarchy.get_root_logger()

        root.assert_log(True, "fine")
        root.assert_log(False, "broken invariant")

        assert [e.level for e in appender.events] == [Level.ERROR]

    def test_warning_alias(self, hierarchy):
        appender = _memory("m")
        hierarchy.get_root_logger().add_appender(appender)
        hierarchy.get_root_logger().warning("careful")
        assert appender.events[0].level is Level.WARN

    def test_exception_attached(self, hierarchy):
        appender = _memory("m")
        hierarchy.get_root_logger().add_appender(appender)
        exc = RuntimeError("x")
        hierarchy.get_root_logger().error("failed", exc)
        assert appender.events[0].exc is exc


class TestAppenderAttachment:
    def test_attach_and_lookup(self):
        node = Logger("n")
        appender = _memory("a")
        node.add_appender(appender)
        assert node.get_appender("a") is appender
        assert node.is_attached(appender)
        assert node.get_appender("missing") is None

    def test_same_name_replaces_and_closes_previous(self):
        node = Logger("n")
        first, second = _memory("a"), _memory("a")
        node.add_appender(first)
        node.add_appender(second)
        assert node.appenders == [second]
        assert first.closed
        assert not second.closed

    def test_reattaching_same_instance_keeps_it_open(self):
        node = Logger("n")
        appender = _memory("a")
        node.add_appender(appender)
        node.add_appender(appender)
        assert node.appenders == [appender]
        assert not appender.closed

    def test_remove_by_name_and_instance(self):
        node = Logger("n")
        a, b = _memory("a"), _memory("b")
        node.add_appender(a)
        node.add_appender(b)
        node.remove_appender("a")
        node.remove_appender(b)
        assert node.appenders == []
        assert a.closed and b.closed

    def test_remove_missing_reports_notice(self, hierarchy, collector):
        hierarchy.get_logger("n").remove_appender("ghost")
        assert collector.messages == ["Cannot remove appender [ghost]: not attached to logger [n]."]
        assert collector.diagnostics[0].severity is DiagnosticSeverity.NOTICE

    def test_remove_all(self):
        node = Logger("n")
        appenders = [_memory(str(i)) for i in range(3)]
        for appender in appenders:
            node.add_appender(appender)
        node.remove_all_appenders()
        assert node.appenders == []
        assert all(a.closed for a in appenders)


class TestRootLogger:
    def test_default_level(self):
        assert RootLogger().level is Level.ALL

    def test_rejects_none_level(self, hierarchy, collector):
        root = hierarchy.get_root_logger()
        root.set_level(Level.WARN)
        root.set_level(None)
        assert root.level is Level.WARN
        assert collector.messages == ["Cannot set the root logger's level to None."]

    def test_rejects_parent(self, hierarchy, collector):
        root = hierarchy.get_root_logger()
        root.set_parent(hierarchy.get_logger("x"))
        assert root.parent is None
        assert collector.messages == ["The root logger cannot have a parent."]
