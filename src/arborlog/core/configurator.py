"""Builds a hierarchy from a configuration tree.

Every problem with a fragment of the tree is reported through the
diagnostic channel and degrades to a fallback (skip the fragment or use a
default); nothing here raises. Reading the tree from a file is the job of
:mod:`arborlog.core.sources`, which does raise.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from arborlog.core import options as opt
from arborlog.core.appender import Appender
from arborlog.core.diagnostics import Diagnostic, DiagnosticSink, log_diagnostic
from arborlog.core.filters import Filter
from arborlog.core.hierarchy import Hierarchy
from arborlog.core.layouts import Layout
from arborlog.core.logger import Logger
from arborlog.core.registry import ComponentRegistry, default_registry
from arborlog.core.renderers import Renderer
from arborlog.models.enums import ComponentKind, DiagnosticSeverity, Level

logger = logging.getLogger(__name__)


def default_configuration(
    root_level: str = "DEBUG", appender: str = "echo", layout: str | None = None
) -> dict[str, Any]:
    """The fallback tree: one appender named ``default`` on the root logger."""
    definition: dict[str, Any] = {"class": appender}
    if layout:
        definition["layout"] = {"class": layout}
    return {
        "rootLogger": {"level": root_level, "appenders": ["default"]},
        "appenders": {"default": definition},
    }


DEFAULT_CONFIGURATION = default_configuration()


class ConfigurationBuilder:
    """Applies a configuration tree to a :class:`Hierarchy`.

    Each call to :meth:`configure` starts from a freshly reset hierarchy, so
    applying the same tree twice yields the same result and nothing from an
    earlier configuration survives.
    """

    def __init__(
        self,
        registry: ComponentRegistry | None = None,
        diagnostics: DiagnosticSink | None = None,
        default: Mapping[str, Any] | None = None,
    ):
        self.registry = registry or default_registry()
        self.diagnostics: DiagnosticSink = diagnostics or log_diagnostic
        self.default = dict(default) if default is not None else DEFAULT_CONFIGURATION

    def configure(self, hierarchy: Hierarchy, config: Any = None) -> None:
        hierarchy.reset()

        if config is None:
            config = self.default
        elif not isinstance(config, Mapping):
            self._warn("Invalid configuration param given. Reverting to default configuration.")
            config = self.default

        threshold = config.get("threshold")
        if threshold is not None:
            level = Level.parse(threshold)
            if level is None:
                self._warn(f"Invalid threshold value [{threshold}] specified. Ignoring threshold definition.")
            else:
                hierarchy.threshold = level

        appenders = self._build_appenders(config.get("appenders"))
        for appender in appenders.values():
            hierarchy.register_appender(appender)

        root_config = config.get("rootLogger", config.get("root_logger"))
        if root_config is not None:
            self._configure_logger(hierarchy.get_root_logger(), root_config, appenders)

        loggers = config.get("loggers")
        if isinstance(loggers, Mapping):
            for name, logger_config in loggers.items():
                self._configure_logger(hierarchy.get_logger(str(name)), logger_config, appenders)
        elif loggers is not None:
            self._warn("Invalid configuration provided for loggers. Skipping logger definitions.")

        renderers = config.get("renderers")
        if isinstance(renderers, Sequence) and not isinstance(renderers, str):
            for renderer_config in renderers:
                self._configure_renderer(hierarchy, renderer_config)
        elif renderers is not None:
            self._warn("Invalid configuration provided for renderers. Skipping renderer definitions.")

        hierarchy.mark_configured()
        logger.debug(
            "Configured hierarchy: %d appender(s), %d named logger(s)",
            len(appenders), len(hierarchy.current_loggers()),
        )

    # ── Appenders ────────────────────────────────────────────────

    def _build_appenders(self, definitions: Any) -> dict[str, Appender]:
        appenders: dict[str, Appender] = {}
        if definitions is None:
            return appenders
        if not isinstance(definitions, Mapping):
            if isinstance(definitions, str) or not isinstance(definitions, Sequence):
                definitions = [definitions]
            for name in definitions:
                self._warn(f"Invalid configuration provided for appender [{name}]. Skipping appender definition.")
            return appenders

        for name, definition in definitions.items():
            appender = self._build_appender(str(name), definition)
            if appender is not None:
                appenders[str(name)] = appender
        return appenders

    def _build_appender(self, name: str, definition: Any) -> Appender | None:
        if not isinstance(definition, Mapping):
            self._warn(f"Invalid configuration provided for appender [{name}]. Skipping appender definition.")
            return None

        key = definition.get("class")
        if not key:
            self._warn(f"No class given for appender [{name}]. Skipping appender definition.")
            return None
        factory = self.registry.resolve(ComponentKind.APPENDER, key)
        if factory is None:
            self._warn(f"Invalid class [{key}] given for appender [{name}]. Class does not exist. "
                       "Skipping appender definition.")
            return None
        appender = factory(name)
        if not isinstance(appender, Appender):
            self._warn(f"Invalid class [{key}] given for appender [{name}]. Not a valid Appender class. "
                       "Skipping appender definition.")
            return None
        appender.diagnostics = self.diagnostics

        threshold = definition.get("threshold")
        if threshold is not None:
            level = Level.parse(threshold)
            if level is None:
                self._warn(f"Invalid threshold value [{threshold}] specified for appender [{name}]. "
                           "Ignoring threshold definition.")
            else:
                appender.threshold = level

        if appender.requires_layout and "layout" in definition:
            layout = self._build_layout(name, definition["layout"])
            appender.layout = layout if layout is not None else appender.default_layout()

        filters = definition.get("filters")
        if filters is not None:
            if isinstance(filters, (Mapping, str)) or not isinstance(filters, Sequence):
                filters = [filters]
            for filter_config in filters:
                built = self._build_filter(name, filter_config)
                if built is not None:
                    appender.add_filter(built)

        self._set_params(appender, definition.get("params"))
        appender.activate_options()
        return appender

    def _build_layout(self, appender_name: str, definition: Any) -> Layout | None:
        key = definition.get("class") if isinstance(definition, Mapping) else definition
        if not key:
            self._warn(f"Layout class not specified for appender [{appender_name}]. Reverting to default layout.")
            return None
        factory = self.registry.resolve(ComponentKind.LAYOUT, key)
        if factory is None:
            self._warn(f"Nonexistent layout class [{key}] specified for appender [{appender_name}]. "
                       "Reverting to default layout.")
            return None
        layout = factory()
        if not isinstance(layout, Layout):
            self._warn(f"Invalid layout class [{key}] specified for appender [{appender_name}]. "
                       "Reverting to default layout.")
            return None
        layout.diagnostics = self.diagnostics
        if isinstance(definition, Mapping):
            self._set_params(layout, definition.get("params"))
        layout.activate_options()
        return layout

    def _build_filter(self, appender_name: str, definition: Any) -> Filter | None:
        key = definition.get("class") if isinstance(definition, Mapping) else definition
        if not key:
            self._warn(f"Filter class not specified for appender [{appender_name}]. Skipping filter definition.")
            return None
        factory = self.registry.resolve(ComponentKind.FILTER, key)
        if factory is None:
            self._warn(f"Nonexistent filter class [{key}] specified on appender [{appender_name}]. "
                       "Skipping filter definition.")
            return None
        built = factory()
        if not isinstance(built, Filter):
            self._warn(f"Invalid filter class [{key}] specified on appender [{appender_name}]. "
                       "Skipping filter definition.")
            return None
        built.diagnostics = self.diagnostics
        if isinstance(definition, Mapping):
            self._set_params(built, definition.get("params"))
        built.activate_options()
        return built

    def _set_params(self, component: opt.Configurable, params: Any) -> None:
        if params is None:
            return
        if not isinstance(params, Mapping):
            self._warn(f"Invalid parameters given for [{type(component).__name__}]. Skipping parameters.")
            return
        component.set_options(params)

    # ── Loggers ──────────────────────────────────────────────────

    def _configure_logger(self, node: Logger, config: Any, appenders: Mapping[str, Appender]) -> None:
        if not isinstance(config, Mapping):
            self._warn(f"Invalid configuration provided for logger [{node.name}]. Skipping logger definition.")
            return

        level_value = config.get("level")
        if level_value is not None:
            level = Level.parse(level_value)
            if level is None:
                self._warn(f"Invalid level value [{level_value}] specified for logger [{node.name}]. "
                           "Ignoring level definition.")
            else:
                node.set_level(level)

        names = config.get("appenders")
        if isinstance(names, str):
            names = [names]
        elif names is not None and (isinstance(names, Mapping) or not isinstance(names, Sequence)):
            self._warn(f"Invalid appender references for logger [{node.name}]. Skipping appender attachment.")
            names = None
        for appender_name in names or ():
            appender = appenders.get(str(appender_name))
            if appender is None:
                self._warn(f"Nonexistent appender [{appender_name}] linked to logger [{node.name}].")
                continue
            node.add_appender(appender)

        additivity = config.get("additivity")
        if additivity is not None:
            try:
                node.additive = opt.boolean(additivity)
            except ValueError:
                self._warn(f"Invalid additivity value [{additivity}] specified for logger [{node.name}].")

    # ── Renderers ────────────────────────────────────────────────

    def _configure_renderer(self, hierarchy: Hierarchy, config: Any) -> None:
        if not isinstance(config, Mapping):
            self._warn("Invalid configuration provided for renderer. Skipping renderer definition.")
            return
        rendering = config.get("renderingClass", config.get("rendering_class"))
        rendered = config.get("renderedClass", config.get("rendered_class"))
        if not rendering:
            self._warn("Rendering class not specified. Skipping renderer definition.")
            return
        if not rendered:
            self._warn("Rendered class not specified. Skipping renderer definition.")
            return
        if not isinstance(rendered, (str, type)):
            self._warn(f"Invalid rendered class [{rendered}] specified. Skipping renderer definition.")
            return

        factory = self.registry.resolve(ComponentKind.RENDERER, rendering)
        if factory is None:
            self._warn(f"Failed adding renderer. Rendering class [{rendering}] not found.",
                       DiagnosticSeverity.NOTICE)
            return
        renderer = factory()
        if not isinstance(renderer, Renderer):
            self._warn(f"Failed adding renderer. Rendering class [{rendering}] does not implement "
                       "the Renderer interface.", DiagnosticSeverity.NOTICE)
            return
        hierarchy.renderer_map.add_renderer(rendered, renderer)

    def _warn(self, message: str, severity: DiagnosticSeverity = DiagnosticSeverity.WARNING) -> None:
        self.diagnostics(Diagnostic(message, severity, source="configurator"))
