"""Configuration sources: turn files or mappings into a configuration tree.

Every source normalises to the same shape consumed by
:class:`~arborlog.core.configurator.ConfigurationBuilder`::

    {
        "threshold": "warn",
        "rootLogger": {"level": "info", "appenders": ["default"]},
        "loggers": {"foo.bar": {"level": "debug", "additivity": "false", "appenders": [...]}},
        "appenders": {
            "default": {
                "class": "echo",
                "threshold": "info",
                "layout": {"class": "pattern", "params": {"conversionPattern": "%m%n"}},
                "filters": [{"class": "stringmatch", "params": {...}}],
                "params": {...},
            },
        },
        "renderers": [{"renderedClass": "Fruit", "renderingClass": "fruit"}],
    }

Failures here are fatal: a source that cannot be read or parsed raises
:class:`~arborlog.errors.ConfigurationError`.
"""

from __future__ import annotations

import json
import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from pathlib import Path
from typing import Any

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from arborlog.core.diagnostics import Diagnostic, DiagnosticSink, log_diagnostic
from arborlog.errors import ConfigurationError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".toml", ".json", ".xml")


def load_configuration(
    source: Mapping[str, Any] | str | Path,
    diagnostics: DiagnosticSink | None = None,
) -> dict[str, Any]:
    """Load a configuration tree from a mapping or a file path."""
    if isinstance(source, Mapping):
        return _validated(dict(source), "<mapping>")
    if not isinstance(source, (str, Path)):
        raise ConfigurationError(f"Unsupported configuration source type: {type(source).__name__}.")

    path = Path(source)
    if not path.is_file():
        raise ConfigurationError(f"File [{path}] does not exist.", source=str(path))

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise ConfigurationError(
            f"Unsupported configuration file extension: {suffix.lstrip('.') or '(none)'}", source=str(path)
        )

    logger.debug("Loading configuration from %s", path)
    try:
        if suffix == ".toml":
            with open(path, "rb") as f:
                data = tomllib.load(f)
        elif suffix == ".json":
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        else:
            data = convert_xml(ET.parse(path).getroot(), diagnostics or log_diagnostic)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, ET.ParseError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Error loading configuration file: {exc}", source=str(path)) from exc
    except OSError as exc:
        raise ConfigurationError(f"Error reading configuration file: {exc}", source=str(path)) from exc

    return _validated(data, str(path))


def _validated(data: Any, origin: str) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise ConfigurationError("Invalid configuration: not a mapping.", source=origin)
    if not data:
        raise ConfigurationError("Invalid configuration: empty configuration.", source=origin)
    return dict(data)


# ── XML ──────────────────────────────────────────────────────────


def convert_xml(root: ET.Element, diagnostics: DiagnosticSink = log_diagnostic) -> dict[str, Any]:
    """Convert a ``<configuration>`` element into a configuration tree."""
    config: dict[str, Any] = {}

    threshold = root.get("threshold")
    if threshold is not None:
        config["threshold"] = threshold

    for node in root:
        tag = _local(node.tag)
        if tag == "appender":
            name = node.get("name", "")
            config.setdefault("appenders", {})[name] = _xml_appender(node)
        elif tag == "logger":
            name = node.get("name", "")
            loggers = config.setdefault("loggers", {})
            if name in loggers:
                diagnostics(Diagnostic(f"Duplicate logger definition [{name}]. Overwriting.", source="xml"))
            loggers[name] = _xml_logger(node)
        elif tag == "root":
            config["rootLogger"] = _xml_logger(node)
        elif tag == "renderer":
            config.setdefault("renderers", []).append({
                "renderedClass": node.get("renderedClass"),
                "renderingClass": node.get("renderingClass"),
            })
    return config


def _xml_appender(node: ET.Element) -> dict[str, Any]:
    appender: dict[str, Any] = {"class": node.get("class")}
    if node.get("threshold") is not None:
        appender["threshold"] = node.get("threshold")
    for child in node:
        tag = _local(child.tag)
        if tag == "layout":
            appender["layout"] = _xml_component(child)
        elif tag == "filter":
            appender.setdefault("filters", []).append(_xml_component(child))
    params = _xml_params(node)
    if params:
        appender["params"] = params
    return appender


def _xml_component(node: ET.Element) -> dict[str, Any]:
    component: dict[str, Any] = {"class": node.get("class")}
    params = _xml_params(node)
    if params:
        component["params"] = params
    return component


def _xml_logger(node: ET.Element) -> dict[str, Any]:
    entry: dict[str, Any] = {}
    for child in node:
        tag = _local(child.tag)
        if tag == "level":
            entry["level"] = child.get("value")
        elif tag in ("appender_ref", "appender-ref"):
            entry.setdefault("appenders", []).append(child.get("ref"))
    if node.get("additivity") is not None:
        entry["additivity"] = node.get("additivity")
    return entry


def _xml_params(node: ET.Element) -> dict[str, Any]:
    return {
        child.get("name"): child.get("value")
        for child in node
        if _local(child.tag) == "param" and child.get("name")
    }


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]
