"""Settings for arborlog itself.

Loads from .arborlog/settings.toml -> env vars -> defaults.

These are not logger configurations (those come from a configuration tree,
see :mod:`arborlog.core.sources`); they decide what an unconfigured context
falls back to and how the framework's own diagnostics are logged.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

SETTINGS_DIR = ".arborlog"
SETTINGS_FILE = "settings.toml"


@dataclass(frozen=True)
class DefaultsConfig:
    """Shape of the default configuration used when none is supplied."""

    root_level: str = "DEBUG"
    appender: str = "echo"
    layout: str = "simple"


@dataclass(frozen=True)
class SourceConfig:
    """Where an unconfigured context looks for its configuration tree."""

    path: str = ""


@dataclass(frozen=True)
class LogConfig:
    """Logging of arborlog's own output.

    ``level`` and ``format`` apply to the framework's internal messages,
    the ``diagnostics_*`` fields to the diagnostics channel. ``file``
    receives both, rotated at ``file_max_bytes`` when that is positive.
    """

    level: str = "WARNING"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    diagnostics: bool = True
    diagnostics_level: str = "notice"
    diagnostics_format: str = "arborlog %(levelname)s: %(message)s"
    file: str = ""
    file_max_bytes: int = 0
    file_backups: int = 3


@dataclass(frozen=True)
class ArborSettings:
    """Top-level arborlog settings."""

    defaults: DefaultsConfig = DefaultsConfig()
    source: SourceConfig = SourceConfig()
    logging: LogConfig = LogConfig()

    @classmethod
    def load(cls, project_path: str | Path = ".") -> ArborSettings:
        """Load settings from .arborlog/settings.toml, env vars, and defaults.

        Priority: env vars > TOML file > defaults. A relative ``source.path``
        read from the TOML file is resolved against the project directory.
        """
        project = Path(project_path).resolve()
        settings_file = project / SETTINGS_DIR / SETTINGS_FILE

        toml_data: dict = {}
        if settings_file.exists():
            with open(settings_file, "rb") as f:
                toml_data = tomllib.load(f)

        source = _build_section(SourceConfig, toml_data.get("source", {}), "ARBORLOG_SOURCE")
        if source.path and not Path(source.path).is_absolute() and "path" in toml_data.get("source", {}):
            source = SourceConfig(path=str(project / source.path))

        return cls(
            defaults=_build_section(DefaultsConfig, toml_data.get("defaults", {}), "ARBORLOG_DEFAULTS"),
            source=source,
            logging=_build_section(LogConfig, toml_data.get("logging", {}), "ARBORLOG_LOG"),
        )


def _build_section(cls: type, toml_dict: dict, env_prefix: str):
    """Build a settings section from TOML dict + env var overrides."""
    kwargs = {}
    for f in fields(cls):
        env_key = f"{env_prefix}_{f.name}".upper()
        env_val = os.environ.get(env_key)

        if env_val is not None:
            kwargs[f.name] = _coerce(env_val, f.type)
        elif f.name in toml_dict:
            kwargs[f.name] = toml_dict[f.name]

    return cls(**kwargs)


def _coerce(value: str, type_hint: str):
    """Coerce a string env var value to the appropriate type."""
    if type_hint == "bool":
        return value.lower() in ("true", "1", "yes")
    if type_hint == "int":
        return int(value)
    return value
