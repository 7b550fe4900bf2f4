"""
Configuration for the planner application.

Defaults live in the dataclasses below. A YAML file may override any of
them, section by section:

    storage:
      adapter: json
      directory: ~/planner-data
    events:
      history_capacity: 200

Two environment variables take precedence over the file:
``PLANNER_DATA_DIR`` (storage directory) and ``PLANNER_LOG_LEVEL``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

STORAGE_ADAPTERS = ("json", "memory")


@dataclass(frozen=True)
class AppConfig:
    name: str = "Planner"
    version: str = "2.0.0"


@dataclass(frozen=True)
class StorageConfig:
    adapter: str = "json"
    directory: Path = Path.home() / ".planner"
    namespace: str = "planner"
    key: str = "plannerData"
    autosave: bool = True


@dataclass(frozen=True)
class EventsConfig:
    history_capacity: int = 100


@dataclass(frozen=True)
class FeaturesConfig:
    undo_redo: bool = True
    max_undo_steps: int = 50
    debug_mode: bool = False


@dataclass(frozen=True)
class DefaultsConfig:
    section_title: str = "New Section"
    section_placeholder: str = "Write something..."
    orientation: str = "landscape"


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "WARNING"


@dataclass(frozen=True)
class PlannerConfig:
    app: AppConfig = field(default_factory=AppConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    events: EventsConfig = field(default_factory=EventsConfig)
    features: FeaturesConfig = field(default_factory=FeaturesConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def is_feature_enabled(self, name: str) -> bool:
        return bool(getattr(self.features, name, False))


def load_config(path: Path | None = None, environ: Mapping[str, str] | None = None) -> PlannerConfig:
    """
    Build the configuration from defaults, an optional YAML file, and
    the environment.

    Raises ``ValueError`` when the file is not a mapping, names an unknown
    section or option, or gives an option the wrong type.
    """
    config = PlannerConfig()

    if path is not None:
        with Path(path).open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        config = apply_overrides(config, raw or {})

    return apply_environment(config, os.environ if environ is None else environ)


def apply_overrides(config: PlannerConfig, raw: Any) -> PlannerConfig:
    if not isinstance(raw, dict):
        raise ValueError("Config file must be a YAML mapping (dict)")

    sections = {f.name: getattr(config, f.name) for f in fields(config)}
    for section_name, values in raw.items():
        if section_name not in sections:
            raise ValueError(f"Unknown config section: '{section_name}'")
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ValueError(f"Config section '{section_name}' must be a mapping")
        sections[section_name] = _override_section(section_name, sections[section_name], values)

    config = PlannerConfig(**sections)
    _validate(config)
    return config


def apply_environment(config: PlannerConfig, environ: Mapping[str, str]) -> PlannerConfig:
    data_dir = environ.get("PLANNER_DATA_DIR")
    if data_dir:
        config = replace(config, storage=replace(config.storage, directory=Path(data_dir).expanduser()))

    log_level = environ.get("PLANNER_LOG_LEVEL")
    if log_level:
        config = replace(config, logging=replace(config.logging, level=log_level.upper()))

    return config


def _override_section(section_name: str, section: Any, values: dict[str, Any]) -> Any:
    known = {f.name: f for f in fields(section)}
    updates: dict[str, Any] = {}
    for key, value in values.items():
        if key not in known:
            raise ValueError(f"Unknown option '{key}' in config section '{section_name}'")
        default = getattr(section, key)
        if isinstance(default, Path):
            value = Path(str(value)).expanduser()
        elif isinstance(default, bool):
            if not isinstance(value, bool):
                raise ValueError(f"'{section_name}.{key}' must be true or false")
        elif isinstance(default, int):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"'{section_name}.{key}' must be an integer")
        elif isinstance(default, str):
            value = str(value)
        updates[key] = value
    return replace(section, **updates)


def _validate(config: PlannerConfig) -> None:
    if config.storage.adapter not in STORAGE_ADAPTERS:
        raise ValueError(
            f"storage.adapter must be one of {', '.join(STORAGE_ADAPTERS)}, got '{config.storage.adapter}'"
        )
    if config.events.history_capacity < 0:
        raise ValueError("events.history_capacity must be >= 0")
    if config.features.max_undo_steps < 0:
        raise ValueError("features.max_undo_steps must be >= 0")
    if config.defaults.orientation not in ("portrait", "landscape"):
        raise ValueError("defaults.orientation must be 'portrait' or 'landscape'")
