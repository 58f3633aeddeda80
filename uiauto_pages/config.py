# uiauto_pages/config.py
"""
@file config.py
@brief Timing configuration and YAML settings for page nodes.

Effective timings for the current thread, highest priority first:

  1. TimeConfig.override(...) context
  2. run config installed with TimeConfig.install_run_config() or PageSettings.install()
  3. process default (the "default" preset)

Example settings file:

    preset: default
    nodes:
      default_timeout: 10
      polling_interval: 0.2
      default_wait: visible
    store:
      disable_cache: false
    timings:
      page_wait: {timeout: 30, interval: 0.5}
"""

from __future__ import annotations

import json
import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, Dict, Generator, Optional

import yaml
from jsonschema import Draft202012Validator

from .exceptions import ConfigError
from .timings import (PAUSE_FIELDS, TIMEOUT_FIELDS, WAIT_TYPES,
                      build_preset_values, list_presets)

SETTINGS_SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schemas", "settings.schema.json")


@dataclass(frozen=True)
class TimeoutSettings:
    """Timeout and poll interval of one kind of wait, in seconds."""
    timeout: float
    interval: float
    retry_count: Optional[int] = None

    def merged(self, values: Dict[str, Any]) -> TimeoutSettings:
        """Return a copy with the non-None entries of values applied."""
        changes = {key: values[key] for key in ("timeout", "interval", "retry_count") if values.get(key) is not None}
        for key in ("timeout", "interval"):
            if key in changes:
                changes[key] = float(changes[key])
        return replace(self, **changes)


class TimeConfig:
    """
    Snapshot of every timing field: one TimeoutSettings per wait kind in
    TIMEOUT_FIELDS and one float per pause in PAUSE_FIELDS.

    Nodes read the current config once, when they are constructed.
    """

    _local = threading.local()
    _lock = threading.Lock()
    _default: Optional[TimeConfig] = None

    def __init__(self, preset: str = "default"):
        values = build_preset_values(preset)
        for name in TIMEOUT_FIELDS:
            entry = values[name]
            setattr(self, name, TimeoutSettings(
                timeout=float(entry["timeout"]),
                interval=float(entry["interval"]),
                retry_count=entry.get("retry_count"),
            ))
        for name in PAUSE_FIELDS:
            setattr(self, name, float(values[name]))

    def __repr__(self) -> str:
        return f"TimeConfig({self.to_dict()!r})"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for name in TIMEOUT_FIELDS:
            setting: TimeoutSettings = getattr(self, name)
            data[name] = {"timeout": setting.timeout, "interval": setting.interval, "retry_count": setting.retry_count}
        for name in PAUSE_FIELDS:
            data[name] = getattr(self, name)
        return data

    def with_overrides(self, overrides: Dict[str, Any]) -> TimeConfig:
        """
        Return a copy with overrides applied. Timeout fields accept a
        TimeoutSettings or a partial dict; pause fields accept a number.

        @raise ValueError for unknown fields or malformed values
        """
        config = object.__new__(TimeConfig)
        config.__dict__.update(self.__dict__)
        for key, value in overrides.items():
            if key in TIMEOUT_FIELDS:
                if isinstance(value, TimeoutSettings):
                    setattr(config, key, value)
                elif isinstance(value, dict):
                    setattr(config, key, getattr(config, key).merged(value))
                else:
                    raise ValueError(f"Invalid override for {key}: {value!r}")
            elif key in PAUSE_FIELDS:
                setattr(config, key, float(value))
            else:
                raise ValueError(f"Unknown TimeConfig field: {key}")
        return config

    @classmethod
    def build_from(
        cls,
        *,
        preset: str = "default",
        overrides: Optional[Dict[str, Any]] = None,
        app_defaults: Optional[Dict[str, float]] = None,
    ) -> TimeConfig:
        """
        Build a run config: preset values, then overrides. With the default
        preset, app_defaults (default_timeout, polling_interval) set the
        element and list waits wherever overrides leave them untouched.
        """
        overrides = dict(overrides or {})
        if app_defaults and preset == "default":
            node_wait = {
                "timeout": float(app_defaults["default_timeout"]),
                "interval": float(app_defaults["polling_interval"]),
            }
            for name in ("element_wait", "list_wait"):
                overrides.setdefault(name, node_wait)
        return cls(preset).with_overrides(overrides)

    @classmethod
    def default(cls) -> TimeConfig:
        if cls._default is None:
            with cls._lock:
                if cls._default is None:
                    cls._default = cls("default")
        return cls._default

    @classmethod
    def current(cls) -> TimeConfig:
        """The effective config for this thread."""
        for attr in ("override", "run_config"):
            config = getattr(cls._local, attr, None)
            if config is not None:
                return config
        return cls.default()

    @classmethod
    def install_run_config(cls, config: Optional[TimeConfig]) -> None:
        cls._local.run_config = config

    @classmethod
    def clear_run_config(cls) -> None:
        cls._local.run_config = None

    @classmethod
    @contextmanager
    def override(cls, **overrides: Any) -> Generator[TimeConfig, None, None]:
        """Temporarily replace timing fields for this thread."""
        previous = getattr(cls._local, "override", None)
        cls._local.override = cls.current().with_overrides(overrides)
        try:
            yield cls._local.override
        finally:
            cls._local.override = previous

    @classmethod
    def reset_to_defaults(cls) -> None:
        with cls._lock:
            cls._default = cls("default")
        cls._local.override = None
        cls._local.run_config = None


def available_presets() -> Dict[str, Dict[str, Any]]:
    return list_presets()


@dataclass(frozen=True)
class PageSettings:
    """Settings consumed by nodes at construction time."""
    default_timeout: float = 10.0
    polling_interval: float = 0.2
    default_wait: str = "visible"
    disable_cache: bool = False
    preset: str = "default"
    timings: Optional[Dict[str, Any]] = None

    def build_time_config(self) -> TimeConfig:
        return TimeConfig.build_from(
            preset=self.preset,
            overrides=self.timings,
            app_defaults={"default_timeout": self.default_timeout, "polling_interval": self.polling_interval},
        )

    def install(self) -> TimeConfig:
        """Install these settings as the current thread's run config."""
        config = self.build_time_config()
        TimeConfig.install_run_config(config)
        return config


def validate_settings(data: Dict[str, Any], schema_path: str = SETTINGS_SCHEMA_PATH) -> None:
    """
    Validate raw settings against the JSON schema.

    @raise ConfigError listing every violation with its path
    """
    with open(schema_path, "r", encoding="utf-8") as f:
        validator = Draft202012Validator(json.load(f))
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        lines = ["Settings schema validation failed:"]
        lines.extend(f"- {list(e.path)}: {e.message}" for e in errors)
        raise ConfigError("\n".join(lines))


def parse_settings(data: Dict[str, Any]) -> PageSettings:
    validate_settings(data)
    nodes = data.get("nodes") or {}
    store = data.get("store") or {}

    default_wait = str(nodes.get("default_wait", "visible"))
    if default_wait not in WAIT_TYPES:
        raise ConfigError(f"nodes.default_wait must be one of {list(WAIT_TYPES)}, got '{default_wait}'")

    return PageSettings(
        default_timeout=float(nodes.get("default_timeout", 10.0)),
        polling_interval=float(nodes.get("polling_interval", 0.2)),
        default_wait=default_wait,
        disable_cache=bool(store.get("disable_cache", False)),
        preset=str(data.get("preset", "default")),
        timings=data.get("timings") or None,
    )


def load_settings(path: str) -> PageSettings:
    """
    Load settings from a YAML file.

    @param path Path to a settings YAML file
    @return Parsed and validated PageSettings
    @raise ConfigError if the file is missing, unparsable or invalid
    """
    path = os.path.abspath(path)
    if not os.path.exists(path):
        raise ConfigError(f"Settings YAML not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Settings YAML must be a mapping at root.")
    return parse_settings(data)
