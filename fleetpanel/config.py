"""TOML-based panel settings.

Loads ~/.fleetpanel/defaults.toml (global) and fleetpanel.toml (project),
merges them, and builds a PanelConfig. FLEETPANEL_URL overrides the url.

    [panel]
    url = "http://capacity.internal:8080"
    poll_interval = 5
    visible_states = ["running", "pending", "shutting-down"]

    [logging]
    level = "DEBUG"
    file = "fleetpanel.log"
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fleetpanel.core.exceptions import ConfigurationError
from fleetpanel.logging import LOG_LEVELS, LogConfig
from fleetpanel.model import DEFAULT_VISIBLE_STATES
from fleetpanel.workers import DEFAULT_POLL_INTERVAL

type RawConfig = dict[str, Any]

GLOBAL_CONFIG_PATH = Path.home() / ".fleetpanel" / "defaults.toml"
PROJECT_CONFIG_NAME = "fleetpanel.toml"
URL_ENV_VAR = "FLEETPANEL_URL"
DEFAULT_URL = "http://localhost:8080"


@dataclass(frozen=True, slots=True)
class PanelConfig:
    """Settings for one panel instance.

    Args:
        url: Capacity service root; ``/api/v1`` is appended by the client.
        poll_interval: Seconds between worker list refreshes.
        request_timeout: Total timeout for a single request, in seconds.
        visible_states: Worker machine states shown in the worker view.
        log: Logging sinks to install.
    """

    url: str = DEFAULT_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = 30.0
    visible_states: frozenset[str] = DEFAULT_VISIBLE_STATES
    log: LogConfig = field(default_factory=LogConfig)


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> RawConfig:
    global_cfg = _read_toml(global_path or GLOBAL_CONFIG_PATH)
    project_cfg = _read_toml((project_dir or Path.cwd()) / PROJECT_CONFIG_NAME)

    merged = _deep_merge(global_cfg, project_cfg)
    merged.setdefault("panel", {})
    merged.setdefault("logging", {})
    return merged


def _positive(raw: RawConfig, key: str, default: float) -> float:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
        raise ConfigurationError(f"'{key}' must be a positive number, got {value!r}")
    return float(value)


def _build_log(raw: RawConfig) -> LogConfig:
    raw = dict(raw)
    level = str(raw.pop("level", "INFO")).upper()
    if level not in LOG_LEVELS:
        raise ConfigurationError(f"Unknown log level '{level}'. Valid: {', '.join(LOG_LEVELS)}")
    try:
        return LogConfig(level=level, **raw)  # type: ignore[arg-type]
    except TypeError as e:
        raise ConfigurationError(f"Invalid [logging] table: {e}") from e


def build_settings(raw: RawConfig) -> PanelConfig:
    panel = raw.get("panel", {})
    unknown = set(panel) - {"url", "poll_interval", "request_timeout", "visible_states"}
    if unknown:
        raise ConfigurationError(f"Unknown [panel] keys: {', '.join(sorted(unknown))}")

    url = os.environ.get(URL_ENV_VAR) or panel.get("url", DEFAULT_URL)
    if not isinstance(url, str) or not url.startswith(("http://", "https://")):
        raise ConfigurationError(f"'url' must be an http(s) URL, got {url!r}")

    states = panel.get("visible_states", sorted(DEFAULT_VISIBLE_STATES))
    if not isinstance(states, list) or not all(isinstance(s, str) for s in states):
        raise ConfigurationError(f"'visible_states' must be a list of strings, got {states!r}")

    return PanelConfig(
        url=url,
        poll_interval=_positive(panel, "poll_interval", DEFAULT_POLL_INTERVAL),
        request_timeout=_positive(panel, "request_timeout", 30.0),
        visible_states=frozenset(states),
        log=_build_log(raw.get("logging", {})),
    )


def load_settings(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> PanelConfig:
    return build_settings(load_config(project_dir=project_dir, global_path=global_path))
