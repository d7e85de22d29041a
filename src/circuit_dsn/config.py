"""Configuration loader for the converter and the Freerouting client.

Configuration lives in an optional YAML file (``circuit_dsn.yaml`` by
default). Missing files and missing keys fall back to the defaults below.

Example file::

    converter:
      design_name: my-board
      max_iterations: 1000
    freerouting:
      base_url: https://api.freerouting.app/v1
      timeout_sec: 300
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from . import __version__

DEFAULT_CONFIG_PATH = Path("circuit_dsn.yaml")

# Default values if config is missing
DEFAULT_DESIGN_NAME = "circuit-design"
DEFAULT_HOST_CAD = "circuit-json-to-dsn"
DEFAULT_MAX_ITERATIONS = 1000

DEFAULT_FREEROUTING_BASE_URL = "https://api.freerouting.app/v1"
DEFAULT_FREEROUTING_ENVIRONMENT_HOST = "circuit-json-to-dsn"
DEFAULT_FREEROUTING_TIMEOUT_SEC = 300.0
DEFAULT_FREEROUTING_POLL_INTERVAL_SEC = 1.0


class ConfigError(ValueError):
    """Raised when the configuration file is invalid."""


@dataclass(frozen=True)
class ConverterConfig:
    """Settings that shape the generated DSN document."""

    design_name: str = DEFAULT_DESIGN_NAME
    host_cad: str = DEFAULT_HOST_CAD
    host_version: str = __version__
    max_iterations: int = DEFAULT_MAX_ITERATIONS


@dataclass(frozen=True)
class FreeroutingConfig:
    """Freerouting API endpoint and polling behaviour."""

    base_url: str = DEFAULT_FREEROUTING_BASE_URL
    profile_id: str | None = None
    environment_host: str = DEFAULT_FREEROUTING_ENVIRONMENT_HOST
    timeout_sec: float = DEFAULT_FREEROUTING_TIMEOUT_SEC
    poll_interval_sec: float = DEFAULT_FREEROUTING_POLL_INTERVAL_SEC


@dataclass(frozen=True)
class AppConfig:
    converter: ConverterConfig = field(default_factory=ConverterConfig)
    freerouting: FreeroutingConfig = field(default_factory=FreeroutingConfig)


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML file. Defaults to ``circuit_dsn.yaml`` in
            the working directory.

    Returns:
        AppConfig with defaults filled in.

    Raises:
        ConfigError: If the file is not valid YAML or has the wrong shape.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        return AppConfig()

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return AppConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")

    return _parse_config(data)


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping, got {type(section).__name__}")
    return section


def _number(section: dict[str, Any], section_name: str, key: str, default: float, kind: type) -> Any:
    value = section.get(key, default)
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{section_name}.{key} must be {kind.__name__}, got {value!r}") from e


def _parse_config(data: dict[str, Any]) -> AppConfig:
    converter_data = _section(data, "converter")
    max_iterations = _number(converter_data, "converter", "max_iterations", DEFAULT_MAX_ITERATIONS, int)
    if max_iterations < 1:
        raise ConfigError(f"converter.max_iterations must be >= 1, got {max_iterations}")
    converter = ConverterConfig(
        design_name=str(converter_data.get("design_name", DEFAULT_DESIGN_NAME)),
        host_cad=str(converter_data.get("host_cad", DEFAULT_HOST_CAD)),
        host_version=str(converter_data.get("host_version", __version__)),
        max_iterations=max_iterations,
    )

    routing_data = _section(data, "freerouting")
    profile_id = routing_data.get("profile_id")
    freerouting = FreeroutingConfig(
        base_url=str(routing_data.get("base_url", DEFAULT_FREEROUTING_BASE_URL)).rstrip("/"),
        profile_id=str(profile_id) if profile_id else None,
        environment_host=str(routing_data.get("environment_host", DEFAULT_FREEROUTING_ENVIRONMENT_HOST)),
        timeout_sec=_number(routing_data, "freerouting", "timeout_sec", DEFAULT_FREEROUTING_TIMEOUT_SEC, float),
        poll_interval_sec=_number(
            routing_data, "freerouting", "poll_interval_sec", DEFAULT_FREEROUTING_POLL_INTERVAL_SEC, float
        ),
    )
    if freerouting.timeout_sec <= 0 or freerouting.poll_interval_sec <= 0:
        raise ConfigError("freerouting.timeout_sec and freerouting.poll_interval_sec must be positive")

    return AppConfig(converter=converter, freerouting=freerouting)
