#
# config/loader.py
#
"""
Loads and validates the gtrunner TOML configuration file.
"""

import tomllib
from pathlib import Path
from typing import Any

import attrs
import structlog

from gtrunner.config.models import GlobalConfig, GtrunnerConfig, RunnerConfig
from gtrunner.exceptions import ConfigurationError
from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("config.loader")

DEFAULT_CONFIG_NAME = "gtrunner.toml"


def _known_keys(cls: type) -> set[str]:
    return {a.name for a in attrs.fields(cls)}


def _build_section(cls: type, section_name: str, raw: Any) -> Any:
    """Instantiate an attrs model from one TOML table, rejecting unknown keys."""
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Section [{section_name}] must be a table, got {type(raw).__name__}.")

    unknown = sorted(set(raw) - _known_keys(cls))
    if unknown:
        raise ConfigurationError(f"Unknown key(s) in [{section_name}]: {', '.join(unknown)}")

    try:
        return cls(**raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value in [{section_name}]: {e}") from e


def load_config(config_path: Path | None) -> GtrunnerConfig:
    """
    Loads the configuration from a TOML file.

    A missing file is not an error: defaults are returned so gtrunner works in
    any CMake workspace without setup.

    Args:
        config_path: Path to the TOML file, or None for pure defaults.

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: The file exists but cannot be parsed or validated.
    """
    load_log = log.bind(config_path=str(config_path) if config_path else None)

    if config_path is None or not config_path.is_file():
        load_log.debug("No configuration file found, using defaults")
        return GtrunnerConfig(config_file_path=None)

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        load_log.error("Configuration file is not valid TOML", error=str(e))
        raise ConfigurationError(f"Invalid TOML in '{config_path}': {e}") from e
    except OSError as e:
        load_log.error("Configuration file could not be read", error=str(e))
        raise ConfigurationError(f"Cannot read '{config_path}': {e}") from e

    unknown_sections = sorted(set(data) - {"global", "runner"})
    if unknown_sections:
        raise ConfigurationError(f"Unknown section(s) in '{config_path}': {', '.join(unknown_sections)}")

    config = GtrunnerConfig(
        runner=_build_section(RunnerConfig, "runner", data.get("runner")),
        global_config=_build_section(GlobalConfig, "global", data.get("global")),
        config_file_path=config_path.resolve(),
    )
    load_log.info("Configuration loaded", log_level=config.global_config.log_level)
    return config


# 🔼⚙️
