# src/equalscheck/core/config.py
"""
Configuration schema and loading for equalscheck.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class LoggingSettings(BaseModel):
    """Logging output configuration, consumed by configure_logging()."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Root log level",
    )
    json_output: bool = Field(
        default=False,
        description="Emit JSON lines instead of console output",
    )


class PrefabSettings(BaseModel):
    """Prefab value pool configuration.

    Example YAML:
        prefab:
          max_depth: 8
          include_defaults: true
    """

    model_config = {"frozen": True, "extra": "forbid"}

    max_depth: int = Field(
        default=16,
        gt=0,
        description="Maximum nesting depth when generating values for unknown classes",
    )
    include_defaults: bool = Field(
        default=True,
        description="Seed the pool with the built-in catalogue of common value types",
    )


class EqualsCheckSettings(BaseModel):
    """Top-level settings."""

    model_config = {"frozen": True, "extra": "forbid"}

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    prefab: PrefabSettings = Field(default_factory=PrefabSettings)


def load_settings(config_path: Path | None = None) -> EqualsCheckSettings:
    """Load settings from an optional YAML file with environment overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (EQUALSCHECK_*) - highest priority
    2. Config file, when given
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: EQUALSCHECK_PREFAB__MAX_DEPTH for nested keys.

    Args:
        config_path: Path to YAML configuration file, or None for env/defaults only

    Returns:
        Validated EqualsCheckSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config_path is given but doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="EQUALSCHECK",
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys (top level and nested); Pydantic wants lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return EqualsCheckSettings(**raw_config)


def _lower_keys(value: object) -> object:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value
