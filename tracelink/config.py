"""Configuration loading for Tracelink.

Settings come from four places, highest priority first:
- explicit overrides passed by the caller
- environment variables (TRACELINK_*)
- a TOML config file (./tracelink.toml or ~/.tracelink/tracelink.toml)
- defaults on the pydantic models below
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

try:
    import tomllib  # Python >=3.11
except ImportError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from tracelink.errors import ConfigError
from tracelink.utils.helpers import is_lower_hex

logger = logging.getLogger("tracelink.config")

CONFIG_FILE_NAME = "tracelink.toml"
ENV_PREFIX = "TRACELINK_"

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}

# flat key -> (section, type)
_FIELDS = {
    "supported_versions": ("propagation", list),
    "reject_zero_ids": ("propagation", bool),
    "debug": ("logging", bool),
}


class PropagationConfig(BaseModel):
    supported_versions: List[str] = Field(default_factory=lambda: ["00"])
    reject_zero_ids: bool = False

    @field_validator("supported_versions")
    @classmethod
    def _check_versions(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("at least one traceparent version must be supported")
        for version in value:
            if not is_lower_hex(version, 2):
                raise ValueError(f"version {version!r} is not two lowercase hex digits")
            if version == "ff":
                raise ValueError("version 'ff' is reserved as invalid")
        return sorted(set(value))


class LoggingConfig(BaseModel):
    debug: bool = False


class TracelinkConfig(BaseModel):
    propagation: PropagationConfig = Field(default_factory=PropagationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_flat(cls, flat: Dict[str, Any]) -> "TracelinkConfig":
        nested: Dict[str, Dict[str, Any]] = {}
        for key, value in flat.items():
            if key not in _FIELDS:
                raise ConfigError("Unknown config key", {"key": key})
            section, _ = _FIELDS[key]
            nested.setdefault(section, {})[key] = value
        return cls.model_validate(nested)


def find_config_file() -> Optional[str]:
    """Return the first config file found in the cwd or home directory."""
    candidates = [
        Path.cwd() / CONFIG_FILE_NAME,
        Path.home() / ".tracelink" / CONFIG_FILE_NAME,
    ]
    for path in candidates:
        if path.is_file():
            return str(path)
    return None


def load_toml_config(path: str) -> Dict[str, Any]:
    """
    Load a TOML config file into a nested dict.

    Returns an empty dict if the file does not exist.

    Raises:
        ConfigError: if the file is not valid TOML
    """
    file_path = Path(path)
    if not file_path.is_file():
        logger.debug("Config file %s not found", path)
        return {}
    try:
        with file_path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError("Invalid TOML config file", {"path": path, "error": e}) from e


def _flatten(nested: Dict[str, Any], source: str) -> Dict[str, Any]:
    """
    Flatten {section: {key: value}} into {key: value}.

    Raises:
        ConfigError: on a section or key that is not a known setting
    """
    flat: Dict[str, Any] = {}
    for section, values in nested.items():
        if not isinstance(values, dict):
            raise ConfigError("Unknown config section", {"section": section, "source": source})
        for key, value in values.items():
            if _FIELDS.get(key, (None, None))[0] != section:
                raise ConfigError("Unknown config key", {"key": f"{section}.{key}", "source": source})
            flat[key] = value
    return flat


def _parse_env_value(name: str, raw: str, kind: type) -> Any:
    if kind is bool:
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigError("Invalid boolean environment variable", {"name": name, "value": raw})
    if kind is list:
        return [item.strip() for item in raw.split(",") if item.strip()]
    return raw


def load_config_from_env(flat: bool = False) -> Dict[str, Any]:
    """
    Read TRACELINK_* environment variables.

    Args:
        flat: return {key: value} instead of {section: {key: value}}
    """
    result: Dict[str, Any] = {}
    for key, (section, kind) in _FIELDS.items():
        name = ENV_PREFIX + key.upper()
        raw = os.environ.get(name)
        if raw is None:
            continue
        value = _parse_env_value(name, raw, kind)
        if flat:
            result[key] = value
        else:
            result.setdefault(section, {})[key] = value
    return result


def load_config_with_priority(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Merge file, environment and explicit settings into a flat dict.

    Priority: overrides > env > config file. Keys with a None override are
    ignored.
    """
    path = config_file or find_config_file()
    merged: Dict[str, Any] = {}
    if path:
        merged.update(_flatten(load_toml_config(path), source=path))
    merged.update(load_config_from_env(flat=True))
    if overrides:
        merged.update({k: v for k, v in overrides.items() if v is not None})
    return merged


def validate_config(values: Dict[str, Any]) -> TracelinkConfig:
    """Validate a flat config dict, raising ConfigError on bad values."""
    try:
        return TracelinkConfig.from_flat(values)
    except PydanticValidationError as e:
        raise ConfigError("Invalid configuration", {"errors": e.errors()}) from e


def load_config(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> TracelinkConfig:
    """Load and validate configuration from every source."""
    cfg = validate_config(load_config_with_priority(config_file=config_file, overrides=overrides))
    logger.debug("Loaded config: %s", cfg.model_dump())
    return cfg
