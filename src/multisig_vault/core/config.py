"""
multisig-vault Configuration

Supports:
- Config file loading (YAML/JSON)
- Environment variable overrides (MSIG_SECTION_KEY=value)
- Config validation

Example:
    MSIG_WALLET_MAX_OWNERS=25
    MSIG_LOGGING_LEVEL=DEBUG
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "MSIG_"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


@dataclass
class WalletConfig:
    """Wallet policy settings"""
    max_owners: int = 0  # 0 = unlimited

    def validate(self):
        """Validate wallet configuration"""
        if isinstance(self.max_owners, bool) or not isinstance(self.max_owners, int):
            raise ConfigurationError(f"Invalid max_owners: {self.max_owners!r}. Must be an integer")
        if self.max_owners < 0:
            raise ConfigurationError(f"Invalid max_owners: {self.max_owners}. Must be >= 0")
        if 0 < self.max_owners < 2:
            # administrator plus at least one co-owner
            raise ConfigurationError(f"Invalid max_owners: {self.max_owners}. Must be 0 or >= 2")


@dataclass
class LoggingConfig:
    """Logging configuration settings"""
    level: str = "INFO"
    log_file: Optional[str] = None
    environment: str = "development"
    json_format: bool = True

    def validate(self):
        """Validate logging configuration"""
        if str(self.level).upper() not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {self.level}. Must be one of {', '.join(VALID_LOG_LEVELS)}"
            )
        self.level = str(self.level).upper()

        if self.log_file is not None and not isinstance(self.log_file, str):
            raise ConfigurationError(f"Invalid log_file: {self.log_file!r}. Must be a path string")
        if not isinstance(self.environment, str):
            raise ConfigurationError(f"Invalid environment: {self.environment!r}. Must be a string")
        if not isinstance(self.json_format, bool):
            raise ConfigurationError(f"Invalid json_format: {self.json_format!r}. Must be a boolean")


@dataclass
class EngineConfig:
    """Top-level configuration"""
    wallet: WalletConfig = field(default_factory=WalletConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self):
        self.wallet.validate()
        self.logging.validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _load_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from a YAML or JSON file.

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Malformed config file {config_path}: {exc}") from exc

    data = data or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")
    return data


def _parse_env_value(value: str) -> Union[str, int, float, bool]:
    """
    Parse environment variable value to appropriate type

    Args:
        value: String value from environment variable

    Returns:
        Parsed value
    """
    # Boolean
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False

    # Integer
    try:
        return int(value)
    except ValueError:
        pass

    # Float
    try:
        return float(value)
    except ValueError:
        pass

    return value


def _apply_env_variables(
    config: Dict[str, Any], environ: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """
    Apply environment variable overrides (MSIG_SECTION_KEY=value).

    Unknown sections are ignored.
    """
    environ = os.environ if environ is None else environ
    result = {}
    for section, values in config.items():
        if values is not None and not isinstance(values, dict):
            raise ConfigurationError(f"Config section {section!r} must be a mapping")
        result[section] = dict(values or {})

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue

        parts = key[len(ENV_PREFIX):].lower().split("_")
        if len(parts) < 2:
            continue

        section = parts[0]
        config_key = "_".join(parts[1:])
        if section not in ("wallet", "logging"):
            continue

        result.setdefault(section, {})[config_key] = _parse_env_value(value)

    return result


def _build_section(cls, values: Dict[str, Any]):
    known = {name for name in cls.__dataclass_fields__}
    unknown = set(values) - known
    if unknown:
        raise ConfigurationError(
            f"Unknown {cls.__name__} option(s): {', '.join(sorted(unknown))}"
        )
    return cls(**values)


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> EngineConfig:
    """
    Build the engine configuration.

    Precedence (lowest to highest): dataclass defaults, config file,
    MSIG_* environment variables.

    Args:
        path: Optional YAML or JSON config file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated EngineConfig

    Raises:
        ConfigurationError: If any value is invalid
    """
    raw = _load_config_file(path) if path else {}
    raw = _apply_env_variables(raw, environ)

    for section in raw:
        if section not in ("wallet", "logging"):
            raise ConfigurationError(f"Unknown config section: {section}")

    config = EngineConfig(
        wallet=_build_section(WalletConfig, raw.get("wallet", {})),
        logging=_build_section(LoggingConfig, raw.get("logging", {})),
    )
    config.validate()

    logger.debug(
        "Configuration loaded",
        extra={"event": "config.loaded", "source": str(path) if path else "defaults"},
    )
    return config
