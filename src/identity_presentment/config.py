"""
Configuration settings for identity presentment verification
"""

from __future__ import annotations

import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .digest import DigestAlgorithm
from .errors import ConfigurationError, UnsupportedDigestAlgorithmError
from .keys import DEFAULT_NONCE_LENGTH, MIN_NONCE_LENGTH

LOG_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}
LOG_OFF_LEVEL = "OFF"  # Disables all output


class PresentmentSettings(BaseSettings):
    """Settings for the presentment verifier"""

    model_config = SettingsConfigDict(env_prefix="PRESENTMENT_", env_file=".env", extra="ignore")

    # Identifiers agreed with the device out of band
    merchant_id: str = Field(..., min_length=1)
    team_id: str = Field(..., min_length=1)

    digest_algorithm: str = "SHA-256"
    nonce_length: int = Field(DEFAULT_NONCE_LENGTH, ge=MIN_NONCE_LENGTH)

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "text"

    @field_validator("merchant_id", "team_id")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        if not v.strip():
            msg = "Identifier must not be blank"
            raise ValueError(msg)
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS and level != LOG_OFF_LEVEL:
            msg = f"Unknown log level: {v}"
            raise ValueError(msg)
        return level

    @field_validator("digest_algorithm")
    @classmethod
    def validate_digest_algorithm(cls, v: str) -> str:
        try:
            return DigestAlgorithm.from_identifier(v).value
        except UnsupportedDigestAlgorithmError as e:
            raise ValueError(e.message) from e

    @classmethod
    def from_yaml(cls, path: str | Path) -> PresentmentSettings:
        """
        Load settings from a YAML file.

        Values may reference environment variables as ${VAR_NAME:-default}.

        Raises:
            ConfigurationError: If the file cannot be read or is invalid
        """
        config_path = Path(path)
        try:
            with open(config_path) as file:
                config_data = yaml.safe_load(file) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing YAML configuration file {config_path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Error reading configuration file {config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Configuration file {config_path} must contain a mapping")

        section = config_data.get("presentment", config_data)
        if not isinstance(section, dict):
            raise ConfigurationError(f"presentment section in {config_path} must be a mapping")
        try:
            return cls(**_expand_env_vars(section))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid presentment configuration: {e}") from e


@lru_cache
def get_settings() -> PresentmentSettings:
    """Return settings loaded from the environment"""
    try:
        return PresentmentSettings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid presentment configuration: {e}") from e


def _expand_env_vars(obj: Any) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports format: ${VAR_NAME:-default_value}
    """
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return re.sub(r"\$\{([^}]+)\}", _replace_var, obj)
    else:
        return obj


def _replace_var(match: re.Match) -> str:
    var_expr = match.group(1)
    if ":-" in var_expr:
        var_name, default_value = var_expr.split(":-", 1)
        return os.environ.get(var_name, default_value)
    return os.environ.get(var_expr, "")
