"""Configuration loader for harness settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import voluptuous as vol
import yaml

from .const import (
    CONF_LOG_LEVEL,
    CONF_RESET_AFTER_EACH_TEST,
    CONF_STUB_SPEC,
    CONF_VERSION,
    DEFAULT_LOG_LEVEL,
    DEFAULT_RESET_AFTER_EACH_TEST,
    DEFAULT_STUB_SPEC,
    STUB_SPEC_MODES,
    SUPPORTED_CONFIG_MAJOR,
)
from .domain.exceptions import ConfigurationError

_LOGGER = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

SETTINGS_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_VERSION, default=f"{SUPPORTED_CONFIG_MAJOR}.0"): vol.Coerce(
            str
        ),
        vol.Optional(
            CONF_RESET_AFTER_EACH_TEST, default=DEFAULT_RESET_AFTER_EACH_TEST
        ): bool,
        vol.Optional(CONF_STUB_SPEC, default=DEFAULT_STUB_SPEC): vol.In(
            STUB_SPEC_MODES
        ),
        vol.Optional(CONF_LOG_LEVEL, default=DEFAULT_LOG_LEVEL): vol.All(
            str, vol.Upper, vol.In(LOG_LEVELS)
        ),
    }
)


@dataclass(frozen=True)
class Settings:
    """Harness settings.

    Attributes:
        reset_after_each_test: Reset every double after each test method
        stub_spec: Stub spec mode passed to the double factory
        log_level: Level applied to the mockinbean logger
    """

    reset_after_each_test: bool = DEFAULT_RESET_AFTER_EACH_TEST
    stub_spec: str = DEFAULT_STUB_SPEC
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(config_file: str | Path | None, required: bool = False) -> Settings:
    """Load and validate settings from YAML.

    Args:
        config_file: Path of the settings file, or None for defaults
        required: Raise if the file does not exist (explicitly configured path)

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: If the file is missing (when required), is not
            valid YAML, or does not match the settings schema
    """
    if config_file is None:
        return Settings()

    path = Path(config_file)
    if not path.exists():
        if required:
            raise ConfigurationError(f"Configuration file not found: {path}")
        _LOGGER.debug("No settings file at %s, using defaults", path)
        return Settings()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as err:
        raise ConfigurationError(f"Invalid YAML in {path}: {err}") from err

    settings = parse_settings(raw, source=str(path))
    _LOGGER.info(
        "Loaded settings from %s: reset_after_each_test=%s, stub_spec=%s",
        path,
        settings.reset_after_each_test,
        settings.stub_spec,
    )
    return settings


def parse_settings(raw: Any, source: str = "<settings>") -> Settings:
    """Validate a raw settings mapping.

    Args:
        raw: Parsed YAML content (None means empty)
        source: Label used in error messages

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: If the mapping is invalid
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{source}: settings must be a mapping")

    try:
        data = SETTINGS_SCHEMA(raw)
    except vol.Invalid as err:
        raise ConfigurationError(f"{source}: {err}") from err

    version = data[CONF_VERSION]
    if version.split(".")[0] != SUPPORTED_CONFIG_MAJOR:
        raise ConfigurationError(
            f"{source}: configuration version {version} not supported. "
            f"Only version {SUPPORTED_CONFIG_MAJOR}.x is supported."
        )

    return Settings(
        reset_after_each_test=data[CONF_RESET_AFTER_EACH_TEST],
        stub_spec=data[CONF_STUB_SPEC],
        log_level=data[CONF_LOG_LEVEL],
    )
