"""Constants for the mockinbean test harness.

This file contains only the constants shared across layers. Runtime settings
are loaded from an optional YAML file (see config_loader.py).
"""

from __future__ import annotations

# Parent of every module logger in the package
LOGGER_NAME = "mockinbean"

# Settings file
CONFIG_FILENAME = "mockinbean.yaml"
CONFIG_INI_OPTION = "mockinbean_config"
SUPPORTED_CONFIG_MAJOR = "1"

# Settings keys
CONF_VERSION = "version"
CONF_RESET_AFTER_EACH_TEST = "reset_after_each_test"
CONF_STUB_SPEC = "stub_spec"
CONF_LOG_LEVEL = "log_level"

# Stub spec modes
STUB_SPEC_AUTOSPEC = "autospec"
STUB_SPEC_SPEC = "spec"
STUB_SPEC_NONE = "none"
STUB_SPEC_MODES = (STUB_SPEC_AUTOSPEC, STUB_SPEC_SPEC, STUB_SPEC_NONE)

# Defaults
DEFAULT_RESET_AFTER_EACH_TEST = True
DEFAULT_STUB_SPEC = STUB_SPEC_AUTOSPEC
DEFAULT_LOG_LEVEL = "WARNING"

# Fixture names used by the pytest plugin
CONTAINER_FIXTURE = "mockinbean_container"
DOUBLE_FACTORY_FIXTURE = "mockinbean_double_factory"
