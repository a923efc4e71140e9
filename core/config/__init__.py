"""
Runtime Configuration Module

Provides configuration loading and management.
"""

from .runtime import (
    ENV_PREFIX,
    IngestConfig,
    LoggingConfig,
    RuntimeConfig,
    StorageConfig,
    TamperConfig,
    get_default_config,
    get_default_config_template,
    load_config,
    set_default_config,
)

__all__ = [
    "ENV_PREFIX",
    "IngestConfig",
    "LoggingConfig",
    "RuntimeConfig",
    "StorageConfig",
    "TamperConfig",
    "get_default_config",
    "get_default_config_template",
    "load_config",
    "set_default_config",
]
