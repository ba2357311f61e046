"""
Configuration management for healthstats.

This module provides a validated, immutable engine configuration with
environment variable support and JSON/YAML file loading.
"""

from .settings import (
    EngineConfig,
    get_config,
    set_config,
    reset_config,
    update_config,
    load_config_from_env,
    load_config_file,
    save_config_file,
)
from .loader import (
    ConfigLoader,
    YAMLConfigLoader,
    JSONConfigLoader,
    get_config_loader,
)

__all__ = [
    "EngineConfig",
    "get_config",
    "set_config",
    "reset_config",
    "update_config",
    "load_config_from_env",
    "load_config_file",
    "save_config_file",
    "ConfigLoader",
    "YAMLConfigLoader",
    "JSONConfigLoader",
    "get_config_loader",
]
