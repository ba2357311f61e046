"""
Configuration settings and management for healthstats.

This module provides centralized configuration with validation and
environment variable support. Numerical tolerances and the significance
threshold are module constants in the math package, not settings; the
configuration only covers execution and logging concerns.
"""

import os
import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Optional
from pathlib import Path

from ..base.exceptions import ConfigurationError
from .loader import get_config_loader


# Global configuration instance
_global_config: Optional["EngineConfig"] = None

VALID_METHODS = ("pearson", "spearman", "kendall")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_LOG_FORMATS = ("standard", "json", "detailed")

ENV_PREFIX = "HEALTHSTATS_"


@dataclass(frozen=True)
class EngineConfig:
    """Execution settings for the correlation and transform engine.

    Instances are immutable; use :meth:`replace` to derive a modified copy.
    """

    # Parallel processing
    num_workers: Optional[int] = None

    # Defaults for client calls
    correlation_method: str = "pearson"
    sampling_rate: float = 1.0

    # Logging
    log_level: str = "INFO"
    log_format: str = "standard"
    log_file: Optional[Path] = None

    def __post_init__(self):
        """Post-initialization normalization and validation."""
        if self.log_file is not None:
            object.__setattr__(self, "log_file", Path(self.log_file))

        if self.num_workers is None:
            object.__setattr__(self, "num_workers", os.cpu_count() or 1)

        object.__setattr__(self, "log_level", str(self.log_level).upper())
        object.__setattr__(self, "correlation_method", str(self.correlation_method).lower())

        self.validate()

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises
        ------
        ConfigurationError
            If any configuration parameter is invalid
        """
        errors = []

        if isinstance(self.num_workers, bool) or not isinstance(self.num_workers, int) \
                or self.num_workers <= 0:
            errors.append("num_workers must be a positive integer or None")

        if self.correlation_method not in VALID_METHODS:
            errors.append(f"correlation_method must be one of {list(VALID_METHODS)}")

        if not isinstance(self.sampling_rate, (int, float)) or isinstance(self.sampling_rate, bool) \
                or not self.sampling_rate > 0 or self.sampling_rate == float("inf"):
            errors.append("sampling_rate must be a finite positive number")

        if self.log_level not in VALID_LOG_LEVELS:
            errors.append(f"log_level must be one of {list(VALID_LOG_LEVELS)}")

        if self.log_format not in VALID_LOG_FORMATS:
            errors.append(f"log_format must be one of {list(VALID_LOG_FORMATS)}")

        if errors:
            raise ConfigurationError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary.

        Returns
        -------
        dict
            Dictionary representation with paths as strings
        """
        result = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            result[f.name] = str(value) if isinstance(value, Path) else value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Create configuration from dictionary.

        Raises
        ------
        ConfigurationError
            If the dictionary contains unknown keys
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration parameters: {', '.join(unknown)}",
                                     parameter=unknown[0])
        return cls(**data)

    def replace(self, **changes) -> "EngineConfig":
        """Return a validated copy with the given fields changed."""
        known = {f.name for f in dataclasses.fields(self)}
        for key in changes:
            if key not in known:
                raise ConfigurationError(f"Unknown configuration parameter: {key}", parameter=key)
        return dataclasses.replace(self, **changes)


def get_config() -> EngineConfig:
    """Get the global configuration instance.

    Returns
    -------
    EngineConfig
        Global configuration instance, created with defaults on first use
    """
    global _global_config
    if _global_config is None:
        _global_config = EngineConfig()
    return _global_config


def set_config(config: EngineConfig) -> None:
    """Set the global configuration instance.

    Raises
    ------
    TypeError
        If config is not an EngineConfig instance
    """
    global _global_config
    if not isinstance(config, EngineConfig):
        raise TypeError("config must be an EngineConfig instance")
    _global_config = config


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _global_config
    _global_config = EngineConfig()


def update_config(**kwargs) -> EngineConfig:
    """Replace the global configuration with an updated copy."""
    config = get_config().replace(**kwargs)
    set_config(config)
    return config


def load_config_from_env(environ: Optional[Dict[str, str]] = None) -> EngineConfig:
    """Load configuration from ``HEALTHSTATS_*`` environment variables.

    Parameters
    ----------
    environ : dict, optional
        Mapping to read instead of ``os.environ``

    Returns
    -------
    EngineConfig
        Defaults overridden by any variables that are set
    """
    environ = os.environ if environ is None else environ

    env_mapping = {
        f'{ENV_PREFIX}NUM_WORKERS': 'num_workers',
        f'{ENV_PREFIX}CORRELATION_METHOD': 'correlation_method',
        f'{ENV_PREFIX}SAMPLING_RATE': 'sampling_rate',
        f'{ENV_PREFIX}LOG_LEVEL': 'log_level',
        f'{ENV_PREFIX}LOG_FORMAT': 'log_format',
        f'{ENV_PREFIX}LOG_FILE': 'log_file',
    }

    updates = {}
    for env_var, attr_name in env_mapping.items():
        if env_var not in environ:
            continue
        value = environ[env_var]

        try:
            if attr_name == 'num_workers':
                updates[attr_name] = int(value) if value else None
            elif attr_name == 'sampling_rate':
                updates[attr_name] = float(value)
            elif attr_name == 'log_file':
                if value:
                    updates[attr_name] = Path(value)
            else:
                updates[attr_name] = value
        except ValueError as e:
            raise ConfigurationError(f"Invalid value for {env_var}: {value!r}",
                                     parameter=attr_name, cause=e) from e

    return EngineConfig(**updates)


def load_config_file(path) -> EngineConfig:
    """Load configuration from a JSON or YAML file."""
    path = Path(path)
    return EngineConfig.from_dict(get_config_loader(path).load(path))


def save_config_file(config: EngineConfig, path) -> None:
    """Write configuration to a JSON or YAML file chosen by extension."""
    path = Path(path)
    get_config_loader(path).save(config.to_dict(), path)
