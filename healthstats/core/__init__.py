"""
Core functionality for healthstats with minimal dependencies.

This module provides the foundational components that other modules build upon,
including the exception hierarchy, result structures, numerical routines and
configuration.
"""

from healthstats.core.base import (
    HealthStatsError,
    InvalidInputError,
    ConfigurationError,
    DataStructure,
    CorrelationResult,
)
from healthstats.core.config import (
    get_config,
    set_config,
    EngineConfig,
)

__all__ = [
    # Exceptions
    "HealthStatsError",
    "InvalidInputError",
    "ConfigurationError",
    # Base classes
    "DataStructure",
    "CorrelationResult",
    # Configuration
    "get_config",
    "set_config",
    "EngineConfig",
]
