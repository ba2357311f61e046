"""
Base classes and data structures with minimal dependencies.

This module provides the foundational components that other modules build upon:
the exception hierarchy, result data structures and input validation.
"""

from .exceptions import (
    HealthStatsError,
    InvalidInputError,
    SingularMatrixError,
    DomainError,
    NumericalDivergenceError,
    ComputationCancelled,
    ConfigurationError,
    reraise_with_context,
)
from .data_structures import (
    SIGNIFICANCE_LEVEL,
    DataStructure,
    CorrelationResult,
    MultipleCorrelationResult,
    IncompleteBetaResult,
    FrequencyDomainResult,
    CorrelationMatrixResult,
    ODESolution,
)
from .validation import (
    Validator,
    SeriesValidator,
    as_series,
    as_sample_pair,
    require_positive,
    require_positive_int,
    require_finite,
)

__all__ = [
    # Exceptions
    "HealthStatsError",
    "InvalidInputError",
    "SingularMatrixError",
    "DomainError",
    "NumericalDivergenceError",
    "ComputationCancelled",
    "ConfigurationError",
    "reraise_with_context",
    # Data structures
    "SIGNIFICANCE_LEVEL",
    "DataStructure",
    "CorrelationResult",
    "MultipleCorrelationResult",
    "IncompleteBetaResult",
    "FrequencyDomainResult",
    "CorrelationMatrixResult",
    "ODESolution",
    # Validation
    "Validator",
    "SeriesValidator",
    "as_series",
    "as_sample_pair",
    "require_positive",
    "require_positive_int",
    "require_finite",
]
