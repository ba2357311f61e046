"""
healthstats: statistical correlation and numerical-transform engine for
health report analysis.
"""

__version__ = "0.1.0"

from healthstats.core.base.exceptions import (
    HealthStatsError,
    InvalidInputError,
    SingularMatrixError,
    DomainError,
    NumericalDivergenceError,
    ComputationCancelled,
    ConfigurationError,
)
from healthstats.core.base.data_structures import (
    SIGNIFICANCE_LEVEL,
    CorrelationResult,
    MultipleCorrelationResult,
    FrequencyDomainResult,
    CorrelationMatrixResult,
    ODESolution,
)
from healthstats.core.config import get_config, EngineConfig
from healthstats.api import (
    correlate_pearson,
    correlate_spearman,
    correlate_kendall,
    correlate_partial,
    correlate_multiple,
    invert_matrix,
    dominant_frequencies,
    wavelet_transform,
    laplace_transform,
    solve_ode_rk4,
    lagrange_interpolate,
    reconstruct_phase_space,
    correlation_matrix,
    HealthStatsClient,
)

# Public API
__all__ = [
    "__version__",
    # Exceptions
    "HealthStatsError",
    "InvalidInputError",
    "SingularMatrixError",
    "DomainError",
    "NumericalDivergenceError",
    "ComputationCancelled",
    "ConfigurationError",
    # Results
    "SIGNIFICANCE_LEVEL",
    "CorrelationResult",
    "MultipleCorrelationResult",
    "FrequencyDomainResult",
    "CorrelationMatrixResult",
    "ODESolution",
    # Configuration
    "get_config",
    "EngineConfig",
    # Operations
    "correlate_pearson",
    "correlate_spearman",
    "correlate_kendall",
    "correlate_partial",
    "correlate_multiple",
    "invert_matrix",
    "dominant_frequencies",
    "wavelet_transform",
    "laplace_transform",
    "solve_ode_rk4",
    "lagrange_interpolate",
    "reconstruct_phase_space",
    "correlation_matrix",
    "HealthStatsClient",
]


def get_version():
    """Get the version string."""
    return __version__


def get_info():
    """Get package information."""
    return {
        "version": __version__,
        "correlation_methods": ["pearson", "spearman", "kendall"],
    }
