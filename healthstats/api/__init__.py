"""
Public interface of the healthstats engine.

Every function here is stateless and deterministic; ``HealthStatsClient``
adds configured defaults on top of them.
"""

from ..core.math.statistics import (
    correlate_pearson,
    correlate_spearman,
    correlate_kendall,
    correlate_partial,
    correlate_multiple,
    rank_average,
)
from ..core.math.linalg import invert_matrix
from ..core.math.transforms import dominant_frequencies, wavelet_transform, laplace_transform
from ..core.math.integration import solve_ode_rk4
from ..core.math.interpolation import lagrange_interpolate
from ..core.math.dynamics import reconstruct_phase_space
from ..core.processing.batch import correlation_matrix
from .client import HealthStatsClient

__all__ = [
    "correlate_pearson",
    "correlate_spearman",
    "correlate_kendall",
    "correlate_partial",
    "correlate_multiple",
    "rank_average",
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
