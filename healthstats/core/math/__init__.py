"""
Numerical core of healthstats.

This module provides special functions, matrix inversion, correlation
analysis and signal transforms using only numpy and scipy.
"""

from .special import (
    SpecialFunctions,
    log_gamma,
    erf,
    normal_cdf,
    incomplete_beta_regularized,
    student_t_two_tailed_p,
    f_distribution_upper_p,
)
from .linalg import MatrixOperations, invert_matrix
from .statistics import (
    RankStatistics,
    CorrelationAnalysis,
    rank_average,
    correlate_pearson,
    correlate_spearman,
    correlate_kendall,
    correlate_partial,
    correlate_multiple,
)
from .transforms import (
    FourierTransforms,
    WaveletTransforms,
    dominant_frequencies,
    laplace_transform,
    wavelet_transform,
)
from .integration import ODEIntegrator, solve_ode_rk4
from .interpolation import LagrangeInterpolator, lagrange_interpolate
from .dynamics import PhaseSpace, reconstruct_phase_space

__all__ = [
    # Special functions
    "SpecialFunctions",
    "log_gamma",
    "erf",
    "normal_cdf",
    "incomplete_beta_regularized",
    "student_t_two_tailed_p",
    "f_distribution_upper_p",
    # Linear algebra
    "MatrixOperations",
    "invert_matrix",
    # Correlation
    "RankStatistics",
    "CorrelationAnalysis",
    "rank_average",
    "correlate_pearson",
    "correlate_spearman",
    "correlate_kendall",
    "correlate_partial",
    "correlate_multiple",
    # Transforms
    "FourierTransforms",
    "WaveletTransforms",
    "dominant_frequencies",
    "laplace_transform",
    "wavelet_transform",
    # Integration, interpolation, dynamics
    "ODEIntegrator",
    "solve_ode_rk4",
    "LagrangeInterpolator",
    "lagrange_interpolate",
    "PhaseSpace",
    "reconstruct_phase_space",
]
