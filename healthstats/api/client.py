"""
Main client interface for healthstats.
"""

from typing import Any, Dict, Optional, Sequence, Tuple
import logging
import threading

import numpy as np

from ..core.config.settings import EngineConfig, get_config
from ..core.base.data_structures import (
    CorrelationMatrixResult,
    CorrelationResult,
    FrequencyDomainResult,
    MultipleCorrelationResult,
)
from ..core.base.validation import ArrayLike
from ..core.math.statistics import CorrelationAnalysis
from ..core.math.transforms import FourierTransforms, WaveletTransforms
from ..core.processing.batch import CorrelationMatrixBuilder, VariablesLike


class HealthStatsClient:
    """Main client interface applying configured defaults to engine calls."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or get_config()
        self.logger = logging.getLogger(f"healthstats.{self.__class__.__name__}")

    def correlate(self, x: ArrayLike, y: ArrayLike,
                  method: Optional[str] = None) -> CorrelationResult:
        """Pairwise correlation using ``method`` or the configured default."""
        method = method or self.config.correlation_method
        result = CorrelationAnalysis.compute(x, y, method)
        if not result.converged:
            self.logger.warning("p-value for %s correlation is a best estimate", method)
        return result

    def partial(self, x: ArrayLike, y: ArrayLike, z: ArrayLike) -> CorrelationResult:
        return CorrelationAnalysis.partial(x, y, z)

    def multiple(self, dependent: ArrayLike,
                 independents: Sequence[ArrayLike]) -> MultipleCorrelationResult:
        return CorrelationAnalysis.multiple(dependent, independents)

    def correlation_matrix(self, variables: VariablesLike, method: Optional[str] = None,
                           cancel_event: Optional[threading.Event] = None) -> CorrelationMatrixResult:
        """Correlation matrix on ``config.num_workers`` threads."""
        builder = CorrelationMatrixBuilder(
            method=method or self.config.correlation_method,
            max_workers=self.config.num_workers,
            cancel_event=cancel_event,
        )
        return builder.build(variables)

    def spectrum(self, series: ArrayLike, sampling_rate: Optional[float] = None,
                 detrend: bool = False) -> FrequencyDomainResult:
        """Dominant frequencies at ``sampling_rate`` or the configured rate."""
        rate = self.config.sampling_rate if sampling_rate is None else sampling_rate
        return FourierTransforms.dominant_frequencies(series, rate, detrend=detrend)

    def laplace(self, series: ArrayLike,
                sampling_rate: Optional[float] = None) -> Tuple[np.ndarray, np.ndarray]:
        rate = self.config.sampling_rate if sampling_rate is None else sampling_rate
        return FourierTransforms.laplace_transform(series, rate)

    def wavelet(self, signal: ArrayLike, scales: ArrayLike) -> np.ndarray:
        return WaveletTransforms.transform(signal, scales)

    def get_info(self) -> Dict[str, Any]:
        """Get client information."""
        return {
            "config": self.config.to_dict(),
            "correlation_methods": list(CorrelationAnalysis.METHODS),
        }
