"""
Batch execution and logging infrastructure.
"""

from .log_manager import (
    JSONFormatter,
    PerformanceLogger,
    LogManager,
    setup_logging,
)
from .batch import CorrelationMatrixBuilder, correlation_matrix

__all__ = [
    "JSONFormatter",
    "PerformanceLogger",
    "LogManager",
    "setup_logging",
    "CorrelationMatrixBuilder",
    "correlation_matrix",
]
