"""
Parallel correlation matrix over many named variables.

Each upper-triangle pair is an independent task. Workers write only the two
cells owned by their pair into preallocated arrays, so no lock is needed.
"""

import itertools
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from ..base.data_structures import CorrelationMatrixResult
from ..base.exceptions import ComputationCancelled, InvalidInputError, reraise_with_context
from ..base.validation import ArrayLike, as_series
from ..math.statistics import CorrelationAnalysis
from .log_manager import PerformanceLogger


logger = logging.getLogger(__name__)

VariablesLike = Union[Mapping[str, ArrayLike], Sequence[ArrayLike]]

_build_counter = itertools.count(1)


class CorrelationMatrixBuilder:
    """Builds symmetric coefficient and p-value matrices on a thread pool.

    Parameters
    ----------
    method : str
        Pairwise method: "pearson", "spearman" or "kendall"
    max_workers : int, optional
        Thread pool size (default: executor default)
    cancel_event : threading.Event, optional
        Checked before each pair; once set, remaining pairs are skipped and
        :class:`ComputationCancelled` is raised
    """

    def __init__(self, method: str = "pearson", max_workers: Optional[int] = None,
                 cancel_event: Optional[threading.Event] = None):
        if method not in CorrelationAnalysis.METHODS:
            raise InvalidInputError(
                f"Unknown correlation method '{method}'. "
                f"Available: {', '.join(CorrelationAnalysis.METHODS)}",
                field="method", value=method,
            )
        if max_workers is not None and max_workers <= 0:
            raise InvalidInputError("max_workers must be positive", field="max_workers",
                                    value=max_workers)

        self.method = method
        self.max_workers = max_workers
        self.cancel_event = cancel_event if cancel_event is not None else threading.Event()
        self.performance = PerformanceLogger(logger)

    @staticmethod
    def _normalize(variables: VariablesLike) -> Tuple[Tuple[str, ...], list]:
        if isinstance(variables, Mapping):
            labels = tuple(str(label) for label in variables.keys())
            values = list(variables.values())
        else:
            values = list(variables)
            labels = tuple(str(k) for k in range(len(values)))

        if not values:
            raise InvalidInputError("At least one variable is required", field="variables", value=0)

        series = [as_series(v, f"variables[{label}]") for label, v in zip(labels, values)]
        return labels, series

    def build(self, variables: VariablesLike) -> CorrelationMatrixResult:
        """Compute all pairwise correlations.

        Parameters
        ----------
        variables : mapping or sequence
            ``label -> samples`` or a sequence of sample sequences, which are
            labelled "0", "1", ...

        Returns
        -------
        CorrelationMatrixResult
            Unit diagonal with zero p-values on the diagonal

        Raises
        ------
        ComputationCancelled
            If the cancel event was set before every pair ran
        HealthStatsError
            The first error raised by a pair, prefixed with the pair labels
        """
        labels, series = self._normalize(variables)
        k = len(labels)

        coefficients = np.eye(k)
        p_values = np.zeros((k, k))
        converged = np.ones((k, k), dtype=bool)

        pairs = [(i, j) for i in range(k) for j in range(i + 1, k)]
        total = len(pairs)
        timer = f"correlation_matrix#{next(_build_counter)} ({self.method}, {k} variables)"

        abort = threading.Event()

        def compute_pair(i: int, j: int) -> bool:
            if self.cancel_event.is_set() or abort.is_set():
                return False
            result = CorrelationAnalysis.compute(series[i], series[j], self.method)
            coefficients[i, j] = coefficients[j, i] = result.coefficient
            p_values[i, j] = p_values[j, i] = result.p_value
            converged[i, j] = converged[j, i] = result.converged
            return True

        completed = 0
        with self.performance.time_operation(timer):
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {executor.submit(compute_pair, i, j): (i, j) for i, j in pairs}

                for future in as_completed(futures):
                    i, j = futures[future]
                    try:
                        done = future.result()
                    except Exception as e:
                        abort.set()
                        for f in futures:
                            f.cancel()
                        reraise_with_context(
                            e, f"Correlation of '{labels[i]}' and '{labels[j]}' failed",
                            {"pair": (labels[i], labels[j])},
                        )
                    if done:
                        completed += 1

        if completed < total:
            logger.info("Correlation matrix cancelled after %d of %d pairs", completed, total)
            raise ComputationCancelled(
                f"Correlation matrix cancelled after {completed} of {total} pairs",
                completed=completed, total=total,
            )

        logger.debug("Computed %d %s correlations over %d variables", total, self.method, k)
        return CorrelationMatrixResult(
            labels=labels,
            coefficients=coefficients,
            p_values=p_values,
            method=self.method,
            converged=converged,
        )


def correlation_matrix(variables: VariablesLike, method: str = "pearson",
                       max_workers: Optional[int] = None,
                       cancel_event: Optional[threading.Event] = None) -> CorrelationMatrixResult:
    """Correlation matrix over named variables, computed in parallel."""
    builder = CorrelationMatrixBuilder(method=method, max_workers=max_workers,
                                       cancel_event=cancel_event)
    return builder.build(variables)
