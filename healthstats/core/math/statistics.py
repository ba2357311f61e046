"""
Correlation analysis with significance testing.

Pearson, Spearman, Kendall, partial and multiple correlation are computed
directly from the samples. Tail probabilities come from
:mod:`healthstats.core.math.special` so each result carries a convergence flag.
"""

import logging
import math
from typing import Sequence, Union

import numpy as np

from ..base.data_structures import CorrelationResult, MultipleCorrelationResult, SIGNIFICANCE_LEVEL
from ..base.exceptions import InvalidInputError
from ..base.validation import ArrayLike, as_sample_pair, as_series
from .linalg import MatrixOperations
from .special import SpecialFunctions


logger = logging.getLogger(__name__)

# |r| within this distance of 1 is treated as a perfect linear relationship
PERFECT_CORRELATION_TOLERANCE = 1e-12


class RankStatistics:
    """Rank transforms."""

    @staticmethod
    def rank_average(values: ArrayLike) -> np.ndarray:
        """Assign 1-based ranks, giving tied values the mean of their positions.

        Parameters
        ----------
        values : array-like
            Input samples

        Returns
        -------
        np.ndarray
            Float ranks in input order
        """
        data = as_series(values, "values")
        n = data.size
        order = np.argsort(data, kind="mergesort")
        sorted_values = data[order]

        # Start index of each run of equal values
        boundaries = np.concatenate(([True], sorted_values[1:] != sorted_values[:-1]))
        group_ids = np.cumsum(boundaries) - 1
        starts = np.flatnonzero(boundaries)
        ends = np.append(starts[1:], n)
        group_ranks = (starts + 1 + ends) / 2.0

        ranks = np.empty(n, dtype=float)
        ranks[order] = group_ranks[group_ids]
        return ranks


class CorrelationAnalysis:
    """Pairwise and multivariate correlation coefficients with p-values."""

    METHODS = ("pearson", "spearman", "kendall")

    @staticmethod
    def _pearson_coefficient(x: np.ndarray, y: np.ndarray, names=("x", "y")) -> float:
        dx = x - x.mean()
        dy = y - y.mean()
        sxx = float(np.dot(dx, dx))
        syy = float(np.dot(dy, dy))
        # Zero range marks a constant series; its float sum of squares may not be 0
        for name, values, ss in zip(names, (x, y), (sxx, syy)):
            if np.ptp(values) == 0.0 or ss == 0.0:
                raise InvalidInputError(
                    f"Sequence '{name}' has zero variance; correlation is undefined",
                    field=name, value=0.0,
                )
        r = float(np.dot(dx, dy)) / math.sqrt(sxx * syy)
        return min(max(r, -1.0), 1.0)

    @staticmethod
    def _t_test(r: float, n: int, df: int, method: str) -> CorrelationResult:
        """Attach a Student's t significance test to a coefficient."""
        if 1.0 - abs(r) <= PERFECT_CORRELATION_TOLERANCE:
            return CorrelationResult.from_statistic(math.copysign(1.0, r), 0.0, method, n)

        t = r * math.sqrt(df / (1.0 - r * r))
        tail = SpecialFunctions.student_t_two_tailed_p(t, df)
        return CorrelationResult.from_statistic(r, tail.value, method, n,
                                                converged=tail.converged)

    @staticmethod
    def pearson(x: ArrayLike, y: ArrayLike) -> CorrelationResult:
        """Pearson product-moment correlation.

        Parameters
        ----------
        x, y : array-like
            Paired samples of equal length, at least 3

        Returns
        -------
        CorrelationResult
            Coefficient with two-tailed p-value from Student's t (n-2 df)

        Raises
        ------
        InvalidInputError
            If the lengths differ, n < 3, values are non-finite or either
            sequence is constant
        """
        x_arr, y_arr = as_sample_pair(x, y, min_length=3)
        n = x_arr.size
        r = CorrelationAnalysis._pearson_coefficient(x_arr, y_arr)
        return CorrelationAnalysis._t_test(r, n, n - 2, "pearson")

    @staticmethod
    def spearman(x: ArrayLike, y: ArrayLike) -> CorrelationResult:
        """Spearman rank correlation with average ranks for ties."""
        x_arr, y_arr = as_sample_pair(x, y, min_length=3)
        n = x_arr.size
        r = CorrelationAnalysis._pearson_coefficient(
            RankStatistics.rank_average(x_arr), RankStatistics.rank_average(y_arr)
        )
        return CorrelationAnalysis._t_test(r, n, n - 2, "spearman")

    @staticmethod
    def kendall(x: ArrayLike, y: ArrayLike) -> CorrelationResult:
        """Kendall's tau with a normal approximation for significance.

        Pairs tied in either variable count as neither concordant nor
        discordant, so constant input yields tau = 0.
        """
        x_arr, y_arr = as_sample_pair(x, y, min_length=3)
        n = x_arr.size

        i, j = np.triu_indices(n, k=1)
        products = np.sign(x_arr[i] - x_arr[j]) * np.sign(y_arr[i] - y_arr[j])
        concordant = int(np.count_nonzero(products > 0))
        discordant = int(np.count_nonzero(products < 0))

        n_pairs = n * (n - 1) / 2.0
        tau = (concordant - discordant) / n_pairs
        variance = (4.0 * n + 10.0) / (9.0 * n * (n - 1))
        z = tau / math.sqrt(variance)
        p_value = 2.0 * (1.0 - SpecialFunctions.normal_cdf(abs(z)))

        logger.debug("Kendall tau: C=%d D=%d n=%d z=%.4f", concordant, discordant, n, z)
        return CorrelationResult.from_statistic(tau, p_value, "kendall", n)

    @staticmethod
    def partial(x: ArrayLike, y: ArrayLike, z: ArrayLike) -> CorrelationResult:
        """Correlation between x and y controlling for z.

        Raises
        ------
        InvalidInputError
            If n < 4, or z is perfectly correlated with x or y
        """
        x_arr, y_arr = as_sample_pair(x, y, min_length=4)
        _, z_arr = as_sample_pair(x_arr, z, min_length=4, names=("x", "z"))
        n = x_arr.size

        rxy = CorrelationAnalysis._pearson_coefficient(x_arr, y_arr, ("x", "y"))
        rxz = CorrelationAnalysis._pearson_coefficient(x_arr, z_arr, ("x", "z"))
        ryz = CorrelationAnalysis._pearson_coefficient(y_arr, z_arr, ("y", "z"))

        if min(1.0 - abs(rxz), 1.0 - abs(ryz)) <= PERFECT_CORRELATION_TOLERANCE:
            raise InvalidInputError(
                "Control variable is perfectly correlated with x or y; "
                "partial correlation is undefined",
                field="z", value=(rxz, ryz),
            )

        denominator = (1.0 - rxz * rxz) * (1.0 - ryz * ryz)
        r = (rxy - rxz * ryz) / math.sqrt(denominator)
        r = min(max(r, -1.0), 1.0)
        return CorrelationAnalysis._t_test(r, n, n - 3, "partial")

    @staticmethod
    def multiple(dependent: ArrayLike,
                 independents: Union[np.ndarray, Sequence[ArrayLike]]) -> MultipleCorrelationResult:
        """Multiple correlation of one variable on several predictors.

        Parameters
        ----------
        dependent : array-like
            Response samples of length n
        independents : sequence of array-like
            p predictor sequences, each of length n

        Returns
        -------
        MultipleCorrelationResult
            R, R², F statistic and upper-tail p-value with (p, n-p-1) df

        Raises
        ------
        InvalidInputError
            If p < 1, n - p - 1 < 1, lengths differ or a variable is constant
        SingularMatrixError
            If the predictors are collinear
        """
        y = as_series(dependent, "dependent")
        predictors = [as_series(values, f"independents[{k}]")
                      for k, values in enumerate(independents)]
        p = len(predictors)
        n = y.size

        if p < 1:
            raise InvalidInputError("At least one independent variable is required",
                                    field="independents", value=p)
        for k, values in enumerate(predictors):
            if values.size != n:
                raise InvalidInputError(
                    f"independents[{k}] has length {values.size}, expected {n}",
                    field=f"independents[{k}]", value=values.size,
                )
        df_residual = n - p - 1
        if df_residual < 1:
            raise InvalidInputError(
                f"Need more than {p + 1} samples for {p} predictors, got {n}",
                field="n_samples", value=n,
            )

        variables = [y] + predictors
        names = ["dependent"] + [f"independents[{k}]" for k in range(p)]
        size = p + 1
        corr = np.eye(size)
        for a in range(size):
            for b in range(a + 1, size):
                r = CorrelationAnalysis._pearson_coefficient(
                    variables[a], variables[b], (names[a], names[b])
                )
                corr[a, b] = corr[b, a] = r

        r_yx = corr[0, 1:]
        r_xx_inv = MatrixOperations.invert(corr[1:, 1:])
        r_squared = float(r_yx @ r_xx_inv @ r_yx)
        r_squared = min(max(r_squared, 0.0), 1.0)

        if 1.0 - r_squared <= PERFECT_CORRELATION_TOLERANCE:
            return MultipleCorrelationResult(
                coefficient=1.0, p_value=0.0, significant=True, r_squared=1.0,
                f_statistic=math.inf, df_model=p, df_residual=df_residual, n_samples=n,
            )

        f_statistic = (r_squared / p) / ((1.0 - r_squared) / df_residual)
        tail = SpecialFunctions.f_distribution_upper_p(f_statistic, p, df_residual)
        p_value = min(max(tail.value, 0.0), 1.0)

        return MultipleCorrelationResult(
            coefficient=math.sqrt(r_squared),
            p_value=p_value,
            significant=p_value < SIGNIFICANCE_LEVEL,
            r_squared=r_squared,
            f_statistic=f_statistic,
            df_model=p,
            df_residual=df_residual,
            n_samples=n,
            converged=tail.converged,
        )

    @staticmethod
    def compute(x: ArrayLike, y: ArrayLike, method: str = "pearson") -> CorrelationResult:
        """Dispatch a pairwise correlation by method name."""
        try:
            func = {
                "pearson": CorrelationAnalysis.pearson,
                "spearman": CorrelationAnalysis.spearman,
                "kendall": CorrelationAnalysis.kendall,
            }[method]
        except KeyError:
            raise InvalidInputError(
                f"Unknown correlation method '{method}'. "
                f"Available: {', '.join(CorrelationAnalysis.METHODS)}",
                field="method", value=method,
            ) from None
        return func(x, y)


rank_average = RankStatistics.rank_average
correlate_pearson = CorrelationAnalysis.pearson
correlate_spearman = CorrelationAnalysis.spearman
correlate_kendall = CorrelationAnalysis.kendall
correlate_partial = CorrelationAnalysis.partial
correlate_multiple = CorrelationAnalysis.multiple
