"""
Polynomial interpolation through scattered points.
"""

import logging
from typing import Sequence, Tuple, Union

import numpy as np
from scipy import interpolate

from ..base.exceptions import InvalidInputError
from ..base.validation import require_finite


logger = logging.getLogger(__name__)

PointsLike = Union[np.ndarray, Sequence[Tuple[float, float]]]


class LagrangeInterpolator:
    """Lagrange interpolating polynomial in barycentric form.

    Built on :class:`scipy.interpolate.BarycentricInterpolator`, which
    rescales the barycentric weights by the node spread so their products
    neither overflow nor underflow for large node counts. The form is
    algebraically identical to the classical Lagrange formula.

    Parameters
    ----------
    points : array-like
        (x, y) pairs or an array of shape (n, 2) with distinct x values
    """

    def __init__(self, points: PointsLike):
        try:
            nodes = np.array(points, dtype=float)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Points must be (x, y) pairs: {e}", field="points") from e

        if nodes.size == 0:
            raise InvalidInputError("At least one interpolation point is required",
                                    field="points", value=0)
        if nodes.ndim != 2 or nodes.shape[1] != 2:
            raise InvalidInputError(f"Points must have shape (n, 2), got {nodes.shape}",
                                    field="points", value=nodes.shape)
        if not np.all(np.isfinite(nodes)):
            raise InvalidInputError("Points contain non-finite values", field="points")

        self.x = nodes[:, 0].copy()
        self.y = nodes[:, 1].copy()

        if np.unique(self.x).size != self.x.size:
            raise InvalidInputError("Interpolation points must have distinct x values",
                                    field="points")

        # A single node is a constant polynomial; the node spread is zero
        self._interpolator = (interpolate.BarycentricInterpolator(self.x, self.y)
                              if self.x.size > 1 else None)
        logger.debug("Built barycentric interpolator on %d nodes", self.x.size)

    def __call__(self, target_x: float) -> float:
        """Evaluate the interpolating polynomial at target_x.

        Raises
        ------
        InvalidInputError
            If the target is not finite or the polynomial value overflows
        """
        target = require_finite(target_x, "target_x")

        exact = np.flatnonzero(self.x == target)
        if exact.size:
            return float(self.y[exact[0]])
        if self._interpolator is None:
            return float(self.y[0])

        with np.errstate(all="ignore"):
            value = float(self._interpolator(target))
        if not np.isfinite(value):
            raise InvalidInputError(
                f"Interpolating polynomial through {len(self)} points is not finite "
                f"at x={target:g}",
                field="target_x", value=target,
            )
        return value

    def __len__(self) -> int:
        return self.x.size


def lagrange_interpolate(points: PointsLike, target_x: float) -> float:
    """Evaluate the Lagrange polynomial through ``points`` at ``target_x``."""
    return LagrangeInterpolator(points)(target_x)
