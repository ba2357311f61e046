"""
Fixed-step integration of ordinary differential equations.
"""

import logging
import math
from typing import Callable, Union

import numpy as np

from ..base.data_structures import ODESolution
from ..base.exceptions import InvalidInputError, NumericalDivergenceError
from ..base.validation import require_finite, require_positive


logger = logging.getLogger(__name__)

# Slack so that an interval that is an exact multiple of h gains no extra step
STEP_COUNT_SLACK = 1e-9

StateLike = Union[float, np.ndarray]


class ODEIntegrator:
    """Classical fourth-order Runge-Kutta integrator."""

    @staticmethod
    def rk4(f: Callable[[float, StateLike], StateLike], y0: StateLike,
            t0: float, tn: float, h: float) -> ODESolution:
        """Integrate y' = f(t, y) from t0 to tn with fixed step h.

        Parameters
        ----------
        f : callable
            Derivative function f(t, y), returning a value shaped like y
        y0 : float or array-like
            Initial state, scalar or vector
        t0, tn : float
            Integration interval, tn >= t0
        h : float
            Positive step size

        Returns
        -------
        ODESolution
            ``t`` of length steps+1 with t[i] = t0 + i*h, and ``y`` with one
            state per time point (shape (steps+1,) for scalar y0, otherwise
            (steps+1, len(y0)))

        Raises
        ------
        InvalidInputError
            If h <= 0, tn < t0 or a bound is not finite
        NumericalDivergenceError
            If the state becomes non-finite
        """
        t0 = require_finite(t0, "t0")
        tn = require_finite(tn, "tn")
        h = require_positive(h, "h")
        if tn < t0:
            raise InvalidInputError(f"End time {tn} precedes start time {t0}",
                                    field="tn", value=tn)

        state = np.array(y0, dtype=float)
        if state.ndim > 1:
            raise InvalidInputError("Initial state must be a scalar or a 1-D vector",
                                    field="y0", value=state.shape)
        if not np.all(np.isfinite(state)):
            raise InvalidInputError("Initial state contains non-finite values", field="y0")

        steps = max(0, math.ceil((tn - t0) / h - STEP_COUNT_SLACK))
        times = t0 + h * np.arange(steps + 1)
        values = np.empty((steps + 1,) + state.shape, dtype=float)
        values[0] = state

        def derivative(t, y):
            return np.asarray(f(t, y), dtype=float)

        for i in range(steps):
            t = times[i]
            k1 = derivative(t, state)
            k2 = derivative(t + h / 2, state + h / 2 * k1)
            k3 = derivative(t + h / 2, state + h / 2 * k2)
            k4 = derivative(t + h, state + h * k3)
            state = state + h / 6 * (k1 + 2 * k2 + 2 * k3 + k4)

            if not np.all(np.isfinite(state)):
                raise NumericalDivergenceError(
                    f"Solution became non-finite at t={times[i + 1]:g}",
                    step=i + 1, time=float(times[i + 1]),
                )
            values[i + 1] = state

        logger.debug("RK4 integrated %d steps on [%g, %g]", steps, t0, tn)
        return ODESolution(t=times, y=values)


solve_ode_rk4 = ODEIntegrator.rk4
