import math

import numpy as np
import pytest

from healthstats.core.base.data_structures import ODESolution
from healthstats.core.base.exceptions import InvalidInputError, NumericalDivergenceError
from healthstats.core.math.integration import solve_ode_rk4


class TestRK4:
    def test_exponential_growth(self):
        solution = solve_ode_rk4(lambda t, y: y, 1.0, 0.0, 1.0, 0.1)
        assert isinstance(solution, ODESolution)
        assert len(solution.t) == 11
        assert len(solution.y) == 11
        assert solution.y[-1] == pytest.approx(math.e, abs=1e-5)

    def test_time_grid(self):
        solution = solve_ode_rk4(lambda t, y: 0.0, 0.0, 2.0, 3.0, 0.25)
        np.testing.assert_allclose(solution.t, 2.0 + 0.25 * np.arange(5))

    def test_exact_multiple_adds_no_extra_step(self):
        # 0.3 / 0.1 is 2.9999999999999996 in floating point
        solution = solve_ode_rk4(lambda t, y: 1.0, 0.0, 0.0, 0.3, 0.1)
        assert len(solution.t) == 4

    def test_partial_last_step_rounds_up(self):
        solution = solve_ode_rk4(lambda t, y: 1.0, 0.0, 0.0, 1.0, 0.3)
        assert len(solution.t) == 5
        assert solution.t[-1] == pytest.approx(1.2)

    def test_polynomial_integrated_exactly(self):
        # RK4 is exact for y' = t^3
        solution = solve_ode_rk4(lambda t, y: t ** 3, 0.0, 0.0, 2.0, 0.5)
        np.testing.assert_allclose(solution.y, solution.t ** 4 / 4, atol=1e-12)

    def test_fourth_order_convergence(self):
        def error(h):
            solution = solve_ode_rk4(lambda t, y: -2.0 * y, 1.0, 0.0, 1.0, h)
            return abs(solution.y[-1] - math.exp(-2.0))

        ratio = error(0.1) / error(0.05)
        assert 12.0 < ratio < 20.0

    def test_vector_state_harmonic_oscillator(self):
        def oscillator(t, state):
            position, velocity = state
            return [velocity, -position]

        solution = solve_ode_rk4(oscillator, [1.0, 0.0], 0.0, math.pi, 0.01)
        assert solution.y.shape == (len(solution.t), 2)
        assert solution.y[-1, 0] == pytest.approx(math.cos(solution.t[-1]), abs=1e-6)
        assert solution.y[-1, 1] == pytest.approx(-math.sin(solution.t[-1]), abs=1e-6)

    def test_zero_length_interval(self):
        solution = solve_ode_rk4(lambda t, y: y, 3.0, 1.0, 1.0, 0.1)
        np.testing.assert_array_equal(solution.t, [1.0])
        np.testing.assert_array_equal(solution.y, [3.0])

    def test_initial_state_not_aliased(self):
        y0 = np.array([1.0, 2.0])
        solve_ode_rk4(lambda t, y: -y, y0, 0.0, 1.0, 0.1)
        np.testing.assert_array_equal(y0, [1.0, 2.0])

    @pytest.mark.parametrize("t0,tn,h", [
        (0.0, 1.0, 0.0),
        (0.0, 1.0, -0.1),
        (1.0, 0.0, 0.1),
        (0.0, float("inf"), 0.1),
        (float("nan"), 1.0, 0.1),
    ])
    def test_rejects_invalid_interval(self, t0, tn, h):
        with pytest.raises(InvalidInputError):
            solve_ode_rk4(lambda t, y: y, 1.0, t0, tn, h)

    def test_divergence_raises(self):
        with pytest.raises(NumericalDivergenceError) as exc_info:
            solve_ode_rk4(lambda t, y: y ** 2, 1.0, 0.0, 5.0, 0.5)
        assert exc_info.value.step >= 1
