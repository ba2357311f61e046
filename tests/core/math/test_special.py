import logging
import math

import pytest
from scipy import special as sp
from scipy import stats

from healthstats.core.base.exceptions import DomainError
from healthstats.core.math.special import (
    CF_MAX_ITERATIONS,
    SpecialFunctions,
    erf,
    f_distribution_upper_p,
    incomplete_beta_regularized,
    log_gamma,
    normal_cdf,
    student_t_two_tailed_p,
)


class TestLogGamma:
    @pytest.mark.parametrize("x", [0.1, 0.5, 1.5, 3.0, 7.25, 20.0, 150.0])
    def test_matches_scipy(self, x):
        assert log_gamma(x) == pytest.approx(sp.gammaln(x), rel=1e-9, abs=1e-9)

    def test_integer_arguments_give_log_factorial(self):
        assert log_gamma(1.0) == pytest.approx(0.0, abs=1e-9)
        assert log_gamma(2.0) == pytest.approx(0.0, abs=1e-9)
        assert log_gamma(6.0) == pytest.approx(math.log(120.0), abs=1e-9)

    @pytest.mark.parametrize("x", [0.0, -1.0, -0.5, float("nan"), float("inf")])
    def test_rejects_out_of_domain(self, x):
        with pytest.raises(DomainError) as exc_info:
            log_gamma(x)
        assert exc_info.value.function == "log_gamma"


class TestErf:
    @pytest.mark.parametrize("x", [-3.0, -1.2, -0.3, 0.0, 0.4, 1.0, 2.5, 5.0])
    def test_matches_scipy(self, x):
        assert erf(x) == pytest.approx(sp.erf(x), abs=2e-7)

    def test_odd_symmetry(self):
        for x in (0.1, 0.7, 1.9):
            assert erf(-x) == pytest.approx(-erf(x), abs=1e-15)

    @pytest.mark.parametrize("z", [-4.0, -1.96, -0.5, 0.0, 1.0, 1.96, 3.0])
    def test_normal_cdf_matches_scipy(self, z):
        assert normal_cdf(z) == pytest.approx(sp.ndtr(z), abs=1e-7)

    def test_normal_cdf_at_zero(self):
        assert normal_cdf(0.0) == pytest.approx(0.5, abs=1e-8)


class TestIncompleteBeta:
    @pytest.mark.parametrize("x,a,b", [
        (0.1, 2.0, 3.0),
        (0.5, 0.5, 0.5),
        (0.3, 5.0, 1.0),
        (0.9, 2.5, 7.0),
        (0.75, 10.0, 10.0),
        (0.02, 1.0, 30.0),
        (0.6, 15.0, 0.5),
    ])
    def test_matches_scipy(self, x, a, b):
        result = incomplete_beta_regularized(x, a, b)
        assert result.converged
        assert 0 < result.iterations <= CF_MAX_ITERATIONS
        assert result.value == pytest.approx(sp.betainc(a, b, x), abs=1e-7)

    def test_endpoints_are_exact(self):
        assert incomplete_beta_regularized(0.0, 2.0, 3.0).value == 0.0
        assert incomplete_beta_regularized(1.0, 2.0, 3.0).value == 1.0

    def test_symmetry_relation(self):
        x, a, b = 0.35, 3.0, 4.5
        lhs = incomplete_beta_regularized(x, a, b).value
        rhs = 1.0 - incomplete_beta_regularized(1.0 - x, b, a).value
        assert lhs == pytest.approx(rhs, abs=1e-9)

    def test_monotone_in_x(self):
        values = [incomplete_beta_regularized(x, 2.0, 5.0).value
                  for x in (0.05, 0.2, 0.4, 0.6, 0.8, 0.95)]
        assert values == sorted(values)

    def test_non_convergence_is_flagged_not_raised(self, caplog):
        with caplog.at_level(logging.WARNING, logger="healthstats.core.math.special"):
            result = incomplete_beta_regularized(0.4, 5.0, 7.0, max_iterations=2)

        assert result.converged is False
        assert result.iterations == 2
        assert 0.0 <= result.value <= 1.0
        assert "did not converge" in caplog.text

    @pytest.mark.parametrize("x,a,b", [
        (-0.1, 1.0, 1.0),
        (1.1, 1.0, 1.0),
        (0.5, 0.0, 1.0),
        (0.5, 1.0, -2.0),
        (float("nan"), 1.0, 1.0),
    ])
    def test_rejects_out_of_domain(self, x, a, b):
        with pytest.raises(DomainError):
            incomplete_beta_regularized(x, a, b)


class TestTailProbabilities:
    @pytest.mark.parametrize("t,df", [
        (0.5, 3), (1.0, 10), (2.1, 8), (-2.1, 8), (3.5, 25), (0.01, 1), (4.0, 100),
    ])
    def test_student_t_matches_scipy(self, t, df):
        expected = 2 * stats.t.sf(abs(t), df)
        result = student_t_two_tailed_p(t, df)
        assert result.value == pytest.approx(expected, abs=1e-6)

    def test_student_t_zero_statistic(self):
        assert student_t_two_tailed_p(0.0, 5).value == pytest.approx(1.0)

    def test_student_t_rejects_non_positive_df(self):
        with pytest.raises(DomainError):
            student_t_two_tailed_p(1.0, 0)

    @pytest.mark.parametrize("f,df1,df2", [
        (0.5, 1, 10), (2.0, 2, 20), (4.3, 3, 7), (12.0, 5, 40),
    ])
    def test_f_distribution_matches_scipy(self, f, df1, df2):
        expected = stats.f.sf(f, df1, df2)
        assert f_distribution_upper_p(f, df1, df2).value == pytest.approx(expected, abs=1e-6)

    def test_f_distribution_zero_statistic(self):
        assert f_distribution_upper_p(0.0, 2, 10).value == 1.0

    def test_f_distribution_rejects_non_positive_df(self):
        with pytest.raises(DomainError):
            f_distribution_upper_p(1.0, 2, 0)


def test_module_aliases_point_to_class():
    assert log_gamma is SpecialFunctions.log_gamma
    assert incomplete_beta_regularized is SpecialFunctions.incomplete_beta_regularized
