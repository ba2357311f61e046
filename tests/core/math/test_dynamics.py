import numpy as np
import pytest

from healthstats.core.base.exceptions import InvalidInputError
from healthstats.core.math.dynamics import reconstruct_phase_space


class TestReconstructPhaseSpace:
    def test_delay_vectors(self):
        vectors = reconstruct_phase_space([0, 1, 2, 3, 4, 5], dimension=3, delay=2)
        np.testing.assert_array_equal(vectors, [[0, 2, 4], [1, 3, 5]])

    def test_shape(self):
        series = np.arange(100.0)
        vectors = reconstruct_phase_space(series, dimension=4, delay=3)
        assert vectors.shape == (100 - 3 * 3, 4)

    def test_dimension_one_is_identity(self):
        series = [3.0, 1.0, 4.0, 1.0, 5.0]
        np.testing.assert_array_equal(reconstruct_phase_space(series, 1, 7),
                                      np.array(series)[:, np.newaxis])

    def test_exactly_one_vector(self):
        vectors = reconstruct_phase_space([1.0, 2.0, 3.0], dimension=2, delay=2)
        np.testing.assert_array_equal(vectors, [[1.0, 3.0]])

    def test_sine_embedding_lies_on_ellipse(self):
        n = 200
        series = np.sin(2 * np.pi * np.arange(n) / 40)
        vectors = reconstruct_phase_space(series, dimension=2, delay=10)
        # A quarter-period delay turns sin into cos
        np.testing.assert_allclose(vectors[:, 0] ** 2 + vectors[:, 1] ** 2, 1.0, atol=1e-12)

    def test_rejects_too_short(self):
        with pytest.raises(InvalidInputError):
            reconstruct_phase_space([1.0, 2.0, 3.0], dimension=3, delay=2)

    def test_rejects_empty(self):
        with pytest.raises(InvalidInputError):
            reconstruct_phase_space([], dimension=1, delay=1)

    @pytest.mark.parametrize("dimension,delay", [(0, 1), (2, 0), (-1, 1), (2.5, 1)])
    def test_rejects_bad_parameters(self, dimension, delay):
        with pytest.raises(InvalidInputError):
            reconstruct_phase_space(np.arange(10.0), dimension, delay)
