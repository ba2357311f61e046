"""
Time-delay embedding of scalar series.
"""

import numpy as np

from ..base.exceptions import InvalidInputError
from ..base.validation import ArrayLike, as_series, require_positive_int


class PhaseSpace:
    """Phase-space reconstruction by the method of delays."""

    @staticmethod
    def reconstruct(series: ArrayLike, dimension: int, delay: int) -> np.ndarray:
        """Build delay vectors (s[i], s[i+delay], ..., s[i+(dimension-1)*delay]).

        Parameters
        ----------
        series : array-like
            Scalar time series
        dimension : int
            Embedding dimension, at least 1
        delay : int
            Lag between coordinates in samples, at least 1

        Returns
        -------
        np.ndarray
            Array of shape (len(series) - (dimension-1)*delay, dimension)

        Raises
        ------
        InvalidInputError
            If the parameters are out of range or the series is too short
            to produce a single vector
        """
        dimension = require_positive_int(dimension, "dimension")
        delay = require_positive_int(delay, "delay")
        data = as_series(series, "series", min_length=0)

        count = data.size - (dimension - 1) * delay
        if count <= 0:
            raise InvalidInputError(
                f"Series of length {data.size} is too short for dimension "
                f"{dimension} with delay {delay}",
                field="series", value=data.size,
            )

        return np.column_stack([data[k * delay:k * delay + count] for k in range(dimension)])


reconstruct_phase_space = PhaseSpace.reconstruct
