"""
Dense linear algebra for small correlation matrices.
"""

import logging
from typing import Sequence, Union

import numpy as np

from ..base.exceptions import InvalidInputError, SingularMatrixError


logger = logging.getLogger(__name__)

# Pivot tolerance relative to the largest absolute entry
PIVOT_TOLERANCE = 1e-12


class MatrixOperations:
    """Matrix inversion with explicit singularity detection."""

    @staticmethod
    def validate_square(matrix: Union[np.ndarray, Sequence[Sequence[float]]]) -> np.ndarray:
        """Return a float copy of a non-empty, finite, square matrix."""
        try:
            array = np.array(matrix, dtype=float)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Matrix is not a real rectangular array: {e}",
                                    field="matrix") from e

        if array.ndim != 2 or array.shape[0] != array.shape[1]:
            raise InvalidInputError(f"Matrix must be square, got shape {array.shape}",
                                    field="matrix", value=array.shape)
        if array.shape[0] == 0:
            raise InvalidInputError("Matrix must not be empty", field="matrix", value=array.shape)
        if not np.all(np.isfinite(array)):
            raise InvalidInputError("Matrix contains non-finite entries", field="matrix")
        return array

    @staticmethod
    def invert(matrix: Union[np.ndarray, Sequence[Sequence[float]]]) -> np.ndarray:
        """Invert a square matrix by Gauss-Jordan elimination.

        Partial pivoting selects the row with the largest absolute value in
        the current column. The input is never modified.

        Parameters
        ----------
        matrix : array-like
            Square real matrix

        Returns
        -------
        np.ndarray
            Newly allocated inverse

        Raises
        ------
        InvalidInputError
            If the matrix is empty, non-square or non-finite
        SingularMatrixError
            If a pivot magnitude falls below tolerance
        """
        a = MatrixOperations.validate_square(matrix)
        n = a.shape[0]
        scale = float(np.max(np.abs(a)))
        tolerance = PIVOT_TOLERANCE * scale if scale > 0 else PIVOT_TOLERANCE

        augmented = np.hstack([a, np.eye(n)])

        for col in range(n):
            pivot_row = col + int(np.argmax(np.abs(augmented[col:, col])))
            pivot = augmented[pivot_row, col]
            if abs(pivot) < tolerance:
                raise SingularMatrixError(
                    f"Matrix is singular or near-singular at column {col}",
                    column=col, pivot=float(abs(pivot)),
                )

            if pivot_row != col:
                augmented[[col, pivot_row]] = augmented[[pivot_row, col]]

            augmented[col] /= augmented[col, col]
            factors = augmented[:, col].copy()
            factors[col] = 0.0
            augmented -= np.outer(factors, augmented[col])

        logger.debug("Inverted %dx%d matrix", n, n)
        return augmented[:, n:].copy()


invert_matrix = MatrixOperations.invert
