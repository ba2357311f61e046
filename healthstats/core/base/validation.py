"""
Validation utilities for numeric inputs.

Every public operation converts its arguments through these helpers so that
boundary conditions are rejected explicitly, before they can turn into a
division by zero or a NaN further down.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, Union
import logging
import numbers

import numpy as np

from .exceptions import InvalidInputError


logger = logging.getLogger(__name__)


ArrayLike = Union[Sequence[float], np.ndarray]


class Validator(ABC):
    """Abstract base class for validators."""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    @abstractmethod
    def validate(self, data: Any) -> bool:
        """Validate the given data.

        Parameters
        ----------
        data : Any
            Data to validate

        Returns
        -------
        bool
            True if validation passes, False otherwise
        """
        pass

    def get_errors(self) -> List[str]:
        return self.errors.copy()

    def get_warnings(self) -> List[str]:
        return self.warnings.copy()

    def clear_messages(self) -> None:
        """Clear all error and warning messages."""
        self.errors.clear()
        self.warnings.clear()

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def has_errors(self) -> bool:
        return len(self.errors) > 0


class SeriesValidator(Validator):
    """Validator for one-dimensional real sample sequences."""

    def __init__(self, min_length: int = 1, allow_constant: bool = True):
        """Initialize series validator.

        Parameters
        ----------
        min_length : int
            Minimum number of samples required
        allow_constant : bool
            If False, a sequence with zero variance is an error
        """
        super().__init__()
        self.min_length = min_length
        self.allow_constant = allow_constant

    def validate(self, data: Any) -> bool:
        self.clear_messages()

        try:
            array = np.asarray(data, dtype=float)
        except (TypeError, ValueError) as e:
            self.add_error(f"Values are not convertible to a real array: {e}")
            return False

        if array.ndim != 1:
            self.add_error(f"Expected a one-dimensional sequence, got {array.ndim} dimensions")
            return False

        if array.size < self.min_length:
            self.add_error(f"Need at least {self.min_length} samples, got {array.size}")
            return False

        if not np.all(np.isfinite(array)):
            n_invalid = int(np.sum(~np.isfinite(array)))
            self.add_error(f"Sequence contains {n_invalid} non-finite values")
            return False

        if array.size > 0 and np.ptp(array) == 0.0:
            if self.allow_constant:
                self.add_warning("Sequence is constant")
            else:
                self.add_error("Sequence has zero variance")
                return False

        return True


def as_series(values: ArrayLike, name: str, min_length: int = 1,
              allow_constant: bool = True) -> np.ndarray:
    """Convert values to a finite 1-D float array or raise.

    Parameters
    ----------
    values : array-like
        Input samples
    name : str
        Argument name used in error messages
    min_length : int
        Minimum number of samples required
    allow_constant : bool
        Whether a zero-variance sequence is acceptable

    Returns
    -------
    np.ndarray
        Fresh float64 copy of the input

    Raises
    ------
    InvalidInputError
        If validation fails
    """
    validator = SeriesValidator(min_length=min_length, allow_constant=allow_constant)
    if not validator.validate(values):
        raise InvalidInputError(f"Invalid '{name}': {'; '.join(validator.get_errors())}",
                                field=name)
    for warning in validator.get_warnings():
        logger.debug("Input '%s': %s", name, warning)
    return np.array(values, dtype=float)


def as_sample_pair(x: ArrayLike, y: ArrayLike, min_length: int = 3,
                   names: Sequence[str] = ("x", "y")):
    """Validate two equal-length sample sequences.

    Returns
    -------
    tuple
        (x, y) as float arrays
    """
    x_arr = as_series(x, names[0])
    y_arr = as_series(y, names[1])

    if x_arr.size != y_arr.size:
        raise InvalidInputError(
            f"Sequences '{names[0]}' and '{names[1]}' must have equal length, "
            f"got {x_arr.size} and {y_arr.size}",
            field=names[1], value=y_arr.size,
        )

    if x_arr.size < min_length:
        raise InvalidInputError(
            f"Need at least {min_length} paired samples, got {x_arr.size}",
            field="n_samples", value=x_arr.size,
        )

    return x_arr, y_arr


def require_positive(value: float, name: str) -> float:
    """Validate that a scalar is finite and strictly positive."""
    if not isinstance(value, numbers.Real) or not np.isfinite(value):
        raise InvalidInputError(f"Parameter '{name}' must be a finite real number, got {value!r}",
                                field=name, value=value)
    if value <= 0:
        raise InvalidInputError(f"Parameter '{name}' must be positive, got {value}",
                                field=name, value=value)
    return float(value)


def require_positive_int(value: Any, name: str, minimum: int = 1) -> int:
    """Validate an integer parameter with a lower bound."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidInputError(f"Parameter '{name}' must be an integer, got {value!r}",
                                field=name, value=value)
    if value < minimum:
        raise InvalidInputError(f"Parameter '{name}' must be >= {minimum}, got {value}",
                                field=name, value=value)
    return int(value)


def require_finite(value: Any, name: str, message: Optional[str] = None) -> float:
    """Validate that a scalar is a finite real number."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not np.isfinite(value):
        raise InvalidInputError(message or f"Parameter '{name}' must be finite, got {value!r}",
                                field=name, value=value)
    return float(value)
