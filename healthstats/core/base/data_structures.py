"""
Result data structures for healthstats.

Every structure here is created per call and owned by the caller. They are
frozen dataclasses so that a result handed to a downstream consumer (for
example a narrative generator) cannot be altered behind the engine's back.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, NamedTuple, Tuple
import copy

import numpy as np

from .exceptions import InvalidInputError


# Fixed significance threshold used by every correlation test
SIGNIFICANCE_LEVEL = 0.05


class DataStructure(ABC):
    """Abstract base class for all result structures."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation.

        Returns
        -------
        dict
            Dictionary representation with numpy arrays converted to lists
        """
        pass

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DataStructure":
        """Create from dictionary representation, ignoring unknown keys."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})

    def copy(self) -> "DataStructure":
        """Create a deep copy of the data structure."""
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._repr_info()})"

    def _repr_info(self) -> str:
        return ""


@dataclass(frozen=True, repr=False)
class CorrelationResult(DataStructure):
    """Coefficient and two-tailed significance of a pairwise correlation.

    ``converged`` is False when the p-value was taken from a continued
    fraction that exhausted its iteration budget; the value is then a best
    estimate and callers needing guaranteed precision should not trust it.
    """

    coefficient: float
    p_value: float
    significant: bool
    method: str = "pearson"
    n_samples: int = 0
    converged: bool = True

    @classmethod
    def from_statistic(cls, coefficient: float, p_value: float, method: str,
                       n_samples: int, converged: bool = True) -> "CorrelationResult":
        """Build a result applying the fixed significance threshold."""
        p_value = min(max(float(p_value), 0.0), 1.0)
        return cls(
            coefficient=float(coefficient),
            p_value=p_value,
            significant=p_value < SIGNIFICANCE_LEVEL,
            method=method,
            n_samples=int(n_samples),
            converged=bool(converged),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coefficient": self.coefficient,
            "p_value": self.p_value,
            "significant": self.significant,
            "method": self.method,
            "n_samples": self.n_samples,
            "converged": self.converged,
        }

    def _repr_info(self) -> str:
        return (f"method={self.method}, r={self.coefficient:.4f}, "
                f"p={self.p_value:.4g}, n={self.n_samples}")


@dataclass(frozen=True, repr=False)
class MultipleCorrelationResult(DataStructure):
    """Multiple correlation coefficient R with its F-test."""

    coefficient: float
    p_value: float
    significant: bool
    r_squared: float
    f_statistic: float
    df_model: int
    df_residual: int
    n_samples: int
    converged: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def _repr_info(self) -> str:
        return (f"R={self.coefficient:.4f}, F={self.f_statistic:.4g}, "
                f"df=({self.df_model}, {self.df_residual}), p={self.p_value:.4g}")


@dataclass(frozen=True, repr=False)
class IncompleteBetaResult(DataStructure):
    """Value of the regularized incomplete beta function with convergence flag."""

    value: float
    converged: bool = True
    iterations: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "converged": self.converged,
                "iterations": self.iterations}

    def _repr_info(self) -> str:
        return f"value={self.value:.10g}, converged={self.converged}"


@dataclass(frozen=True, repr=False)
class FrequencyDomainResult(DataStructure):
    """Magnitude spectrum of a real time series.

    ``frequencies`` and ``amplitudes`` are parallel arrays of the input
    length; ``dominant`` holds the non-negative frequencies whose bins exceed
    the dominance threshold.
    """

    frequencies: np.ndarray
    amplitudes: np.ndarray
    dominant: np.ndarray
    sampling_rate: float = 1.0

    def __post_init__(self):
        if self.frequencies.shape != self.amplitudes.shape:
            raise InvalidInputError(
                "frequencies and amplitudes must be parallel arrays",
                field="amplitudes", value=self.amplitudes.shape,
            )

    @property
    def peak_frequency(self) -> float:
        """Non-negative frequency of the largest amplitude bin."""
        return float(abs(self.frequencies[int(np.argmax(self.amplitudes))]))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frequencies": self.frequencies.tolist(),
            "amplitudes": self.amplitudes.tolist(),
            "dominant": self.dominant.tolist(),
            "sampling_rate": self.sampling_rate,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FrequencyDomainResult":
        return cls(
            frequencies=np.asarray(data["frequencies"], dtype=float),
            amplitudes=np.asarray(data["amplitudes"], dtype=float),
            dominant=np.asarray(data["dominant"], dtype=float),
            sampling_rate=float(data.get("sampling_rate", 1.0)),
        )

    def _repr_info(self) -> str:
        return f"n_bins={len(self.frequencies)}, dominant={self.dominant.tolist()}"


class ODESolution(NamedTuple):
    """Time grid and solution values of an initial value problem."""

    t: np.ndarray
    y: np.ndarray


@dataclass(frozen=True, repr=False)
class CorrelationMatrixResult(DataStructure):
    """Symmetric coefficient and p-value matrices over labelled variables."""

    labels: Tuple[str, ...]
    coefficients: np.ndarray
    p_values: np.ndarray
    method: str = "pearson"
    converged: np.ndarray = field(default=None)

    def coefficient(self, a: str, b: str) -> float:
        """Coefficient between two labelled variables."""
        i, j = self._index(a), self._index(b)
        return float(self.coefficients[i, j])

    def p_value(self, a: str, b: str) -> float:
        i, j = self._index(a), self._index(b)
        return float(self.p_values[i, j])

    def significant_pairs(self) -> List[Tuple[str, str, float, float]]:
        """Upper-triangle pairs with p below the significance level.

        Returns
        -------
        list
            (label_a, label_b, coefficient, p_value), strongest first
        """
        pairs = []
        n = len(self.labels)
        for i in range(n):
            for j in range(i + 1, n):
                if self.p_values[i, j] < SIGNIFICANCE_LEVEL:
                    pairs.append((self.labels[i], self.labels[j],
                                  float(self.coefficients[i, j]),
                                  float(self.p_values[i, j])))
        pairs.sort(key=lambda item: abs(item[2]), reverse=True)
        return pairs

    def _index(self, label: str) -> int:
        try:
            return self.labels.index(label)
        except ValueError:
            raise InvalidInputError(f"Unknown variable label: {label}",
                                    field="label", value=label) from None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "labels": list(self.labels),
            "coefficients": self.coefficients.tolist(),
            "p_values": self.p_values.tolist(),
            "method": self.method,
            "converged": None if self.converged is None else self.converged.tolist(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CorrelationMatrixResult":
        return cls(
            labels=tuple(data["labels"]),
            coefficients=np.asarray(data["coefficients"], dtype=float),
            p_values=np.asarray(data["p_values"], dtype=float),
            method=data.get("method", "pearson"),
            converged=(None if data.get("converged") is None
                       else np.asarray(data["converged"], dtype=bool)),
        )

    def _repr_info(self) -> str:
        return f"method={self.method}, labels={list(self.labels)}"
