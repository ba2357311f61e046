"""
Frequency-domain and time-frequency transforms for time series.

This module provides dominant-frequency detection on the FFT magnitude
spectrum, a Morlet continuous wavelet transform and a discrete Laplace
transform evaluated on the real axis.
"""

import logging
from typing import Tuple

import numpy as np
from scipy import fft

from ..base.data_structures import FrequencyDomainResult
from ..base.exceptions import InvalidInputError
from ..base.validation import ArrayLike, as_series, require_positive


logger = logging.getLogger(__name__)

# A bin is dominant when its amplitude exceeds this fraction of the maximum
DOMINANT_FRACTION = 0.1

# Central angular frequency of the Morlet mother wavelet
MORLET_OMEGA0 = 5.0


class FourierTransforms:
    """Spectral analysis of real-valued series."""

    @staticmethod
    def dominant_frequencies(series: ArrayLike, sampling_rate: float = 1.0,
                             detrend: bool = False) -> FrequencyDomainResult:
        """Find the frequencies carrying most of the spectral amplitude.

        Parameters
        ----------
        series : array-like
            Real time series, uniformly sampled
        sampling_rate : float
            Samples per unit time
        detrend : bool
            Whether to remove the mean before transforming

        Returns
        -------
        FrequencyDomainResult
            Signed FFT bin frequencies, their magnitudes, and the sorted set
            of non-negative frequencies whose bins exceed the threshold.
            Mirror bins (+f and -f) collapse to a single entry.
        """
        data = as_series(series, "series")
        fs = require_positive(sampling_rate, "sampling_rate")

        if detrend:
            data = data - data.mean()

        n = data.size
        frequencies = fft.fftfreq(n, 1.0 / fs)
        amplitudes = np.abs(fft.fft(data))

        peak = float(amplitudes.max())
        if peak > 0.0:
            mask = amplitudes > DOMINANT_FRACTION * peak
            dominant = np.unique(np.abs(frequencies[mask]))
        else:
            dominant = np.empty(0, dtype=float)

        logger.debug("Spectrum of %d samples at %g Hz: %d dominant frequencies",
                     n, fs, dominant.size)
        return FrequencyDomainResult(
            frequencies=frequencies,
            amplitudes=amplitudes,
            dominant=dominant,
            sampling_rate=fs,
        )

    @staticmethod
    def laplace_transform(series: ArrayLike,
                          sampling_rate: float = 1.0) -> Tuple[np.ndarray, np.ndarray]:
        """Discrete Laplace transform on the real axis.

        Evaluates F(s) = sum_t x_t exp(-s t dt) dt at s_i = 2 pi i / (N dt).

        Returns
        -------
        tuple
            (s, F) arrays of length N
        """
        data = as_series(series, "series")
        fs = require_positive(sampling_rate, "sampling_rate")
        dt = 1.0 / fs
        n = data.size

        s = np.arange(n) * 2.0 * np.pi / (n * dt)
        times = np.arange(n) * dt
        kernel = np.exp(-np.outer(s, times))
        return s, kernel @ data * dt


class WaveletTransforms:
    """Continuous wavelet transform with a real Morlet wavelet."""

    @staticmethod
    def morlet(x: np.ndarray) -> np.ndarray:
        """Real Morlet mother wavelet exp(-x^2/2) cos(5x)."""
        return np.exp(-0.5 * x ** 2) * np.cos(MORLET_OMEGA0 * x)

    @staticmethod
    def transform(signal: ArrayLike, scales: ArrayLike) -> np.ndarray:
        """Continuous wavelet transform by direct summation.

        Parameters
        ----------
        signal : array-like
            Real series of length n
        scales : array-like
            Positive scales

        Returns
        -------
        np.ndarray
            Coefficients of shape (len(scales), n) where
            W[s, t] = sum_tau signal[tau] * psi((tau - t) / s) / sqrt(s)
        """
        data = as_series(signal, "signal")
        scale_values = as_series(scales, "scales")
        if np.any(scale_values <= 0):
            bad = scale_values[scale_values <= 0]
            raise InvalidInputError(f"Wavelet scales must be positive, got {bad.tolist()}",
                                    field="scales", value=float(bad[0]))

        n = data.size
        index = np.arange(n, dtype=float)
        # lag[t, tau] = tau - t
        lag = index[np.newaxis, :] - index[:, np.newaxis]

        coefficients = np.empty((scale_values.size, n), dtype=float)
        for k, scale in enumerate(scale_values):
            kernel = WaveletTransforms.morlet(lag / scale)
            coefficients[k] = kernel @ data / np.sqrt(scale)
        return coefficients


dominant_frequencies = FourierTransforms.dominant_frequencies
laplace_transform = FourierTransforms.laplace_transform
wavelet_transform = WaveletTransforms.transform
