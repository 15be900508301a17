"""Signal conditioning filters.

All filters are pure functions over a 1-D array of voltages and return an
array of the same length. Sample times never change, so they are not passed
around. Windows are clipped at the array boundaries: edge samples are
averaged over a shrinking window rather than a wrapped or padded one.
"""

import math
from collections.abc import Callable

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view
from scipy import signal

from .config import BaselineFilter, BaselineFilterOptions


class BaselineFilterError(ValueError):
    """Raised when an unknown baseline filter is requested."""

    pass


def _windows(values: np.ndarray, before: int, after: int) -> np.ndarray:
    """Return one row per sample holding values[i - before : i + after + 1].

    Positions outside the array are NaN so that nan-aware reductions clip the
    window at the boundaries.
    """
    padded = np.pad(values, (before, after), constant_values=np.nan)
    return sliding_window_view(padded, before + after + 1)


def smooth(values: np.ndarray, window_size: int = 5) -> np.ndarray:
    """Moving average over the window [i - floor(w/2), i + ceil(w/2)).

    Args:
        values: Input voltages
        window_size: Number of samples in the window

    Returns:
        Smoothed voltages with the same length as the input
    """
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return values.copy()
    before = window_size // 2
    after = math.ceil(window_size / 2) - 1
    return np.nanmean(_windows(values, before, after), axis=1)


def mean_filter(values: np.ndarray, window_size: int = 20) -> np.ndarray:
    """Centered mean over [i - w//2, i + w//2]."""
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return values.copy()
    half = window_size // 2
    return np.nanmean(_windows(values, half, half), axis=1)


def median_filter(values: np.ndarray, window_size: int = 20) -> np.ndarray:
    """Centered median over [i - w//2, i + w//2].

    Windows clipped to an even length take the lower of the two middle values.
    """
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return values.copy()
    half = window_size // 2
    # NaN padding sorts to the end of each row
    ordered = np.sort(_windows(values, half, half), axis=1)
    counts = np.count_nonzero(~np.isnan(ordered), axis=1)
    return ordered[np.arange(values.size), (counts - 1) // 2]


def lowpass_filter(values: np.ndarray, alpha: float = 0.15) -> np.ndarray:
    """Exponential low-pass filter: y[0] = x[0], y[i] = alpha * x[i] + (1 - alpha) * y[i - 1]."""
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return values.copy()
    # Initial state makes y[-1] == x[0]
    zi = np.array([(1.0 - alpha) * values[0]])
    filtered, _ = signal.lfilter([alpha], [1.0, alpha - 1.0], values, zi=zi)
    return filtered


def slope(values: np.ndarray) -> np.ndarray:
    """First-order difference of consecutive samples (one element shorter than the input)."""
    return np.diff(np.asarray(values, dtype=float))


_BASELINE_FILTERS: dict[BaselineFilter, Callable[[np.ndarray, BaselineFilterOptions], np.ndarray]] = {
    BaselineFilter.LOWPASS: lambda values, options: lowpass_filter(values, options.alpha),
    BaselineFilter.MEAN: lambda values, options: mean_filter(values, options.window_size),
    BaselineFilter.MEDIAN: lambda values, options: median_filter(values, options.window_size),
}


def apply_baseline_filter(
    values: np.ndarray,
    kind: BaselineFilter | str,
    options: BaselineFilterOptions | None = None,
) -> np.ndarray:
    """Estimate a baseline with the configured filter.

    Args:
        values: Input voltages
        kind: Baseline filter selector
        options: Filter parameters. Defaults to BaselineFilterOptions().

    Returns:
        Baseline voltages with the same length as the input

    Raises:
        BaselineFilterError: If kind is not a known baseline filter
    """
    try:
        baseline_filter = _BASELINE_FILTERS[BaselineFilter(kind)]
    except (ValueError, KeyError) as e:
        raise BaselineFilterError(
            f"Invalid baseline filter: {kind!r}. Allowed filters are: {[f.value for f in BaselineFilter]}"
        ) from e
    return baseline_filter(values, options or BaselineFilterOptions())
