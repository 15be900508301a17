"""Preparing raw input for delineation.

This module turns the recording handed to the processor into paired
(time, voltage) arrays:
- Peak-preserving down-sampling (aggregation) of plain voltage input
- Time axis construction in milliseconds
- Direct timing mode, where the caller supplies (time, voltage) pairs in sample units
"""

import numpy as np

from ._logging import logger
from .config import Settings
from .constants import CENTERING_LIMIT, MAX_SAMPLE_JUMP
from .types import RawECG, TimeArray, VoltageArray


def as_float_array(values) -> np.ndarray:
    """Convert input to a float array, turning None into NaN."""
    data = np.asarray(values, dtype=object)
    return np.where(data == None, np.nan, data).astype(float)  # noqa: E711


def aggregation_ratio(sfreq: float, settings: Settings) -> int:
    """Group size used to down-sample plain voltage input (at least 1)."""
    if settings.aggregation is not None:
        return settings.aggregation
    return max(1, int(sfreq // 100))


def aggregate(voltages: np.ndarray, group_size: int = 5) -> VoltageArray:
    """Down-sample voltages while keeping sharp peaks and troughs.

    Consecutive samples are collected into groups of ``group_size``. A group
    emits its maximum when the maximum exceeds both its first and last
    sample, its minimum when the minimum is below both, and its mean
    otherwise. Samples jumping more than 2 V from their predecessor are
    dropped as artefacts. A missing sample is emitted as NaN so that segment
    boundaries survive. When the retained samples span beyond +/-1.5 V the
    output is centred on the midpoint of their range.

    Args:
        voltages: Raw voltages, NaN for missing samples
        group_size: Number of samples per output value

    Returns:
        Down-sampled voltages
    """
    voltages = np.asarray(voltages, dtype=float)
    if group_size < 1:
        raise ValueError(f"group_size must be at least 1, got {group_size}")

    result: list[float] = []
    group: list[float] = []
    v_max, v_min = -np.inf, np.inf
    previous = np.nan
    for voltage in voltages:
        if np.isnan(voltage):
            group = []
            result.append(np.nan)
            previous = voltage
            continue
        if np.isnan(previous) or abs(voltage - previous) <= MAX_SAMPLE_JUMP:
            v_max = max(v_max, voltage)
            v_min = min(v_min, voltage)
            group.append(voltage)
        previous = voltage
        if len(group) >= group_size:
            first, last = group[0], group[-1]
            g_max, g_min = max(group), min(group)
            if g_max > first and g_max > last:
                result.append(g_max)
            elif g_min < first and g_min < last:
                result.append(g_min)
            else:
                result.append(sum(group) / len(group))
            group = []

    aggregated = np.asarray(result, dtype=float)
    if v_max >= CENTERING_LIMIT or v_min <= -CENTERING_LIMIT:
        middle = (v_max + v_min) / 2
        logger.debug(f"Centering aggregated signal on {middle:.3f} V")
        aggregated = aggregated - middle
    return aggregated


def time_scale(frequency: float, settings: Settings) -> float:
    """Factor converting pipeline time units into milliseconds."""
    if settings.use_direct_data:
        return 1000.0 / frequency
    return 1.0


def prepare_samples(ecg: RawECG, sfreq: float, settings: Settings) -> tuple[TimeArray, VoltageArray, float]:
    """Turn raw input into paired time and voltage arrays.

    Args:
        ecg: 1D voltages, or (n_samples, 2) (time, voltage) pairs in direct mode
        sfreq: Nominal sampling frequency in Hz
        settings: Processing settings

    Returns:
        Tuple containing:
        - Sample times (milliseconds, or sample units in direct mode)
        - Voltages, NaN where a sample is missing
        - Sampling frequency of the returned samples in Hz

    Raises:
        ValueError: If sfreq is not positive or the input has the wrong shape
    """
    if sfreq <= 0:
        raise ValueError(f"Sampling frequency must be positive, got {sfreq}")

    data = as_float_array(ecg)

    if settings.use_direct_data:
        if data.ndim != 2 or data.shape[1] != 2:
            raise ValueError(f"Direct data must be an array of (time, voltage) pairs, got shape {data.shape}")
        logger.info(f"Using {data.shape[0]} direct (time, voltage) samples at {sfreq} Hz")
        return data[:, 0], data[:, 1], float(sfreq)

    if data.ndim != 1:
        raise ValueError(f"ECG data must be a 1D array of voltages, got shape {data.shape}")
    if data.size == 0:
        raise ValueError("ECG data is empty")

    ratio = aggregation_ratio(sfreq, settings)
    voltages = aggregate(data, ratio)
    frequency = sfreq / ratio
    logger.info(f"Aggregated {data.size} samples by {ratio} to {voltages.size} samples at {frequency:.3f} Hz")
    times = np.arange(voltages.size) * 1000.0 / frequency
    return times, voltages, frequency
