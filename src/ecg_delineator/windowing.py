"""Cutting a segment into beat windows around its R-peaks.

Each beat gets a left arm (from the previous beat's T-wave end up to the
R-peak) and a right arm (after the R-peak up to the next one). The arms are
trimmed to the likely P-wave onset and T-wave offset, and first estimates
of the QRS onset and offset are taken from where the raw slope flattens.
All provisional boundaries are stored as sample times; later stages look
the indices up again instead of carrying offsets across trims.
"""

import numpy as np

from ._logging import logger
from .config import Settings
from .constants import FLAT_SLOPE, MIN_TRIM_SLOPE
from .filters import slope, smooth
from .models import Beat, Segment, Wave


def find_peaks(
    values: np.ndarray,
    direction: int = 1,
    min_distance: int = 10,
    min_height: float = 0.1,
) -> list[int]:
    """Find local maxima that stand out from the trough preceding them.

    The signal is traversed while tracking the lowest value seen since the
    last accepted peak. Each rise followed by a fall marks a candidate at the
    middle of its plateau. A candidate is accepted when it rises at least
    ``min_height`` above the running trough and lies more than
    ``min_distance`` samples from the previously accepted peak. Accepting a
    peak resets the trough.

    Args:
        values: Input voltages
        direction: 1 scans left to right, -1 right to left
        min_distance: Minimum distance in samples between accepted peaks
        min_height: Minimum rise above the running trough

    Returns:
        Indices of accepted peaks in scan order
    """
    values = np.asarray(values, dtype=float)
    n = len(values)
    if direction < 0:
        return [n - 1 - peak for peak in find_peaks(values[::-1], 1, min_distance, min_height)]

    peaks: list[int] = []
    trough: float | None = None
    for i in range(1, n - 1):
        trough = values[i] if trough is None else min(trough, values[i])
        if values[i] <= values[i - 1]:
            continue
        j = i + 1
        while j < n and values[j] == values[i]:
            j += 1
        if j >= n or values[j] >= values[i]:
            continue
        peak = (i + j - 1) // 2
        if values[peak] - trough < min_height:
            continue
        if not peaks or abs(peak - peaks[-1]) > min_distance:
            peaks.append(peak)
            trough = None
    return peaks


def _last_flat_index(diffs: np.ndarray, frequency: float) -> int | None:
    """Index of the last slope whose magnitude in V/s is below FLAT_SLOPE."""
    flat = np.flatnonzero(np.abs(diffs) * frequency < FLAT_SLOPE)
    return int(flat[-1]) if flat.size else None


def _first_flat_index(diffs: np.ndarray, frequency: float) -> int | None:
    """Index of the first slope whose magnitude in V/s is below FLAT_SLOPE."""
    flat = np.flatnonzero(np.abs(diffs) * frequency < FLAT_SLOPE)
    return int(flat[0]) if flat.size else None


def _is_shallow(value: float) -> bool:
    return value >= MIN_TRIM_SLOPE and abs(value) < FLAT_SLOPE


def _p_wave_onset(smoothed: np.ndarray, frequency: float, settings: Settings) -> int:
    """Index where the left arm is cut: the shallow point before the first P candidate.

    Returns 0 (no cut) when no candidate is found.
    """
    candidates = find_peaks(smoothed, 1, settings.through_min_distance, settings.min_p_wave_height)
    if not candidates:
        return 0
    for j in range(candidates[0], 0, -1):
        if _is_shallow((smoothed[j] - smoothed[j - 1]) * frequency):
            return j
    return 0


def _t_wave_offset(
    smoothed: np.ndarray, qrs_offset: int | None, frequency: float, settings: Settings
) -> int | None:
    """Index where the right arm is cut: the shallow point after the first T candidate.

    Only candidates at or after the QRS offset qualify.
    """
    candidates = find_peaks(smoothed, 1, settings.through_min_distance, settings.min_t_wave_height)
    lower = qrs_offset if qrs_offset is not None else 0
    qualifying = [peak for peak in candidates if peak >= lower]
    if not qualifying:
        return None
    for j in range(qualifying[0], len(smoothed) - 1):
        if _is_shallow((smoothed[j + 1] - smoothed[j]) * frequency):
            return j
    return None


def _window_beat(
    segment: Segment,
    peak_idx: int,
    start: float,
    end: float | None,
    frequency: float,
    settings: Settings,
) -> Beat:
    """Build one beat from the samples in [start, R) and (R, end]."""
    times, voltages = segment.times, segment.voltages
    peak_time = times[peak_idx]

    left = (times >= start) & (times < peak_time)
    right = times > peak_time
    if end is not None:
        right &= times <= end
    left_t, left_v = times[left], voltages[left]
    right_t, right_v = times[right], voltages[right]

    # QRS onset/offset from where the raw slope flattens next to the R-peak
    q_flat = _last_flat_index(slope(left_v), frequency)
    s_flat = _first_flat_index(slope(right_v), frequency)

    cut_start = _p_wave_onset(smooth(left_v, settings.smooth_window_size), frequency, settings)
    cut_end = _t_wave_offset(smooth(right_v, settings.smooth_window_size), s_flat, frequency, settings)

    q_onset = None
    if q_flat is not None and q_flat - 1 >= cut_start:
        q_onset = float(left_t[q_flat - 1])

    left_t, left_v = left_t[cut_start:], left_v[cut_start:]
    if cut_end is not None and cut_end > 0:
        t_offset: float | None = float(right_t[cut_end])
        right_t, right_v = right_t[: cut_end + 1], right_v[: cut_end + 1]
    else:
        t_offset = float(right_t[-1]) if right_t.size else None

    s_offset = None
    if s_flat is not None and s_flat + 1 < len(right_t):
        s_offset = float(right_t[s_flat + 1])

    beat_t = np.concatenate([left_t, [peak_time], right_t])
    beat_v = np.concatenate([left_v, [voltages[peak_idx]], right_v])
    return Beat(
        start_time=float(beat_t[0]),
        end_time=float(beat_t[-1]),
        times=beat_t,
        voltages=beat_v,
        p=Wave(start_time=float(left_t[0]) if left_t.size else None),
        q=Wave(start_time=q_onset),
        r=Wave(peak_time=float(peak_time), peak_voltage=float(voltages[peak_idx])),
        s=Wave(end_time=s_offset),
        t=Wave(end_time=t_offset),
    )


def window_beats(
    segment: Segment,
    r_peaks: np.ndarray,
    frequency: float,
    settings: Settings | None = None,
) -> list[Beat]:
    """Create one beat per R-peak with provisional wave boundaries.

    Beats are built in R-peak order because each left arm starts at the
    previous beat's T-wave end. The first beat starts at the segment start;
    without a T-wave end the previous R-peak is used.

    Args:
        segment: Segment the R-peaks were detected in
        r_peaks: R-peak sample indices in increasing order
        frequency: Sampling frequency in Hz
        settings: Processing settings. Defaults to Settings().

    Returns:
        Beats populated with raw window samples, R-peak, provisional QRS
        onset and offset, P-wave start and T-wave end.
    """
    settings = settings or Settings()
    beats: list[Beat] = []
    for i, peak_idx in enumerate(r_peaks):
        if i == 0:
            start = segment.start_time
        elif beats[-1].t.end_time is not None:
            start = beats[-1].t.end_time
        else:
            start = float(segment.times[r_peaks[i - 1]])
        end = float(segment.times[r_peaks[i + 1]]) if i + 1 < len(r_peaks) else None
        beats.append(_window_beat(segment, int(peak_idx), start, end, frequency, settings))

    logger.debug(f"Windowed {len(beats)} beats")
    return beats
