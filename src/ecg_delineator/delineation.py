"""Delineation of the P, Q, R, S and T waves of a windowed beat.

The beat window is extended at both ends, smoothed, and two baselines are
estimated with the configured filter: one from the smoothed signal and one
from the smoothed signal with the provisional QRS complex held flat. Wave
boundaries are the places where the smoothed signal crosses these baselines
by more than WAVE_THRESHOLD. Waves that cannot be located keep their
provisional values; they make the beat invalid but never raise.
"""

import numpy as np

from ._logging import logger
from .config import Settings
from .constants import EDGE_EXTENSION, WAVE_THRESHOLD
from .filters import apply_baseline_filter, smooth
from .models import Beat, Wave, index_of


def hold_through(values: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """Replace masked samples by the last unmasked value before them.

    Masked samples at the very start take the first value.
    """
    source = np.where(mask, 0, np.arange(len(values)))
    return values[np.maximum.accumulate(source)]


def _qrs_mask(times: np.ndarray, onset: float | None, offset: float | None) -> np.ndarray:
    if onset is None or offset is None:
        return np.zeros(len(times), dtype=bool)
    return (times >= onset) & (times <= offset)


def _baselines(beat: Beat, settings: Settings) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return the smoothed beat, its baseline and its baseline without the QRS complex."""
    n = len(beat.times)
    times = np.pad(beat.times, EDGE_EXTENSION, mode="edge")
    voltages = np.pad(beat.voltages, EDGE_EXTENSION, mode="edge")

    smoothed = smooth(voltages, settings.smooth_window_size)
    without_qrs = hold_through(smoothed, _qrs_mask(times, beat.q.start_time, beat.s.end_time))
    baseline = apply_baseline_filter(smoothed, settings.baseline_filter, settings.baseline_filter_options)
    baseline_without_qrs = apply_baseline_filter(
        without_qrs, settings.baseline_filter, settings.baseline_filter_options
    )

    inner = slice(EDGE_EXTENSION, EDGE_EXTENSION + n)
    return smoothed[inner], baseline[inner], baseline_without_qrs[inner]


def _p_wave(
    smooth_left: np.ndarray,
    base_left: np.ndarray,
    base_wo_left: np.ndarray,
    hint: int | None,
    q_onset: int | None,
) -> tuple[int | None, int | None, int | None]:
    """Return (start, peak, end) indices of the P-wave in the left arm."""
    if hint is None or q_onset is None:
        return None, None, None
    thr = WAVE_THRESHOLD

    start = None
    for i in range(max(hint, 1), q_onset):
        if (
            smooth_left[i] > smooth_left[i - 1]
            and smooth_left[i - 1] <= base_left[i - 1] + thr
            and smooth_left[i] >= base_left[i] + thr
        ):
            start = i
            break

    end = None
    for i in range(min(q_onset, len(smooth_left) - 2), 0, -1):
        if (
            smooth_left[i] > smooth_left[i + 1]
            and base_left[i] <= smooth_left[i] <= base_wo_left[i] + thr
            and smooth_left[i + 1] <= base_wo_left[i + 1] + thr
        ):
            end = i
            break

    if start is None or end is None or start >= end:
        return None, None, None
    peak = start + int(np.argmax(smooth_left[start:end]))
    return start, peak, end


def _q_wave(
    smooth_left: np.ndarray, base_left: np.ndarray, q_onset: int | None
) -> tuple[int | None, int | None]:
    """Return (peak, end) indices of the Q-wave. The end is the last upward baseline crossing before R."""
    thr = WAVE_THRESHOLD
    lower = q_onset if q_onset is not None else 0

    end = None
    for i in range(len(smooth_left) - 2, lower - 1, -1):
        if (
            smooth_left[i] < smooth_left[i + 1]
            and smooth_left[i] <= base_left[i] + thr
            and smooth_left[i + 1] >= base_left[i + 1] + thr
        ):
            end = i
            break

    if q_onset is None or end is None or q_onset >= end:
        return None, end
    trough = smooth_left[q_onset:end]
    # Last sample reaching the minimum
    peak = q_onset + len(trough) - 1 - int(np.argmin(trough[::-1]))
    return peak, end


def _r_wave_end(smooth_right: np.ndarray, base_right: np.ndarray, s_offset: int | None) -> int | None:
    """Index in the right arm where the R downstroke stops at or below the baseline."""
    if s_offset is None:
        return None
    for i in range(1, s_offset):
        if smooth_right[i - 1] >= smooth_right[i] and smooth_right[i] <= base_right[i] + WAVE_THRESHOLD:
            return i
    return None


def _t_wave_start(smooth_right: np.ndarray, base_wo_right: np.ndarray, s_offset: int | None) -> int | None:
    """First rising sample at or after the S offset above the QRS-free baseline."""
    if s_offset is None:
        return None
    for i in range(max(s_offset, 1), len(smooth_right)):
        if smooth_right[i] > smooth_right[i - 1] and smooth_right[i] >= base_wo_right[i] + WAVE_THRESHOLD:
            return i
    return None


def delineate_beat(beat: Beat, settings: Settings | None = None) -> Beat:
    """Locate start, end and peak of all five waves of a windowed beat.

    Args:
        beat: Beat produced by ``window_beats``
        settings: Processing settings. Defaults to Settings().

    Returns:
        A copy of the beat with located waves filled in and the baseline
        curves attached.

    Raises:
        BaselineFilterError: If the configured baseline filter is unknown
    """
    settings = settings or Settings()
    smoothed, baseline, baseline_wo = _baselines(beat, settings)
    times, voltages = beat.times, beat.voltages

    r_idx = beat.index_of(beat.r.peak_time)
    if r_idx is None:
        logger.warning(f"R-peak at {beat.r.peak_time} is outside its beat window, skipping delineation")
        return beat.model_copy(update={"baseline": baseline, "baseline_without_qrs": baseline_wo})

    # Left arm ends with the R-peak, right arm starts with it
    left_t, left_v = times[: r_idx + 1], voltages[: r_idx + 1]
    right_t, right_v = times[r_idx:], voltages[r_idx:]
    smooth_left, smooth_right = smoothed[: r_idx + 1], smoothed[r_idx:]
    base_left, base_right = baseline[: r_idx + 1], baseline[r_idx:]
    base_wo_left, base_wo_right = baseline_wo[: r_idx + 1], baseline_wo[r_idx:]

    q_onset = index_of(left_t, beat.q.start_time)
    s_offset = index_of(right_t, beat.s.end_time)
    p_hint = index_of(times, beat.p.start_time)

    p, q, r, s, t = beat.p, beat.q, beat.r, beat.s, beat.t

    p_start, p_peak, p_end = _p_wave(smooth_left, base_left, base_wo_left, p_hint, q_onset)
    if p_peak is not None:
        p = Wave(
            start_time=float(left_t[p_start]),
            end_time=float(left_t[p_end]),
            peak_time=float(left_t[p_peak]),
            peak_voltage=float(left_v[p_peak]),
        )

    q_peak, q_end = _q_wave(smooth_left, base_left, q_onset)
    if q_peak is not None:
        q = Wave(
            start_time=float(left_t[q_onset]),
            end_time=float(left_t[q_end]),
            peak_time=float(left_t[q_peak]),
            peak_voltage=float(left_v[q_peak]),
        )

    r_end = _r_wave_end(smooth_right, base_right, s_offset)
    if q_end is not None and r_end is not None:
        r = r.model_copy(update={"start_time": float(left_t[q_end]), "end_time": float(right_t[r_end])})

    if r_end is not None and s_offset is not None and r_end < s_offset:
        s_peak = r_end + int(np.argmin(smooth_right[r_end:s_offset]))
        s = Wave(
            start_time=float(right_t[r_end]),
            end_time=float(right_t[s_offset]),
            peak_time=float(right_t[s_peak]),
            peak_voltage=float(right_v[s_peak]),
        )

    t_start = _t_wave_start(smooth_right, base_wo_right, s_offset)
    t_end = index_of(right_t, beat.t.end_time)
    if t_end is None:
        t_end = len(right_t) - 1
    if t_start is not None and t_start < t_end:
        crest = right_v[t_start:t_end]
        # Last raw sample reaching the maximum
        t_peak = t_start + len(crest) - 1 - int(np.argmax(crest[::-1]))
        t = Wave(
            start_time=float(right_t[t_start]),
            end_time=float(right_t[t_end]),
            peak_time=float(right_t[t_peak]),
            peak_voltage=float(right_v[t_peak]),
        )

    logger.debug(
        f"Beat at R={beat.r.peak_time}: P=({p_start}, {p_peak}, {p_end}) Q=({q_onset}, {q_peak}, {q_end}) "
        f"R=({q_end}, {r_end}) S=({r_end}, {s_offset}) T=({t_start}, {t_end})"
    )
    return beat.model_copy(
        update={
            "p": p,
            "q": q,
            "r": r,
            "s": s,
            "t": t,
            "baseline": baseline,
            "baseline_without_qrs": baseline_wo,
        }
    )
