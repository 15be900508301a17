"""Interval computation and segment/recording summaries."""

import math

import numpy as np

from ._logging import logger
from .constants import ST_OFFSET_S
from .models import Beat, SegmentResult, SegmentSummary, Summary
from .utils import round_half_up


def st_level(beat: Beat, frequency: float) -> float | None:
    """ST level of a beat relative to its J-point (end of the S-wave).

    The J-point voltage is the larger of the J-point sample and the sample
    after it (when that one still precedes the T-wave). The ST voltage is
    read ST_OFFSET_S seconds after the J-point, but not later than the T-wave
    onset.

    Args:
        beat: Delineated beat
        frequency: Sampling frequency in Hz

    Returns:
        ST level in volts, or None when the J-point is unknown or the
        measurement point falls outside the beat window.
    """
    j_idx = beat.index_of(beat.s.end_time)
    t_idx = beat.index_of(beat.t.start_time)
    if j_idx is None or t_idx is None:
        return None
    voltages = beat.voltages
    j_voltage = voltages[j_idx]
    if t_idx > j_idx + 1 and voltages[j_idx + 1] > j_voltage:
        j_voltage = voltages[j_idx + 1]
    st_idx = min(j_idx + math.floor(ST_OFFSET_S * frequency), t_idx)
    if st_idx >= len(voltages):
        return None
    return float(voltages[st_idx] - j_voltage)


def heart_rate(beats: list[Beat], scale: float) -> tuple[int | None, float | None, int | None]:
    """Heart rate from the first and last R-peak of consecutive beats.

    Args:
        beats: Beats in R-peak order
        scale: Factor converting beat times into milliseconds

    Returns:
        Tuple of (hr in bpm, R-R duration in ms, number of R-R intervals).
        All None with fewer than two beats; hr is None for zero duration.
    """
    if len(beats) < 2:
        return None, None, None
    n_intervals = len(beats) - 1
    duration = (beats[-1].r.peak_time - beats[0].r.peak_time) * scale
    if duration <= 0:
        return None, None, n_intervals
    return round_half_up(60 / (duration / 1000 / n_intervals)), duration, n_intervals


def summarize_segment(beats: list[Beat], frequency: float, scale: float = 1.0) -> tuple[list[Beat], SegmentSummary]:
    """Summarise the beats of one segment.

    ST, PR and QRS are averaged over valid beats that yield an ST level.
    Valid beats without an ST level are demoted to invalid.

    Args:
        beats: Validated beats in R-peak order
        frequency: Sampling frequency in Hz
        scale: Factor converting beat times into milliseconds

    Returns:
        Tuple of (beats with demotions applied, segment summary)
    """
    hr, hr_duration, hr_beats = heart_rate(beats, scale)

    st, pr, qrs = [], [], []
    updated = []
    for beat in beats:
        if beat.valid:
            level = st_level(beat, frequency)
            if level is None:
                logger.debug(f"No ST level for beat at R={beat.r.peak_time}, marking invalid")
                beat = beat.model_copy(update={"valid": False})
            else:
                st.append(level)
                pr.append((beat.r.start_time - beat.p.start_time) * scale)
                qrs.append((beat.s.end_time - beat.q.start_time) * scale)
        updated.append(beat)

    summary = SegmentSummary(
        hr=hr,
        hr_duration=hr_duration,
        hr_beats=hr_beats,
        st=float(np.mean(st)) if st else None,
        pr=float(np.mean(pr)) if pr else None,
        qrs=float(np.mean(qrs)) if qrs else None,
        valid_beats=len(st),
    )
    return updated, summary


def summarize_recording(segments: list[SegmentResult]) -> Summary:
    """Combine segment summaries into a recording summary.

    Heart rate uses the pooled R-R duration over the pooled interval count.
    PR and QRS are weighted by each segment's valid beats. ST is the plain
    mean over segments that have an ST level, so a single long noisy segment
    does not dominate it.
    """
    hr_duration = 0.0
    hr_beats = 0
    st_levels = []
    pr_sum = qrs_sum = 0.0
    valid_beats = 0
    for segment in segments:
        summary = segment.summary
        if summary.hr_duration:
            hr_duration += summary.hr_duration
            hr_beats += summary.hr_beats or 0
        if summary.st is not None:
            st_levels.append(summary.st)
        if summary.pr is not None:
            pr_sum += summary.pr * summary.valid_beats
        if summary.qrs is not None:
            qrs_sum += summary.qrs * summary.valid_beats
        valid_beats += summary.valid_beats

    hr = round_half_up(60 / (hr_duration / 1000 / hr_beats)) if hr_beats > 0 and hr_duration > 0 else None
    return Summary(
        hr=hr,
        hr_duration=hr_duration if hr_beats > 0 else None,
        hr_beats=hr_beats if hr_beats > 0 else None,
        st=float(np.mean(st_levels)) if st_levels else None,
        pr=pr_sum / valid_beats if valid_beats > 0 else None,
        qrs=qrs_sum / valid_beats if valid_beats > 0 else None,
        valid_beats=valid_beats,
    )
