"""R-peak detection on a single segment."""

import numpy as np

from ._logging import logger
from .config import Settings
from .filters import slope, smooth
from .models import Segment


def detect_r_peaks(segment: Segment, settings: Settings | None = None) -> np.ndarray[tuple[int], np.dtype[np.intp]]:
    """Locate R-peaks as sharp rise-then-fall transitions of the smoothed signal.

    The slope of the smoothed segment is scanned left to right with a
    two-state machine. A slope above ``+r_peak_slope_threshold`` opens a
    rising edge; a slope below ``-r_peak_slope_threshold`` while rising closes
    it. On closing, the scan walks back while the smoothed signal is still
    decreasing to land on the local maximum. That index is accepted when it
    is the first peak or lies more than ``r_peak_min_distance`` samples after
    the previously accepted one.

    Args:
        segment: Segment to scan
        settings: Detection settings. Defaults to Settings().

    Returns:
        Sample indices of the accepted R-peaks in increasing order. Times and
        voltages are read from the unsmoothed segment at these indices.

    Examples:
        >>> peaks = detect_r_peaks(segment)
        >>> r_times = segment.times[peaks]
    """
    settings = settings or Settings()
    smoothed = smooth(segment.voltages, settings.smooth_window_size)
    diffs = slope(smoothed)
    threshold = settings.r_peak_slope_threshold

    peaks: list[int] = []
    rising = False
    for i in range(1, len(diffs)):
        if diffs[i] > threshold and not rising:
            rising = True
        elif diffs[i] < -threshold and rising:
            rising = False
            j = i
            while j > 0 and smoothed[j] < smoothed[j - 1]:
                j -= 1
            if not peaks or j - peaks[-1] > settings.r_peak_min_distance:
                peaks.append(j)
            else:
                logger.debug(f"Discarding R-peak candidate at {j}, too close to {peaks[-1]}")

    logger.debug(f"Detected {len(peaks)} R-peaks in segment of {len(segment)} samples")
    return np.asarray(peaks, dtype=np.intp)
