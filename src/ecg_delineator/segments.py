"""Splitting a recording into contiguous segments of valid samples."""

import numpy as np

from ._logging import logger
from .models import Segment
from .preprocessing import as_float_array


def split_segments(times: np.ndarray, voltages: np.ndarray) -> list[Segment]:
    """Split samples into maximal runs without missing voltages.

    A missing voltage (NaN, or None in an object array) ends the current run.
    Empty runs are never emitted, so all-missing input yields no segments.

    Args:
        times: Sample times, non-decreasing
        voltages: Voltages matching ``times``

    Returns:
        Segments in time order
    """
    times = np.asarray(times, dtype=float)
    voltages = as_float_array(voltages)
    if times.shape != voltages.shape:
        raise ValueError(f"times and voltages must have the same shape, got {times.shape} and {voltages.shape}")

    missing = np.isnan(voltages)
    segments = []
    # Run boundaries are the transitions between missing and present samples
    edges = np.flatnonzero(np.diff(np.concatenate(([True], missing, [True])).astype(np.int8)))
    for start, stop in zip(edges[::2], edges[1::2], strict=True):
        segments.append(Segment(times=times[start:stop], voltages=voltages[start:stop]))

    logger.debug(f"Split {len(voltages)} samples ({int(missing.sum())} missing) into {len(segments)} segment(s)")
    return segments
