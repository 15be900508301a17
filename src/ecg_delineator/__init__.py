"""ecg-delineator: beat segmentation and P/Q/R/S/T wave delineation for single-lead ECGs.

This package splits a recording into gap-free segments, detects R-peaks,
cuts each segment into beats, delineates the five canonical waves of every
beat and summarises heart rate, PR, QRS and ST at beat, segment and
recording level.
"""

from ._logging import logger, set_log_file, set_log_level
from .config import BaselineFilter, BaselineFilterOptions, ConfigLoader, Settings
from .core import ECGProcessor, process_ecg, process_segment
from .delineation import delineate_beat
from .filters import (
    BaselineFilterError,
    apply_baseline_filter,
    lowpass_filter,
    mean_filter,
    median_filter,
    smooth,
)
from .models import Beat, ECGResult, Segment, SegmentResult, SegmentSummary, Summary, Wave
from .preprocessing import aggregate, prepare_samples
from .rpeaks import detect_r_peaks
from .segments import split_segments
from .summary import summarize_recording, summarize_segment
from .validation import is_complete, validate_beat
from .windowing import find_peaks, window_beats

__version__ = "1.0.0-alpha.1"
__all__ = [
    "__version__",
    "logger",
    "set_log_level",
    "set_log_file",
    "Settings",
    "BaselineFilter",
    "BaselineFilterOptions",
    "BaselineFilterError",
    "ConfigLoader",
    "ECGProcessor",
    "process_ecg",
    "process_segment",
    "aggregate",
    "prepare_samples",
    "split_segments",
    "smooth",
    "mean_filter",
    "median_filter",
    "lowpass_filter",
    "apply_baseline_filter",
    "detect_r_peaks",
    "find_peaks",
    "window_beats",
    "delineate_beat",
    "is_complete",
    "validate_beat",
    "summarize_segment",
    "summarize_recording",
    "Wave",
    "Beat",
    "Segment",
    "SegmentResult",
    "SegmentSummary",
    "Summary",
    "ECGResult",
]


def __dir__():
    return __all__
