"""Pydantic models for segments, beats, waves and their summaries.

Every value that may be missing is optional and defaults to None. Models are
frozen: pipeline stages derive updated copies with ``model_copy(update=...)``
instead of mutating a shared record. Numpy buffers used while delineating a
beat are excluded from serialisation and only published in debug mode.
"""

from typing import Any

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

WAVE_NAMES = ("p", "q", "r", "s", "t")


class Wave(BaseModel):
    """Boundaries and peak of one ECG wave within a beat.

    Attributes:
        start_time: Onset of the wave
        end_time: Offset of the wave
        peak_time: Time of the wave peak (or trough for Q and S)
        peak_voltage: Raw voltage at the peak
    """

    model_config = ConfigDict(frozen=True)

    start_time: float | None = None
    end_time: float | None = None
    peak_time: float | None = None
    peak_voltage: float | None = None

    @property
    def located(self) -> bool:
        """True when onset, offset and peak are all known."""
        return (
            self.start_time is not None
            and self.end_time is not None
            and self.peak_time is not None
            and self.start_time >= 0
            and self.end_time >= 0
            and self.peak_time > 0
        )


class Beat(BaseModel):
    """One cardiac cycle anchored at an R-peak.

    The raw samples of the beat window and the curves computed while
    delineating it are kept as numpy arrays; they never appear in
    ``model_dump()``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    start_time: float
    end_time: float
    p: Wave = Field(default_factory=Wave)
    q: Wave = Field(default_factory=Wave)
    r: Wave = Field(default_factory=Wave)
    s: Wave = Field(default_factory=Wave)
    t: Wave = Field(default_factory=Wave)
    valid: bool = False

    times: np.ndarray = Field(exclude=True, repr=False)
    voltages: np.ndarray = Field(exclude=True, repr=False)
    baseline: np.ndarray | None = Field(default=None, exclude=True, repr=False)
    baseline_without_qrs: np.ndarray | None = Field(default=None, exclude=True, repr=False)

    def index_of(self, time: float | None) -> int | None:
        """Return the first index of the beat window sampled at ``time``."""
        return index_of(self.times, time)

    def to_dict(self, debug: bool = False) -> dict[str, Any]:
        """Serialise the beat; internal buffers are added when debug is set."""
        result = self.model_dump()
        if debug:
            result["_data"] = np.column_stack([self.times, self.voltages]).tolist()
            if self.baseline is not None:
                result["_baseline"] = np.column_stack([self.times, self.baseline]).tolist()
            if self.baseline_without_qrs is not None:
                result["_baseline_without_qrs"] = np.column_stack(
                    [self.times, self.baseline_without_qrs]
                ).tolist()
        return result


class Segment(BaseModel):
    """A contiguous run of samples without missing values."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    times: np.ndarray = Field(repr=False)
    voltages: np.ndarray = Field(repr=False)

    @property
    def start_time(self) -> float:
        return float(self.times[0])

    @property
    def end_time(self) -> float:
        return float(self.times[-1])

    def __len__(self) -> int:
        return len(self.times)


class SegmentSummary(BaseModel):
    """Heart rate and mean intervals of one segment (or of a whole recording).

    Attributes:
        hr: Heart rate in beats per minute, None with fewer than two beats
        hr_duration: Time between the first and last R-peak in milliseconds
        hr_beats: Number of R-R intervals behind hr_duration
        st: Mean ST level in volts over beats with an ST measurement
        pr: Mean PR interval in milliseconds
        qrs: Mean QRS duration in milliseconds
        valid_beats: Number of beats behind st, pr and qrs
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    hr: int | None = None
    hr_duration: float | None = None
    hr_beats: int | None = None
    st: float | None = None
    pr: float | None = None
    qrs: float | None = None
    valid_beats: int = Field(default=0, alias="validBeats")


class Summary(SegmentSummary):
    """Recording-level summary combining all segment summaries."""

    pass


class SegmentResult(BaseModel):
    """Beats and summary of one segment."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    start_time: float
    end_time: float
    summary: SegmentSummary
    beats: list[Beat] = Field(default_factory=list)
    segment: Segment | None = Field(default=None, exclude=True, repr=False)

    def to_dict(self, debug: bool = False) -> dict[str, Any]:
        result: dict[str, Any] = {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "summary": self.summary.model_dump(by_alias=True),
            "beats": [beat.to_dict(debug=debug) for beat in self.beats],
        }
        if debug and self.segment is not None:
            result["_data"] = np.column_stack([self.segment.times, self.segment.voltages]).tolist()
        return result


class ECGResult(BaseModel):
    """Complete delineation result of one recording.

    Attributes:
        summary: Recording-level summary
        segments: One entry per contiguous segment, in time order
        frequency: Sampling frequency the pipeline worked at (after down-sampling)
        original_frequency: Nominal sampling frequency of the input
        original_data: The input exactly as received
        debug: Default for publishing internal buffers in to_dict()
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    summary: Summary
    segments: list[SegmentResult] = Field(default_factory=list)
    frequency: float
    original_frequency: float
    original_data: np.ndarray = Field(exclude=True, repr=False)
    debug: bool = Field(default=False, exclude=True)

    @property
    def beats(self) -> list[Beat]:
        """All beats of all segments in time order."""
        return [beat for segment in self.segments for beat in segment.beats]

    def to_dict(self, debug: bool | None = None) -> dict[str, Any]:
        """Publish the result as plain Python containers.

        Args:
            debug: Include raw sample buffers and baseline curves. Defaults to
                the debug flag of the settings the result was produced with.
        """
        debug = self.debug if debug is None else debug
        return {
            "summary": self.summary.model_dump(by_alias=True),
            "segments": [segment.to_dict(debug=debug) for segment in self.segments],
        }

    def beats_frame(self) -> pd.DataFrame:
        """One row per beat with wave boundaries flattened into columns.

        Columns follow the pattern ``{wave}_{field}`` (e.g. ``p_start_time``),
        plus ``segment``, ``start_time``, ``end_time`` and ``valid``.
        """
        rows = []
        for seg_idx, segment in enumerate(self.segments):
            for beat in segment.beats:
                row: dict[str, Any] = {
                    "segment": seg_idx,
                    "start_time": beat.start_time,
                    "end_time": beat.end_time,
                    "valid": beat.valid,
                }
                for name in WAVE_NAMES:
                    for field, value in getattr(beat, name).model_dump().items():
                        row[f"{name}_{field}"] = value
                rows.append(row)
        columns = ["segment", "start_time", "end_time", "valid"] + [
            f"{name}_{field}" for name in WAVE_NAMES for field in Wave.model_fields
        ]
        return pd.DataFrame(rows, columns=columns)


def index_of(times: np.ndarray, time: float | None) -> int | None:
    """Return the first index where ``times`` equals ``time``, or None."""
    if time is None:
        return None
    matches = np.flatnonzero(times == time)
    if matches.size == 0:
        return None
    return int(matches[0])
