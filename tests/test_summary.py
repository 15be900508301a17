"""Unit tests for heart rate, interval and ST summaries."""

import numpy as np
import pytest

from ecg_delineator import SegmentSummary, summarize_recording, summarize_segment
from ecg_delineator.models import Beat, SegmentResult, Wave
from ecg_delineator.summary import heart_rate, st_level


def _beat(r_time: float, valid: bool = False, **waves) -> Beat:
    times = np.arange(r_time - 40, r_time + 40, dtype=float)
    return Beat(
        start_time=times[0],
        end_time=times[-1],
        times=times,
        voltages=np.zeros(times.size),
        r=Wave(peak_time=r_time, peak_voltage=1.0),
        valid=valid,
        **waves,
    )


def _st_beat(t_start: float) -> Beat:
    times = np.arange(30, dtype=float)
    voltages = np.zeros(30)
    voltages[10] = 0.1
    voltages[11] = 0.05
    voltages[18] = 0.3
    return Beat(
        start_time=0,
        end_time=29,
        times=times,
        voltages=voltages,
        p=Wave(start_time=1.0),
        q=Wave(start_time=6.0),
        r=Wave(start_time=7.0, peak_time=8.0),
        s=Wave(end_time=10.0),
        t=Wave(start_time=t_start),
        valid=True,
    )


def test_heart_rate_ms():
    beats = [_beat(t) for t in (100.0, 900.0, 1700.0)]
    assert heart_rate(beats, 1.0) == (75, 1600.0, 2)


def test_heart_rate_sample_units():
    beats = [_beat(t) for t in (100.0, 180.0, 260.0)]
    hr, duration, n_intervals = heart_rate(beats, 10.0)
    assert hr == 75
    assert duration == pytest.approx(1600.0)
    assert n_intervals == 2


def test_heart_rate_needs_two_beats():
    assert heart_rate([_beat(100.0)], 1.0) == (None, None, None)
    assert heart_rate([], 1.0) == (None, None, None)


def test_st_level():
    # J at index 10, measured 8 samples later at 100 Hz
    assert st_level(_st_beat(25.0), 100) == pytest.approx(0.2)


def test_st_level_clamped_to_t_onset():
    assert st_level(_st_beat(15.0), 100) == pytest.approx(-0.1)


def test_st_level_uses_larger_j_neighbour():
    beat = _st_beat(25.0)
    voltages = beat.voltages.copy()
    voltages[11] = 0.2
    beat = beat.model_copy(update={"voltages": voltages})
    assert st_level(beat, 100) == pytest.approx(0.1)


def test_st_level_unknown_t_onset():
    assert st_level(_st_beat(25.0).model_copy(update={"t": Wave()}), 100) is None


def test_st_level_high_frequency_clamps_to_t_onset():
    beat = _st_beat(25.0)
    assert st_level(beat, 1000) == pytest.approx(-0.1)


def test_summarize_segment_intervals():
    beats = [_st_beat(25.0), _st_beat(15.0)]
    updated, summary = summarize_segment(beats, 100, scale=10.0)

    assert summary.valid_beats == 2
    assert summary.pr == pytest.approx(60.0)
    assert summary.qrs == pytest.approx(40.0)
    assert summary.st == pytest.approx(0.05)
    assert all(beat.valid for beat in updated)


def test_summarize_segment_demotes_beats_without_st():
    beats = [_st_beat(25.0), _st_beat(25.0).model_copy(update={"t": Wave()})]
    updated, summary = summarize_segment(beats, 100)

    assert [beat.valid for beat in updated] == [True, False]
    assert beats[1].valid
    assert summary.valid_beats == 1


def test_summarize_segment_without_valid_beats():
    beats = [_beat(t) for t in (100.0, 900.0, 1700.0)]
    _, summary = summarize_segment(beats, 100)

    assert summary.hr == 75
    assert summary.valid_beats == 0
    assert summary.st is None
    assert summary.pr is None
    assert summary.qrs is None


def _segment_result(summary: SegmentSummary) -> SegmentResult:
    return SegmentResult(start_time=0, end_time=1, summary=summary)


def test_summarize_recording_weights():
    segments = [
        _segment_result(SegmentSummary(hr=75, hr_duration=1600, hr_beats=2, st=0.1, pr=100, qrs=80, valid_beats=1)),
        _segment_result(SegmentSummary(hr=75, hr_duration=2400, hr_beats=3, st=0.3, pr=200, qrs=100, valid_beats=3)),
    ]
    summary = summarize_recording(segments)

    assert summary.hr == 75
    assert summary.hr_duration == 4000
    assert summary.hr_beats == 5
    assert summary.pr == pytest.approx(175.0)
    assert summary.qrs == pytest.approx(95.0)
    # ST is not weighted by beat count
    assert summary.st == pytest.approx(0.2)
    assert summary.valid_beats == 4


def test_summarize_recording_skips_segments_without_hr():
    segments = [
        _segment_result(SegmentSummary(hr_duration=1600, hr_beats=2)),
        _segment_result(SegmentSummary()),
    ]
    summary = summarize_recording(segments)
    assert summary.hr == 75
    assert summary.st is None


def test_summarize_recording_empty():
    summary = summarize_recording([])
    assert summary.hr is None
    assert summary.hr_duration is None
    assert summary.valid_beats == 0
    assert summary.model_dump(by_alias=True)["validBeats"] == 0
