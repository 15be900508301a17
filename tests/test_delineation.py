"""Unit tests for wave delineation and beat validity."""

import numpy as np
import pytest

import ecg_delineator
from ecg_delineator import (
    BaselineFilter,
    Settings,
    delineate_beat,
    detect_r_peaks,
    is_complete,
    validate_beat,
    window_beats,
)
from ecg_delineator.delineation import hold_through
from ecg_delineator.models import WAVE_NAMES, Beat, Segment, Wave


def _delineated(voltages: np.ndarray, settings: Settings | None = None) -> list[Beat]:
    settings = settings or Settings()
    segment = Segment(times=np.arange(voltages.size, dtype=float), voltages=voltages)
    beats = window_beats(segment, detect_r_peaks(segment, settings), 100, settings)
    return [validate_beat(delineate_beat(beat, settings)) for beat in beats]


def _complete_beat(**overrides) -> Beat:
    times = np.arange(100, dtype=float)
    waves = {
        "p": Wave(start_time=10, end_time=20, peak_time=15, peak_voltage=0.1),
        "q": Wave(start_time=30, end_time=33, peak_time=32, peak_voltage=-0.1),
        "r": Wave(start_time=33, end_time=37, peak_time=35, peak_voltage=1.0),
        "s": Wave(start_time=37, end_time=40, peak_time=38, peak_voltage=-0.2),
        "t": Wave(start_time=55, end_time=80, peak_time=65, peak_voltage=0.3),
    }
    waves.update(overrides)
    return Beat(start_time=0, end_time=99, times=times, voltages=np.zeros(100), **waves)


def test_hold_through():
    values = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
    mask = np.array([False, True, True, False, False])
    assert hold_through(values, mask).tolist() == [1.0, 1.0, 1.0, 4.0, 5.0]


def test_hold_through_masked_start_takes_first_value():
    values = np.array([1.0, 2.0, 3.0])
    mask = np.array([True, True, False])
    assert hold_through(values, mask).tolist() == [1.0, 1.0, 3.0]


def test_delineated_waves_are_ordered(synthetic_ecg):
    voltages, _ = synthetic_ecg
    beats = _delineated(voltages)
    assert len(beats) == 10

    for beat in beats:
        for name in WAVE_NAMES:
            wave = getattr(beat, name)
            if wave.start_time is not None and wave.end_time is not None:
                assert wave.start_time <= wave.end_time
            if wave.located:
                assert wave.start_time <= wave.peak_time <= wave.end_time
                assert beat.index_of(wave.peak_time) is not None


def test_qrs_boundaries_surround_r_peak(synthetic_ecg):
    voltages, _ = synthetic_ecg
    for beat in _delineated(voltages):
        if beat.q.peak_time is not None:
            assert beat.q.peak_time < beat.r.peak_time
        if beat.s.peak_time is not None:
            assert beat.s.peak_time > beat.r.peak_time
        if beat.t.peak_time is not None:
            assert beat.t.peak_time > beat.r.peak_time


def test_valid_beats_are_complete(synthetic_ecg):
    voltages, _ = synthetic_ecg
    for beat in _delineated(voltages):
        assert beat.valid == is_complete(beat)


def test_delineate_returns_copy(synthetic_ecg):
    voltages, _ = synthetic_ecg
    segment = Segment(times=np.arange(voltages.size, dtype=float), voltages=voltages)
    beat = window_beats(segment, detect_r_peaks(segment), 100)[3]

    delineated = delineate_beat(beat)

    assert beat.baseline is None
    assert delineated.baseline.shape == beat.times.shape
    assert delineated.baseline_without_qrs.shape == beat.times.shape
    assert delineated.r.peak_time == beat.r.peak_time


@pytest.mark.parametrize("kind", list(BaselineFilter))
def test_all_baseline_filters(synthetic_ecg, kind):
    voltages, _ = synthetic_ecg
    beats = _delineated(voltages, Settings(baseline_filter=kind))
    assert len(beats) == 10
    assert all(np.all(np.isfinite(beat.baseline)) for beat in beats)


def test_is_complete():
    assert is_complete(_complete_beat())
    assert validate_beat(_complete_beat()).valid


@pytest.mark.parametrize(
    "wave",
    [
        Wave(start_time=10, end_time=20),
        Wave(start_time=None, end_time=20, peak_time=15),
        Wave(start_time=10, end_time=20, peak_time=0),
        Wave(start_time=-1, end_time=20, peak_time=15),
    ],
)
def test_incomplete_wave_invalidates_beat(wave):
    beat = validate_beat(_complete_beat(t=wave))
    assert not beat.valid


def test_p_wave_located_on_simulated_ecg(simulated_ecg):
    voltages, sfreq = simulated_ecg
    result = ecg_delineator.process_ecg(voltages, sfreq)

    located = [beat for beat in result.beats if beat.p.located]
    assert located
    for beat in located:
        assert beat.p.start_time <= beat.p.peak_time < beat.p.end_time
        assert beat.p.end_time < beat.r.peak_time
        assert beat.index_of(beat.p.peak_time) is not None
    for beat in result.beats:
        if beat.valid:
            assert is_complete(beat)
