"""Shared test fixtures for ecg-delineator tests."""

import neurokit2 as nk
import numpy as np
import pytest

# (amplitude, offset in samples from the R-peak, width in samples)
_WAVES = {
    "p": (0.15, -20, 2.5),
    "q": (-0.12, -3, 1.0),
    "r": (1.2, 0, 1.2),
    "s": (-0.25, 3, 1.0),
    "t": (0.35, 28, 5.0),
}


def gaussian_ecg(n_beats: int = 10, rr: int = 80, first_r: int = 50, n_samples: int = 850) -> np.ndarray:
    """Noise-free ECG built from one Gaussian bump per wave and beat."""
    x = np.arange(n_samples, dtype=float)
    ecg = np.zeros(n_samples)
    for k in range(n_beats):
        r = first_r + k * rr
        for amplitude, offset, width in _WAVES.values():
            ecg += amplitude * np.exp(-0.5 * ((x - r - offset) / width) ** 2)
    return ecg


@pytest.fixture
def synthetic_ecg() -> tuple[np.ndarray, int]:
    """Ten identical beats at 75 bpm sampled at 100 Hz.

    Returns:
        Tuple of (voltages, sfreq)
    """
    return gaussian_ecg(), 100


@pytest.fixture
def synthetic_pairs(synthetic_ecg: tuple[np.ndarray, int]) -> tuple[np.ndarray, int]:
    """The synthetic ECG as (sample index, voltage) pairs for direct mode."""
    voltages, sfreq = synthetic_ecg
    return np.column_stack([np.arange(voltages.size, dtype=float), voltages]), sfreq


@pytest.fixture
def gapped_ecg() -> tuple[np.ndarray, int]:
    """Synthetic ECG with two runs of missing samples, giving three segments."""
    voltages = gaussian_ecg(n_beats=30, n_samples=2450)
    voltages[800:810] = np.nan
    voltages[1610:1620] = np.nan
    return voltages, 100


@pytest.fixture
def simulated_ecg() -> tuple[np.ndarray, int]:
    """Realistic single-lead ECG from neurokit2 at 500 Hz.

    Returns:
        Tuple of (voltages, sfreq)
    """
    sfreq = 500
    ecg = nk.ecg_simulate(duration=10, sampling_rate=sfreq, noise=0.01, heart_rate=70, random_state=0)
    return np.asarray(ecg, dtype=float), sfreq
