"""Type definitions for ECG data structures."""

from typing import Annotated, TypeAlias

import numpy as np
import numpy.typing as npt

# Sample times, non-decreasing. Milliseconds, or sample units in direct mode.
TimeArray: TypeAlias = Annotated[npt.NDArray[np.float64], "Shape: (n_samples,)"]

# Voltages matching a TimeArray. NaN marks a missing sample.
VoltageArray: TypeAlias = Annotated[npt.NDArray[np.float64], "Shape: (n_samples,)"]

# Raw recording as handed to the processor:
#   - 1D array of voltages sampled at a nominal frequency, or
#   - 2D array of (time, voltage) pairs when direct timing is used
RawECG: TypeAlias = Annotated[
    npt.NDArray[np.floating],
    "Shape: (n_samples,) or (n_samples, 2)",
]
