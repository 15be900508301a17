"""Pydantic models for configuration."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BaselineFilter(str, Enum):
    """Filter used to estimate the baseline of a beat."""

    LOWPASS = "LOWPASS"
    MEAN = "MEAN"
    MEDIAN = "MEDIAN"


class BaselineFilterOptions(BaseModel):
    """Parameters of the baseline filters.

    Attributes:
        alpha: Smoothing factor of the low-pass filter (1 returns the input unchanged).
        window_size: Window of the mean and median filters, in samples.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    alpha: float = Field(default=0.05, gt=0, le=1)
    window_size: int = Field(default=20, ge=1, alias="windowSize")


class Settings(BaseModel):
    """Complete settings for beat segmentation and wave delineation.

    Settings are immutable: build one object per run and hand it to the
    processor. Every field accepts its camelCase name as well, so option
    dictionaries such as ``{"rPeakMinDistance": 25}`` validate directly.

    Args:
        smooth_window_size: Moving-average window used before slope analysis.
        r_peak_slope_threshold: Slope of the smoothed signal that opens/closes a QRS upstroke.
        r_peak_min_distance: Minimum distance in samples between accepted R-peaks.
        baseline_filter: Which filter estimates the beat baseline.
        baseline_filter_options: Parameters of the baseline filter.
        through_min_distance: Minimum distance in samples between P/T wave candidates.
        min_p_wave_height: Minimum height of a P-wave candidate above the running trough.
        min_t_wave_height: Minimum height of a T-wave candidate above the running trough.
        use_direct_data: Input is (time, voltage) pairs in sample units, no down-sampling.
        debug: Keep internal sample buffers in the published result.
        aggregation: Group size for peak-preserving down-sampling. None uses sfreq // 100.
        n_jobs: Worker processes used across segments (-1 for all CPUs).

    Examples:
        # Default settings
        settings = Settings()

        # Median baseline with a wider window
        settings = Settings(baseline_filter="MEDIAN", baseline_filter_options={"window_size": 30})

        # Options in their original camelCase spelling
        settings = Settings.model_validate({"useDirectData": True, "rPeakMinDistance": 25})
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    smooth_window_size: int = Field(default=5, ge=1, alias="smoothWindowSize")
    r_peak_slope_threshold: float = Field(default=0.05, gt=0, alias="rPeakSlopeThreshold")
    r_peak_min_distance: int = Field(default=30, ge=0, alias="rPeakMinDistance")
    baseline_filter: BaselineFilter = Field(default=BaselineFilter.LOWPASS, alias="baselineFilter")
    baseline_filter_options: BaselineFilterOptions = Field(
        default_factory=BaselineFilterOptions, alias="baselineFilterOptions"
    )
    through_min_distance: int = Field(default=10, ge=0, alias="throughMinDistance")
    min_p_wave_height: float = Field(default=0.0, ge=0, alias="minPWaveHeight")
    min_t_wave_height: float = Field(default=0.1, ge=0, alias="minTWaveHeight")
    use_direct_data: bool = Field(default=False, alias="useDirectData")
    debug: bool = False
    aggregation: int | None = Field(default=None, ge=1)
    n_jobs: int | None = Field(default=1, alias="nJobs")
