"""Main delineation orchestrator."""

import multiprocessing
from functools import partial
from pathlib import Path

import numpy as np
from tqdm import tqdm

from . import utils
from ._logging import logger
from .config import ConfigLoader, Settings
from .delineation import delineate_beat
from .models import ECGResult, Segment, SegmentResult
from .preprocessing import prepare_samples, time_scale
from .rpeaks import detect_r_peaks
from .segments import split_segments
from .summary import summarize_recording, summarize_segment
from .types import RawECG
from .validation import validate_beat
from .windowing import window_beats


def process_segment(segment: Segment, frequency: float, settings: Settings) -> SegmentResult:
    """Run R-peak detection, windowing, delineation, validation and summary on one segment.

    Segments are independent of each other, so this function is safe to run
    in worker processes.

    Args:
        segment: Contiguous run of valid samples
        frequency: Sampling frequency of the segment in Hz
        settings: Processing settings

    Returns:
        Beats and summary of the segment
    """
    r_peaks = detect_r_peaks(segment, settings)
    beats = window_beats(segment, r_peaks, frequency, settings)
    beats = [validate_beat(delineate_beat(beat, settings)) for beat in beats]
    beats, summary = summarize_segment(beats, frequency, time_scale(frequency, settings))
    if not beats:
        logger.warning(
            f"No beats found in segment {segment.start_time}-{segment.end_time} ({len(segment)} samples)"
        )
    logger.debug(f"Segment {segment.start_time}-{segment.end_time}: {len(beats)} beats, {summary.valid_beats} valid")
    return SegmentResult(
        start_time=segment.start_time,
        end_time=segment.end_time,
        summary=summary,
        beats=beats,
        segment=segment if settings.debug else None,
    )


class ECGProcessor:
    """Main orchestrator for beat segmentation and wave delineation.

    This class runs the complete pipeline from a raw single-lead recording
    to per-beat wave boundaries and segment/recording summaries.

    Args:
        sfreq: Nominal sampling frequency in Hz
        settings: Processing settings

    Examples:
        # Default settings
        processor = ECGProcessor(sfreq=500)
        result = processor.process(voltages)

        # (time, voltage) pairs in sample units, no down-sampling
        processor = ECGProcessor(sfreq=100, settings=Settings(use_direct_data=True))
        result = processor.process(pairs)
    """

    def __init__(self, sfreq: float, settings: Settings | None = None):
        """Initialize the processor.

        Args:
            sfreq: Nominal sampling frequency in Hz
            settings: Settings object. If None, uses default settings.
        """
        self.sfreq = sfreq
        self.settings = settings or Settings()

    def process(self, ecg: RawECG) -> ECGResult:
        """Delineate every beat of a recording.

        This is the main entry point. It:
        1. Down-samples and timestamps the input (or takes direct (time, voltage) pairs)
        2. Splits the samples into segments at missing values
        3. Processes each segment (sequentially or in worker processes)
        4. Combines the segment summaries into a recording summary

        Args:
            ecg: 1D voltages, or (n_samples, 2) (time, voltage) pairs in direct mode

        Returns:
            Complete delineation result

        Raises:
            ValueError: If the input has an invalid shape or sfreq is not positive
            BaselineFilterError: If the configured baseline filter is unknown
        """
        times, voltages, frequency = prepare_samples(ecg, self.sfreq, self.settings)
        segments = split_segments(times, voltages)
        if not segments:
            logger.warning("Recording contains no valid samples")

        start = utils.log_start("beat delineation", len(segments))
        worker = partial(process_segment, frequency=frequency, settings=self.settings)
        processes = utils.get_n_processes(self.settings.n_jobs, len(segments))

        if processes == 1:
            results = list(
                tqdm(
                    (worker(segment) for segment in segments),
                    total=len(segments),
                    desc="Segments",
                    unit="segment",
                    disable=len(segments) < 2,
                )
            )
        else:
            logger.info(f"Starting parallel processing with {processes} CPUs")
            with multiprocessing.Pool(processes=processes) as pool:
                results = list(
                    tqdm(
                        pool.imap(worker, segments),
                        total=len(segments),
                        desc="Segments",
                        unit="segment",
                    )
                )

        summary = summarize_recording(results)
        utils.log_end("beat delineation", start, sum(len(result.beats) for result in results))
        logger.info(
            f"Recording summary: hr={summary.hr}, pr={summary.pr}, qrs={summary.qrs}, st={summary.st}, "
            f"valid beats={summary.valid_beats}"
        )

        return ECGResult(
            summary=summary,
            segments=results,
            frequency=frequency,
            original_frequency=self.sfreq,
            original_data=np.asarray(ecg),
            debug=self.settings.debug,
        )


def process_ecg(
    ecg: RawECG,
    sfreq: float,
    settings: Settings | dict | str | Path | None = None,
) -> ECGResult:
    """Delineate an ECG recording.

    This is the main high-level API. It handles configuration loading and
    runs the complete pipeline.

    Args:
        ecg: 1D voltages, or (n_samples, 2) (time, voltage) pairs when
            ``use_direct_data`` is set. NaN or None marks a missing sample.
        sfreq: Nominal sampling frequency in Hz
        settings: Configuration. Can be:
            - Settings object: Use directly
            - dict: Validated into Settings (camelCase keys accepted)
            - str or Path: Load from JSON/TOML config file
            - None: Use default settings

    Returns:
        Complete delineation result

    Raises:
        ValueError: If input data has invalid shape or settings are invalid
        TypeError: If settings has an unsupported type
        FileNotFoundError: If settings is a path that doesn't exist

    Examples:
        result = ecg_delineator.process_ecg(voltages, sfreq=511.547, settings={"aggregation": 5})
        print(result.to_dict()["summary"])
    """
    if settings is None:
        settings_obj = Settings()
    elif isinstance(settings, Settings):
        settings_obj = settings
    elif isinstance(settings, dict):
        settings_obj = Settings.model_validate(settings)
    elif isinstance(settings, (str, Path)):
        settings_obj = ConfigLoader.from_file(settings)
    else:
        raise TypeError(f"settings must be a Settings object, dict, str, Path, or None, got {type(settings).__name__}")

    return ECGProcessor(sfreq, settings_obj).process(ecg)

