"""Shared helpers for CPU management and timing logs."""

import math
import os
import sys
import time

from ._logging import logger


def get_n_processes(n_jobs: int | None, n_tasks: int) -> int:
    """Get the number of processes to use for parallel processing.

    Args:
        n_jobs: Number of parallel jobs to run.
                - None or -1: Use all available CPUs
                - Positive int: Use exactly that many CPUs
                - Negative int (< -1): Use (total_cpus + n_jobs + 1) CPUs
        n_tasks: Number of tasks to process (used to cap the number of processes)

    Returns:
        Number of processes to use, capped by n_tasks and at least 1
    """
    if sys.version_info >= (3, 13):
        total_cpus = os.process_cpu_count()
    else:
        total_cpus = os.cpu_count()

    if total_cpus is None:
        logger.warning("Could not determine CPU count, defaulting to 1")
        total_cpus = 1

    if n_jobs is None or n_jobs == -1:
        n_processes = total_cpus
    elif n_jobs > 0:
        n_processes = n_jobs
    elif n_jobs < -1:
        # e.g. n_jobs=-2 means all CPUs except one
        n_processes = max(1, total_cpus + n_jobs + 1)
    else:
        logger.warning(f"Invalid n_jobs value: {n_jobs}, defaulting to 1")
        n_processes = 1

    n_processes = max(1, min(n_processes, n_tasks))
    logger.debug(f"Using {n_processes} processes for {n_tasks} tasks")
    return n_processes


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def log_start(stage: str, n_items: int) -> float:
    """Log the start of a processing stage and return the current time."""
    logger.info(f"Starting {stage} for {n_items} segment(s)...")
    return time.time()


def log_end(stage: str, start_time: float, n_beats: int) -> None:
    """Log the end of a processing stage together with the elapsed time."""
    logger.info(f"Completed {stage}. Beats: {n_beats}. Time taken: {time.time() - start_time:.1f} s")
