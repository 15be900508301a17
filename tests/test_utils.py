"""Unit tests for shared helpers."""

import logging
import os
import sys

import pytest

from ecg_delineator import logger
from ecg_delineator.utils import get_n_processes, log_end, log_start, round_half_up


def _total_cpus() -> int:
    if sys.version_info >= (3, 13):
        return os.process_cpu_count() or 1
    return os.cpu_count() or 1


@pytest.mark.parametrize(
    "n_jobs,n_tasks,expected",
    [
        (1, 10, 1),
        (2, 10, 2),
        (100, 5, 5),
        (0, 10, 1),
        (-100, 10, 1),
        (4, 0, 1),
    ],
)
def test_get_n_processes(n_jobs, n_tasks, expected):
    assert get_n_processes(n_jobs, n_tasks) == expected


@pytest.mark.parametrize("n_jobs", [None, -1])
def test_get_n_processes_all_cpus(n_jobs):
    assert get_n_processes(n_jobs, 1000) == min(_total_cpus(), 1000)


def test_get_n_processes_all_but_one():
    assert get_n_processes(-2, 1000) == max(1, _total_cpus() - 1)


@pytest.mark.parametrize("value,expected", [(2.5, 3), (74.5, 75), (74.49, 74), (0.0, 0), (80.0, 80)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_stage_timing_logs():
    records: list[logging.LogRecord] = []
    handler = logging.Handler()
    handler.emit = records.append
    logger.addHandler(handler)
    try:
        start = log_start("beat delineation", 3)
        log_end("beat delineation", start, 12)
    finally:
        logger.removeHandler(handler)

    messages = [record.getMessage() for record in records]
    assert messages[0] == "Starting beat delineation for 3 segment(s)..."
    assert messages[1].startswith("Completed beat delineation. Beats: 12. Time taken: ")
    assert messages[1].endswith(" s")
