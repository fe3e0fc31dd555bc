"""Summary statistics shared by the run calculator and the aggregator."""

import math
from collections.abc import Sequence

import numpy as np

from line_sim.simulation.results import ConfidenceInterval, WaitStats

MIN_SAMPLES_FOR_VARIANCE = 2
Z_95 = 1.96
P90_QUANTILE = 0.9


def safe_div(numerator: float, denominator: float) -> float:
    """Ratio that yields 0 instead of failing on a zero denominator."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(values))


def summarize_waits(values: Sequence[float]) -> WaitStats:
    """
    Average, 90th percentile and maximum of a wait sample.

    The percentile is read straight off the sorted sample at index
    floor(n * 0.9), no interpolation. An empty sample gives all zeros.
    """
    if len(values) == 0:
        return WaitStats()
    ordered = np.sort(np.asarray(values, dtype=np.float64))
    p90_idx = math.floor(len(ordered) * P90_QUANTILE)
    return WaitStats(
        avg=float(np.mean(ordered)),
        p90=float(ordered[p90_idx]),
        max=float(ordered[-1]),
    )


def confidence_interval(values: Sequence[float], z: float = Z_95) -> ConfidenceInterval:
    """
    Normal-approximation interval: mean +/- z * s / sqrt(n).

    s uses Bessel's correction; a single value gives a zero-width interval.
    """
    if len(values) == 0:
        raise ValueError("Cannot build a confidence interval from no values")
    sample = np.asarray(values, dtype=np.float64)
    n = len(sample)
    center = float(np.mean(sample))
    if n < MIN_SAMPLES_FOR_VARIANCE:
        return ConfidenceInterval.point(center)
    std_dev = float(np.std(sample, ddof=1))
    margin = z * std_dev / math.sqrt(n)
    return ConfidenceInterval(mean=center, lower=center - margin, upper=center + margin)


def round_half_up(value: float) -> int:
    """Nearest integer with .5 rounded up (not banker's rounding)."""
    return math.floor(value + 0.5)
