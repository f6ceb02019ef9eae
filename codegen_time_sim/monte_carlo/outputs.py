"""
PURPOSE: Summary statistics of a simulation batch and the plain-text report.

This module turns a batch of trial durations into the six summary statistics
(mean, median, p90, p95, min, max) and renders them, together with the model
parameters, as a human-readable console report.

SRP/DRY: Single responsibility = aggregation and formatting.
         No sampling, no charts. Works on any sequence of durations.

PERCENTILES:
    p90 and p95 use the nearest-rank rule sorted[floor(N * fraction)] with no
    interpolation. For small N this differs from interpolated conventions:
    with N=10 both p90 and p95 pick sorted[9], the maximum.
    The median is the conventional one (mean of the two middle values for
    even N).
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import numpy as np

from .config import P90_FRACTION, P95_FRACTION
from .errors import InvalidInput


def format_number(value) -> str:
    """Shortest plain rendering of a parameter value: 1.0 -> '1', 0.05 -> '0.05'."""
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        return str(int(value))
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def round_minutes(value: float) -> str:
    """Round half up to whole minutes; non-finite values are shown as-is."""
    if not math.isfinite(value):
        return str(value)
    return str(int(math.floor(value + 0.5)))


def nearest_rank(sorted_values: np.ndarray, fraction: float) -> float:
    """Return sorted_values[floor(N * fraction)] (nearest-rank percentile, no interpolation)."""
    index = int(math.floor(len(sorted_values) * fraction))
    return float(sorted_values[index])


@dataclass(frozen=True)
class SummaryStatistics:
    """Read-only snapshot of a simulation batch, all values in minutes.

    Attributes:
        count (int): Number of trials in the batch.
        mean_minutes (float): Arithmetic mean.
        median_minutes (float): Conventional median.
        p90_minutes (float): Nearest-rank 90th percentile.
        p95_minutes (float): Nearest-rank 95th percentile.
        min_minutes (float): Smallest duration.
        max_minutes (float): Largest duration.
    """
    count: int
    mean_minutes: float
    median_minutes: float
    p90_minutes: float
    p95_minutes: float
    min_minutes: float
    max_minutes: float

    @classmethod
    def from_times(cls, times) -> "SummaryStatistics":
        """
        Compute statistics over a batch of durations.

        The batch is not modified; percentiles come from a sorted copy.

        Raises:
            InvalidInput: If the batch is empty.
        """
        values = np.asarray(times, dtype=float)
        if values.ndim != 1:
            raise InvalidInput(f"times must be one-dimensional, got shape {values.shape}")
        n = values.shape[0]
        if n == 0:
            raise InvalidInput("cannot compute statistics of an empty batch")

        sorted_values = np.sort(values)
        return cls(
            count=int(n),
            mean_minutes=float(np.mean(values)),
            median_minutes=float(np.median(sorted_values)),
            p90_minutes=nearest_rank(sorted_values, P90_FRACTION),
            p95_minutes=nearest_rank(sorted_values, P95_FRACTION),
            min_minutes=float(sorted_values[0]),
            max_minutes=float(sorted_values[-1]),
        )

    def as_rows(self) -> List[Tuple[str, float]]:
        """Label/value pairs in report order."""
        return [
            ("Mean", self.mean_minutes),
            ("Median", self.median_minutes),
            ("90th %ile", self.p90_minutes),
            ("95th %ile", self.p95_minutes),
            ("Min", self.min_minutes),
            ("Max", self.max_minutes),
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to dictionary for JSON serialization."""
        return {
            "count": self.count,
            "mean_minutes": round(self.mean_minutes, 2),
            "median_minutes": round(self.median_minutes, 2),
            "p90_minutes": round(self.p90_minutes, 2),
            "p95_minutes": round(self.p95_minutes, 2),
            "min_minutes": round(self.min_minutes, 2),
            "max_minutes": round(self.max_minutes, 2),
        }


def calculate_stats(times) -> SummaryStatistics:
    """Module-level wrapper for SummaryStatistics.from_times."""
    return SummaryStatistics.from_times(times)


class ReportFormatter:
    """
    Formats a configuration and its statistics as a console report.

    The parameter section explains, for each model parameter, which way it
    moves the result. The results section rounds every statistic to whole
    minutes.
    """

    PARAMETER_DESCRIPTIONS = {
        "mu": (
            "Mean (μ) of log-normal AI retries. How many retries AI makes before success.\n"
            "AI takes exponentially longer when it fails early. +1 → ~2.7× median retries"
        ),
        "sigma": (
            "Std (σ) of log-normal AI retries. Adjusts retry variability.\n"
            "+0.5 → ~1.6× IQR. Wider spread means AI sometimes fails quickly, sometimes loops longer."
        ),
        "wait_time_mean": (
            "Mean (W) AI task generation time. Base time AI takes per attempt.\n"
            "+10s → ~+50% mean total time. Higher values slow down every retry."
        ),
        "wait_time_std": (
            "Std (σ_w) AI task generation time. Adds randomness to AI response times.\n"
            "+3s → more variance in completion time, but doesn't affect median much."
        ),
        "retry_impact": (
            "Multiplicative retry delay (α). Increases slowdown per retry.\n"
            "+0.05 → +5% per retry, compounding delays. Makes AI struggle more on hard tasks."
        ),
        "retry_power": (
            "Retry scaling exponent (p). Controls how retry impact grows.\n"
            "1.0 = linear, 2.0 = quadratic. Higher values punish repeated failures more."
        ),
        "lines_of_code": (
            "Task size (LOC). Number of lines AI is generating.\n"
            "+100 → ~+100% time increase, but retries scale worse with larger tasks."
        ),
        "readiness_mean": (
            "Mean AI success rate (R). Fraction of code AI gets right per attempt.\n"
            "-0.1 → ~1.25× retries needed. AI retries more when lower."
        ),
        "readiness_std": (
            "Std (σ_r) AI success rate. Increases randomness in AI's effectiveness.\n"
            "+0.05 → AI alternates between good and bad completions more."
        ),
    }

    @staticmethod
    def format_parameters(config) -> str:
        """Render the parameter section: name, value and description per field."""
        lines = ["=== Simulation Parameters ===", ""]
        for name, description in ReportFormatter.PARAMETER_DESCRIPTIONS.items():
            value = format_number(getattr(config, name))
            lines.append(f"{name:<15} = {value:<6} | {description}")
            lines.append("")
        return "\n".join(lines)

    @staticmethod
    def format_results(stats: SummaryStatistics) -> str:
        """Render the results section, one statistic per line in whole minutes."""
        lines = ["=== Simulation Results ===", ""]
        for label, value in stats.as_rows():
            lines.append(f"{label:<12}: {round_minutes(value)} minutes")
        return "\n".join(lines)

    @staticmethod
    def format_report(config, stats: SummaryStatistics) -> str:
        """Full report: parameters followed by results."""
        return "\n".join(
            [
                "",
                ReportFormatter.format_parameters(config),
                ReportFormatter.format_results(stats),
                "",
            ]
        )
