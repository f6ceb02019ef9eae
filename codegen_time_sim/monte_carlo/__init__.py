"""
Monte Carlo simulation of AI code-generation time.

PURPOSE:
    Estimate how long an automated code-generation agent needs to produce a
    task of a given size, by sampling a parametric retry/wait/readiness model
    many times and summarizing the empirical distribution.

RESPONSIBILITIES:
    - Expose latent-variable samplers (log-normal retries, floored wait time,
      clamped readiness)
    - Run batches of independent trials with an owned, seedable generator
    - Compute summary statistics with nearest-rank percentiles
    - Format the console report and render distribution charts

SRP/DRY CHECK:
    Each submodule has a single responsibility:
    - distributions.py: Sampling latent variables only
    - simulation.py: Model configuration and trial batches only
    - outputs.py: Statistics and report formatting only
    - charts.py: Chart rendering only
"""

from .distributions import sample_readiness, sample_retry_count, sample_wait_time
from .errors import InvalidConfiguration, InvalidInput, SimulationError
from .outputs import ReportFormatter, SummaryStatistics, calculate_stats
from .simulation import CodingTimeSimulator, LatentDraws, SimulationConfig, compute_durations

__version__ = "0.1.0"

__all__ = [
    "sample_retry_count",
    "sample_wait_time",
    "sample_readiness",
    "SimulationConfig",
    "LatentDraws",
    "CodingTimeSimulator",
    "compute_durations",
    "SummaryStatistics",
    "calculate_stats",
    "ReportFormatter",
    "SimulationError",
    "InvalidConfiguration",
    "InvalidInput",
]
