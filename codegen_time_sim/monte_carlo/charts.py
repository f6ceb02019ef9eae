"""
PURPOSE: Render histogram and cumulative-distribution charts of a simulation batch.

Each chart is written to a PNG whose file name encodes the model parameters
(readiness, wait mean, mu, sigma, retry impact, retry power, scale mode), so an
output artifact can be traced back to the configuration that produced it.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
from matplotlib import ticker  # noqa: E402

from .config import (  # noqa: E402
    CHART_COLOR,
    CHART_HEIGHT_INCHES,
    CHART_MAX_BINS,
    CHART_OUTPUT_DIR,
    CHART_WIDTH_INCHES,
)
from .errors import InvalidInput  # noqa: E402
from .outputs import SummaryStatistics, format_number, round_minutes  # noqa: E402
from .simulation import SimulationConfig  # noqa: E402

logger = logging.getLogger(__name__)

plt.rcParams["figure.dpi"] = 100
plt.rcParams["savefig.dpi"] = 100
plt.rcParams["font.size"] = 10
plt.rcParams["axes.titlesize"] = 16


def chart_suffix(config: SimulationConfig, use_log_scale: bool) -> str:
    """Parameter-encoding file name suffix shared by both charts."""
    return (
        f"r{format_number(config.readiness_mean)}"
        f"_w{format_number(config.wait_time_mean)}"
        f"_mu{format_number(config.mu)}"
        f"_s{format_number(config.sigma)}"
        f"_i{format_number(config.retry_impact)}"
        f"_p{format_number(config.retry_power)}"
        f"_{'log' if use_log_scale else 'linear'}"
    )


def distribution_filename(config: SimulationConfig, use_log_scale: bool) -> str:
    return f"sim_{chart_suffix(config, use_log_scale)}.png"


def cumulative_filename(config: SimulationConfig, use_log_scale: bool) -> str:
    return f"sim_cumulative_{chart_suffix(config, use_log_scale)}.png"


class ChartRenderer:
    """
    Draws the distribution charts for one configuration.

    max_minutes > 0 drops trials slower than the cutoff from the plotted data
    and fixes the right edge of the time axis; 0 means no cutoff. Statistics
    in the subtitle always describe the full, unfiltered batch.
    """

    def __init__(
        self,
        config: SimulationConfig,
        max_minutes: float = 0,
        use_log_scale: bool = False,
        output_dir: str | Path = CHART_OUTPUT_DIR,
    ):
        if max_minutes < 0:
            raise InvalidInput(f"max_minutes must be >= 0 (0 means no limit), got {max_minutes}")
        self.config = config
        self.max_minutes = max_minutes
        self.use_log_scale = use_log_scale
        self.output_dir = Path(output_dir)

    def _filtered(self, times) -> np.ndarray:
        values = np.asarray(times, dtype=float)
        finite = np.isfinite(values)
        if not finite.all():
            logger.warning(
                "Dropping %s non-finite trial durations out of %s from the chart", int((~finite).sum()), values.size
            )
            values = values[finite]
        if self.max_minutes > 0:
            values = values[values <= self.max_minutes]
        if values.size == 0:
            raise InvalidInput(
                f"no trial durations to plot (batch size {len(times)}, max_minutes={self.max_minutes})"
            )
        return values

    def _time_range(self, filtered: np.ndarray) -> tuple[float, float]:
        max_time = float(self.max_minutes) if self.max_minutes > 0 else float(filtered.max())
        min_time = max(1.0, float(filtered.min()))
        if self.use_log_scale and max_time <= min_time:
            max_time = min_time * math.e
        elif max_time <= 0:
            max_time = 1.0
        return min_time, max_time

    def _subtitle(self, stats: SummaryStatistics, suffix: str) -> str:
        cfg = self.config
        return "\n".join(
            [
                f"Parameters: AI success rate (Normal): {format_number(cfg.readiness_mean * 100)}% mean, "
                f"AI retries (Log-normal): {float(np.exp(cfg.mu)):.1f} median, "
                f"AI response time (Normal): {format_number(cfg.wait_time_mean)}s mean",
                f"Expected time to generate {cfg.lines_of_code} LOC, min{suffix}",
                f"Time range: {round_minutes(stats.min_minutes)}-{round_minutes(stats.max_minutes)}",
                f"Mean: {round_minutes(stats.mean_minutes)}",
                f"Median: {round_minutes(stats.median_minutes)}",
                f"P90-P95: {round_minutes(stats.p90_minutes)}-{round_minutes(stats.p95_minutes)}",
            ]
        )

    def _setup_axes(self, fig, ax, title: str, subtitle: str, min_time: float, max_time: float, ylabel: str):
        fig.suptitle(title, x=0.01, ha="left", fontsize=16)
        ax.set_title(subtitle, loc="left", fontsize=11)
        if self.use_log_scale:
            ax.set_xscale("log", base=math.e)
            ax.set_xlim(min_time, max_time)
        else:
            ax.set_xlim(0, max_time)
        ax.xaxis.set_major_formatter(ticker.FuncFormatter(lambda x, _pos: f"{x:.0f}"))
        ax.set_xlabel("Time (minutes)")
        ax.set_ylabel(ylabel)
        ax.grid(False)

    def _save(self, fig, filename: str) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / filename
        fig.savefig(path, bbox_inches="tight", facecolor="white", edgecolor="none")
        plt.close(fig)
        logger.info("Rendering chart %s", path)
        return path

    def plot_distribution(self, times) -> Path:
        """Histogram of trial durations with up to CHART_MAX_BINS bins."""
        stats = SummaryStatistics.from_times(times)
        filtered = self._filtered(times)
        min_time, max_time = self._time_range(filtered)

        if self.use_log_scale:
            bins = np.geomspace(min_time, max_time, CHART_MAX_BINS + 1)
        else:
            bins = np.linspace(0.0, max_time, CHART_MAX_BINS + 1)

        fig, ax = plt.subplots(figsize=(CHART_WIDTH_INCHES, CHART_HEIGHT_INCHES))
        ax.hist(filtered, bins=bins, color=CHART_COLOR)
        scale = "log scale" if self.use_log_scale else "linear scale"
        self._setup_axes(
            fig,
            ax,
            f"AI Code Generation Time Distribution (N={len(times)}) {scale}",
            self._subtitle(stats, ":"),
            min_time,
            max_time,
            "Count",
        )
        return self._save(fig, distribution_filename(self.config, self.use_log_scale))

    def plot_cumulative_distribution(self, times) -> Path:
        """Count of trials finished by each point in time. Sorts its own copy."""
        stats = SummaryStatistics.from_times(times)
        filtered = np.sort(self._filtered(times))
        min_time, max_time = self._time_range(filtered)
        cumulative_count = np.arange(1, filtered.size + 1)

        fig, ax = plt.subplots(figsize=(CHART_WIDTH_INCHES, CHART_HEIGHT_INCHES))
        ax.plot(filtered, cumulative_count, color=CHART_COLOR, linewidth=2)
        ax.set_ylim(0, filtered.size)
        self._setup_axes(
            fig,
            ax,
            f"AI Code Generation Time Cumulative Distribution (N={len(times)})",
            self._subtitle(stats, ""),
            min_time,
            max_time,
            "Cumulative Count",
        )
        return self._save(fig, cumulative_filename(self.config, self.use_log_scale))
