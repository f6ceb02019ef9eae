"""
PURPOSE: Unit tests for outputs.py module.

Tests cover:
1. Summary statistics on small hand-checked batches
2. The nearest-rank percentile index rule
3. Error handling for empty and malformed batches
4. Report formatting and value rendering
5. Serialization to JSON-compatible dicts
"""

import numpy as np
import pytest

from codegen_time_sim.monte_carlo.errors import InvalidInput
from codegen_time_sim.monte_carlo.outputs import (
    ReportFormatter,
    SummaryStatistics,
    calculate_stats,
    format_number,
    nearest_rank,
    round_minutes,
)
from codegen_time_sim.monte_carlo.simulation import CodingTimeSimulator, SimulationConfig


class TestSummaryStatistics:
    """Tests for SummaryStatistics.from_times."""

    def test_odd_batch(self):
        stats = SummaryStatistics.from_times([5.0, 1.0, 4.0, 2.0, 3.0])
        assert stats.count == 5
        assert stats.mean_minutes == 3.0
        assert stats.median_minutes == 3.0
        assert stats.min_minutes == 1.0
        assert stats.max_minutes == 5.0
        # floor(5 * 0.90) = 4, floor(5 * 0.95) = 4
        assert stats.p90_minutes == 5.0
        assert stats.p95_minutes == 5.0

    def test_even_batch_median_averages_middle_pair(self):
        values = [float(v) for v in range(10, 0, -1)]
        stats = SummaryStatistics.from_times(values)
        assert stats.median_minutes == 5.5
        # floor(10 * 0.90) = 9 and floor(10 * 0.95) = 9: both pick the maximum
        assert stats.p90_minutes == 10.0
        assert stats.p95_minutes == 10.0

    def test_nearest_rank_index_rule_n20(self):
        values = np.arange(1, 21, dtype=float)
        stats = SummaryStatistics.from_times(values[::-1])
        # sorted[18] and sorted[19]
        assert stats.p90_minutes == 19.0
        assert stats.p95_minutes == 20.0
        assert stats.median_minutes == 10.5

    def test_single_value(self):
        stats = SummaryStatistics.from_times([42.0])
        assert stats.mean_minutes == stats.median_minutes == 42.0
        assert stats.p90_minutes == stats.p95_minutes == 42.0
        assert stats.min_minutes == stats.max_minutes == 42.0

    def test_empty_batch_raises(self):
        with pytest.raises(InvalidInput):
            SummaryStatistics.from_times([])
        with pytest.raises(ValueError):
            calculate_stats(np.array([]))

    def test_two_dimensional_batch_raises(self):
        with pytest.raises(InvalidInput):
            SummaryStatistics.from_times([[1.0, 2.0], [3.0, 4.0]])

    def test_batch_order_preserved(self):
        values = [3.0, 1.0, 2.0]
        SummaryStatistics.from_times(values)
        assert values == [3.0, 1.0, 2.0]

    def test_read_only_batch(self):
        times = CodingTimeSimulator(SimulationConfig(), random_seed=1).run_simulation(100)
        before = times.copy()
        SummaryStatistics.from_times(times)
        np.testing.assert_array_equal(times, before)

    def test_monotonic_ordering(self):
        times = CodingTimeSimulator(SimulationConfig(sigma=1.0), random_seed=2).run_simulation(2001)
        stats = calculate_stats(times)
        assert stats.min_minutes <= stats.median_minutes <= stats.p90_minutes
        assert stats.p90_minutes <= stats.p95_minutes <= stats.max_minutes
        assert stats.min_minutes > 0

    def test_nearest_rank_helper(self):
        sorted_values = np.array([1.0, 2.0, 3.0, 4.0])
        assert nearest_rank(sorted_values, 0.90) == 4.0
        assert nearest_rank(sorted_values, 0.50) == 3.0
        assert nearest_rank(sorted_values, 0.0) == 1.0

    def test_to_dict_serialization(self):
        stats = SummaryStatistics(
            count=3,
            mean_minutes=10.1234,
            median_minutes=9.876,
            p90_minutes=20.555,
            p95_minutes=25.0,
            min_minutes=1.004,
            max_minutes=30.0,
        )
        result = stats.to_dict()
        assert result["count"] == 3
        assert result["mean_minutes"] == 10.12
        assert result["median_minutes"] == 9.88
        assert result["min_minutes"] == 1.0
        assert result["max_minutes"] == 30.0


class TestValueRendering:

    def test_format_number(self):
        assert format_number(1.0) == "1"
        assert format_number(20) == "20"
        assert format_number(0.05) == "0.05"
        assert format_number(np.float64(0.8)) == "0.8"
        assert format_number(np.int64(100)) == "100"

    def test_round_minutes_half_up(self):
        assert round_minutes(2.5) == "3"
        assert round_minutes(3.5) == "4"
        assert round_minutes(115.49) == "115"

    def test_round_minutes_non_finite(self):
        assert round_minutes(float("inf")) == "inf"


class TestReportFormatter:
    """Tests for the console report."""

    def setup_method(self):
        self.config = SimulationConfig()
        self.stats = SummaryStatistics.from_times([1.0, 2.0, 3.0, 4.0, 5.0])

    def test_sections_present(self):
        report = ReportFormatter.format_report(self.config, self.stats)
        assert "=== Simulation Parameters ===" in report
        assert "=== Simulation Results ===" in report
        assert report.index("=== Simulation Parameters ===") < report.index("=== Simulation Results ===")

    def test_parameter_line_layout(self):
        report = ReportFormatter.format_parameters(self.config)
        assert f"{'mu':<15} = {'0.9':<6} | Mean (μ) of log-normal AI retries." in report
        assert f"{'lines_of_code':<15} = {'100':<6} | Task size (LOC)." in report
        assert f"{'retry_power':<15} = {'1':<6} | Retry scaling exponent (p)." in report

    def test_parameter_order(self):
        report = ReportFormatter.format_parameters(self.config)
        names = [
            "mu",
            "sigma",
            "wait_time_mean",
            "wait_time_std",
            "retry_impact",
            "retry_power",
            "lines_of_code",
            "readiness_mean",
            "readiness_std",
        ]
        positions = [report.index(f"\n{name:<15} = ") for name in names]
        assert positions == sorted(positions)

    def test_result_lines(self):
        results = ReportFormatter.format_results(self.stats).splitlines()
        assert f"{'Mean':<12}: 3 minutes" in results
        assert f"{'Median':<12}: 3 minutes" in results
        assert f"{'90th %ile':<12}: 5 minutes" in results
        assert f"{'95th %ile':<12}: 5 minutes" in results
        assert f"{'Min':<12}: 1 minutes" in results
        assert f"{'Max':<12}: 5 minutes" in results

    def test_every_parameter_described(self):
        fields = set(SimulationConfig.__dataclass_fields__)
        assert set(ReportFormatter.PARAMETER_DESCRIPTIONS) == fields
