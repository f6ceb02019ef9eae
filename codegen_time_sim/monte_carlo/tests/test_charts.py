import os
import tempfile
import unittest

import numpy as np

from codegen_time_sim.monte_carlo.charts import (
    ChartRenderer,
    cumulative_filename,
    distribution_filename,
)
from codegen_time_sim.monte_carlo.errors import InvalidInput
from codegen_time_sim.monte_carlo.simulation import CodingTimeSimulator, SimulationConfig


class TestChartFilenames(unittest.TestCase):
    def test_filename_encodes_parameters(self):
        config = SimulationConfig()
        self.assertEqual(
            distribution_filename(config, use_log_scale=False),
            "sim_r0.8_w20_mu0.9_s0.5_i0.05_p1_linear.png",
        )
        self.assertEqual(
            cumulative_filename(config, use_log_scale=True),
            "sim_cumulative_r0.8_w20_mu0.9_s0.5_i0.05_p1_log.png",
        )

    def test_filename_changes_with_config(self):
        a = distribution_filename(SimulationConfig(sigma=1.0), use_log_scale=False)
        b = distribution_filename(SimulationConfig(sigma=0.5), use_log_scale=False)
        self.assertNotEqual(a, b)
        self.assertIn("_s1_", a)


class TestChartRenderer(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.output_dir = os.path.join(self.tmp.name, "media")
        self.config = SimulationConfig()
        self.times = CodingTimeSimulator(self.config, random_seed=0).run_simulation(500)

    def tearDown(self):
        self.tmp.cleanup()

    def test_linear_charts_written(self):
        renderer = ChartRenderer(self.config, output_dir=self.output_dir)
        hist_path = renderer.plot_distribution(self.times)
        cum_path = renderer.plot_cumulative_distribution(self.times)

        self.assertEqual(hist_path.name, distribution_filename(self.config, False))
        self.assertEqual(cum_path.name, cumulative_filename(self.config, False))
        for path in (hist_path, cum_path):
            self.assertTrue(path.exists())
            self.assertGreater(path.stat().st_size, 0)

    def test_log_scale_charts_written(self):
        renderer = ChartRenderer(self.config, use_log_scale=True, output_dir=self.output_dir)
        hist_path = renderer.plot_distribution(self.times)
        cum_path = renderer.plot_cumulative_distribution(self.times)
        self.assertTrue(hist_path.name.endswith("_log.png"))
        self.assertTrue(cum_path.exists())

    def test_max_minutes_cutoff(self):
        renderer = ChartRenderer(self.config, max_minutes=150, output_dir=self.output_dir)
        self.assertTrue(renderer.plot_distribution(self.times).exists())

    def test_cutoff_below_every_trial_raises(self):
        renderer = ChartRenderer(self.config, max_minutes=1e-6, output_dir=self.output_dir)
        with self.assertRaises(InvalidInput):
            renderer.plot_distribution(self.times)

    def test_negative_cutoff_raises(self):
        with self.assertRaises(InvalidInput):
            ChartRenderer(self.config, max_minutes=-1)

    def test_cumulative_does_not_reorder_input(self):
        times = [30.0, 10.0, 20.0]
        renderer = ChartRenderer(self.config, output_dir=self.output_dir)
        renderer.plot_cumulative_distribution(times)
        self.assertEqual(times, [30.0, 10.0, 20.0])

    def test_non_finite_durations_are_dropped(self):
        times = np.array([10.0, 20.0, np.inf, 30.0, np.nan])
        for use_log_scale in (False, True):
            with self.subTest(use_log_scale=use_log_scale):
                renderer = ChartRenderer(self.config, use_log_scale=use_log_scale, output_dir=self.output_dir)
                with self.assertLogs("codegen_time_sim.monte_carlo.charts", level="WARNING") as logs:
                    hist_path = renderer.plot_distribution(times)
                self.assertIn("Dropping 2 non-finite", logs.output[0])
                self.assertTrue(hist_path.exists())
                self.assertTrue(renderer.plot_cumulative_distribution(times).exists())

    def test_overflowed_batch_raises(self):
        config = SimulationConfig(mu=706.0)
        times = CodingTimeSimulator(config, random_seed=1).run_simulation(50)
        self.assertFalse(np.any(np.isfinite(times)))
        renderer = ChartRenderer(config, output_dir=self.output_dir)
        with self.assertRaises(InvalidInput):
            renderer.plot_distribution(times)

    def test_all_zero_durations_on_linear_scale(self):
        renderer = ChartRenderer(self.config, output_dir=self.output_dir)
        self.assertTrue(renderer.plot_distribution(np.zeros(10)).exists())

    def test_identical_values_on_log_scale(self):
        renderer = ChartRenderer(self.config, use_log_scale=True, output_dir=self.output_dir)
        path = renderer.plot_distribution(np.array([5.0, 5.0, 5.0]))
        self.assertTrue(path.exists())


if __name__ == "__main__":
    unittest.main()
