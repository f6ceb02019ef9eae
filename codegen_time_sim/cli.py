"""
Command line entry point: simulate, print the report, render the charts.

Environment (read from .env in the working directory, then os.environ):
    CODEGEN_SIM_LOG_LEVEL   logging level name, default INFO
    CODEGEN_SIM_OUTPUT_DIR  chart directory, default "media"
    CODEGEN_SIM_SEED        integer seed, default unseeded

Command line flags override the environment.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from codegen_time_sim.monte_carlo.config import CHART_OUTPUT_DIR, CLI_NUM_RUNS, get_model_defaults
from codegen_time_sim.monte_carlo.errors import SimulationError
from codegen_time_sim.monte_carlo.outputs import ReportFormatter, SummaryStatistics
from codegen_time_sim.monte_carlo.simulation import CodingTimeSimulator, SimulationConfig

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(log_level_name: Optional[str] = None) -> int:
    """Send all log records to stderr through the root logger. Returns the effective level."""
    log_level_name = (log_level_name or os.environ.get("CODEGEN_SIM_LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, log_level_name, None)
    invalid_log_level = not isinstance(log_level, int)
    if invalid_log_level:
        log_level = logging.INFO

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=log_level, handlers=[stream_handler], force=True)

    # Route numpy/matplotlib warnings through logging.
    logging.captureWarnings(True)
    logging.getLogger("matplotlib").setLevel(logging.WARNING)

    if invalid_log_level:
        logger.warning("Invalid CODEGEN_SIM_LOG_LEVEL %r; defaulting to INFO.", log_level_name)
    return log_level


def _seed_from_env() -> Optional[int]:
    raw = os.environ.get("CODEGEN_SIM_SEED")
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer CODEGEN_SIM_SEED %r", raw)
        return None


def build_argparser() -> argparse.ArgumentParser:
    defaults = get_model_defaults()
    ap = argparse.ArgumentParser(
        prog="codegen-time-sim",
        description="Monte Carlo estimate of how long an AI agent takes to generate a task of N lines of code",
    )
    ap.add_argument("--mu", type=float, default=defaults["mu"], help="Log-space mean of the retry count")
    ap.add_argument("--sigma", type=float, default=defaults["sigma"], help="Log-space std of the retry count")
    ap.add_argument("--readiness-mean", type=float, default=defaults["readiness_mean"], help="Mean success fraction per attempt")
    ap.add_argument("--readiness-std", type=float, default=defaults["readiness_std"], help="Std of the success fraction")
    ap.add_argument("--wait-time-mean", type=float, default=defaults["wait_time_mean"], help="Mean seconds per attempt")
    ap.add_argument("--wait-time-std", type=float, default=defaults["wait_time_std"], help="Std of seconds per attempt")
    ap.add_argument("--retry-impact", type=float, default=defaults["retry_impact"], help="Compounding slowdown per retry (alpha)")
    ap.add_argument("--retry-power", type=float, default=defaults["retry_power"], help="Exponent of the retry slowdown (p)")
    ap.add_argument("--lines-of-code", type=int, default=defaults["lines_of_code"], help="Task size in lines of code")
    ap.add_argument("--num-simulations", type=int, default=CLI_NUM_RUNS, help="Number of trials")
    ap.add_argument("--seed", type=int, default=None, help="Random seed (default: CODEGEN_SIM_SEED or unseeded)")
    ap.add_argument("--max-minutes", type=float, default=0, help="Drop trials slower than this from the charts (0 = no limit)")
    ap.add_argument("--log-scale", action="store_true", help="Use a logarithmic time axis")
    ap.add_argument("--output-dir", default=None, help="Chart directory (default: CODEGEN_SIM_OUTPUT_DIR or media)")
    ap.add_argument("--no-charts", action="store_true", help="Only print the report")
    ap.add_argument("--log-level", default=None, help="Logging level (default: CODEGEN_SIM_LOG_LEVEL or INFO)")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv(Path.cwd() / ".env")
    args = build_argparser().parse_args(argv)
    configure_logging(args.log_level)

    seed = args.seed if args.seed is not None else _seed_from_env()
    output_dir = args.output_dir or os.environ.get("CODEGEN_SIM_OUTPUT_DIR") or CHART_OUTPUT_DIR

    try:
        config = SimulationConfig(
            mu=args.mu,
            sigma=args.sigma,
            readiness_mean=args.readiness_mean,
            readiness_std=args.readiness_std,
            wait_time_mean=args.wait_time_mean,
            wait_time_std=args.wait_time_std,
            retry_impact=args.retry_impact,
            retry_power=args.retry_power,
            lines_of_code=args.lines_of_code,
        )
        simulator = CodingTimeSimulator(config, random_seed=seed)
        logger.info("Running %s simulations (seed=%s)", args.num_simulations, seed)
        times = simulator.run_simulation(args.num_simulations)
        stats = SummaryStatistics.from_times(times)
        sys.stdout.write(ReportFormatter.format_report(config, stats) + "\n")
        sys.stdout.flush()

        if not args.no_charts:
            # matplotlib is only imported when charts are rendered.
            from codegen_time_sim.monte_carlo.charts import ChartRenderer

            renderer = ChartRenderer(
                config,
                max_minutes=args.max_minutes,
                use_log_scale=args.log_scale,
                output_dir=output_dir,
            )
            renderer.plot_distribution(times)
            renderer.plot_cumulative_distribution(times)
    except SimulationError as e:
        logger.error("Simulation aborted: %s", e)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
