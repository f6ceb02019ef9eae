"""
PURPOSE: Simulation constants and default model parameters for the coding-time Monte Carlo engine.

RESPONSIBILITIES:
- Define simulation hyperparameters (number of runs, random seed)
- Fixed model bounds (readiness clamp, wait-time floor, unit conversion)
- Default parameters of the coding-time model
- Percentile outputs and chart settings
- Single responsibility: configuration only, no simulation logic
"""

# Simulation Parameters
NUM_RUNS = 30000  # Default sample size for run_simulation()
CLI_NUM_RUNS = 1000  # Default sample size for the command line
RANDOM_SEED = None  # Set to int for reproducibility, None for random

# Model bounds (not parameterized)
READINESS_MIN = 0.5  # Agent never gets less than half the code right per attempt
READINESS_MAX = 1.0
WAIT_TIME_FLOOR = 1.0  # Seconds
SECONDS_PER_MINUTE = 60.0

# Default model parameters
DEFAULT_MU = 0.9  # exp(0.9) ~ 2.5 median retries
DEFAULT_SIGMA = 0.5
DEFAULT_READINESS_MEAN = 0.8
DEFAULT_READINESS_STD = 0.05
DEFAULT_WAIT_TIME_MEAN = 20.0  # Seconds per attempt
DEFAULT_WAIT_TIME_STD = 3.0
DEFAULT_RETRY_IMPACT = 0.05
DEFAULT_RETRY_POWER = 1.0
DEFAULT_LINES_OF_CODE = 100

# Percentile Outputs (nearest-rank, see outputs.nearest_rank)
P90_FRACTION = 0.90
P95_FRACTION = 0.95

# Chart Configuration
CHART_MAX_BINS = 100
CHART_OUTPUT_DIR = "media"
CHART_WIDTH_INCHES = 12
CHART_HEIGHT_INCHES = 7
CHART_COLOR = "#4682b4"


def get_model_defaults():
    """Return the default coding-time model parameters keyed by field name."""
    return {
        "mu": DEFAULT_MU,
        "sigma": DEFAULT_SIGMA,
        "readiness_mean": DEFAULT_READINESS_MEAN,
        "readiness_std": DEFAULT_READINESS_STD,
        "wait_time_mean": DEFAULT_WAIT_TIME_MEAN,
        "wait_time_std": DEFAULT_WAIT_TIME_STD,
        "retry_impact": DEFAULT_RETRY_IMPACT,
        "retry_power": DEFAULT_RETRY_POWER,
        "lines_of_code": DEFAULT_LINES_OF_CODE,
    }


def get_model_bounds():
    """Return the fixed clamp/floor bounds applied to the latent variables."""
    return {
        "readiness_min": READINESS_MIN,
        "readiness_max": READINESS_MAX,
        "wait_time_floor": WAIT_TIME_FLOOR,
    }
