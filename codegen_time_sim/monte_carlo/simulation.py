"""
PURPOSE: Core Monte Carlo engine for AI code-generation time estimation.

Draws independent trials of the coding-time model and returns the elapsed
minutes of each trial as a read-only batch.

SINGLE RESPONSIBILITY:
- Hold the immutable model configuration (SimulationConfig)
- Sample the latent variables (retry count, wait time, readiness) per trial
- Combine them into a trial duration in minutes
- Return raw durations (no statistics, no I/O, no formatting)

MODEL:
    duration = W * N_r * (1 + alpha * N_r ** p) * (LOC / (R * 60))

    W * N_r is the total wait across retries, (1 + alpha * N_r ** p) is the
    compounding slowdown as retries pile up, and LOC / (R * 60) turns task size
    and success rate into minutes (W is in seconds).
"""

import logging
import math
from dataclasses import dataclass, fields

import numpy as np

from .config import (
    DEFAULT_LINES_OF_CODE,
    DEFAULT_MU,
    DEFAULT_READINESS_MEAN,
    DEFAULT_READINESS_STD,
    DEFAULT_RETRY_IMPACT,
    DEFAULT_RETRY_POWER,
    DEFAULT_SIGMA,
    DEFAULT_WAIT_TIME_MEAN,
    DEFAULT_WAIT_TIME_STD,
    NUM_RUNS,
    RANDOM_SEED,
    SECONDS_PER_MINUTE,
)
from .distributions import ReadinessSampler, RetryCountSampler, WaitTimeSampler, resolve_rng
from .errors import InvalidConfiguration, InvalidInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationConfig:
    """Parameters of the coding-time model.

    Attributes:
        mu (float): Log-space mean of the retry count.
        sigma (float): Log-space standard deviation of the retry count.
        readiness_mean (float): Mean per-attempt success fraction, in [0, 1].
        readiness_std (float): Standard deviation of the success fraction.
        wait_time_mean (float): Mean response time per attempt, seconds.
        wait_time_std (float): Standard deviation of the response time, seconds.
        retry_impact (float): Compounding slowdown coefficient (alpha), >= 0.
        retry_power (float): Exponent applied to the retry count in the slowdown (p), >= 0.
        lines_of_code (int): Task size, positive.
    """
    mu: float = DEFAULT_MU
    sigma: float = DEFAULT_SIGMA
    readiness_mean: float = DEFAULT_READINESS_MEAN
    readiness_std: float = DEFAULT_READINESS_STD
    wait_time_mean: float = DEFAULT_WAIT_TIME_MEAN
    wait_time_std: float = DEFAULT_WAIT_TIME_STD
    retry_impact: float = DEFAULT_RETRY_IMPACT
    retry_power: float = DEFAULT_RETRY_POWER
    lines_of_code: int = DEFAULT_LINES_OF_CODE

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
                raise InvalidConfiguration(f.name, f"must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidConfiguration(f.name, f"must be finite, got {value!r}")

        if not isinstance(self.lines_of_code, (int, np.integer)):
            raise InvalidConfiguration("lines_of_code", f"must be an integer, got {self.lines_of_code!r}")
        if self.lines_of_code <= 0:
            raise InvalidConfiguration("lines_of_code", f"must be positive, got {self.lines_of_code}")

        for name in ("sigma", "readiness_std", "wait_time_std"):
            if getattr(self, name) < 0:
                raise InvalidConfiguration(name, f"standard deviation must be >= 0, got {getattr(self, name)}")

        if not 0.0 <= self.readiness_mean <= 1.0:
            raise InvalidConfiguration("readiness_mean", f"must be in [0, 1], got {self.readiness_mean}")
        if self.retry_impact < 0:
            raise InvalidConfiguration("retry_impact", f"must be >= 0, got {self.retry_impact}")
        # N_r can underflow to 0, and 0 ** p is infinite for p < 0.
        if self.retry_power < 0:
            raise InvalidConfiguration("retry_power", f"must be >= 0, got {self.retry_power}")


@dataclass(frozen=True)
class LatentDraws:
    """Per-trial latent variables, one array entry per trial."""
    wait_time: np.ndarray
    retry_count: np.ndarray
    readiness: np.ndarray

    def __len__(self):
        return len(self.wait_time)


def compute_durations(config, latents):
    """
    Combine latent draws into trial durations (minutes).

    Args:
        config: SimulationConfig
        latents: LatentDraws

    Returns:
        numpy array of durations, same length as latents
    """
    n_r = latents.retry_count
    if config.retry_impact == 0:
        # Keeps an overflowed N_r at inf instead of 0 * inf = nan.
        slowdown = np.ones_like(n_r)
    else:
        slowdown = 1.0 + config.retry_impact * np.power(n_r, config.retry_power)
    per_retry_minutes = config.lines_of_code / (latents.readiness * SECONDS_PER_MINUTE)
    return latents.wait_time * n_r * slowdown * per_retry_minutes


def _validate_num_simulations(num_simulations):
    if isinstance(num_simulations, bool) or not isinstance(num_simulations, (int, np.integer)):
        raise InvalidInput(f"num_simulations must be an integer, got {num_simulations!r}")
    if num_simulations <= 0:
        raise InvalidInput(f"num_simulations must be positive, got {num_simulations}")


class CodingTimeSimulator:
    """
    Monte Carlo sampler for the time an AI agent needs to generate a task.

    The simulator owns its random generator. Pass an int seed (or a numpy
    Generator) for reproducible batches; None draws fresh OS entropy.
    """

    def __init__(self, config=None, random_seed=RANDOM_SEED):
        """
        Initialize the sampler.

        Args:
            config: SimulationConfig (default: model defaults)
            random_seed: int seed, numpy Generator, or None
        """
        self.config = config if config is not None else SimulationConfig()
        self.random_seed = random_seed
        self.rng = resolve_rng(random_seed)

    def draw_latents(self, num_simulations):
        """
        Draw the three latent variables for `num_simulations` trials.

        Retry count, wait time and readiness each consume their own uniforms,
        so they are independent of each other and across trials.
        """
        _validate_num_simulations(num_simulations)
        cfg = self.config
        retry_count = RetryCountSampler.sample_lognormal(self.rng, cfg.mu, cfg.sigma, size=num_simulations)
        wait_time = WaitTimeSampler.sample_floored_normal(
            self.rng, cfg.wait_time_mean, cfg.wait_time_std, size=num_simulations
        )
        readiness = ReadinessSampler.sample_clamped_normal(
            self.rng, cfg.readiness_mean, cfg.readiness_std, size=num_simulations
        )
        return LatentDraws(wait_time=wait_time, retry_count=retry_count, readiness=readiness)

    def simulate_time(self):
        """Run a single trial and return its duration in minutes."""
        return float(self.run_simulation(1)[0])

    def run_simulation(self, num_simulations=NUM_RUNS):
        """
        Run `num_simulations` independent trials.

        Returns:
            Read-only numpy array of durations in minutes, in draw order.

        Raises:
            InvalidInput: if num_simulations is not a positive integer.
        """
        latents = self.draw_latents(num_simulations)
        durations = compute_durations(self.config, latents)
        durations.flags.writeable = False
        logger.debug(
            "Simulated %s trials (mu=%s, sigma=%s, loc=%s)",
            num_simulations,
            self.config.mu,
            self.config.sigma,
            self.config.lines_of_code,
        )
        return durations
