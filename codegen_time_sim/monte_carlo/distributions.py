"""
PURPOSE: Samplers for the three latent variables of the coding-time model.

RESPONSIBILITIES:
- Standard normal variates via the Box-Muller transform
- Retry count from a log-normal distribution (unclamped, heavy right tail)
- Wait time from a normal distribution floored at WAIT_TIME_FLOOR
- Readiness from a normal distribution clamped to [READINESS_MIN, READINESS_MAX]
- Single responsibility: only sampling, no aggregation or I/O

Every sampler takes an explicit numpy Generator. There is no module-level
random state, so two samplers seeded identically produce identical draws.
"""

import numpy as np

from .config import READINESS_MAX, READINESS_MIN, WAIT_TIME_FLOOR


def resolve_rng(random_state=None):
    """Turn None, an int seed or a Generator into a numpy Generator."""
    if isinstance(random_state, np.random.Generator):
        return random_state
    if random_state is None or isinstance(random_state, (int, np.integer)):
        return np.random.default_rng(random_state)
    raise TypeError(f"random_state must be None, an int or a numpy Generator, got {type(random_state).__name__}")


def sample_standard_normal(rng, size=1):
    """
    Draw standard normal variates with the Box-Muller transform.

    Each variate consumes its own pair of fresh uniforms u1, u2:
        z = sqrt(-2 ln u1) * cos(2 pi u2)

    u1 is taken from (0, 1] so the logarithm is always finite.

    Args:
        rng: numpy Generator
        size: Number of variates

    Returns:
        numpy array of shape (size,)
    """
    u1 = 1.0 - rng.random(size)
    u2 = rng.random(size)
    return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)


class RetryCountSampler:
    """Samples the number of attempts the agent needs before success."""

    @staticmethod
    def sample_lognormal(rng, mu, sigma, size=1):
        """
        Sample exp(mu + sigma * z).

        No clamping is applied: values can be arbitrarily close to zero or very
        large. This is the source of the duration distribution's right tail.

        Args:
            rng: numpy Generator
            mu: Mean of the underlying normal (log space)
            sigma: Standard deviation of the underlying normal (log space)
            size: Number of samples

        Returns:
            numpy array of retry counts
        """
        z = sample_standard_normal(rng, size)
        return np.exp(mu + sigma * z)


class WaitTimeSampler:
    """Samples per-attempt response latency in seconds."""

    @staticmethod
    def sample_floored_normal(rng, mean, std, size=1, floor=WAIT_TIME_FLOOR):
        """Sample normal(mean, std), floored so no wait time is below `floor`."""
        z = sample_standard_normal(rng, size)
        return np.maximum(floor, mean + std * z)


class ReadinessSampler:
    """Samples the fraction of code the agent gets right per attempt."""

    @staticmethod
    def sample_clamped_normal(rng, mean, std, size=1, low=READINESS_MIN, high=READINESS_MAX):
        """Sample normal(mean, std) clamped to the closed interval [low, high]."""
        z = sample_standard_normal(rng, size)
        return np.clip(mean + std * z, low, high)


# Module-level convenience functions for direct import
def sample_retry_count(mu, sigma, size=1, random_state=None):
    """Module-level wrapper for retry count sampling."""
    return RetryCountSampler.sample_lognormal(resolve_rng(random_state), mu, sigma, size=size)


def sample_wait_time(mean, std, size=1, random_state=None):
    """Module-level wrapper for wait time sampling."""
    return WaitTimeSampler.sample_floored_normal(resolve_rng(random_state), mean, std, size=size)


def sample_readiness(mean, std, size=1, random_state=None):
    """Module-level wrapper for readiness sampling."""
    return ReadinessSampler.sample_clamped_normal(resolve_rng(random_state), mean, std, size=size)
