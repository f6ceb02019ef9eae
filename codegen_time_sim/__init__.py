"""Estimate how long an AI coding agent takes to generate a task, by Monte Carlo simulation."""

__version__ = "0.1.0"
