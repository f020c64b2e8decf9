"""
Error types raised by the benchmark harness.
"""

from __future__ import annotations


class BenchmarkError(Exception):
    """Base class for failures that abort a benchmark variant."""


class ConfigurationError(BenchmarkError):
    """Raised when population, iteration or run parameters are invalid."""


class EmptySequenceError(BenchmarkError):
    """Raised when statistics are requested over zero duration samples."""


class ClockRegressionError(BenchmarkError):
    """Raised when the clock reports a negative elapsed duration."""

    def __init__(self, start_ns: int, end_ns: int) -> None:
        super().__init__(
            f"clock went backwards: start={start_ns}ns end={end_ns}ns "
            f"(elapsed {end_ns - start_ns}ns)"
        )
        self.start_ns = start_ns
        self.end_ns = end_ns


__all__ = [
    "BenchmarkError",
    "ClockRegressionError",
    "ConfigurationError",
    "EmptySequenceError",
]
