from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .errors import EmptySequenceError


@dataclass(frozen=True)
class Summary:
    """Average/min/max of one duration sequence, in nanoseconds."""

    name: str
    samples: int
    average: int
    minimum: int
    maximum: int

    def as_row(self) -> dict[str, object]:
        return {
            "operation": self.name,
            "samples": self.samples,
            "average_ns": self.average,
            "min_ns": self.minimum,
            "max_ns": self.maximum,
        }


def average(samples: Sequence[int]) -> int:
    """Exact integer mean, truncated toward zero."""
    _require_samples(samples, "average")
    total = sum(samples)
    quotient = abs(total) // len(samples)
    return quotient if total >= 0 else -quotient


def minimum(samples: Sequence[int]) -> int:
    _require_samples(samples, "min")
    current = samples[0]
    for value in samples:
        if value < current:
            current = value
    return current


def maximum(samples: Sequence[int]) -> int:
    _require_samples(samples, "max")
    current = samples[0]
    for value in samples:
        if value > current:
            current = value
    return current


def summarize(samples: Sequence[int], name: str = "") -> Summary:
    _require_samples(samples, f"summary of {name!r}" if name else "summary")
    return Summary(
        name=name,
        samples=len(samples),
        average=average(samples),
        minimum=minimum(samples),
        maximum=maximum(samples),
    )


def _require_samples(samples: Sequence[int], what: str) -> None:
    if len(samples) == 0:
        raise EmptySequenceError(f"cannot compute {what} of an empty duration sequence")
