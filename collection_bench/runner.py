from __future__ import annotations

import contextlib
import gc
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from .config import PER_CONTAINER, PER_ITERATION, PER_RUN_SUM, SAMPLING_MODES, BenchmarkVariant
from .errors import ClockRegressionError, ConfigurationError
from .operations import Operation, Scalar
from .population import Population, PopulationBuilder

LOGGER = logging.getLogger("collection_bench.runner")

Clock = Callable[[], int]
Emit = Callable[[str], None]


@dataclass
class TimedResult:
    """Duration sequence and last result accumulator of one operation."""

    name: str
    durations: list[int] = field(default_factory=list)
    result: Optional[Scalar] = None


@dataclass
class VariantResult:
    variant: BenchmarkVariant
    timings: list[TimedResult] = field(default_factory=list)

    def accumulators(self) -> list[Scalar]:
        return [timing.result for timing in self.timings if timing.result is not None]


@contextlib.contextmanager
def _gc_paused(enabled: bool) -> Iterator[None]:
    """Keep the cyclic collector out of timing brackets."""
    was_enabled = gc.isenabled()
    if enabled and was_enabled:
        gc.disable()
    try:
        yield
    finally:
        if enabled and was_enabled:
            gc.enable()


class TimedOperationRunner:
    """Brackets catalogue operations with clock reads and folds the samples.

    Every timed execution is surrounded by exactly one clock read before and
    one after. Populations are built and dropped outside of those brackets.
    """

    def __init__(
        self,
        clock: Clock = time.perf_counter_ns,
        emit: Emit = print,
        pause_gc: bool = True,
    ) -> None:
        self._clock = clock
        self._emit = emit
        self._pause_gc = pause_gc

    def measure(self, operation: Operation, population: Population) -> tuple[int, Scalar]:
        start = self._clock()
        result = operation(population)
        end = self._clock()
        return _elapsed(start, end), result

    def run_timed(
        self,
        operation: Operation,
        population: Population,
        iterations: int,
        runs: int,
        mode: str = PER_RUN_SUM,
        name: str = "",
    ) -> TimedResult:
        """Time ``operation`` against an already-built population."""
        _require_count("iterations", iterations)
        _require_count("runs", runs)
        timing = TimedResult(name=name or getattr(operation, "__name__", "operation"))
        for run in range(runs):
            self._emit(f"  Run {run + 1}/{runs}")
            with _gc_paused(self._pause_gc):
                samples, result = self._run_iterations(operation, population, iterations, mode)
            timing.durations.extend(samples)
            timing.result = result
        return timing

    def time_per_container(self, population: Population, name: str = "size") -> TimedResult:
        """One sample per container: the cost of reading its size."""
        timing = TimedResult(name=name)
        total = 0
        clock = self._clock
        with _gc_paused(self._pause_gc):
            for container in population.containers:
                start = clock()
                size = len(container)
                end = clock()
                timing.durations.append(_elapsed(start, end))
                total += size
        timing.result = total
        return timing

    def run_variant(self, variant: BenchmarkVariant) -> VariantResult:
        builder = PopulationBuilder(variant.container_kind, variant.shape)

        if variant.mode == PER_CONTAINER:
            probe_population = builder.build(variant.num_containers, variant.entries_per_container)
            LOGGER.info("Timing size reads across %d containers", len(probe_population))
            timing = self.time_per_container(probe_population, name=f"size ({variant.subject})")
            return VariantResult(variant=variant, timings=[timing])

        timings = {spec.label: TimedResult(name=spec.label) for spec in variant.operations}
        population: Population | None = None
        if not variant.rebuild_per_run:
            population = builder.build(variant.num_containers, variant.entries_per_container)

        for run in range(variant.runs):
            self._emit(f"  Run {run + 1}/{variant.runs}")
            if variant.rebuild_per_run:
                population = None
                population = builder.build(variant.num_containers, variant.entries_per_container)
            LOGGER.debug("Run %d/%d of %s", run + 1, variant.runs, variant.name)
            with _gc_paused(self._pause_gc):
                for spec in variant.operations:
                    samples, result = self._run_iterations(
                        spec.operation, population, variant.iterations, variant.mode
                    )
                    timing = timings[spec.label]
                    timing.durations.extend(samples)
                    timing.result = result

        return VariantResult(
            variant=variant,
            timings=[timings[spec.label] for spec in variant.operations],
        )

    def _run_iterations(
        self,
        operation: Operation,
        population: Population,
        iterations: int,
        mode: str,
    ) -> tuple[list[int], Optional[Scalar]]:
        result: Optional[Scalar] = None
        if mode == PER_RUN_SUM:
            if iterations == 0:
                return [], None
            total = 0
            for _ in range(iterations):
                elapsed, result = self.measure(operation, population)
                total += elapsed
            return [total], result
        if mode == PER_ITERATION:
            samples: list[int] = []
            for _ in range(iterations):
                elapsed, result = self.measure(operation, population)
                samples.append(elapsed)
            return samples, result
        raise ConfigurationError(
            f"sampling mode {mode!r} cannot time operations; expected one of "
            f"{[m for m in SAMPLING_MODES if m != PER_CONTAINER]}"
        )


def _elapsed(start: int, end: int) -> int:
    if end < start:
        raise ClockRegressionError(start, end)
    return end - start


def _require_count(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")
