import os

os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from collection_bench.config import (
    MAP_OPERATIONS,
    PER_CONTAINER,
    SET_OPERATIONS,
    BenchmarkPlan,
    BenchmarkVariant,
)
from collection_bench.population import EntryShape


class StepClock:
    """Deterministic nanosecond clock advancing by a fixed step per read."""

    def __init__(self, step: int = 10, start: int = 1_000) -> None:
        self.step = step
        self.now = start
        self.reads = 0

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        self.reads += 1
        return value


@pytest.fixture
def step_clock():
    return StepClock()


@pytest.fixture
def lines():
    """Collects everything the harness would print."""
    return []


@pytest.fixture
def tiny_map_variant():
    return BenchmarkVariant(
        name="tiny-maps",
        title="Tiny Map Benchmark",
        container_kind="dict",
        num_containers=3,
        entries_per_container=4,
        shape=EntryShape("padded-string", value_size=100),
        iterations=2,
        runs=3,
        operations=MAP_OPERATIONS,
        chart_filename="tiny_maps.png",
    )


@pytest.fixture
def tiny_set_variant():
    return BenchmarkVariant(
        name="tiny-sets",
        title="Tiny Set Benchmark",
        container_kind="set",
        num_containers=3,
        entries_per_container=4,
        shape=EntryShape("integer"),
        iterations=2,
        runs=2,
        operations=SET_OPERATIONS,
        rebuild_per_run=False,
    )


@pytest.fixture
def tiny_size_variant():
    return BenchmarkVariant(
        name="tiny-size",
        title="Tiny Size Read Benchmark",
        container_kind="dict",
        num_containers=5,
        entries_per_container=0,
        shape=EntryShape("integer"),
        mode=PER_CONTAINER,
        rebuild_per_run=False,
        probe_subject="Map",
    )


@pytest.fixture
def tiny_plan(tiny_map_variant, tiny_set_variant, tiny_size_variant):
    return BenchmarkPlan(variants=[tiny_map_variant, tiny_set_variant, tiny_size_variant])
