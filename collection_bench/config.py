from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence

from .errors import ConfigurationError
from .operations import Operation, check_operation_fits, resolve_operation
from .population import EntryShape, resolve_kind

PER_RUN_SUM = "per-run-sum"
PER_ITERATION = "per-iteration"
PER_CONTAINER = "per-container"

SAMPLING_MODES: tuple[str, ...] = (PER_RUN_SUM, PER_ITERATION, PER_CONTAINER)


@dataclass(frozen=True)
class OperationSpec:
    """A catalogue operation together with its report label."""

    label: str
    name: str

    def __post_init__(self) -> None:
        resolve_operation(self.name)

    @property
    def operation(self) -> Operation:
        return resolve_operation(self.name)


@dataclass(frozen=True)
class BenchmarkVariant:
    """One fixed parameter set: population shape, repetition counts and operations."""

    name: str
    title: str
    container_kind: str
    num_containers: int
    entries_per_container: int
    shape: EntryShape
    iterations: int = 1
    runs: int = 1
    mode: str = PER_RUN_SUM
    operations: Sequence[OperationSpec] = ()
    rebuild_per_run: bool = True
    probe_subject: str | None = None
    description: str | None = None
    chart_filename: str | None = None

    def __post_init__(self) -> None:
        for attr in ("num_containers", "entries_per_container", "iterations", "runs"):
            value = getattr(self, attr)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{self.name}: {attr} must be an integer, got {value!r}")
            if value < 0:
                raise ConfigurationError(f"{self.name}: {attr} must be >= 0, got {value}")
        if self.mode not in SAMPLING_MODES:
            raise ConfigurationError(
                f"{self.name}: unknown sampling mode {self.mode!r}; expected one of {list(SAMPLING_MODES)}"
            )
        family = resolve_kind(self.container_kind).family
        for spec in self.operations:
            try:
                check_operation_fits(spec.name, family, self.shape.value_type)
            except ConfigurationError as exc:
                raise ConfigurationError(f"{self.name}: {exc}") from exc
        if self.mode == PER_CONTAINER:
            if self.operations:
                raise ConfigurationError(
                    f"{self.name}: per-container variants time a single size read, not operations"
                )
        elif not self.operations:
            raise ConfigurationError(f"{self.name}: at least one operation is required")
        labels = [spec.label for spec in self.operations]
        if len(set(labels)) != len(labels):
            raise ConfigurationError(f"{self.name}: operation labels must be unique, got {labels}")

    @property
    def subject(self) -> str:
        return self.probe_subject or self.container_kind

    def header_lines(self) -> list[str]:
        if self.mode == PER_CONTAINER:
            lines = [self.title, f"Containers: {self.num_containers} x {self.entries_per_container} entries"]
        else:
            lines = [
                self.title,
                f"Containers: {self.num_containers} x {self.entries_per_container} entries"
                f" | Iterations: {self.iterations} | Runs: {self.runs}",
            ]
        if self.description:
            lines.append(self.description)
        if self.mode != PER_CONTAINER:
            lines.append(f"Running {self.runs} runs...")
        return lines


@dataclass
class BenchmarkPlan:
    """Complete set of variants the harness will execute."""

    variants: list[BenchmarkVariant] = field(default_factory=list)

    def __iter__(self) -> Iterator[BenchmarkVariant]:
        return iter(self.variants)

    def names(self) -> list[str]:
        return [variant.name for variant in self.variants]

    def select(self, names: Iterable[str] | None) -> "BenchmarkPlan":
        wanted = [name for name in (names or []) if name]
        if not wanted:
            return self
        by_name = {variant.name: variant for variant in self.variants}
        unknown = [name for name in wanted if name not in by_name]
        if unknown:
            raise ConfigurationError(
                f"unknown variant(s) {', '.join(unknown)}; expected one of {', '.join(self.names())}"
            )
        return BenchmarkPlan(variants=[by_name[name] for name in wanted])


MAP_OPERATIONS = (
    OperationSpec("keys (all maps)", "key_sum"),
    OperationSpec("values (all maps)", "value_length_sum"),
    OperationSpec("filter keys (all)", "filter_keys"),
    OperationSpec("filter values (all)", "filter_value_length"),
    OperationSpec("size (all maps)", "size_sum"),
)

SET_OPERATIONS = (
    OperationSpec("values (all sets)", "value_sum"),
    OperationSpec("filter values (all)", "filter_values"),
    OperationSpec("max value (all)", "max_value"),
    OperationSpec("count even (all)", "count_even"),
    OperationSpec("size (all sets)", "size_sum"),
)

STRING_SET_OPERATIONS = (
    OperationSpec("values (all sets)", "value_length_sum"),
    OperationSpec("filter values (all)", "filter_value_length"),
    OperationSpec("size (all sets)", "size_sum"),
)


def default_benchmark_plan() -> BenchmarkPlan:
    """Return the fixed suite of benchmark variants."""

    maps = BenchmarkVariant(
        name="maps",
        title="Map Cross-Container Iteration Benchmark (String Values ~10KB each)",
        description="Iterates across many dicts whose values are large unique strings",
        container_kind="dict",
        num_containers=500,
        entries_per_container=100,
        shape=EntryShape("padded-string", value_size=10_000),
        iterations=10,
        runs=5,
        operations=MAP_OPERATIONS,
        chart_filename="maps.png",
    )
    maps_ordered = dataclasses.replace(
        maps,
        name="maps-ordered",
        title="OrderedDict Cross-Container Iteration Benchmark (String Values ~10KB each)",
        description="Same population as 'maps', stored in OrderedDict instances",
        container_kind="ordered-dict",
        chart_filename="maps_ordered.png",
    )
    sets = BenchmarkVariant(
        name="sets",
        title="Set Cross-Container Iteration Benchmark",
        description="Iterates across many sets of integers",
        container_kind="set",
        num_containers=5_000,
        entries_per_container=100,
        shape=EntryShape("integer"),
        iterations=10,
        runs=5,
        operations=SET_OPERATIONS,
        chart_filename="sets.png",
    )
    sets_strings = BenchmarkVariant(
        name="sets-strings",
        title="Set Cross-Container Iteration Benchmark (Constant 1MB String Values)",
        description="Every entry is the same 1MB string, so each set holds one element",
        container_kind="set",
        num_containers=50,
        entries_per_container=100,
        shape=EntryShape("constant-string", value_size=1_000_000),
        iterations=10,
        runs=5,
        operations=STRING_SET_OPERATIONS,
        chart_filename="sets_strings.png",
    )
    map_size = BenchmarkVariant(
        name="map-size",
        title="Map Size Read Benchmark",
        container_kind="dict",
        num_containers=100_000,
        entries_per_container=0,
        shape=EntryShape("integer"),
        mode=PER_CONTAINER,
        rebuild_per_run=False,
        probe_subject="Map",
        chart_filename="map_size.png",
    )
    set_size = dataclasses.replace(
        map_size,
        name="set-size",
        title="Set Size Read Benchmark",
        container_kind="set",
        num_containers=800_000,
        probe_subject="Set",
        chart_filename="set_size.png",
    )

    return BenchmarkPlan(
        variants=[maps, maps_ordered, sets, sets_strings, map_size, set_size]
    )
