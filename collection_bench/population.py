from __future__ import annotations

import collections
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator

from .errors import ConfigurationError

LOGGER = logging.getLogger("collection_bench.population")

MAP_FAMILY = "map"
SET_FAMILY = "set"

SHAPE_NAMES: tuple[str, ...] = ("padded-string", "constant-string", "integer")

NUMERIC = "numeric"
STRING = "string"

# Length of the "value_<i>_<j>_" prefix budgeted out of a padded value.
PADDED_PREFIX_BUDGET = 20


@dataclass(frozen=True)
class ContainerKind:
    """An associative container implementation under measurement."""

    name: str
    family: str
    factory: Callable[[], Any]

    def create(self) -> Any:
        return self.factory()

    def insert(self, container: Any, key: int, value: Any) -> None:
        if self.family == MAP_FAMILY:
            container[key] = value
        else:
            container.add(value)

    def keys(self, container: Any) -> Iterable[Any]:
        if self.family == MAP_FAMILY:
            return container.keys()
        return container

    def values(self, container: Any) -> Iterable[Any]:
        if self.family == MAP_FAMILY:
            return container.values()
        return container


CONTAINER_KINDS: dict[str, ContainerKind] = {
    "dict": ContainerKind(name="dict", family=MAP_FAMILY, factory=dict),
    "ordered-dict": ContainerKind(
        name="ordered-dict", family=MAP_FAMILY, factory=collections.OrderedDict
    ),
    "set": ContainerKind(name="set", family=SET_FAMILY, factory=set),
}


def resolve_kind(kind: str | ContainerKind) -> ContainerKind:
    if isinstance(kind, ContainerKind):
        return kind
    try:
        return CONTAINER_KINDS[kind]
    except KeyError:
        raise ConfigurationError(
            f"unknown container kind {kind!r}; expected one of {sorted(CONTAINER_KINDS)}"
        ) from None


@dataclass(frozen=True)
class EntryShape:
    """How the value of entry ``j`` in container ``i`` is generated."""

    name: str
    value_size: int = 0

    def __post_init__(self) -> None:
        if self.name not in SHAPE_NAMES:
            raise ConfigurationError(
                f"unknown entry shape {self.name!r}; expected one of {list(SHAPE_NAMES)}"
            )
        _require_non_negative("value_size", self.value_size)

    @property
    def value_type(self) -> str:
        return NUMERIC if self.name == "integer" else STRING

    def value_generator(self) -> Callable[[int, int, int], Any]:
        """Return ``f(i, j, key) -> value`` for this shape."""
        if self.name == "padded-string":
            padding = "x" * max(self.value_size - PADDED_PREFIX_BUDGET, 0)
            return lambda i, j, key: f"value_{i}_{j}_{padding}"
        if self.name == "constant-string":
            # One shared object: a set of these collapses to a single element.
            constant = "A" * self.value_size
            return lambda i, j, key: constant
        return lambda i, j, key: key


@dataclass
class Population:
    """Ordered containers built for one measurement pass."""

    kind: ContainerKind
    shape: EntryShape
    entries_per_container: int
    containers: list[Any] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.containers)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.containers)

    def __getitem__(self, index: int) -> Any:
        return self.containers[index]


class PopulationBuilder:
    """Deterministically populates containers of one kind and entry shape.

    Key ``i * M + j`` is assigned to entry ``j`` of container ``i``; map kinds
    store ``key -> value`` and set kinds store the generated value.
    """

    def __init__(self, kind: str | ContainerKind, shape: EntryShape) -> None:
        self._kind = resolve_kind(kind)
        self._shape = shape

    def build(self, num_containers: int, entries_per_container: int) -> Population:
        _require_non_negative("num_containers", num_containers)
        _require_non_negative("entries_per_container", entries_per_container)

        kind = self._kind
        make_value = self._shape.value_generator()
        containers = [kind.create() for _ in range(num_containers)]
        for i, container in enumerate(containers):
            base = i * entries_per_container
            for j in range(entries_per_container):
                key = base + j
                kind.insert(container, key, make_value(i, j, key))

        LOGGER.debug(
            "Built %d %s containers x %d entries (shape=%s, value_size=%d)",
            num_containers,
            kind.name,
            entries_per_container,
            self._shape.name,
            self._shape.value_size,
        )
        return Population(
            kind=kind,
            shape=self._shape,
            entries_per_container=entries_per_container,
            containers=containers,
        )


def build_population(
    num_containers: int,
    entries_per_container: int,
    shape: EntryShape,
    kind: str | ContainerKind = "dict",
) -> Population:
    return PopulationBuilder(kind, shape).build(num_containers, entries_per_container)


def _require_non_negative(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ConfigurationError(f"{name} must be >= 0, got {value}")
