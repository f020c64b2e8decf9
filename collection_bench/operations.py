"""
Cross-container access patterns timed by the runner.

Every operation visits the containers of a population in order and returns a
scalar derived from what it touched, so the caller has something to feed the
anti-optimization sink.
"""

from __future__ import annotations

import math
from typing import Callable, Union

from .errors import ConfigurationError
from .population import MAP_FAMILY, NUMERIC, STRING, Population

Scalar = Union[int, float]
Operation = Callable[[Population], Scalar]

VALUE_LENGTH_THRESHOLD = 50


def size_sum(population: Population) -> int:
    total = 0
    for container in population.containers:
        total += len(container)
    return total


def key_sum(population: Population) -> int:
    keys = population.kind.keys
    total = 0
    for container in population.containers:
        for key in keys(container):
            total += key
    return total


def value_length_sum(population: Population) -> int:
    values = population.kind.values
    total = 0
    for container in population.containers:
        for value in values(container):
            total += len(value)
    return total


def value_sum(population: Population) -> int:
    values = population.kind.values
    total = 0
    for container in population.containers:
        for value in values(container):
            total += value
    return total


def filter_keys(population: Population) -> int:
    """Count keys above the midpoint of each container's own key range."""
    keys = population.kind.keys
    per_container = population.entries_per_container
    count = 0
    for i, container in enumerate(population.containers):
        threshold = i * per_container + per_container // 2
        for key in keys(container):
            if key > threshold:
                count += 1
    return count


def filter_value_length(population: Population) -> int:
    values = population.kind.values
    count = 0
    for container in population.containers:
        for value in values(container):
            if len(value) > VALUE_LENGTH_THRESHOLD:
                count += 1
    return count


def filter_values(population: Population) -> int:
    """Like filter_keys, but over values (integer shapes)."""
    values = population.kind.values
    per_container = population.entries_per_container
    count = 0
    for i, container in enumerate(population.containers):
        threshold = i * per_container + per_container // 2
        for value in values(container):
            if value > threshold:
                count += 1
    return count


def max_value(population: Population) -> Scalar:
    values = population.kind.values
    current: Scalar = -math.inf
    for container in population.containers:
        for value in values(container):
            if value > current:
                current = value
    return current


def count_even(population: Population) -> int:
    values = population.kind.values
    count = 0
    for container in population.containers:
        for value in values(container):
            if value % 2 == 0:
                count += 1
    return count


CATALOGUE: dict[str, Operation] = {
    "size_sum": size_sum,
    "key_sum": key_sum,
    "value_length_sum": value_length_sum,
    "value_sum": value_sum,
    "filter_keys": filter_keys,
    "filter_value_length": filter_value_length,
    "filter_values": filter_values,
    "max_value": max_value,
    "count_even": count_even,
}


def resolve_operation(name: str) -> Operation:
    try:
        return CATALOGUE[name]
    except KeyError:
        raise ConfigurationError(
            f"unknown operation {name!r}; expected one of {sorted(CATALOGUE)}"
        ) from None


# Value type each operation reads; keys are integers in map containers.
VALUE_TYPES: dict[str, str] = {
    "value_length_sum": STRING,
    "value_sum": NUMERIC,
    "filter_value_length": STRING,
    "filter_values": NUMERIC,
    "max_value": NUMERIC,
    "count_even": NUMERIC,
}
KEY_OPERATIONS = frozenset({"key_sum", "filter_keys"})


def check_operation_fits(name: str, family: str, value_type: str) -> None:
    """Raise ConfigurationError if ``name`` cannot run over this population shape."""
    resolve_operation(name)
    if name in KEY_OPERATIONS:
        # Set elements double as keys.
        required = NUMERIC if family != MAP_FAMILY else None
    else:
        required = VALUE_TYPES.get(name)
    if required is not None and required != value_type:
        raise ConfigurationError(
            f"operation {name!r} needs {required} values, but the entry shape yields {value_type} values"
        )
