import math

from collection_bench.sink import UNREACHABLE_MESSAGE, observe


def test_valid_accumulators_never_print(lines):
    assert observe([15, 60, 3, 0, 6], lines.append) == 84
    assert lines == []


def test_missing_accumulators_are_skipped(lines):
    assert observe([None, 5, None], lines.append) == 5
    assert lines == []


def test_infinite_max_does_not_trigger(lines):
    assert observe([-math.inf, 12], lines.append) == -math.inf
    assert lines == []


def test_guard_depends_on_combined_value(lines):
    observe([2, -3], lines.append)
    assert lines == [UNREACHABLE_MESSAGE]
