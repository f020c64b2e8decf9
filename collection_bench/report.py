from __future__ import annotations

from typing import Iterable, Sequence

from .stats import Summary, average, maximum, minimum, summarize

NAME_WIDTH = 20
NUMBER_WIDTH = 12
RULE_WIDTH = 76


def format_header() -> str:
    return (
        f"{'Operation':<{NAME_WIDTH}} {'Average':>{NUMBER_WIDTH}}      "
        f"{'Min':>{NUMBER_WIDTH}}   {'Max':>{NUMBER_WIDTH}}"
    )


def format_row(summary: Summary) -> str:
    return (
        f"{summary.name:<{NAME_WIDTH}} {summary.average:>{NUMBER_WIDTH}} ns  "
        f"[{summary.minimum:>{NUMBER_WIDTH}} - {summary.maximum:>{NUMBER_WIDTH}}]"
    )


def summarize_rows(rows: Iterable[tuple[str, Sequence[int]]]) -> list[Summary]:
    return [summarize(durations, name=name) for name, durations in rows]


def render(rows: Iterable[tuple[str, Sequence[int]]]) -> str:
    """Fixed-width table: one line per operation under a full-width rule."""
    return render_summaries(summarize_rows(rows))


def render_summaries(summaries: Iterable[Summary]) -> str:
    lines = ["", format_header(), "─" * RULE_WIDTH]
    lines.extend(format_row(summary) for summary in summaries)
    return "\n".join(lines)


def render_extremes(subject: str, samples: Sequence[int]) -> str:
    lines = [
        f"Best time to get size of {subject}: {minimum(samples)} ns",
        f"Average time to get size of {subject}: {average(samples)} ns",
        f"Worst time to get size of {subject}: {maximum(samples)} ns",
    ]
    return "\n".join(lines)
