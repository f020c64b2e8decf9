from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from .runner import VariantResult
from .stats import Summary

LOGGER = logging.getLogger("collection_bench.collector")

SAMPLE_COLUMNS = ["variant", "operation", "sample", "duration_ns"]
SUMMARY_COLUMNS = ["variant", "operation", "samples", "average_ns", "min_ns", "max_ns"]


def build_dataframe(result: VariantResult) -> pd.DataFrame:
    """Long-form frame with one row per duration sample."""
    operations: list[str] = []
    indices: list[int] = []
    durations: list[int] = []
    for timing in result.timings:
        for index, duration in enumerate(timing.durations):
            operations.append(timing.name)
            indices.append(index)
            durations.append(duration)

    if not durations:
        return pd.DataFrame(columns=SAMPLE_COLUMNS)
    return pd.DataFrame(
        {
            "variant": [result.variant.name] * len(durations),
            "operation": operations,
            "sample": indices,
            # object dtype keeps Python ints exact past the int64 range
            "duration_ns": pd.Series(durations, dtype=object),
        },
        columns=SAMPLE_COLUMNS,
    )


def build_summary_frame(variant_name: str, summaries: list[Summary]) -> pd.DataFrame:
    if not summaries:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    rows = [{"variant": variant_name, **summary.as_row()} for summary in summaries]
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def write_artefacts(
    result: VariantResult,
    summaries: list[Summary],
    output_dir: Path,
) -> dict[str, str]:
    output_dir.mkdir(parents=True, exist_ok=True)
    name = result.variant.name

    samples_path = output_dir / f"{name}__samples.csv"
    samples = build_dataframe(result)
    samples.to_csv(samples_path, index=False)
    LOGGER.info("Saved %d samples to %s", len(samples), samples_path)

    summary_path = output_dir / f"{name}__summary.csv"
    summary = build_summary_frame(name, summaries)
    summary.to_csv(summary_path, index=False)
    LOGGER.info("Saved summary to %s", summary_path)

    return {"samples": str(samples_path), "summary": str(summary_path)}
