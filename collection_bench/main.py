from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable

from .charts import render_variant_chart
from .collector import build_dataframe, write_artefacts
from .config import PER_CONTAINER, BenchmarkPlan, BenchmarkVariant, default_benchmark_plan
from .errors import BenchmarkError, ConfigurationError
from .report import render_extremes, render_summaries, summarize_rows
from .runner import TimedOperationRunner
from .sink import observe
from .stats import summarize

LOGGER = logging.getLogger("collection_bench")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Associative container layout benchmarks")
    parser.add_argument(
        "--variant",
        action="append",
        default=None,
        help="Benchmark variant to run (repeatable); defaults to every variant in the plan",
    )
    parser.add_argument(
        "--output-dir",
        default=os.environ.get("BENCHMARK_OUTPUT_DIR"),
        help="Directory to store benchmark artefacts (CSV files, charts and manifest)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print the planned benchmark variants without executing them",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("BENCHMARK_LOG_LEVEL", "INFO"),
        help="Logging level",
    )
    args = parser.parse_args(argv)
    if args.variant is None:
        env_variants = os.environ.get("BENCHMARK_VARIANTS", "")
        args.variant = [item.strip() for item in env_variants.split(",") if item.strip()]
    return args


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def load_plan(variants: list[str] | None) -> BenchmarkPlan:
    return default_benchmark_plan().select(variants)


def run_benchmark_variant(
    variant: BenchmarkVariant,
    runner: TimedOperationRunner,
    emit: Callable[[str], None] = print,
    output_dir: Path | None = None,
) -> dict[str, Any]:
    """Run one variant, print its report and return its manifest entry."""
    for line in variant.header_lines():
        emit(line)

    result = runner.run_variant(variant)

    if variant.mode == PER_CONTAINER:
        timing = result.timings[0]
        emit(render_extremes(variant.subject, timing.durations))
        summaries = [summarize(timing.durations, name=timing.name)]
    else:
        summaries = summarize_rows((timing.name, timing.durations) for timing in result.timings)
        emit(render_summaries(summaries))

    observe(result.accumulators(), emit)

    entry: dict[str, Any] = {
        "mode": variant.mode,
        "container_kind": variant.container_kind,
        "summaries": [summary.as_row() for summary in summaries],
    }
    if output_dir is not None:
        entry["artefacts"] = write_artefacts(result, summaries, output_dir)
        chart_path = render_variant_chart(variant, build_dataframe(result), output_dir)
        entry["chart"] = str(chart_path) if chart_path else None
    return entry


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        plan = load_plan(args.variant)
    except ConfigurationError as exc:
        LOGGER.error("Invalid benchmark selection: %s", exc)
        return 1

    if args.dry_run:
        _print_plan(plan)
        return 0

    output_dir = Path(args.output_dir) if args.output_dir else None
    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        LOGGER.info("Benchmark output directory: %s", output_dir)

    runner = TimedOperationRunner()
    manifest: dict[str, Any] = {}
    failed: list[str] = []
    for variant in plan:
        LOGGER.info("Executing benchmark variant: %s", variant.name)
        try:
            manifest[variant.name] = run_benchmark_variant(variant, runner, print, output_dir)
        except BenchmarkError as exc:
            LOGGER.error("Benchmark variant %s aborted: %s", variant.name, exc)
            failed.append(variant.name)
        print()

    if output_dir is not None:
        manifest_path = output_dir / "benchmark_manifest.json"
        with open(manifest_path, "w", encoding="utf-8") as f:
            json.dump(manifest, f, indent=2, default=str)
        LOGGER.info("Benchmark manifest written to %s", manifest_path)

    if failed:
        LOGGER.error("Failed variants: %s", ", ".join(failed))
        return 1
    return 0


def _print_plan(plan: BenchmarkPlan) -> None:
    for variant in plan:
        print(f"Variant: {variant.name} ({variant.title})")
        print(
            f"  - kind={variant.container_kind}, containers={variant.num_containers}, "
            f"entries={variant.entries_per_container}, shape={variant.shape.name}"
            f"/{variant.shape.value_size}, iterations={variant.iterations}, "
            f"runs={variant.runs}, mode={variant.mode}, rebuild_per_run={variant.rebuild_per_run}"
        )
        for spec in variant.operations:
            print(f"    * {spec.label}: {spec.name}")


if __name__ == "__main__":
    sys.exit(main())
