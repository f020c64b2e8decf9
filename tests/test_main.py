"""End-to-end runs of the command line entry point on tiny variants."""

import dataclasses
import importlib
import json

import pytest

from collection_bench.config import BenchmarkPlan
from collection_bench.population import EntryShape
from collection_bench.runner import TimedOperationRunner
from collection_bench.sink import UNREACHABLE_MESSAGE

# The package re-exports the main() function under the same name as the module.
main_module = importlib.import_module("collection_bench.main")


@pytest.fixture
def patched_plan(monkeypatch, tiny_plan):
    monkeypatch.setattr(main_module, "default_benchmark_plan", lambda: tiny_plan)
    monkeypatch.delenv("BENCHMARK_VARIANTS", raising=False)
    monkeypatch.delenv("BENCHMARK_OUTPUT_DIR", raising=False)
    return tiny_plan


class TestParseArgs:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("BENCHMARK_VARIANTS", raising=False)
        monkeypatch.delenv("BENCHMARK_OUTPUT_DIR", raising=False)
        args = main_module.parse_args([])
        assert args.variant == []
        assert args.output_dir is None
        assert args.dry_run is False

    def test_variants_from_environment(self, monkeypatch):
        monkeypatch.setenv("BENCHMARK_VARIANTS", "maps, sets,")
        assert main_module.parse_args([]).variant == ["maps", "sets"]

    def test_flags_override_environment(self, monkeypatch):
        monkeypatch.setenv("BENCHMARK_VARIANTS", "maps")
        args = main_module.parse_args(["--variant", "sets", "--variant", "map-size"])
        assert args.variant == ["sets", "map-size"]


class TestMain:
    def test_dry_run_lists_plan(self, patched_plan, capsys):
        assert main_module.main(["--dry-run"]) == 0
        out = capsys.readouterr().out
        assert "Variant: tiny-maps" in out
        assert "keys (all maps): key_sum" in out
        assert "Run 1/" not in out

    def test_runs_selected_variant(self, patched_plan, capsys):
        assert main_module.main(["--variant", "tiny-maps"]) == 0
        out = capsys.readouterr().out
        assert "Tiny Map Benchmark" in out
        assert "  Run 3/3" in out
        assert "keys (all maps)" in out
        assert "─" * 76 in out
        assert "Tiny Set Benchmark" not in out
        assert UNREACHABLE_MESSAGE not in out

    def test_per_container_report(self, patched_plan, capsys):
        assert main_module.main(["--variant", "tiny-size"]) == 0
        out = capsys.readouterr().out
        assert "Best time to get size of Map:" in out
        assert "Worst time to get size of Map:" in out

    def test_unknown_variant_fails(self, patched_plan):
        assert main_module.main(["--variant", "nope"]) == 1

    def test_empty_sequence_aborts_variant(self, monkeypatch, tiny_map_variant, tiny_set_variant, capsys):
        broken = dataclasses.replace(tiny_map_variant, iterations=0)
        plan = BenchmarkPlan(variants=[broken, tiny_set_variant])
        monkeypatch.setattr(main_module, "default_benchmark_plan", lambda: plan)
        monkeypatch.delenv("BENCHMARK_VARIANTS", raising=False)
        monkeypatch.delenv("BENCHMARK_OUTPUT_DIR", raising=False)

        assert main_module.main([]) == 1
        out = capsys.readouterr().out
        # The remaining variant still runs.
        assert "Tiny Set Benchmark" in out
        assert "count even (all)" in out

    def test_writes_artefacts(self, patched_plan, tmp_path):
        output_dir = tmp_path / "bench"
        assert main_module.main(["--output-dir", str(output_dir)]) == 0

        manifest = json.loads((output_dir / "benchmark_manifest.json").read_text())
        assert set(manifest) == {"tiny-maps", "tiny-sets", "tiny-size"}
        assert (output_dir / "tiny-maps__samples.csv").exists()
        assert (output_dir / "tiny-sets__summary.csv").exists()
        assert (output_dir / "tiny_maps.png").exists()
        assert (output_dir / "tiny-size.png").exists()
        assert manifest["tiny-maps"]["summaries"][0]["operation"] == "keys (all maps)"

    def test_mismatched_operations_fail_before_timing(self, monkeypatch, tiny_set_variant, capsys):
        def plan():
            strings = dataclasses.replace(tiny_set_variant, shape=EntryShape("padded-string", value_size=100))
            return BenchmarkPlan(variants=[strings])

        monkeypatch.setattr(main_module, "default_benchmark_plan", plan)
        monkeypatch.delenv("BENCHMARK_VARIANTS", raising=False)
        monkeypatch.delenv("BENCHMARK_OUTPUT_DIR", raising=False)

        assert main_module.main([]) == 1
        assert "Run 1/" not in capsys.readouterr().out


def test_run_benchmark_variant_returns_summaries(tiny_set_variant, step_clock, lines):
    runner = TimedOperationRunner(clock=step_clock, emit=lines.append)
    entry = main_module.run_benchmark_variant(tiny_set_variant, runner, lines.append)
    assert entry["mode"] == "per-run-sum"
    assert [row["average_ns"] for row in entry["summaries"]] == [20] * 5
    assert "chart" not in entry
    assert lines[0] == "Tiny Set Benchmark"
    assert UNREACHABLE_MESSAGE not in lines
