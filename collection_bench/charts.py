from __future__ import annotations

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from .config import PER_CONTAINER, PER_ITERATION, BenchmarkVariant

LOGGER = logging.getLogger("collection_bench.charts")

sns.set_style("whitegrid")
plt.rcParams["figure.dpi"] = 100
plt.rcParams["savefig.dpi"] = 150
plt.rcParams["font.size"] = 10
plt.rcParams["axes.labelsize"] = 11
plt.rcParams["axes.titlesize"] = 13

OPERATION_COLOR = "#2E86AB"
HISTOGRAM_COLOR = "#F18F01"

# Per-container samples have long scheduler-induced tails.
HISTOGRAM_CLIP_PERCENTILE = 99.0


def render_variant_chart(
    variant: BenchmarkVariant,
    frame: pd.DataFrame,
    output_dir: Path,
) -> Path | None:
    """Render the duration distribution of a variant; returns the chart path."""
    if frame.empty or "duration_ns" not in frame.columns:
        LOGGER.warning("No duration samples available for %s chart", variant.name)
        return None

    chart_path = output_dir / (variant.chart_filename or f"{variant.name}.png")
    df = frame.copy()
    df["duration_ms"] = df["duration_ns"].astype(float) / 1_000_000.0

    if variant.mode == PER_CONTAINER:
        _render_histogram(variant, df, chart_path)
    else:
        _render_boxplot(variant, df, chart_path)

    LOGGER.info("Rendering chart %s", chart_path)
    return chart_path


def _render_boxplot(variant: BenchmarkVariant, df: pd.DataFrame, chart_path: Path) -> None:
    fig, ax = plt.subplots(figsize=(12, 6))
    order = list(dict.fromkeys(df["operation"]))

    sns.boxplot(
        data=df,
        x="operation",
        y="duration_ms",
        order=order,
        color=OPERATION_COLOR,
        ax=ax,
        linewidth=1.5,
        width=0.6,
    )
    sns.stripplot(
        data=df,
        x="operation",
        y="duration_ms",
        order=order,
        color="#333333",
        size=4,
        alpha=0.6,
        ax=ax,
    )

    ax.set_xlabel("Operation", fontweight="semibold", labelpad=10)
    ax.set_ylabel(f"Duration per {_sample_unit(variant)} (ms)", fontweight="semibold", labelpad=10)
    ax.set_title(variant.title, fontweight="bold", pad=15)
    ax.set_ylim(bottom=0)
    ax.grid(True, alpha=0.3, linestyle="--", axis="y")
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)

    plt.tight_layout()
    fig.savefig(chart_path, bbox_inches="tight", facecolor="white")
    plt.close(fig)


def _render_histogram(variant: BenchmarkVariant, df: pd.DataFrame, chart_path: Path) -> None:
    fig, ax = plt.subplots(figsize=(10, 6))

    values = df["duration_ns"].astype(float).to_numpy()
    cutoff = np.percentile(values, HISTOGRAM_CLIP_PERCENTILE)
    clipped = values[values <= cutoff]

    sns.histplot(clipped, bins=50, color=HISTOGRAM_COLOR, ax=ax)
    ax.axvline(float(np.median(values)), color="#C73E1D", linestyle="--", linewidth=1.5, label="median")

    ax.set_xlabel("Size read latency (ns)", fontweight="semibold")
    ax.set_ylabel("Containers", fontweight="semibold")
    ax.set_title(
        f"{variant.title} (≤ p{HISTOGRAM_CLIP_PERCENTILE:g})",
        fontweight="bold",
        pad=15,
    )
    ax.legend(loc="upper right", frameon=True)
    ax.grid(True, alpha=0.3, linestyle="--")

    plt.tight_layout()
    fig.savefig(chart_path, bbox_inches="tight", facecolor="white")
    plt.close(fig)


def _sample_unit(variant: BenchmarkVariant) -> str:
    if variant.mode == PER_ITERATION:
        return "iteration"
    return f"run ({variant.iterations} iterations)"
