"""Metrics tracking, report formatting and export for stacking runs.

Provides a dataclass for the figures of one search run and utilities for
rendering the stack report and exporting results to JSON and CSV.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from boxstack.core.models import Box, stack_height


CSV_FIELDS = ["position", "id", "w", "l", "h", "residual_height"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def residual_rows(stack: list[Box]) -> list[tuple[Box, int]]:
    """Pair each box with its residual height, apex first.

    The residual height of a box is the distance from its bottom face to the
    top of the stack, so it starts at the total height and the last row holds
    the base box's own height.

    Example:
        >>> rows = residual_rows([Box(5, 6, 4, 0), Box(1, 2, 3, 1)])
        >>> [(str(b), r) for b, r in rows]
        [('1 2 3', 7), ('5 6 4', 4)]
    """
    remain = stack_height(stack)
    rows = []
    for box in reversed(stack):
        rows.append((box, remain))
        remain -= box.h
    return rows


def format_stack_report(stack: list[Box]) -> str:
    """Render the stack apex first as ``w l h residual`` lines."""
    return "\n".join(f"{box} {remain}" for box, remain in residual_rows(stack))


@dataclass
class SearchMetrics:
    """Figures for a single stacking run.

    Attributes:
        run_id: Unique identifier for the run.
        input_path: Box file the run read ("" for in-memory input).
        original_boxes: Number of valid boxes read.
        candidates: Number of orientations searched.
        initial_size: Greedy stack size.
        initial_height: Greedy stack height.
        final_size: Best stack size.
        final_height: Best stack height.
        iterations: Annealing iterations performed.
        accepted_moves: Accepted neighbor moves.
        accepted_worse: Accepted moves that did not increase height.
        cache_hits: Height cache hits.
        cache_misses: Height cache misses.
        initial_temperature: Starting temperature.
        cooling_rate: Temperature step per iteration.
        seed: Random seed, if any.
        runtime_seconds: Total runtime in seconds.
        started_at: Run start timestamp.
        completed_at: Run completion timestamp (None if running).
        final_stack: Best stack, base first.
    """

    run_id: str
    input_path: str = ""
    original_boxes: int = 0
    candidates: int = 0
    initial_size: int = 0
    initial_height: int = 0
    final_size: int = 0
    final_height: int = 0
    iterations: int = 0
    accepted_moves: int = 0
    accepted_worse: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    initial_temperature: float = 0.0
    cooling_rate: float = 0.0
    seed: int | None = None
    runtime_seconds: float = 0.0
    started_at: datetime = field(default_factory=_now)
    completed_at: datetime | None = None
    final_stack: list[Box] = field(default_factory=list)

    @property
    def improvement(self) -> int:
        """Height gained by annealing over the greedy start."""
        return self.final_height - self.initial_height

    def mark_complete(self) -> None:
        """Mark run as complete and calculate final runtime."""
        self.completed_at = _now()
        self.runtime_seconds = (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with ISO timestamps and boxes as dicts."""
        d = asdict(self)
        d["started_at"] = self.started_at.isoformat()
        d["completed_at"] = self.completed_at.isoformat() if self.completed_at else None
        d["final_stack"] = [box.to_dict() for box in self.final_stack]
        d["improvement"] = self.improvement
        return d

    def to_summary_dict(self) -> dict[str, Any]:
        """Convert to dictionary without the stack itself."""
        d = self.to_dict()
        del d["final_stack"]
        return d


def export_to_json(metrics: SearchMetrics, output_path: Path | str, include_stack: bool = True) -> None:
    """Export run metrics to a JSON file.

    Args:
        metrics: SearchMetrics instance to export.
        output_path: Path to output JSON file.
        include_stack: If True, include the final stack. If False, summary only.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = metrics.to_dict() if include_stack else metrics.to_summary_dict()

    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


def export_to_csv(metrics: SearchMetrics, output_path: Path | str) -> None:
    """Export the final stack to a CSV file, one row per box, apex first.

    An empty stack produces a header-only file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for position, (box, remain) in enumerate(residual_rows(metrics.final_stack)):
            writer.writerow({
                "position": position,
                "id": box.id,
                "w": box.w,
                "l": box.l,
                "h": box.h,
                "residual_height": remain,
            })


def print_summary(metrics: SearchMetrics) -> str:
    """Generate the summary block printed after the stack report.

    Example:
        >>> m = SearchMetrics("run_001", initial_size=2, initial_height=13, final_height=16)
        >>> print(print_summary(m))
        - Summary -
        Initial stack size         : 2
        Initial stack height       : 13
        Final stack total height   : 16
    """
    lines = [
        "- Summary -",
        f"Initial stack size         : {metrics.initial_size}",
        f"Initial stack height       : {metrics.initial_height}",
        f"Final stack total height   : {metrics.final_height}",
    ]
    return "\n".join(lines)


def print_details(metrics: SearchMetrics) -> str:
    """Generate a verbose multi-line description of the search itself."""
    lookups = metrics.cache_hits + metrics.cache_misses
    hit_rate = metrics.cache_hits / lookups * 100 if lookups else 0.0
    lines = [
        "=" * 60,
        f"Run: {metrics.run_id}",
        f"Input: {metrics.input_path or '<memory>'}",
        "=" * 60,
        f"Boxes: {metrics.original_boxes} ({metrics.candidates} orientations)",
        f"Temperature: {metrics.initial_temperature:g} (cooling {metrics.cooling_rate:g}/iteration)",
        f"Seed: {metrics.seed if metrics.seed is not None else 'random'}",
        "",
        "Search Statistics:",
        f"  Iterations:     {metrics.iterations}",
        f"  Accepted moves: {metrics.accepted_moves} ({metrics.accepted_worse} non-improving)",
        f"  Cache hit rate: {hit_rate:.1f}%",
        f"  Improvement:    {metrics.improvement:+d} ({metrics.initial_height} -> {metrics.final_height})",
        "",
        f"Runtime: {metrics.runtime_seconds:.2f} seconds",
        "=" * 60,
    ]
    return "\n".join(lines)
