"""Run orchestration and command-line entry point for box stacking."""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import yaml

from boxstack.algorithms.annealing import SearchResult, SimulatedAnnealer
from boxstack.algorithms.greedy import GreedyStacker
from boxstack.core.config import SearchConfig
from boxstack.core.models import make_orientations, stack_height
from boxstack.monitoring.metrics import (
    SearchMetrics,
    export_to_csv,
    export_to_json,
    format_stack_report,
    print_details,
    print_summary,
)
from boxstack.monitoring.telegram_notifier import (
    format_error,
    format_search_complete,
    format_search_start,
    send_telegram,
)
from boxstack.runner.dataset import BoxDims, load_boxes

logger = logging.getLogger(__name__)


class StackingRunner:
    """
    Orchestrates one stacking run.

    Expands orientations, builds the greedy start, anneals, collects
    metrics, optionally saves them and sends progress notifications.
    """

    def __init__(
        self,
        config: SearchConfig,
        results_dir: Path | str | None = None,
        send_telegram_updates: bool = False,
    ):
        """
        Initialize the runner.

        Args:
            config: Search parameters
            results_dir: Directory to save JSON/CSV results (None: don't save)
            send_telegram_updates: Whether to send Telegram notifications
        """
        self.config = config
        self.results_dir = Path(results_dir) if results_dir is not None else None
        if self.results_dir is not None:
            self.results_dir.mkdir(parents=True, exist_ok=True)
        self.send_telegram_updates = send_telegram_updates

    async def run_file(self, input_path: Path | str) -> SearchMetrics:
        """
        Load boxes from ``input_path`` and run the search.

        Raises:
            FileNotFoundError: If the input file does not exist.
        """
        try:
            boxes = load_boxes(input_path)
        except OSError as e:
            await self._notify(format_error(type(e).__name__, str(e), {"input": input_path}))
            raise
        return await self.run(boxes, input_path=str(input_path))

    async def run(self, boxes: list[BoxDims], input_path: str = "") -> SearchMetrics:
        """
        Run greedy construction and annealing on ``boxes``.

        Args:
            boxes: Original (w, l, h) triples; their order defines box ids.
            input_path: Where the boxes came from, for reporting.

        Returns:
            SearchMetrics including the best stack found.
        """
        run_id = f"run_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S_%f')}"
        metrics = SearchMetrics(
            run_id=run_id,
            input_path=input_path,
            original_boxes=len(boxes),
            initial_temperature=self.config.initial_temperature,
            cooling_rate=self.config.cooling_rate,
            seed=self.config.seed,
        )

        await self._notify(format_search_start(
            input_path=input_path or "<memory>",
            original_boxes=len(boxes),
            initial_temperature=self.config.initial_temperature,
            cooling_rate=self.config.cooling_rate,
            iteration_budget=self.config.iteration_budget,
        ))

        result = self._search(boxes, metrics)

        metrics.final_stack = result.best
        metrics.final_size = len(result.best)
        metrics.final_height = result.best_height
        metrics.iterations = result.iterations
        metrics.accepted_moves = result.accepted
        metrics.accepted_worse = result.accepted_worse
        metrics.cache_hits = result.cache_hits
        metrics.cache_misses = result.cache_misses
        metrics.mark_complete()

        if self.results_dir is not None:
            self._save_results(metrics)

        await self._notify(format_search_complete(
            initial_height=metrics.initial_height,
            final_height=metrics.final_height,
            final_size=metrics.final_size,
            runtime_seconds=metrics.runtime_seconds,
        ))

        return metrics

    def _search(self, boxes: list[BoxDims], metrics: SearchMetrics) -> SearchResult:
        """Expand, build the greedy start and anneal; fills the initial figures."""
        candidates = make_orientations(boxes)
        initial = GreedyStacker(multi_start=self.config.multi_start).build(candidates)

        metrics.candidates = len(candidates)
        metrics.initial_size = len(initial)
        metrics.initial_height = stack_height(initial)

        annealer = SimulatedAnnealer(
            initial_temperature=self.config.initial_temperature,
            cooling_rate=self.config.cooling_rate,
            seed=self.config.seed,
            max_iterations=self.config.max_iterations,
        )
        return annealer.run(candidates, initial)

    def _save_results(self, metrics: SearchMetrics) -> None:
        """
        Save metrics to JSON and the final stack to CSV.

        Args:
            metrics: SearchMetrics to save
        """
        json_path = self.results_dir / f"{metrics.run_id}.json"
        export_to_json(metrics, json_path)

        csv_path = self.results_dir / f"{metrics.run_id}_stack.csv"
        export_to_csv(metrics, csv_path)

        logger.info("Saved results to %s and %s", json_path, csv_path)

    async def _notify(self, message: str) -> None:
        if self.send_telegram_updates:
            await send_telegram(message)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="boxstack",
        description="Build a tall box stack with greedy construction and simulated annealing",
    )
    parser.add_argument("input", type=Path, help="Box file, one 'w l h' triple per line")
    parser.add_argument(
        "temperature",
        type=float,
        nargs="?",
        default=None,
        help="Initial annealing temperature (optional with --config)",
    )
    parser.add_argument(
        "cooling_rate",
        type=float,
        nargs="?",
        default=None,
        help="Temperature decrement per iteration (optional with --config)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible run")
    parser.add_argument("--config", type=Path, default=None, help="YAML or JSON file with search settings")
    parser.add_argument("--max-iterations", type=int, default=None, help="Hard cap on iterations")
    parser.add_argument(
        "--multi-start",
        action="store_true",
        default=None,
        help="Try every orientation as the greedy base",
    )
    parser.add_argument("--results-dir", type=Path, default=None, help="Save JSON/CSV results here")
    parser.add_argument("--notify", action="store_true", help="Send Telegram notifications")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log search progress")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Entry point for ``boxstack``.

    Prints the best stack apex first as ``w l h residual`` lines, then the
    summary block. Temperature and cooling rate may be left out when a
    ``--config`` file supplies them; positionals override the file.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.config is None and (args.temperature is None or args.cooling_rate is None):
        parser.error("the following arguments are required: temperature, cooling_rate")

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    overrides = {
        "initial_temperature": args.temperature,
        "cooling_rate": args.cooling_rate,
        "seed": args.seed,
        "max_iterations": args.max_iterations,
        "multi_start": args.multi_start,
    }
    try:
        if args.config is not None:
            config = SearchConfig.from_file(args.config, **overrides)
        else:
            config = SearchConfig(**{k: v for k, v in overrides.items() if v is not None})
    except (OSError, ValueError, yaml.YAMLError) as e:
        parser.error(f"invalid configuration: {e}")

    runner = StackingRunner(
        config,
        results_dir=args.results_dir,
        send_telegram_updates=args.notify,
    )
    try:
        metrics = asyncio.run(runner.run_file(args.input))
    except FileNotFoundError:
        parser.error(f"input file not found: {args.input}")

    print(format_stack_report(metrics.final_stack))
    print()
    print(print_summary(metrics))
    if args.verbose:
        print()
        print(print_details(metrics))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
