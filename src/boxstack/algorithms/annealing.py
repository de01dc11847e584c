"""
Simulated annealing over stack sequences.

The search starts from a valid stack (normally the greedy one) and keeps
asking the neighbor generator for mutations. Taller neighbors are always
accepted; shorter or equal ones are accepted with probability
exp(delta / temperature). Temperature cools linearly by a fixed step and
the run ends once it is no longer positive.

All mutable search state lives in a SearchContext that is passed through
each iteration, so two annealers never share a cache or random stream.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from boxstack.algorithms.height_cache import HeightCache
from boxstack.algorithms.neighbors import NeighborGenerator
from boxstack.core.models import Box

logger = logging.getLogger(__name__)


def acceptance_probability(delta: float, temperature: float) -> float:
    """
    Metropolis acceptance probability for a height change ``delta``.

    Args:
        delta: neighbor height minus current height.
        temperature: Current temperature, must be positive.

    Returns:
        1.0 for improvements, exp(delta / temperature) otherwise.
    """
    if delta > 0:
        return 1.0
    return math.exp(delta / temperature)


def schedule_length(initial_temperature: float, cooling_rate: float) -> int:
    """
    Number of iterations before the linearly cooled temperature reaches zero.

    Iteration ``k`` runs at ``initial_temperature - k * cooling_rate``. The
    estimate ``ceil(T / c)`` is corrected against that exact expression so
    rounding never makes it disagree with the annealing loop.
    """
    steps = max(1, math.ceil(initial_temperature / cooling_rate))
    while initial_temperature - steps * cooling_rate > 0:
        steps += 1
    while steps > 1 and initial_temperature - (steps - 1) * cooling_rate <= 0:
        steps -= 1
    return steps


@dataclass
class SearchContext:
    """Mutable state of one annealing run."""

    current: list[Box]
    best: list[Box]
    best_height: int
    temperature: float
    cache: HeightCache
    rng: np.random.Generator
    iterations: int = 0
    accepted: int = 0
    accepted_worse: int = 0
    history: list[int] = field(default_factory=list)


@dataclass
class SearchResult:
    """
    Outcome of an annealing run.

    Attributes:
        best: Tallest stack seen, base first.
        best_height: Its total height.
        initial_height: Height of the starting stack.
        iterations: Iterations performed.
        accepted: Moves accepted (improving or not).
        accepted_worse: Accepted moves that did not increase height.
        final_temperature: Temperature when the loop stopped.
        cache_hits: Height cache hits.
        cache_misses: Height cache misses.
        runtime_seconds: Wall-clock search time.
        history: Best height after each iteration (empty unless recorded).
    """

    best: list[Box]
    best_height: int
    initial_height: int
    iterations: int
    accepted: int
    accepted_worse: int
    final_temperature: float
    cache_hits: int
    cache_misses: int
    runtime_seconds: float
    history: list[int] = field(default_factory=list)


class SimulatedAnnealer:
    """
    Annealing controller with linear cooling.

    Example:
        >>> from boxstack.algorithms.greedy import GreedyStacker
        >>> from boxstack.core.models import make_orientations, stack_height
        >>> boxes = make_orientations([(4, 6, 7), (1, 2, 3), (4, 5, 6)])
        >>> start = GreedyStacker().build(boxes)
        >>> result = SimulatedAnnealer(1000, 1, seed=0).run(boxes, start)
        >>> result.best_height >= stack_height(start)
        True
    """

    def __init__(
        self,
        initial_temperature: float,
        cooling_rate: float,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        max_iterations: Optional[int] = None,
        record_history: bool = False,
    ):
        """
        Args:
            initial_temperature: Starting temperature (> 0).
            cooling_rate: Linear decrement per iteration (> 0).
            seed: Seed for a fresh generator when ``rng`` is not given.
            rng: Random generator to use; takes precedence over ``seed``.
            max_iterations: Optional cap on top of the temperature schedule.
            record_history: Keep the best height after every iteration.

        Raises:
            ValueError: If temperature or cooling rate is not a positive
                finite number.
        """
        if not math.isfinite(initial_temperature) or initial_temperature <= 0:
            raise ValueError(
                f"initial_temperature must be positive and finite, got {initial_temperature}"
            )
        if not math.isfinite(cooling_rate) or cooling_rate <= 0:
            raise ValueError(
                f"cooling_rate must be positive and finite, got {cooling_rate}; "
                f"the temperature would never reach zero"
            )
        if max_iterations is not None and max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")

        self.initial_temperature = initial_temperature
        self.cooling_rate = cooling_rate
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.max_iterations = max_iterations
        self.record_history = record_history

    @property
    def iteration_budget(self) -> int:
        budget = schedule_length(self.initial_temperature, self.cooling_rate)
        if self.max_iterations is not None:
            budget = min(budget, self.max_iterations)
        return budget

    def run(self, candidates: list[Box], initial: list[Box]) -> SearchResult:
        """
        Anneal from ``initial`` and return the tallest stack seen.

        Args:
            candidates: All orientations, in expansion order.
            initial: Valid starting stack, base first.
        """
        started = time.perf_counter()
        cache = HeightCache()
        initial_height = cache.height(initial)
        ctx = SearchContext(
            current=list(initial),
            best=list(initial),
            best_height=initial_height,
            temperature=self.initial_temperature,
            cache=cache,
            rng=self.rng,
        )
        generator = NeighborGenerator(candidates, ctx.rng)

        logger.info(
            "Annealing from height %d: T=%g, cooling=%g, budget=%d iterations",
            initial_height, self.initial_temperature, self.cooling_rate, self.iteration_budget,
        )

        while ctx.temperature > 0:
            if self.max_iterations is not None and ctx.iterations >= self.max_iterations:
                break
            self._step(ctx, generator)
            if self.record_history:
                ctx.history.append(ctx.best_height)

        runtime = time.perf_counter() - started
        logger.info(
            "Annealing done: best height %d after %d iterations (%.2fs, cache hit rate %.1f%%)",
            ctx.best_height, ctx.iterations, runtime, cache.hit_rate * 100,
        )

        return SearchResult(
            best=ctx.best,
            best_height=ctx.best_height,
            initial_height=initial_height,
            iterations=ctx.iterations,
            accepted=ctx.accepted,
            accepted_worse=ctx.accepted_worse,
            final_temperature=ctx.temperature,
            cache_hits=cache.hits,
            cache_misses=cache.misses,
            runtime_seconds=runtime,
            history=ctx.history,
        )

    def _step(self, ctx: SearchContext, generator: NeighborGenerator) -> None:
        """One propose / evaluate / accept / cool iteration."""
        neighbor, move = generator.propose(ctx.current)
        current_height = ctx.cache.height(ctx.current)
        neighbor_height = ctx.cache.height(neighbor)

        if neighbor_height > current_height:
            ctx.current = neighbor
            ctx.accepted += 1
            if neighbor_height > ctx.best_height:
                ctx.best = list(neighbor)
                ctx.best_height = neighbor_height
                logger.debug(
                    "New best height %d (%s move, T=%.3f)", neighbor_height, move, ctx.temperature
                )
        else:
            prob = acceptance_probability(neighbor_height - current_height, ctx.temperature)
            if prob > ctx.rng.random():
                ctx.current = neighbor
                ctx.accepted += 1
                ctx.accepted_worse += 1

        ctx.iterations += 1
        ctx.temperature = self.initial_temperature - ctx.iterations * self.cooling_rate
