"""Random add/remove/replace moves over valid stacks."""

from typing import Optional

import numpy as np

from boxstack.core.models import Box

MOVES: tuple[str, ...] = ("add", "remove", "replace")


class NeighborGenerator:
    """
    Produces mutated copies of a stack that stay inside the valid-stack space.

    Every move keeps the single-use rule and the strict footprint nesting.
    A move that cannot be applied (empty stack, full pool, no fitting
    candidate) returns an unchanged copy instead of failing.

    add and replace pick the first suitable candidate in orientation
    expansion order, so earlier input boxes are favoured.
    """

    def __init__(self, candidates: list[Box], rng: np.random.Generator):
        """
        Args:
            candidates: All orientations, in expansion order.
            rng: Random source shared with the rest of the search.
        """
        self.candidates = candidates
        self.rng = rng

    def propose(self, stack: list[Box]) -> tuple[list[Box], str]:
        """
        Draw a move kind uniformly and apply it to a copy of ``stack``.

        Returns:
            (neighbor stack, move name). ``stack`` itself is not modified.
        """
        move = MOVES[int(self.rng.integers(len(MOVES)))]
        neighbor = list(stack)

        if move == "add" and len(neighbor) < len(self.candidates):
            self._add(neighbor)
        elif move == "remove" and neighbor:
            del neighbor[int(self.rng.integers(len(neighbor)))]
        elif move == "replace" and neighbor:
            self._replace(neighbor, int(self.rng.integers(len(neighbor))))

        return neighbor, move

    def _add(self, stack: list[Box]) -> None:
        used = {box.id for box in stack}
        top = stack[-1] if stack else None
        for box in self.candidates:
            if box.id not in used and (top is None or box.can_be_on(top)):
                stack.append(box)
                return

    def _replace(self, stack: list[Box], i: int) -> None:
        used = {box.id for box in stack}
        below: Optional[Box] = stack[i - 1] if i > 0 else None
        above: Optional[Box] = stack[i + 1] if i < len(stack) - 1 else None
        for box in self.candidates:
            if box.id in used:
                continue
            if below is not None and not box.can_be_on(below):
                continue
            if above is not None and not above.can_be_on(box):
                continue
            stack[i] = box
            return
