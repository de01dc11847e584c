"""Greedy largest-footprint-first stack construction."""

import logging

from boxstack.core.models import Box, stack_height

logger = logging.getLogger(__name__)


class GreedyStacker:
    """
    Single-pass greedy stack builder.

    Scans candidates by footprint area (largest first) and puts each one on
    top of the stack if its original box is unused and it fits on the
    current top. Boxes that do not fit are skipped, never backtracked.
    """

    def __init__(self, multi_start: bool = False):
        """
        Args:
            multi_start: If True, run one scan per candidate forced as the
                base and keep the tallest stack instead of a single scan.
        """
        self.multi_start = multi_start

    def build(self, candidates: list[Box]) -> list[Box]:
        """
        Build an initial stack.

        Args:
            candidates: All orientations. The list is not modified.

        Returns:
            A valid base-first stack (empty only if there are no candidates).
        """
        # sorted() is stable: equal areas keep orientation order
        ordered = sorted(candidates, key=lambda b: b.area, reverse=True)

        if not self.multi_start:
            stack = self._scan(ordered)
        else:
            stack = []
            best_height = -1
            for base_idx in range(len(ordered)):
                trial = self._scan(ordered, base_idx)
                height = stack_height(trial)
                if height > best_height:
                    stack, best_height = trial, height

        logger.debug("Greedy stack: %d boxes, height %d", len(stack), stack_height(stack))
        return stack

    @staticmethod
    def _scan(ordered: list[Box], base_idx: int = 0) -> list[Box]:
        """Scan ``ordered`` from ``base_idx``; the first candidate scanned is the base."""
        stack: list[Box] = []
        used: set[int] = set()

        for box in ordered[base_idx:]:
            if box.id in used:
                continue
            if not stack or box.can_be_on(stack[-1]):
                stack.append(box)
                used.add(box.id)

        return stack
