"""Memoized stack height evaluation."""

from typing import Sequence

from boxstack.core.models import Box, stack_height


class HeightCache:
    """
    Caches total heights keyed by the exact ordered box sequence.

    Heights depend only on content, so entries never go stale. Only an
    identical sequence produces a hit.
    """

    def __init__(self):
        self._heights: dict[tuple[Box, ...], int] = {}
        self.hits = 0
        self.misses = 0

    def height(self, stack: Sequence[Box]) -> int:
        """Return the height of ``stack``, computing it on first sight."""
        key = tuple(stack)
        cached = self._heights.get(key)
        if cached is not None:
            self.hits += 1
            return cached

        self.misses += 1
        value = stack_height(key)
        self._heights[key] = value
        return value

    @property
    def hit_rate(self) -> float:
        """Fraction of lookups answered from the cache (0.0 when unused)."""
        lookups = self.hits + self.misses
        if lookups == 0:
            return 0.0
        return self.hits / lookups

    def __len__(self) -> int:
        return len(self._heights)

    def __contains__(self, stack: Sequence[Box]) -> bool:
        return tuple(stack) in self._heights
