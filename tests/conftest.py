"""Shared fixtures for the boxstack test suite."""

import pytest

from boxstack.core.models import Box, make_orientations


class ScriptedRng:
    """Stand-in for numpy.random.Generator that replays fixed draws."""

    def __init__(self, integers=(), randoms=()):
        self._integers = list(integers)
        self._randoms = list(randoms)

    def integers(self, n):
        value = self._integers.pop(0)
        assert 0 <= value < n, f"scripted draw {value} out of range [0, {n})"
        return value

    def random(self):
        return self._randoms.pop(0)


@pytest.fixture
def example_originals():
    """The three-box example: (4,6,7), (1,2,3), (4,5,6)."""
    return [(4, 6, 7), (1, 2, 3), (4, 5, 6)]


@pytest.fixture
def example_candidates(example_originals):
    return make_orientations(example_originals)


@pytest.fixture
def greedy_example_stack():
    """Greedy result for the three-box example."""
    return [Box(6, 7, 4, 0), Box(5, 6, 4, 2), Box(2, 3, 1, 1)]


@pytest.fixture
def scripted_rng():
    return ScriptedRng
