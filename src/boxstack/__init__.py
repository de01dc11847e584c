"""
boxstack: tall box stacks by greedy construction and simulated annealing.

Public API:
    from boxstack import Box, make_orientations, GreedyStacker, SimulatedAnnealer
"""

from boxstack.algorithms.annealing import SearchResult, SimulatedAnnealer
from boxstack.algorithms.greedy import GreedyStacker
from boxstack.core.models import Box, can_be_on, is_valid_stack, make_orientations, stack_height

__version__ = "0.1.0"

__all__ = [
    "Box",
    "GreedyStacker",
    "SearchResult",
    "SimulatedAnnealer",
    "can_be_on",
    "is_valid_stack",
    "make_orientations",
    "stack_height",
]
