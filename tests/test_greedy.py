"""
Tests for the greedy stack constructor.

Run with:
    python -m pytest tests/test_greedy.py -v
"""

from boxstack.algorithms.greedy import GreedyStacker
from boxstack.core.models import Box, is_valid_stack, make_orientations, stack_height
from boxstack.runner.dataset import generate_boxes


class TestSinglePass:
    def test_example_stack(self, example_candidates, greedy_example_stack):
        assert GreedyStacker().build(example_candidates) == greedy_example_stack

    def test_does_not_modify_candidates(self, example_candidates):
        before = list(example_candidates)
        GreedyStacker().build(example_candidates)
        assert example_candidates == before

    def test_deterministic(self):
        candidates = make_orientations(generate_boxes(40, seed=3))
        stacker = GreedyStacker()
        assert stacker.build(candidates) == stacker.build(candidates)

    def test_incompatible_boxes_give_single_box(self):
        # All footprints share a side length of 5, so nothing nests.
        candidates = make_orientations([(5, 5, 5), (5, 5, 2)])
        stack = GreedyStacker().build(candidates)
        assert len(stack) == 1
        assert stack[0] == Box(5, 5, 5, 0)

    def test_empty_input(self):
        assert GreedyStacker().build([]) == []

    def test_always_valid(self):
        for seed in range(10):
            candidates = make_orientations(generate_boxes(30, seed=seed, max_dim=20))
            stack = GreedyStacker().build(candidates)
            assert is_valid_stack(stack)
            assert stack


class TestMultiStart:
    def test_never_worse_than_single_pass(self):
        for seed in range(10):
            candidates = make_orientations(generate_boxes(25, seed=seed, max_dim=20))
            single = GreedyStacker().build(candidates)
            multi = GreedyStacker(multi_start=True).build(candidates)
            assert is_valid_stack(multi)
            assert stack_height(multi) >= stack_height(single)

    def test_finds_taller_base(self):
        # Two flat slabs: the single pass lays both flat (height 2), standing
        # the larger slab on its edge gives 10.
        candidates = make_orientations([(10, 10, 1), (9, 9, 1)])
        single = GreedyStacker().build(candidates)
        multi = GreedyStacker(multi_start=True).build(candidates)
        assert stack_height(single) == 2
        assert multi == [Box(1, 10, 10, 0)]
