"""Core data models for box stacking."""

from dataclasses import dataclass
from typing import Iterable, Sequence


@dataclass(frozen=True)
class Box:
    """
    A box in one fixed orientation.

    Frozen so that boxes can be shared between stacks and used as
    parts of cache keys.

    Attributes:
        w:  Footprint width (always <= l for expanded orientations).
        l:  Footprint length.
        h:  Height in this orientation.
        id: Index of the original box this orientation derives from.
    """

    w: int
    l: int
    h: int
    id: int

    @property
    def area(self) -> int:
        """Footprint area, used to order greedy candidates."""
        return self.w * self.l

    def can_be_on(self, bottom: "Box") -> bool:
        """Check if this box can rest directly on top of ``bottom``."""
        return self.w < bottom.w and self.l < bottom.l

    def to_dict(self) -> dict:
        return {"id": self.id, "w": self.w, "l": self.l, "h": self.h}

    @classmethod
    def from_dict(cls, d: dict) -> "Box":
        return cls(w=d["w"], l=d["l"], h=d["h"], id=d["id"])

    def __str__(self) -> str:
        return f"{self.w} {self.l} {self.h}"


def can_be_on(top: Box, bottom: Box) -> bool:
    """Strict footprint nesting: ``top`` is narrower and shorter on both axes."""
    return top.can_be_on(bottom)


def make_orientations(originals: Sequence[tuple[int, int, int]]) -> list[Box]:
    """
    Expand each original box into its three orientations.

    Each dimension takes a turn as the height; the remaining two become the
    footprint, stored as (min, max) so footprint comparison does not depend
    on how the box was turned. Duplicates (cubes, repeated sides) are kept.

    Args:
        originals: (d0, d1, d2) triples in input order. The position in this
            sequence becomes the id shared by the three orientations.

    Returns:
        3 * len(originals) boxes, grouped by original box.
    """
    boxes = []
    for i, original in enumerate(originals):
        dims = tuple(original)
        for j in range(3):
            height = dims[j]
            side1 = dims[(j + 1) % 3]
            side2 = dims[(j + 2) % 3]
            boxes.append(Box(w=min(side1, side2), l=max(side1, side2), h=height, id=i))
    return boxes


def stack_height(stack: Iterable[Box]) -> int:
    """Total height of a stack (validity is not checked)."""
    return sum(box.h for box in stack)


def is_valid_stack(stack: Sequence[Box]) -> bool:
    """
    Check the physical and single-use rules for a base-first stack.

    Returns:
        True if every box fits strictly on the one below it and no
        original box appears twice.
    """
    ids = [box.id for box in stack]
    if len(ids) != len(set(ids)):
        return False
    return all(top.can_be_on(bottom) for bottom, top in zip(stack, stack[1:]))
