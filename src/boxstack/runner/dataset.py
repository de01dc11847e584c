"""Box list input and random instance generation."""

import argparse
import logging
from pathlib import Path
from typing import Iterable, Optional

import numpy as np

logger = logging.getLogger(__name__)

BoxDims = tuple[int, int, int]


def parse_boxes(lines: Iterable[str]) -> list[BoxDims]:
    """
    Parse ``w l h`` lines into dimension triples.

    Lines that do not hold exactly three integers, or that hold a
    non-positive value, are skipped.

    Args:
        lines: Text lines, e.g. an open file.

    Returns:
        Triples in input order (the order defines original box ids).
    """
    boxes = []
    for lineno, line in enumerate(lines, start=1):
        parts = line.split()
        if len(parts) != 3:
            logger.debug("Skipping line %d: expected 3 values, got %d", lineno, len(parts))
            continue
        try:
            dims = tuple(int(p) for p in parts)
        except ValueError:
            logger.debug("Skipping line %d: non-integer value in %r", lineno, line.strip())
            continue
        if min(dims) <= 0:
            logger.debug("Skipping line %d: non-positive dimension in %r", lineno, line.strip())
            continue
        boxes.append(dims)
    return boxes


def load_boxes(path: Path | str) -> list[BoxDims]:
    """
    Read a box file.

    Undecodable bytes become replacement characters, so such a line fails
    integer parsing and is skipped like any other malformed line.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
    """
    path = Path(path)
    with path.open(errors="replace") as f:
        boxes = parse_boxes(f)
    logger.info("Loaded %d boxes from %s", len(boxes), path)
    return boxes


def generate_boxes(
    count: int = 100,
    seed: Optional[int] = None,
    min_dim: int = 1,
    max_dim: int = 100,
) -> list[BoxDims]:
    """
    Generate random boxes for experimentation.

    Args:
        count: Number of boxes to generate
        seed: Random seed for reproducibility (default: None)
        min_dim: Smallest dimension (inclusive)
        max_dim: Largest dimension (inclusive)

    Returns:
        List of (w, l, h) integer triples

    Raises:
        ValueError: If the dimension range is empty or not positive
    """
    if min_dim <= 0 or max_dim < min_dim:
        raise ValueError(f"Invalid dimension range: [{min_dim}, {max_dim}]")

    rng = np.random.default_rng(seed)
    dims = rng.integers(min_dim, max_dim + 1, size=(count, 3))
    return [tuple(int(d) for d in row) for row in dims]


def write_boxes(path: Path | str, boxes: Iterable[BoxDims]) -> None:
    """Write boxes in the ``w l h`` line format read by :func:`load_boxes`."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        for w, l, h in boxes:
            f.write(f"{w} {l} {h}\n")


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for ``boxstack-generate``."""
    parser = argparse.ArgumentParser(description="Generate a random box file")
    parser.add_argument("output", type=Path, help="File to write")
    parser.add_argument("--count", type=int, default=100, help="Number of boxes (default: 100)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--min-dim", type=int, default=1, help="Smallest dimension (default: 1)")
    parser.add_argument("--max-dim", type=int, default=100, help="Largest dimension (default: 100)")
    args = parser.parse_args(argv)

    try:
        boxes = generate_boxes(args.count, args.seed, args.min_dim, args.max_dim)
    except ValueError as e:
        parser.error(str(e))

    write_boxes(args.output, boxes)
    print(f"Wrote {len(boxes)} boxes to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
