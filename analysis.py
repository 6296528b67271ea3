"""Dead-end comparison across generators.

The share of dead ends is a quick way to see each algorithm's texture:
Recursive Backtracker produces few, long corridors while Aldous-Broder and
Wilson's sit in the middle and Sidewinder/Binary Tree produce many short ones.
"""

import logging
import random
from typing import List, Optional, Tuple

from generators import SEQUENTIAL_GENERATORS, get_generator


logger = logging.getLogger(__name__)


def run_analysis(
    rows: int,
    cols: int,
    tries: int,
    seed: Optional[int] = None,
) -> List[Tuple[str, float]]:
    """Return (generator name, average dead ends), most dead ends first."""

    if tries <= 0:
        raise ValueError("tries must be > 0")

    seeds = random.Random(seed)
    averages: List[Tuple[str, float]] = []
    for key in SEQUENTIAL_GENERATORS:
        generator = get_generator(key, seed=seeds.getrandbits(32))
        logger.info("Running generator %s ...", generator.name)

        total = 0
        for _ in range(tries):
            grid = generator.generate(rows, cols)
            total += len(grid.get_dead_ends())
        averages.append((generator.name, total / tries))

    averages.sort(key=lambda item: item[1], reverse=True)
    return averages


def format_report(rows: int, cols: int, averages: List[Tuple[str, float]]) -> List[str]:
    """Format the averages as report lines."""

    size = rows * cols
    lines = [f"Average dead-ends per {rows}x{cols} maze ({size} cells):"]
    for name, average in averages:
        percentage = average * 100.0 / size
        lines.append(
            f"{name:>22}: {int(average):3} / {size} ({int(percentage)}%)"
        )
    return lines
