"""Hexadecimal writer for maze grids.

Converts a grid into one hexadecimal digit per cell and writes it, along with
the solved entry/exit pair and directions, to an output file.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from maze_mask import Coord
from mazegen import Grid


DISABLED_HEX = "F"


def cell_to_hex(grid: Grid, row: int, col: int) -> str:
    """Encode a cell's closed walls as a single hexadecimal digit.

    Each closed wall adds its bit: N=1, E=2, S=4, W=8. A wall is closed when
    the cell is not linked in that direction. Disabled cells are fully closed.
    """
    cell = grid.get(row, col)
    if cell is None:
        return DISABLED_HEX

    value = 0
    for bit, neighbor in (
        (1, cell.north),
        (2, cell.east),
        (4, cell.south),
        (8, cell.west),
    ):
        if neighbor is None or not cell.is_linked(neighbor):
            value |= bit
    return f"{value:X}"


def convert_to_hex(grid: Grid) -> List[str]:
    """Return one hex line per grid row."""
    return [
        "".join(cell_to_hex(grid, r, c) for c in range(grid.cols))
        for r in range(grid.rows)
    ]


def write_output_file(
    path: Path,
    grid: Grid,
    entry: Coord,
    exit_: Coord,
    directions: str,
) -> None:
    """Write the hex maze followed by entry, exit and directions.

    Entry and exit are given as (row, col) and written as `x,y` (col,row).
    """
    lines = convert_to_hex(grid)
    lines.append("")
    lines.append(f"{entry[1]},{entry[0]}")
    lines.append(f"{exit_[1]},{exit_[0]}")
    lines.append(directions)

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
