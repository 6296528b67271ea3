"""Text and image rendering of a grid.

Walls are drawn wherever two cells are not linked. Disabled (masked) cells
are drawn as solid blocks.
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

import numpy as np
from PIL import Image

from maze_mask import Coord
from mazegen import Cell, Grid


WALL_CHAR = "█"

BACKGROUND = (255, 255, 255, 255)
WALL_COLOR = (0, 0, 0, 255)
DISABLED_COLOR = (128, 128, 128, 255)

Contents = Callable[[int, int], str]


def _open_east(cell: Cell) -> bool:
    return cell.east is not None and cell.is_linked(cell.east)


def _open_south(cell: Cell) -> bool:
    return cell.south is not None and cell.is_linked(cell.south)


def render_ascii(grid: Grid, contents: Optional[Contents] = None) -> str:
    """Render the maze with `+---+` box drawing.

    `contents(row, col)` supplies the text shown inside each enabled cell.
    """

    lines: List[str] = ["+" + "---+" * grid.cols]
    for r in range(grid.rows):
        top = "|"
        bottom = "+"
        for c in range(grid.cols):
            cell = grid.get(r, c)
            if cell is None:
                top += "###|"
                bottom += "---+"
                continue
            text = contents(r, c) if contents is not None else " "
            body = text[-3:].center(3)
            top += body + (" " if _open_east(cell) else "|")
            bottom += ("   " if _open_south(cell) else "---") + "+"
        lines.append(top)
        lines.append(bottom)
    return "\n".join(lines)


def render_block(
    grid: Grid,
    *,
    marks: Optional[Dict[Coord, str]] = None,
) -> List[str]:
    """Render the maze as block characters for terminal display."""

    marks = marks or {}
    out_h = 2 * grid.rows + 1
    out_w = 2 * grid.cols + 1
    canvas: List[List[str]] = [
        [WALL_CHAR for _ in range(out_w)]
        for _ in range(out_h)
    ]

    for cell in grid:
        cx = 2 * cell.row + 1
        cy = 2 * cell.col + 1
        canvas[cx][cy] = " "

        # carve passages; west and north are carved by the other cell
        if _open_south(cell):
            canvas[cx + 1][cy] = " "
        if _open_east(cell):
            canvas[cx][cy + 1] = " "

        m = marks.get((cell.row, cell.col))
        if m is not None and len(m) == 1:
            canvas[cx][cy] = m

    return ["".join(row) for row in canvas]


def render_pixels(grid: Grid, cell_size: int) -> Tuple[int, int, bytes]:
    """Render the maze into an RGBA buffer.

    Returns (width, height, data) with 4 bytes per pixel, row-major.
    """

    if cell_size <= 0:
        raise ValueError("cell_size must be > 0")

    width = grid.cols * cell_size + 1
    height = grid.rows * cell_size + 1
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = BACKGROUND

    for r in range(grid.rows):
        for c in range(grid.cols):
            if grid.get(r, c) is None:
                y1, x1 = r * cell_size, c * cell_size
                pixels[y1:y1 + cell_size + 1, x1:x1 + cell_size + 1] = DISABLED_COLOR

    for cell in grid:
        x1 = cell.col * cell_size
        y1 = cell.row * cell_size
        x2 = x1 + cell_size
        y2 = y1 + cell_size

        if cell.north is None:
            pixels[y1, x1:x2 + 1] = WALL_COLOR
        if cell.west is None:
            pixels[y1:y2 + 1, x1] = WALL_COLOR
        if not _open_east(cell):
            pixels[y1:y2 + 1, x2] = WALL_COLOR
        if not _open_south(cell):
            pixels[y2, x1:x2 + 1] = WALL_COLOR

    return width, height, pixels.tobytes()


def save_png(grid: Grid, path: Union[str, Path], cell_size: int) -> None:
    """Render the maze and save it as a PNG file."""

    width, height, data = render_pixels(grid, cell_size)
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    Image.frombytes("RGBA", (width, height), data).save(out)
