"""Goal-directed maze solving."""

from pathlib import Path
from typing import List, Optional, Union

import numpy as np

import render
from mazegen import CellHandle, Distances, Grid, compute_distances


class DijkstraSolver:
    """Unweighted Dijkstra (plain BFS) solver over the maze links.

    `distances` and `path` stay None until `solve` is called.
    """

    name = "Dijkstra"

    grid: Grid
    root: CellHandle
    distances: Optional[Distances]
    path: Optional[Distances]

    def __init__(self, grid: Grid, root_row: int, root_col: int) -> None:
        self.grid = grid
        self.root = CellHandle(root_row, root_col)
        grid.cell(self.root)
        self.distances = None
        self.path = None

    def solve(self, goal_row: int, goal_col: int) -> List[CellHandle]:
        """Solve from the root to the goal and return the path, root first."""

        goal = CellHandle(goal_row, goal_col)
        self.distances = compute_distances(self.grid, self.root)
        self.path = self.distances.path_to(self.grid, goal)
        return self.path.path()

    def cell_contents(self, row: int, col: int) -> str:
        """Return the base-36 distance shown inside a cell, or a blank."""

        source = self.path if self.path is not None else self.distances
        if source is None:
            return " "
        distance = source.get(CellHandle(row, col))
        if distance is None:
            return " "
        return np.base_repr(distance, base=36).lower()

    def render_ascii(self) -> str:
        return render.render_ascii(self.grid, contents=self.cell_contents)

    def save_png(self, path: Union[str, Path], cell_size: int) -> None:
        render.save_png(self.grid, path, cell_size)
