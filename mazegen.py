"""Reusable maze grid module.

This file is designed to be reused by every generator and solver.

Basic usage:

    from generators import RecursiveBacktracker
    from mazegen import Grid, compute_distances

    grid = Grid(15, 20)
    RecursiveBacktracker(seed=42).run(grid)
    root, goal = grid.longest_path()
    path = compute_distances(grid, root).path_to(grid, goal)

The grid owns a 2D list of optional `Cell` instances (`grid.get(row, col)`).
Cells refer to each other only through `CellHandle` coordinates, which are
resolved through the grid. Each cell has a fixed set of adjacent cells (N/S/E/W)
and a mutable set of linked cells: a link is a carved passage.
"""

from collections import deque
import random
from typing import (
    Deque,
    Dict,
    Iterable,
    Iterator,
    List,
    NamedTuple,
    Optional,
    Set,
    Tuple,
)

from maze_mask import Mask


class CellHandle(NamedTuple):
    """Coordinate used as the only reference between cells."""

    row: int
    col: int


Edge = Tuple[CellHandle, CellHandle]


class Cell:
    """A single grid position."""

    row: int
    col: int
    north: Optional[CellHandle]
    south: Optional[CellHandle]
    east: Optional[CellHandle]
    west: Optional[CellHandle]
    _links: Set[CellHandle]

    def __init__(self, row: int, col: int) -> None:
        self.row = row
        self.col = col
        self.north = None
        self.south = None
        self.east = None
        self.west = None
        self._links = set()

    def __repr__(self) -> str:
        return f"Cell({self.row}, {self.col}, links={len(self._links)})"

    def handle(self) -> CellHandle:
        return CellHandle(self.row, self.col)

    def neighbors(self) -> List[CellHandle]:
        """Return the adjacent cells in N, S, E, W order."""

        return [
            n
            for n in (self.north, self.south, self.east, self.west)
            if n is not None
        ]

    def is_orphaned(self) -> bool:
        """Return True if the cell has no adjacent cell at all."""

        return (
            self.north is None
            and self.south is None
            and self.east is None
            and self.west is None
        )

    def random_neighbor(self, rng: random.Random) -> CellHandle:
        neighbors = self.neighbors()
        if not neighbors:
            raise ValueError(f"Cell ({self.row}, {self.col}) is orphaned")
        return rng.choice(neighbors)

    def links(self) -> List[CellHandle]:
        return sorted(self._links)

    def is_linked(self, handle: CellHandle) -> bool:
        return handle in self._links

    def has_links(self) -> bool:
        return bool(self._links)

    def link_count(self) -> int:
        return len(self._links)

    # One-sided updates; Grid keeps both directions in sync.
    def _link(self, handle: CellHandle) -> None:
        self._links.add(handle)

    def _unlink(self, handle: CellHandle) -> None:
        self._links.discard(handle)


class Grid:
    """Rectangular (optionally masked) lattice of cells.

    Adjacency is wired once at construction. Only link sets change afterwards,
    apart from explicit `orphan` calls.
    """

    rows: int
    cols: int
    mask: Optional[Mask]
    _cells: List[List[Optional[Cell]]]
    _enabled: List[CellHandle]

    def __init__(self, rows: int, cols: int, mask: Optional[Mask] = None) -> None:
        if rows <= 0 or cols <= 0:
            raise ValueError("Grid rows and cols must be > 0")
        if mask is not None and (mask.rows != rows or mask.cols != cols):
            raise ValueError(
                f"Mask is {mask.rows}x{mask.cols}, grid is {rows}x{cols}"
            )

        self.rows = rows
        self.cols = cols
        self.mask = mask
        self._cells = [
            [
                Cell(r, c) if mask is None or mask.get(r, c) else None
                for c in range(cols)
            ]
            for r in range(rows)
        ]
        self._enabled = [
            CellHandle(r, c)
            for r in range(rows)
            for c in range(cols)
            if self._cells[r][c] is not None
        ]
        self._configure_cells()

    @classmethod
    def from_mask(cls, mask: Mask) -> "Grid":
        return cls(mask.rows, mask.cols, mask=mask)

    def _handle_at(self, row: int, col: int) -> Optional[CellHandle]:
        cell = self.get(row, col)
        return cell.handle() if cell is not None else None

    def _configure_cells(self) -> None:
        for cell in self:
            r, c = cell.row, cell.col
            cell.north = self._handle_at(r - 1, c)
            cell.south = self._handle_at(r + 1, c)
            cell.east = self._handle_at(r, c + 1)
            cell.west = self._handle_at(r, c - 1)

    def __repr__(self) -> str:
        return f"Grid(rows={self.rows}, cols={self.cols}, cells={len(self)})"

    def __len__(self) -> int:
        return len(self._enabled)

    def __iter__(self) -> Iterator[Cell]:
        """Yield every enabled cell once, in row-major order."""

        for row in self._cells:
            for cell in row:
                if cell is not None:
                    yield cell

    def size(self) -> int:
        """Return the number of enabled cells."""

        return len(self._enabled)

    def each_row(self) -> Iterator[List[Cell]]:
        """Yield the enabled cells of each row, top to bottom."""

        for row in self._cells:
            yield [cell for cell in row if cell is not None]

    def get(self, row: int, col: int) -> Optional[Cell]:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            return None
        return self._cells[row][col]

    def cell(self, handle: CellHandle) -> Cell:
        """Resolve a handle, failing on disabled or out-of-range coordinates."""

        cell = self.get(handle.row, handle.col)
        if cell is None:
            raise ValueError(f"No enabled cell at ({handle.row}, {handle.col})")
        return cell

    def get_random(self, rng: random.Random) -> Cell:
        if not self._enabled:
            raise ValueError("Grid has no enabled cells")
        return self.cell(rng.choice(self._enabled))

    def _check_pair(self, a: CellHandle, b: CellHandle) -> Tuple[Cell, Cell]:
        first = self.cell(a)
        second = self.cell(b)
        if first.is_orphaned() or second.is_orphaned():
            raise ValueError(f"Cannot link orphaned cells {a} and {b}")
        if b not in first.neighbors():
            raise ValueError(f"Cells {a} and {b} are not adjacent")
        return first, second

    def link_cells(self, a: CellHandle, b: CellHandle) -> None:
        first, second = self._check_pair(a, b)
        first._link(b)
        second._link(a)

    def unlink_cells(self, a: CellHandle, b: CellHandle) -> None:
        first, second = self._check_pair(a, b)
        first._unlink(b)
        second._unlink(a)

    def link_cells_multi(self, pairs: Iterable[Edge]) -> None:
        for a, b in pairs:
            self.link_cells(a, b)

    def edges(self) -> Set[Edge]:
        """Return every link once, as an ordered (smaller, larger) pair."""

        out: Set[Edge] = set()
        for cell in self:
            h = cell.handle()
            for other in cell.links():
                out.add((h, other) if h < other else (other, h))
        return out

    def is_connected(self) -> bool:
        """Return True if all enabled cells form one adjacency region."""

        if not self._enabled:
            return True
        start = self._enabled[0]
        seen: Set[CellHandle] = {start}
        q: Deque[CellHandle] = deque([start])
        while q:
            cur = q.popleft()
            for nxt in self.cell(cur).neighbors():
                if nxt not in seen:
                    seen.add(nxt)
                    q.append(nxt)
        return len(seen) == len(self._enabled)

    def get_dead_ends(self) -> List[Cell]:
        """Return the cells with exactly one link."""

        return [cell for cell in self if cell.link_count() == 1]

    def longest_path(self) -> Tuple[CellHandle, CellHandle]:
        """Return the endpoints of the longest passage in the maze.

        Two sweeps: BFS from an arbitrary cell to its farthest cell, then BFS
        again from there. On a perfect maze this finds the tree diameter.
        """

        if not self._enabled:
            raise ValueError("Grid has no enabled cells")
        start, _ = compute_distances(self, self._enabled[0]).max_distance()
        goal, _ = compute_distances(self, start).max_distance()
        return start, goal

    def orphan(self, row: int, col: int) -> None:
        """Remove an enabled cell from the grid after construction.

        Links and adjacency are cleared in both directions, and the mask (if
        any) is updated.
        """

        cell = self.get(row, col)
        if cell is None:
            raise ValueError(f"No enabled cell at ({row}, {col})")
        h = cell.handle()

        for other in cell.links():
            self.cell(other)._unlink(h)
            cell._unlink(other)

        for other in cell.neighbors():
            neighbor = self.cell(other)
            if neighbor.north == h:
                neighbor.north = None
            if neighbor.south == h:
                neighbor.south = None
            if neighbor.east == h:
                neighbor.east = None
            if neighbor.west == h:
                neighbor.west = None
        cell.north = cell.south = cell.east = cell.west = None

        self._cells[row][col] = None
        self._enabled.remove(h)
        if self.mask is not None:
            self.mask.set(row, col, False)


class Distances:
    """BFS distances from a root cell, one entry per reachable cell."""

    root: CellHandle
    _cells: Dict[CellHandle, int]

    def __init__(self, root: CellHandle) -> None:
        self.root = root
        self._cells = {root: 0}

    def __contains__(self, handle: object) -> bool:
        return handle in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def get(self, handle: CellHandle) -> Optional[int]:
        return self._cells.get(handle)

    def set(self, handle: CellHandle, distance: int) -> None:
        self._cells[handle] = distance

    def cells(self) -> List[CellHandle]:
        return list(self._cells)

    def max_distance(self) -> Tuple[CellHandle, int]:
        """Return the farthest cell and its distance (root on ties at 0)."""

        max_cell = self.root
        max_dist = 0
        for handle, dist in self._cells.items():
            if dist > max_dist:
                max_cell = handle
                max_dist = dist
        return max_cell, max_dist

    def path_to(self, grid: Grid, goal: CellHandle) -> "Distances":
        """Return breadcrumbs for the single path from root to goal.

        Walks back from the goal, each step moving to the linked neighbor
        that is closer to the root.
        """

        current_dist = self.get(goal)
        if current_dist is None:
            raise ValueError(f"{goal} is not reachable from {self.root}")

        breadcrumbs = Distances(self.root)
        breadcrumbs.set(goal, current_dist)

        current = goal
        while current != self.root:
            for neighbor in grid.cell(current).links():
                neighbor_dist = self.get(neighbor)
                if neighbor_dist is not None and neighbor_dist < current_dist:
                    breadcrumbs.set(neighbor, neighbor_dist)
                    current = neighbor
                    current_dist = neighbor_dist
                    break
            else:
                raise RuntimeError(f"Distances are inconsistent at {current}")

        return breadcrumbs

    def path(self) -> List[CellHandle]:
        """Return the recorded cells ordered by distance from the root."""

        return sorted(self._cells, key=lambda h: self._cells[h])


def compute_distances(grid: Grid, root: CellHandle) -> Distances:
    """Compute the link distance from root to every reachable cell."""

    grid.cell(root)
    distances = Distances(root)
    frontier: List[CellHandle] = [root]

    while frontier:
        new_frontier: List[CellHandle] = []
        for handle in frontier:
            next_dist = distances._cells[handle] + 1
            for linked in grid.cell(handle).links():
                if linked in distances:
                    continue
                distances.set(linked, next_dist)
                new_frontier.append(linked)
        frontier = new_frontier

    return distances
