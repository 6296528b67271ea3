"""Maze generation algorithms.

Every generator carves links into an existing `Grid` and leaves adjacency
untouched. Randomness comes from a `random.Random` owned by the generator, so
a fixed seed reproduces the same maze.

    Generator             Perfect  Uniform  Bias
    Binary Tree           yes      no       north row / east column corridors
    Sidewinder            yes      no       north row corridor
    Aldous-Broder         yes      yes      none (slow)
    Wilson's              yes      yes      none
    Hunt-and-Kill         yes      no       hunt scan order
    Recursive Backtracker yes      no       long winding corridors
"""

from concurrent.futures import ThreadPoolExecutor
import logging
import random
from typing import Dict, List, Optional, Type

from maze_mask import Mask
from mazegen import Cell, CellHandle, Edge, Grid


logger = logging.getLogger(__name__)


class Generator:
    """Base class for maze generators."""

    name = "Generator"
    perfect_on_masks = True

    rng: random.Random

    def __init__(
        self,
        seed: Optional[int] = None,
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.rng = rng if rng is not None else random.Random(seed)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def run(self, grid: Grid) -> None:
        """Carve a maze into grid."""

        if grid.size() == 0:
            raise ValueError("Cannot generate a maze on a grid with no cells")
        logger.debug("Running %s on %r", self.name, grid)
        self._carve(grid)

    def _carve(self, grid: Grid) -> None:
        raise NotImplementedError

    def generate(self, rows: int, cols: int, mask: Optional[Mask] = None) -> Grid:
        """Build a fresh grid and carve a maze into it."""

        grid = Grid(rows, cols, mask=mask)
        self.run(grid)
        return grid


def _unvisited(grid: Grid, handles: List[CellHandle]) -> List[CellHandle]:
    return [h for h in handles if not grid.cell(h).has_links()]


def _visited(grid: Grid, handles: List[CellHandle]) -> List[CellHandle]:
    return [h for h in handles if grid.cell(h).has_links()]


def _require_connected(grid: Grid, name: str) -> None:
    if not grid.is_connected():
        raise ValueError(f"{name} needs a grid whose cells form one region")


class BinaryTree(Generator):
    """Link every cell to its north or east neighbor."""

    name = "Binary Tree"
    perfect_on_masks = False

    @staticmethod
    def choose_neighbor(cell: Cell, rng: random.Random) -> Optional[CellHandle]:
        neighbors = [n for n in (cell.north, cell.east) if n is not None]
        if not neighbors:
            return None
        return rng.choice(neighbors)

    def _carve(self, grid: Grid) -> None:
        links: List[Edge] = []
        for cell in grid:
            neighbor = self.choose_neighbor(cell, self.rng)
            if neighbor is not None:
                links.append((cell.handle(), neighbor))
        grid.link_cells_multi(links)


class Sidewinder(Generator):
    """Carve east-running runs, closing each with a single north link."""

    name = "Sidewinder"
    perfect_on_masks = False

    @staticmethod
    def carve_row(row: List[Cell], rng: random.Random) -> List[Edge]:
        """Return the links for one row without touching the grid."""

        links: List[Edge] = []
        run: List[Cell] = []
        for cell in row:
            run.append(cell)

            at_eastern_boundary = cell.east is None
            at_northern_boundary = cell.north is None
            should_close_out = at_eastern_boundary or (
                not at_northern_boundary and rng.randint(0, 1) == 0
            )

            if should_close_out:
                member = rng.choice(run)
                if member.north is not None:
                    links.append((member.handle(), member.north))
                run.clear()
            elif cell.east is not None:
                links.append((cell.handle(), cell.east))
        return links

    def _carve(self, grid: Grid) -> None:
        links: List[Edge] = []
        for row in grid.each_row():
            links.extend(self.carve_row(row, self.rng))
        grid.link_cells_multi(links)


class _RowParallel(Generator):
    """Fork-join over rows; workers read the grid, the caller links."""

    perfect_on_masks = False

    workers: Optional[int]

    def __init__(
        self,
        seed: Optional[int] = None,
        *,
        rng: Optional[random.Random] = None,
        workers: Optional[int] = None,
    ) -> None:
        super().__init__(seed, rng=rng)
        self.workers = workers

    def _row_links(self, row: List[Cell], rng: random.Random) -> List[Edge]:
        raise NotImplementedError

    def _carve(self, grid: Grid) -> None:
        rows = list(grid.each_row())
        # Seeds are drawn before the fork so the result is independent of
        # thread scheduling.
        rngs = [random.Random(self.rng.getrandbits(64)) for _ in rows]
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            per_row = list(pool.map(self._row_links, rows, rngs))
        grid.link_cells_multi(link for links in per_row for link in links)


class BinaryTreeParallel(_RowParallel):
    name = "Binary Tree (Parallel)"

    def _row_links(self, row: List[Cell], rng: random.Random) -> List[Edge]:
        links: List[Edge] = []
        for cell in row:
            neighbor = BinaryTree.choose_neighbor(cell, rng)
            if neighbor is not None:
                links.append((cell.handle(), neighbor))
        return links


class SidewinderParallel(_RowParallel):
    name = "Sidewinder (Parallel)"

    def _row_links(self, row: List[Cell], rng: random.Random) -> List[Edge]:
        return Sidewinder.carve_row(row, rng)


class AldousBroder(Generator):
    """Random walk, linking whenever it steps into a fresh cell."""

    name = "Aldous-Broder"

    def _carve(self, grid: Grid) -> None:
        _require_connected(grid, self.name)

        current = grid.get_random(self.rng).handle()
        unvisited = grid.size() - 1

        while unvisited > 0:
            neighbor = grid.cell(current).random_neighbor(self.rng)
            if not grid.cell(neighbor).has_links():
                grid.link_cells(current, neighbor)
                unvisited -= 1
            current = neighbor


class Wilsons(Generator):
    """Loop-erased random walks from unvisited cells into the visited tree."""

    name = "Wilson's Algorithm"

    def _carve(self, grid: Grid) -> None:
        _require_connected(grid, self.name)

        unvisited: List[CellHandle] = [cell.handle() for cell in grid]
        position: Dict[CellHandle, int] = {h: i for i, h in enumerate(unvisited)}

        def visit(handle: CellHandle) -> None:
            # swap-remove
            i = position.pop(handle)
            last = unvisited.pop()
            if last != handle:
                unvisited[i] = last
                position[last] = i

        visit(self.rng.choice(unvisited))

        while unvisited:
            current = self.rng.choice(unvisited)
            path: List[CellHandle] = [current]
            in_path: Dict[CellHandle, int] = {current: 0}

            while current in position:
                current = grid.cell(current).random_neighbor(self.rng)
                if current in in_path:
                    cut = in_path[current] + 1
                    for erased in path[cut:]:
                        del in_path[erased]
                    del path[cut:]
                else:
                    in_path[current] = len(path)
                    path.append(current)

            for a, b in zip(path, path[1:]):
                grid.link_cells(a, b)
                visit(a)


class HuntAndKill(Generator):
    """Random walk until stuck, then hunt for a fresh cell beside the maze."""

    name = "Hunt-and-Kill"

    def _hunt(self, grid: Grid) -> Optional[CellHandle]:
        for cell in grid:
            if cell.has_links():
                continue
            visited = _visited(grid, cell.neighbors())
            if visited:
                grid.link_cells(cell.handle(), self.rng.choice(visited))
                return cell.handle()
        return None

    def _carve(self, grid: Grid) -> None:
        current: Optional[CellHandle] = grid.get_random(self.rng).handle()

        while current is not None:
            unvisited = _unvisited(grid, grid.cell(current).neighbors())
            if unvisited:
                neighbor = self.rng.choice(unvisited)
                grid.link_cells(current, neighbor)
                current = neighbor
            else:
                current = self._hunt(grid)


class RecursiveBacktracker(Generator):
    """Depth-first carving with an explicit stack."""

    name = "Recursive Backtracker"

    def _carve(self, grid: Grid) -> None:
        stack: List[CellHandle] = [grid.get_random(self.rng).handle()]

        while stack:
            current = stack[-1]
            unvisited = _unvisited(grid, grid.cell(current).neighbors())
            if not unvisited:
                stack.pop()
                continue
            neighbor = self.rng.choice(unvisited)
            grid.link_cells(current, neighbor)
            stack.append(neighbor)


GENERATORS: Dict[str, Type[Generator]] = {
    "binary_tree": BinaryTree,
    "binary_tree_parallel": BinaryTreeParallel,
    "sidewinder": Sidewinder,
    "sidewinder_parallel": SidewinderParallel,
    "aldous_broder": AldousBroder,
    "wilsons": Wilsons,
    "hunt_and_kill": HuntAndKill,
    "recursive_backtracker": RecursiveBacktracker,
}

SEQUENTIAL_GENERATORS: List[str] = [
    "binary_tree",
    "sidewinder",
    "aldous_broder",
    "wilsons",
    "hunt_and_kill",
    "recursive_backtracker",
]


def get_generator(name: str, seed: Optional[int] = None) -> Generator:
    """Instantiate a generator by registry name."""

    key = name.strip().lower().replace("-", "_")
    try:
        cls = GENERATORS[key]
    except KeyError:
        known = ", ".join(sorted(GENERATORS))
        raise KeyError(f"Unknown generator {name!r} (known: {known})") from None
    return cls(seed)
