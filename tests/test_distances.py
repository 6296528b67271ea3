import pytest

from generators import RecursiveBacktracker, Wilsons
from mazegen import CellHandle, Grid, compute_distances
from solvers import DijkstraSolver


def corridor(length: int) -> Grid:
    grid = Grid(1, length)
    for c in range(length - 1):
        grid.link_cells(CellHandle(0, c), CellHandle(0, c + 1))
    return grid


def test_corridor_distances():
    grid = corridor(4)
    distances = compute_distances(grid, CellHandle(0, 0))
    assert [distances.get(CellHandle(0, c)) for c in range(4)] == [0, 1, 2, 3]
    assert distances.max_distance() == ((0, 3), 3)


def test_distances_follow_links_not_adjacency():
    grid = Grid(2, 2)
    distances = compute_distances(grid, CellHandle(0, 0))
    assert len(distances) == 1
    assert CellHandle(1, 1) not in distances
    assert distances.get(CellHandle(1, 1)) is None


@pytest.mark.parametrize("seed", range(4))
def test_every_cell_has_one_closer_neighbor(seed):
    grid = Wilsons(seed).generate(9, 11)
    root = CellHandle(4, 5)
    distances = compute_distances(grid, root)

    assert distances.get(root) == 0
    assert len(distances) == grid.size()
    for cell in grid:
        h = cell.handle()
        if h == root:
            continue
        closer = [
            n for n in cell.links() if distances.get(n) < distances.get(h)
        ]
        assert len(closer) == 1
        assert distances.get(h) == distances.get(closer[0]) + 1


@pytest.mark.parametrize("seed", range(4))
def test_longest_path_beats_any_single_sweep(seed):
    grid = RecursiveBacktracker(seed).generate(10, 10)
    start, goal = grid.longest_path()
    diameter = compute_distances(grid, start).get(goal)
    for cell in grid:
        _, farthest = compute_distances(grid, cell.handle()).max_distance()
        assert diameter >= farthest


def test_path_to_follows_links_back_to_root():
    grid = RecursiveBacktracker(3).generate(8, 8)
    root, goal = CellHandle(0, 0), CellHandle(7, 7)
    distances = compute_distances(grid, root)
    path = distances.path_to(grid, goal).path()

    assert path[0] == root
    assert path[-1] == goal
    assert len(path) == distances.get(goal) + 1
    for a, b in zip(path, path[1:]):
        assert grid.cell(a).is_linked(b)


def test_path_to_unreachable_goal():
    grid = Grid(1, 2)
    distances = compute_distances(grid, CellHandle(0, 0))
    with pytest.raises(ValueError):
        distances.path_to(grid, CellHandle(0, 1))


def test_solver_on_corridor():
    solver = DijkstraSolver(corridor(4), 0, 0)
    assert solver.cell_contents(0, 2) == " "

    path = solver.solve(0, 3)

    assert path == [(0, 0), (0, 1), (0, 2), (0, 3)]
    assert solver.cell_contents(0, 2) == "2"


def test_solver_marks_only_the_path():
    grid = Grid(2, 2)
    grid.link_cells(CellHandle(0, 0), CellHandle(0, 1))
    grid.link_cells(CellHandle(0, 0), CellHandle(1, 0))
    grid.link_cells(CellHandle(0, 1), CellHandle(1, 1))
    solver = DijkstraSolver(grid, 0, 0)

    solver.solve(1, 1)

    assert solver.distances.get(CellHandle(1, 0)) == 1
    assert solver.cell_contents(1, 0) == " "
    assert solver.cell_contents(1, 1) == "2"


def test_solver_uses_base36():
    solver = DijkstraSolver(corridor(40), 0, 0)
    solver.solve(0, 39)
    assert solver.cell_contents(0, 35) == "z"
    assert solver.cell_contents(0, 36) == "10"


def test_solver_rejects_disabled_root():
    with pytest.raises(ValueError):
        DijkstraSolver(Grid(2, 2), 5, 5)


def test_solver_renders_distances():
    solver = DijkstraSolver(corridor(3), 0, 0)
    solver.solve(0, 2)
    assert solver.render_ascii().splitlines()[1] == "| 0   1   2 |"
