import logging
import sys
import time
from pathlib import Path
from typing import List, Sequence

from analysis import format_report, run_analysis
from generators import Generator, get_generator
from hexa_writer import write_output_file
from maze_mask import Mask, MaskError
from mazegen import CellHandle, Grid, compute_distances
from parsing import Config, ConfigError, read_config
from solvers import DijkstraSolver


logger = logging.getLogger(__name__)


def init_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def validate_maze(grid: Grid) -> None:
    """Validate that the grid holds a perfect maze.

    Checks:
    - Links only join adjacent cells and are symmetric.
    - Every enabled cell is reachable from the first one.
    - There are no loops: edges == cells - 1.
    """

    if grid.size() == 0:
        raise RuntimeError("Invalid maze: empty grid")

    for cell in grid:
        h = cell.handle()
        neighbors = cell.neighbors()
        for other in cell.links():
            if other not in neighbors:
                raise RuntimeError(
                    f"Invalid maze: {h} is linked to non-adjacent {other}"
                )
            if not grid.cell(other).is_linked(h):
                raise RuntimeError(
                    f"Invalid maze: link {h} -> {other} is one-sided"
                )

    root = next(iter(grid)).handle()
    if len(compute_distances(grid, root)) != grid.size():
        raise RuntimeError("Invalid maze: disconnected cells exist")

    # A perfect maze over reachable cells is a tree: edges == nodes - 1.
    if len(grid.edges()) != grid.size() - 1:
        raise RuntimeError("Invalid maze: maze contains loops")


def should_validate(generator: Generator, grid: Grid) -> bool:
    """Return True if the generator is guaranteed a perfect maze on grid.

    Binary Tree and Sidewinder only look north and east, so a mask can leave
    them with a forest. The walkers need the enabled cells to form one region.
    """

    if grid.mask is None:
        return True
    return generator.perfect_on_masks and grid.is_connected()


def path_to_directions(path: Sequence[CellHandle]) -> str:
    """Convert a coordinate path into N/E/S/W directions."""

    if len(path) < 2:
        return ""

    out: List[str] = []
    for (r0, c0), (r1, c1) in zip(path, path[1:]):
        dr = r1 - r0
        dc = c1 - c0
        if dr == -1 and dc == 0:
            out.append("N")
        elif dr == 1 and dc == 0:
            out.append("S")
        elif dr == 0 and dc == 1:
            out.append("E")
        elif dr == 0 and dc == -1:
            out.append("W")
        else:
            raise ValueError("Non-adjacent steps in path")
    return "".join(out)


def build_grid(config: Config) -> Grid:
    """Create the (optionally masked) grid described by the config."""

    if config.mask is not None:
        mask = Mask.load(config.mask)
        if config.rows is not None and config.rows != mask.rows:
            raise ConfigError(f"ROWS={config.rows} but mask has {mask.rows} rows")
        if config.cols is not None and config.cols != mask.cols:
            raise ConfigError(f"COLS={config.cols} but mask has {mask.cols} cols")
        return Grid.from_mask(mask)

    if config.rows is None or config.cols is None:
        raise ConfigError("ROWS and COLS are required without a MASK")
    return Grid(config.rows, config.cols)


def run_analysis_mode(config: Config) -> int:
    if config.rows is None or config.cols is None:
        raise ConfigError("Analysis needs ROWS and COLS")
    averages = run_analysis(config.rows, config.cols, config.tries, seed=config.seed)
    print()
    for line in format_report(config.rows, config.cols, averages):
        print(line)
    return 0


def run(config: Config) -> int:
    """Generate the maze, solve it, then print and write the outputs."""

    if config.is_analysis:
        return run_analysis_mode(config)

    generator = get_generator(config.generator, seed=config.seed)
    grid = build_grid(config)
    if grid.size() == 0:
        raise RuntimeError("Mask disables every cell")

    logger.info(
        "Generating %dx%d maze (mask=%s) ...",
        grid.rows,
        grid.cols,
        config.mask,
    )
    logger.info("Running maze generator %s ...", generator.name)
    started = time.perf_counter()
    generator.run(grid)
    logger.info("%.2fms", (time.perf_counter() - started) * 1000.0)

    logger.info("Dead ends: %d", len(grid.get_dead_ends()))

    if config.entry is not None and config.exit is not None:
        for name, point in (("ENTRY", config.entry), ("EXIT", config.exit)):
            if grid.get(*point) is None:
                raise RuntimeError(f"{name} is not an enabled cell")
        root = CellHandle(*config.entry)
        goal = CellHandle(*config.exit)
    else:
        logger.info("Finding longest path ...")
        started = time.perf_counter()
        root, goal = grid.longest_path()
        logger.info("%.2fms", (time.perf_counter() - started) * 1000.0)

    solver = DijkstraSolver(grid, root.row, root.col)
    logger.info(
        "Running solver %s from %s to %s ...",
        solver.name,
        tuple(root),
        tuple(goal),
    )
    started = time.perf_counter()
    try:
        path = solver.solve(goal.row, goal.col)
    except ValueError as exc:
        raise RuntimeError(f"No valid path from ENTRY to EXIT: {exc}") from exc
    logger.info("%.2fms", (time.perf_counter() - started) * 1000.0)

    if should_validate(generator, grid):
        validate_maze(grid)

    if config.render:
        print(f"\n{solver.render_ascii()}\n")

    if config.output_file is not None:
        logger.info("Saving to %s ...", config.output_file)
        write_output_file(
            config.output_file,
            grid,
            root,
            goal,
            path_to_directions(path),
        )

    if config.png_file is not None:
        logger.info("Saving to %s ...", config.png_file)
        solver.save_png(config.png_file, config.cell_size)

    return 0


def main(argv: Sequence[str]) -> int:
    """CLI entrypoint."""

    if len(argv) != 2:
        print("Usage: python3 maze_runner.py config.txt", file=sys.stderr)
        return 2

    init_logging()
    try:
        config = read_config(Path(argv[1]))
        return run(config)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130
    except (ConfigError, MaskError, OSError, RuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:
        print(f"Unexpected error: "
              f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1


def console_main() -> int:
    return main(sys.argv)


if __name__ == "__main__":
    raise SystemExit(console_main())
