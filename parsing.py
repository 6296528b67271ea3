"""Parsing module for maze runner configuration files.

The file is a list of KEY=VALUE lines; `#` starts a comment and blank lines
are ignored. Keys are case-insensitive:

    GENERATOR=wilsons     # registry name, or "analysis"
    ROWS=15               # required unless MASK is given
    COLS=20
    MASK=shapes/heart.txt # text (.txt/.mask) or image mask
    SEED=42
    ENTRY=0,0             # x,y; ENTRY and EXIT go together
    EXIT=19,14            # default: longest path endpoints
    OUTPUT_FILE=maze.txt  # hex output
    PNG_FILE=maze.png
    CELL_SIZE=25
    RENDER=True           # print the ASCII maze
    TRIES=100             # analysis runs per generator
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from generators import GENERATORS


Coord = Tuple[int, int]  # (row, col)

ANALYSIS = "analysis"

ACCEPTABLE_KEYS = {
    "GENERATOR",
    "ROWS",
    "COLS",
    "MASK",
    "SEED",
    "ENTRY",
    "EXIT",
    "OUTPUT_FILE",
    "PNG_FILE",
    "CELL_SIZE",
    "RENDER",
    "TRIES",
}

DEFAULT_CELL_SIZE = 25
DEFAULT_TRIES = 100


@dataclass(frozen=True)
class Config:
    """Parsed configuration for a maze run."""

    generator: str
    rows: Optional[int]
    cols: Optional[int]
    mask: Optional[Path]
    seed: Optional[int]
    entry: Optional[Coord]
    exit: Optional[Coord]
    output_file: Optional[Path]
    png_file: Optional[Path]
    cell_size: int
    render: bool
    tries: int

    @property
    def is_analysis(self) -> bool:
        return self.generator == ANALYSIS


class ConfigError(ValueError):
    """Configuration and validation error."""

    pass


def parse_bool(value: str, *, key: str) -> bool:
    """Parse a boolean from a config value."""

    v = value.strip().lower()
    if v in {"true", "1", "yes", "y", "on"}:
        return True
    if v in {"false", "0", "no", "n", "off"}:
        return False
    raise ConfigError(f"Invalid boolean for {key}: {value!r}")


def parse_int(value: str, *, key: str, positive: bool = False) -> int:
    """Parse an integer from a config value."""

    try:
        number = int(value.strip())
    except ValueError as exc:
        raise ConfigError(f"Invalid integer for {key}: {value!r}") from exc
    if positive and number <= 0:
        raise ConfigError(f"{key} must be greater than 0")
    return number


def parse_coord(value: str, *, key: str) -> Coord:
    """Parse coordinates as (x,y) and return internal (row,col)."""

    parts = [p.strip() for p in value.split(",")]
    if len(parts) != 2:
        raise ConfigError(
            f"Invalid coordinate for {key}: {value!r} (expected 'x,y')"
        )
    x = parse_int(parts[0], key=key)
    y = parse_int(parts[1], key=key)
    return (y, x)


def parse_generator(value: str) -> str:
    name = value.strip().lower().replace("-", "_")
    if name != ANALYSIS and name not in GENERATORS:
        known = ", ".join(sorted(GENERATORS) + [ANALYSIS])
        raise ConfigError(f"Unknown GENERATOR {value!r} (known: {known})")
    return name


def read_raw(path: Path) -> Dict[str, str]:
    """Read KEY=VALUE pairs, rejecting bad syntax and unknown keys."""

    raw: Dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                stripped = line.split("#", 1)[0].strip()
                if not stripped:
                    continue
                if "=" not in stripped:
                    raise ConfigError(
                        f"Line {line_no}: Invalid syntax"
                        f" (expected KEY=VALUE)\n→ {line.rstrip()}"
                    )
                k, v = stripped.split("=", 1)
                key = k.strip().upper()
                if key not in ACCEPTABLE_KEYS:
                    raise ConfigError(
                        f"Line {line_no}: Unknown configuration "
                        f"key '{key}'\n→ {line.rstrip()}"
                    )
                raw[key] = v.strip()
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except OSError as exc:
        raise ConfigError(f"Could not read"
                          f" config file: {path}: {exc}") from exc
    return raw


def read_config(path: Path) -> Config:
    """Read and validate the configuration file."""

    raw = read_raw(path)

    if "GENERATOR" not in raw:
        raise ConfigError("Missing required config key: GENERATOR")
    generator = parse_generator(raw["GENERATOR"])

    mask = Path(raw["MASK"]).expanduser() if raw.get("MASK") else None
    rows: Optional[int] = None
    cols: Optional[int] = None
    if mask is None:
        missing = sorted({"ROWS", "COLS"} - set(raw))
        if missing:
            raise ConfigError(
                f"Missing required config keys: {', '.join(missing)}"
            )
    if "ROWS" in raw:
        rows = parse_int(raw["ROWS"], key="ROWS", positive=True)
    if "COLS" in raw:
        cols = parse_int(raw["COLS"], key="COLS", positive=True)

    seed = parse_int(raw["SEED"], key="SEED") if "SEED" in raw else None

    if ("ENTRY" in raw) != ("EXIT" in raw):
        raise ConfigError("ENTRY and EXIT must be given together")
    entry = parse_coord(raw["ENTRY"], key="ENTRY") if "ENTRY" in raw else None
    exit_ = parse_coord(raw["EXIT"], key="EXIT") if "EXIT" in raw else None
    if rows is not None and cols is not None:
        for name, point in (("ENTRY", entry), ("EXIT", exit_)):
            if point is not None and not (
                0 <= point[0] < rows and 0 <= point[1] < cols
            ):
                raise ConfigError(
                    f"{name} coordinates out of bounds "
                    f"(0 ≤ x < COLS, 0 ≤ y < ROWS)"
                )

    output_file = (
        Path(raw["OUTPUT_FILE"]).expanduser() if raw.get("OUTPUT_FILE") else None
    )
    png_file = Path(raw["PNG_FILE"]).expanduser() if raw.get("PNG_FILE") else None

    cell_size = DEFAULT_CELL_SIZE
    if "CELL_SIZE" in raw:
        cell_size = parse_int(raw["CELL_SIZE"], key="CELL_SIZE", positive=True)
    render = parse_bool(raw.get("RENDER", "True"), key="RENDER")
    tries = DEFAULT_TRIES
    if "TRIES" in raw:
        tries = parse_int(raw["TRIES"], key="TRIES", positive=True)

    return Config(
        generator=generator,
        rows=rows,
        cols=cols,
        mask=mask,
        seed=seed,
        entry=entry,
        exit=exit_,
        output_file=output_file,
        png_file=png_file,
        cell_size=cell_size,
        render=render,
        tries=tries,
    )
