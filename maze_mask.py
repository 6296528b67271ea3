"""Cell masks for non-rectangular mazes.

A mask is a flat, row-major enable/disable map over ``rows * cols``
coordinates. It is built once (blank, from a text pattern or from an image)
and handed to :class:`mazegen.Grid`, which only creates cells where the mask
is enabled.

Text format::

    # lines starting with "#" and empty lines are ignored
    ..X..
    .XXX.
    ..X..

``x``/``X`` disables a cell, any other character enables it.
"""

from pathlib import Path
import random
from typing import List, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError


Coord = Tuple[int, int]  # (row, col)

PathLike = Union[str, Path]

DISABLED_CHARS = ("x", "X")
TEXT_SUFFIXES = ("", ".txt", ".mask")


class MaskError(ValueError):
    """Malformed mask file or image."""

    pass


class Mask:
    """Enable/disable layer over grid coordinates."""

    rows: int
    cols: int
    _bits: List[bool]

    def __init__(self, rows: int, cols: int) -> None:
        if rows <= 0 or cols <= 0:
            raise ValueError("Mask rows and cols must be > 0")
        self.rows = rows
        self.cols = cols
        self._bits = [True] * (rows * cols)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mask):
            return NotImplemented
        return (
            self.rows == other.rows
            and self.cols == other.cols
            and self._bits == other._bits
        )

    def __repr__(self) -> str:
        return f"Mask(rows={self.rows}, cols={self.cols}, enabled={self.count()})"

    def _index(self, row: int, col: int) -> int:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"({row}, {col}) is outside the mask")
        return row * self.cols + col

    def size(self) -> int:
        return self.rows * self.cols

    def get(self, row: int, col: int) -> bool:
        return self._bits[self._index(row, col)]

    def set(self, row: int, col: int, enabled: bool) -> None:
        self._bits[self._index(row, col)] = enabled

    def count(self) -> int:
        """Return the number of enabled positions."""

        return sum(self._bits)

    def enabled_cells(self) -> List[Coord]:
        """Return the enabled coordinates in row-major order."""

        return [
            (i // self.cols, i % self.cols)
            for i, enabled in enumerate(self._bits)
            if enabled
        ]

    def random(self, rng: random.Random) -> Coord:
        """Return a uniformly chosen enabled coordinate."""

        enabled = self.enabled_cells()
        if not enabled:
            raise ValueError("Mask has no enabled cells")
        return rng.choice(enabled)

    def to_text(self) -> str:
        """Serialize using the text format (``X`` disabled, ``.`` enabled)."""

        lines: List[str] = []
        for r in range(self.rows):
            lines.append(
                "".join("." if self.get(r, c) else "X" for c in range(self.cols))
            )
        return "\n".join(lines) + "\n"

    @classmethod
    def from_text(cls, text: str) -> "Mask":
        """Parse the text format.

        Raises MaskError when no rows remain after dropping comments and
        empty lines, or when rows have different lengths.
        """

        lines: List[str] = []
        for line_no, line in enumerate(text.splitlines(), start=1):
            # a row of spaces is an all-open row, not a blank line
            if line == "" or line.startswith("#"):
                continue
            if lines and len(line) != len(lines[0]):
                raise MaskError(
                    f"Line {line_no}: expected {len(lines[0])} columns, "
                    f"got {len(line)}\n→ {line}"
                )
            lines.append(line)

        if not lines:
            raise MaskError("Mask is empty")

        mask = cls(len(lines), len(lines[0]))
        for r, line in enumerate(lines):
            for c, ch in enumerate(line):
                if ch in DISABLED_CHARS:
                    mask.set(r, c, False)
        return mask

    @classmethod
    def from_file(cls, path: PathLike) -> "Mask":
        """Read a text mask from disk."""

        try:
            with Path(path).open("r", encoding="utf-8") as f:
                text = f.read()
        except OSError as exc:
            raise MaskError(f"Could not read mask file: {path}: {exc}") from exc
        return cls.from_text(text)

    @classmethod
    def from_image(cls, path: PathLike) -> "Mask":
        """Build a mask from image transparency.

        Each pixel maps to one cell; any alpha below 255 disables it.
        """

        try:
            with Image.open(path) as image:
                pixels = np.asarray(image.convert("RGBA"))
        except (OSError, UnidentifiedImageError) as exc:
            raise MaskError(f"Could not read mask image: {path}: {exc}") from exc

        height, width = pixels.shape[:2]
        if height == 0 or width == 0:
            raise MaskError(f"Mask image is empty: {path}")

        mask = cls(height, width)
        opaque = pixels[:, :, 3] == 255
        mask._bits = [bool(v) for v in opaque.reshape(-1)]
        return mask

    @classmethod
    def load(cls, path: PathLike) -> "Mask":
        """Load a text or image mask depending on the file suffix."""

        if Path(path).suffix.lower() in TEXT_SUFFIXES:
            return cls.from_file(path)
        return cls.from_image(path)
