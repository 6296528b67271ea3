import random

import pytest
from PIL import Image

from maze_mask import Mask, MaskError


PATTERN = """\
# a plus sign
X.X
...

X.X
"""


def test_blank_mask_is_fully_enabled():
    mask = Mask(2, 3)
    assert mask.size() == 6
    assert mask.count() == 6
    assert all(mask.get(r, c) for r in range(2) for c in range(3))


@pytest.mark.parametrize("rows, cols", [(0, 3), (3, 0), (-1, 2)])
def test_zero_size_mask_is_rejected(rows, cols):
    with pytest.raises(ValueError):
        Mask(rows, cols)


def test_from_text_skips_comments_and_blank_lines():
    mask = Mask.from_text(PATTERN)
    assert (mask.rows, mask.cols) == (3, 3)
    assert mask.count() == 5
    assert not mask.get(0, 0)
    assert mask.get(0, 1)
    assert mask.get(1, 0)
    assert not mask.get(2, 2)
    assert mask.enabled_cells() == [(0, 1), (1, 0), (1, 1), (1, 2), (2, 1)]


def test_row_of_spaces_is_an_open_row():
    mask = Mask.from_text("X.X\n   \nX.X\n")
    assert (mask.rows, mask.cols) == (3, 3)
    assert all(mask.get(1, c) for c in range(3))
    assert mask.count() == 5


def test_indented_hash_is_a_data_row():
    mask = Mask.from_text("X.X\n #.\nX.X\n")
    assert (mask.rows, mask.cols) == (3, 3)
    assert all(mask.get(1, c) for c in range(3))


def test_lowercase_x_disables():
    mask = Mask.from_text("x.\n.X\n")
    assert not mask.get(0, 0)
    assert not mask.get(1, 1)
    assert mask.count() == 2


@pytest.mark.parametrize("text", ["", "\n\n", "# only a comment\n"])
def test_empty_text_is_an_error(text):
    with pytest.raises(MaskError):
        Mask.from_text(text)


def test_unequal_rows_are_an_error():
    with pytest.raises(MaskError, match="Line 2"):
        Mask.from_text("...\n..\n")


def test_text_round_trip(tmp_path):
    mask = Mask(4, 5)
    for r, c in [(0, 0), (1, 3), (3, 4), (2, 2)]:
        mask.set(r, c, False)

    assert Mask.from_text(mask.to_text()) == mask

    path = tmp_path / "shape.txt"
    path.write_text(mask.to_text(), encoding="utf-8")
    assert Mask.load(path) == mask


def test_missing_file_is_an_error(tmp_path):
    with pytest.raises(MaskError):
        Mask.from_file(tmp_path / "missing.txt")


def test_from_image_uses_alpha(tmp_path):
    image = Image.new("RGBA", (3, 2), (255, 255, 255, 255))
    image.putpixel((1, 0), (0, 0, 0, 0))
    image.putpixel((2, 1), (10, 20, 30, 254))
    path = tmp_path / "shape.png"
    image.save(path)

    mask = Mask.load(path)
    assert (mask.rows, mask.cols) == (2, 3)
    assert not mask.get(0, 1)
    assert not mask.get(1, 2)
    assert mask.count() == 4


def test_unreadable_image_is_an_error(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")
    with pytest.raises(MaskError):
        Mask.from_image(path)


def test_random_only_returns_enabled_cells():
    mask = Mask.from_text("X.X\nXXX\n..X\n")
    rng = random.Random(3)
    picks = {mask.random(rng) for _ in range(200)}
    assert picks == {(0, 1), (2, 0), (2, 1)}


def test_random_on_fully_disabled_mask():
    mask = Mask.from_text("X\n")
    with pytest.raises(ValueError):
        mask.random(random.Random(0))
