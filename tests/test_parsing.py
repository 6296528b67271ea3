from pathlib import Path

import pytest

from parsing import DEFAULT_CELL_SIZE, ConfigError, read_config


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.txt"
    path.write_text(text, encoding="utf-8")
    return path


def test_full_config(tmp_path):
    path = write_config(
        tmp_path,
        "# maze settings\n"
        "GENERATOR=Hunt-and-Kill\n"
        "rows = 10\n"
        "COLS=12  # inline comment\n"
        "\n"
        "SEED=42\n"
        "ENTRY=0,1\n"
        "EXIT=11,9\n"
        "OUTPUT_FILE=out/maze.txt\n"
        "PNG_FILE=out/maze.png\n"
        "CELL_SIZE=8\n"
        "RENDER=no\n",
    )
    config = read_config(path)
    assert config.generator == "hunt_and_kill"
    assert (config.rows, config.cols) == (10, 12)
    assert config.seed == 42
    assert config.entry == (1, 0)
    assert config.exit == (9, 11)
    assert config.output_file == Path("out/maze.txt")
    assert config.png_file == Path("out/maze.png")
    assert config.cell_size == 8
    assert config.render is False
    assert not config.is_analysis


def test_defaults(tmp_path):
    config = read_config(
        write_config(tmp_path, "GENERATOR=wilsons\nROWS=3\nCOLS=4\n")
    )
    assert config.seed is None
    assert config.entry is None and config.exit is None
    assert config.mask is None
    assert config.output_file is None
    assert config.cell_size == DEFAULT_CELL_SIZE
    assert config.render is True


def test_mask_replaces_dimensions(tmp_path):
    config = read_config(
        write_config(tmp_path, "GENERATOR=analysis\nMASK=heart.txt\n")
    )
    assert config.mask == Path("heart.txt")
    assert config.rows is None
    assert config.is_analysis


@pytest.mark.parametrize(
    "text, message",
    [
        ("ROWS=3\nCOLS=3\n", "GENERATOR"),
        ("GENERATOR=wilsons\nROWS=3\n", "COLS"),
        ("GENERATOR=prims\nROWS=3\nCOLS=3\n", "Unknown GENERATOR"),
        ("GENERATOR=wilsons\nROWS=3\nCOLS=3\nCOLOR=red\n", "Unknown configuration"),
        ("GENERATOR=wilsons\nROWS=three\nCOLS=3\n", "Invalid integer"),
        ("GENERATOR=wilsons\nROWS=0\nCOLS=3\n", "greater than 0"),
        ("GENERATOR=wilsons\nROWS 3\nCOLS=3\n", "Line 2"),
        ("GENERATOR=wilsons\nROWS=3\nCOLS=3\nENTRY=0,0\n", "together"),
        ("GENERATOR=wilsons\nROWS=3\nCOLS=3\nENTRY=0,0\nEXIT=3,0\n", "out of bounds"),
        ("GENERATOR=wilsons\nROWS=3\nCOLS=3\nENTRY=0\nEXIT=1,1\n", "expected 'x,y'"),
        ("GENERATOR=wilsons\nROWS=3\nCOLS=3\nRENDER=maybe\n", "Invalid boolean"),
    ],
)
def test_invalid_configs(tmp_path, text, message):
    with pytest.raises(ConfigError, match=message):
        read_config(write_config(tmp_path, text))


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        read_config(tmp_path / "nope.txt")
