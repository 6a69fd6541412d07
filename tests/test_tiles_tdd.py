from __future__ import annotations

import logging
from pathlib import Path

import pytest

from bingo_cards.tiles import load_tiles, normalize_tile, parse_tiles


def test_escape_sequence_becomes_newline():
    assert normalize_tile("  Ref makes\\na mistake  ") == "Ref makes\na mistake"


def test_blank_lines_skipped_and_duplicates_collapsed():
    tile_set = parse_tiles(["Slap", "", "   ", "Throw", "Slap", " Throw "])
    assert tile_set.tiles == ["Slap", "Throw"]
    assert tile_set.duplicates == ["Slap", "Throw"]


def test_duplicate_after_escape_normalization():
    tile_set = parse_tiles(["Two\\nlines", "Two\nlines"])
    assert tile_set.tiles == ["Two\nlines"]
    assert len(tile_set.duplicates) == 1


def test_load_tiles_reads_file_and_warns(tmp_path: Path, caplog):
    path = tmp_path / "tiles.txt"
    path.write_text("Henka\nMatta\n\nHenka\nYorikiri\\nwin\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="bingo_cards.tiles"):
        tiles = load_tiles(path)
    assert tiles == ["Henka", "Matta", "Yorikiri\nwin"]
    assert "Duplicate tile: Henka" in caplog.text


def test_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_tiles(tmp_path / "nope.txt")
