"""Loading tile phrases from a newline-delimited text file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)

# Literal backslash-n in the file marks a manual line break inside a tile.
LINE_BREAK_ESCAPE = "\\n"


@dataclass
class TileSet:
    tiles: List[str]
    duplicates: List[str] = field(default_factory=list)


def normalize_tile(line: str) -> str:
    return line.strip().replace(LINE_BREAK_ESCAPE, "\n")


def parse_tiles(lines: Iterable[str]) -> TileSet:
    """Normalize lines into distinct tiles, keeping first-seen order.

    Blank lines are skipped; repeated phrases are collected in ``duplicates``.
    """
    seen: set[str] = set()
    tiles: List[str] = []
    duplicates: List[str] = []
    for line in lines:
        tile = normalize_tile(line)
        if not tile:
            continue
        if tile in seen:
            duplicates.append(tile)
            continue
        seen.add(tile)
        tiles.append(tile)
    return TileSet(tiles=tiles, duplicates=duplicates)


def load_tile_set(path: Path) -> TileSet:
    if not path.exists():
        raise FileNotFoundError(f"Tiles file not found: {path}")
    tile_set = parse_tiles(path.read_text(encoding="utf-8").splitlines())
    for dup in tile_set.duplicates:
        logger.warning("Duplicate tile: %s", dup)
    logger.info("Loaded %d tiles from %s", len(tile_set.tiles), path)
    return tile_set


def load_tiles(path: Path) -> List[str]:
    return load_tile_set(path).tiles
