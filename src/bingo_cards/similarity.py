"""Levenshtein near-duplicate search over a tile set."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from rapidfuzz.distance import Levenshtein

logger = logging.getLogger(__name__)

DEFAULT_DISTANCE_LIMIT = 3


@dataclass(frozen=True)
class SimilarPair:
    first: str
    second: str
    distance: int
    duplicate: bool = False


def find_similar_tiles(tiles: Sequence[str], distance_limit: int = DEFAULT_DISTANCE_LIMIT) -> List[SimilarPair]:
    """Return every pair of tiles whose edit distance is at most ``distance_limit``.

    Identical entries are reported as duplicates with distance 0.
    """
    if distance_limit < 0:
        raise ValueError("distance limit must be >= 0")
    found: List[SimilarPair] = []
    for i in range(len(tiles) - 1):
        for j in range(i + 1, len(tiles)):
            a = tiles[i]
            b = tiles[j]
            if a == b:
                found.append(SimilarPair(first=a, second=b, distance=0, duplicate=True))
                continue
            dist = Levenshtein.distance(a, b, score_cutoff=distance_limit + 1)
            if dist <= distance_limit:
                found.append(SimilarPair(first=a, second=b, distance=dist))
    return found


def check_tiles(tiles: Sequence[str], distance_limit: int = DEFAULT_DISTANCE_LIMIT) -> List[SimilarPair]:
    pairs = find_similar_tiles(tiles, distance_limit)
    for pair in pairs:
        if pair.duplicate:
            logger.warning("Duplicate tile: %s", pair.first)
        else:
            logger.warning("Similar tiles (dist=%d):\n  1: %s\n  2: %s", pair.distance, pair.first, pair.second)
    if not pairs:
        logger.info("No tiles within distance %d of each other", distance_limit)
    return pairs
