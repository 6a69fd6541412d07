"""Dealing shuffled tiles into 5x5 cards around a reserved free square."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .rng import RandomSource, create_rng, derive_seed

logger = logging.getLogger(__name__)

GRID_SIZE = 5
CENTER = GRID_SIZE // 2
TILES_PER_CARD = GRID_SIZE * GRID_SIZE - 1
DEFAULT_FREE_SQUARE = "FREE SQUARE"

# column-major slots, centre excluded
DEAL_ORDER = [
    (row, col)
    for col in range(GRID_SIZE)
    for row in range(GRID_SIZE)
    if (row, col) != (CENTER, CENTER)
]


@dataclass
class Card:
    """One player's card; ``grid`` is row-major with the free square in the centre."""

    person: str
    grid: List[List[str]]

    @property
    def free_cell(self) -> Tuple[int, int]:
        return (CENTER, CENTER)

    def tiles(self) -> List[str]:
        return [
            self.grid[r][c]
            for r in range(GRID_SIZE)
            for c in range(GRID_SIZE)
            if (r, c) != self.free_cell
        ]


def build_card(person: str, tiles: Sequence[str], free_square: str, rng: RandomSource) -> Card:
    """Shuffle ``tiles`` and deal them column by column into a 5x5 grid.

    Dealing skips the centre, which holds ``free_square``; tiles past the
    24th are not placed.
    """
    if len(tiles) < TILES_PER_CARD:
        raise ValueError(
            f"Need at least {TILES_PER_CARD} distinct tiles for a {GRID_SIZE}x{GRID_SIZE} card, got {len(tiles)}"
        )
    deck = list(tiles)
    rng.shuffle(deck)

    grid: List[List[str]] = [["" for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]
    grid[CENTER][CENTER] = free_square
    for (row, col), tile in zip(DEAL_ORDER, deck):
        grid[row][col] = tile
    return Card(person=person, grid=grid)


def check_people(people: Sequence[str]) -> None:
    if not people:
        raise ValueError("At least one person is required")
    seen = set()
    for person in people:
        if not person:
            raise ValueError("Person names must not be empty")
        if person in seen:
            raise ValueError(f"Duplicate person: {person}")
        seen.add(person)


def build_cards(
    people: Sequence[str],
    tiles: Sequence[str],
    *,
    free_square: str = DEFAULT_FREE_SQUARE,
    seed: int,
    rng_engine: str = "py_random",
) -> List[Card]:
    """Build one card per person; each card's shuffle is seeded from ``seed`` and the person's index."""
    check_people(people)
    cards: List[Card] = []
    for idx, person in enumerate(people):
        rng = create_rng(rng_engine, derive_seed(seed, idx, "card"))
        card = build_card(person, tiles, free_square, rng)
        logger.debug("Built card for %s", person)
        cards.append(card)
    return cards
