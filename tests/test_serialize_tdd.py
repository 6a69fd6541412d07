from __future__ import annotations

import json
from pathlib import Path

import pytest

from bingo_cards.layout import build_cards
from bingo_cards.serialize import build_run_meta, cards_hash, emit_cards_json, grid_hash

TILES = [f"t{i}" for i in range(25)]


def test_grid_hash_stable_and_distinct():
    a = [["x", "y"], ["z", "w"]]
    b = [["x", "z"], ["y", "w"]]
    assert grid_hash(a) == grid_hash([row[:] for row in a])
    assert grid_hash(a).startswith("sha256:")
    assert grid_hash(a) != grid_hash(b)
    assert cards_hash([a, b]) != cards_hash([b, a])


def test_emit_cards_json(tmp_path: Path):
    cards = build_cards(["Alice", "Bob"], TILES, seed=3)
    meta = build_run_meta(
        app_version="0.1.0",
        params_hash="sha256:abc",
        seed=3,
        rng_engine="py_random",
        distance_limit=3,
        tile_count=len(TILES),
    )
    path = tmp_path / "out" / "cards.json"
    emit_cards_json(path, cards=cards, run_meta=meta, mkdirs=True, overwrite=False)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["run_meta"]["seed"] == 3
    assert [c["person"] for c in data["cards"]] == ["Alice", "Bob"]
    assert data["cards"][0]["grid"] == cards[0].grid
    assert data["cards"][0]["grid_hash"] == grid_hash(cards[0].grid)
    assert data["cards_hash"] == cards_hash([c.grid for c in cards])

    with pytest.raises(FileExistsError):
        emit_cards_json(path, cards=cards, run_meta=meta, mkdirs=True, overwrite=False)
