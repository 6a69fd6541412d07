"""Output-file guards and the audit JSON for a run: metadata, grids and their hashes."""

from __future__ import annotations

import hashlib
import json
import platform
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, List, Sequence

if TYPE_CHECKING:
    from .layout import Card


def grid_hash(grid: Sequence[Sequence[str]]) -> str:
    payload = json.dumps(grid, ensure_ascii=True, separators=(",", ":"))
    return "sha256:" + hashlib.sha256(payload.encode("utf-8")).hexdigest()


def cards_hash(grids: Iterable[Sequence[Sequence[str]]]) -> str:
    hashes = [grid_hash(g) for g in grids]
    payload = json.dumps(hashes, ensure_ascii=True, separators=(",", ":"))
    return "sha256:" + hashlib.sha256(payload.encode("utf-8")).hexdigest()


def ensure_writable(path: Path, *, overwrite: bool) -> None:
    if path.exists() and not overwrite:
        raise FileExistsError(
            f"Refusing to overwrite existing file without --force: {path}"
        )


def ensure_parent(path: Path, *, mkdirs: bool) -> None:
    parent = path.parent
    if not parent.exists():
        if not mkdirs:
            raise FileNotFoundError(f"Output directory does not exist: {parent}")
        parent.mkdir(parents=True, exist_ok=True)


def write_json(path: Path, data: object, *, mkdirs: bool, overwrite: bool) -> None:
    ensure_writable(path, overwrite=overwrite)
    ensure_parent(path, mkdirs=mkdirs)
    text = json.dumps(data, ensure_ascii=False, sort_keys=True, indent=2)
    path.write_text(text + "\n", encoding="utf-8")


def build_run_meta(
    *,
    app_version: str,
    params_hash: str,
    seed: int,
    rng_engine: str,
    distance_limit: int,
    tile_count: int,
) -> Dict[str, object]:
    return {
        "app_version": app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "python_version": sys.version.split()[0],
        "platform": platform.system().lower(),
        "params_hash": params_hash,
        "seed": seed,
        "rng_engine": rng_engine,
        "distance_limit": distance_limit,
        "tile_count": tile_count,
        "hash_algorithm": "sha256",
    }


def emit_cards_json(
    path: Path,
    *,
    cards: Sequence["Card"],
    run_meta: Dict[str, object],
    mkdirs: bool,
    overwrite: bool,
) -> None:
    entries: List[Dict[str, object]] = []
    for card in cards:
        entries.append(
            {"person": card.person, "grid": card.grid, "grid_hash": grid_hash(card.grid)}
        )
    data = {
        "run_meta": run_meta,
        "cards": entries,
        "cards_hash": cards_hash([c.grid for c in cards]),
    }
    write_json(path, data, mkdirs=mkdirs, overwrite=overwrite)
