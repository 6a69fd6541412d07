"""Command-line entry point: `run` builds the workbook, `check` only inspects tiles."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

import typer

from .config import parse_people, resolve_parameters
from .layout import build_cards
from .logging_setup import setup_logging
from .rng import fresh_seed
from .serialize import build_run_meta, emit_cards_json, ensure_writable
from .similarity import SimilarPair, check_tiles
from .tiles import load_tile_set
from .version import __version__
from .workbook import write_workbook

logger = logging.getLogger(__name__)

INPUT_ERRORS = (ValueError, FileNotFoundError, FileExistsError)

app = typer.Typer(
    help="Bingo card generator: one worksheet per player from a list of tile phrases",
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def common_options(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", help="Show application version and exit", is_eager=True
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


def _resolve(config: str | None, cli_overrides: Dict[str, Any]) -> tuple[Dict[str, Any], str]:
    try:
        resolved, params_hash, _cfg_path = resolve_parameters(
            config_path_str=config, cli_overrides=cli_overrides
        )
    except INPUT_ERRORS as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2)
    setup_logging(
        level=str(resolved.get("log_level", "INFO")),
        log_file=resolved.get("log_file"),
        json_format=(str(resolved.get("log_format", "text")) == "json"),
    )
    return resolved, params_hash


def _load_and_check(tiles_path: Path, distance_limit: int) -> tuple[List[str], List[SimilarPair]]:
    tile_set = load_tile_set(tiles_path)
    findings = [SimilarPair(first=dup, second=dup, distance=0, duplicate=True) for dup in tile_set.duplicates]
    findings.extend(check_tiles(tile_set.tiles, distance_limit))
    return tile_set.tiles, findings


@app.command()
def run(
    free_square: str = typer.Argument(
        None, help="Text to use for the free square (default: 'FREE SQUARE')"
    ),
    dist: int = typer.Option(
        None, "--dist", min=0, help="Report tiles within this Levenshtein distance of each other"
    ),
    people: str = typer.Option(
        None, "--people", help="Comma-separated list of people to generate cards for"
    ),
    tiles: str = typer.Option(None, "--tiles", help="Tiles file, one phrase per line"),
    out: str = typer.Option(None, "--out", help="Workbook output path (.xlsx)"),
    out_json: str = typer.Option(None, "--out-json", help="Optional cards.json audit output"),
    config: str = typer.Option(None, "--config", help="Path to config file (YAML/JSON)"),
    seed: int = typer.Option(None, "--seed", help="Seed for reproducible cards"),
    rng_engine: str = typer.Option(None, "--rng-engine", help="py_random|numpy_pcg64"),
    title: str = typer.Option(None, "--title", help="Header text shown before each name"),
    strict: bool = typer.Option(
        False, "--strict", help="Fail when duplicate or similar tiles are found"
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite outputs if they exist"),
    no_mkdirs: bool = typer.Option(False, "--no-mkdirs", help="Do not create parent directories"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Resolve params and exit"),
    log_level: str = typer.Option(None, "--log-level", help="DEBUG|INFO|WARN|ERROR"),
    log_file: str = typer.Option(None, "--log-file", help="Log file path"),
) -> None:
    """Check the tiles and write one bingo card per person into a workbook."""

    cli_overrides: Dict[str, Any] = {}
    if free_square:
        cli_overrides["free_square"] = free_square
    if dist is not None:
        cli_overrides["dist"] = dist
    if people:
        cli_overrides["people"] = parse_people(people)
    if tiles:
        cli_overrides["tiles"] = tiles
    if out:
        cli_overrides["out"] = out
    if out_json:
        cli_overrides["out_json"] = out_json
    if seed is not None:
        cli_overrides["seed.value"] = seed
    if rng_engine:
        cli_overrides["seed.engine"] = rng_engine
    if title:
        cli_overrides["title"] = title
    if strict:
        cli_overrides["strict"] = True
    if log_level:
        cli_overrides["log_level"] = log_level
    if log_file:
        cli_overrides["log_file"] = log_file

    resolved, params_hash = _resolve(config, cli_overrides)

    if dry_run:
        typer.echo(f"People: {', '.join(resolved['people'])}")
        typer.echo(f"Tiles: {resolved['tiles']}")
        typer.echo(f"Params hash: {params_hash}")
        raise typer.Exit(0)

    distance_limit = resolved["dist"]
    seed_cfg = resolved.get("seed", {})
    engine = str(seed_cfg.get("engine") or "py_random")
    seed_value = seed_cfg.get("value")
    if seed_value is None:
        seed_value = fresh_seed()
        logger.info("No seed configured, using %d", seed_value)

    out_path = Path(resolved["out"])
    out_json_path = Path(resolved["out_json"]) if resolved.get("out_json") else None

    try:
        # nothing is written unless every output can be
        for path in (out_path, out_json_path):
            if path is not None:
                ensure_writable(path, overwrite=force)
        tile_list, findings = _load_and_check(Path(resolved["tiles"]), distance_limit)
        if findings and resolved.get("strict"):
            logger.error("%d duplicate or similar tile pairs found; not writing cards", len(findings))
            exit_code = 1
        else:
            cards = build_cards(
                resolved["people"],
                tile_list,
                free_square=str(resolved["free_square"]),
                seed=seed_value,
                rng_engine=engine,
            )
            write_workbook(
                out_path,
                cards,
                title=str(resolved["title"]),
                mkdirs=(not no_mkdirs),
                overwrite=force,
            )
            if out_json_path:
                run_meta = build_run_meta(
                    app_version=__version__,
                    params_hash=params_hash,
                    seed=seed_value,
                    rng_engine=engine,
                    distance_limit=distance_limit,
                    tile_count=len(tile_list),
                )
                emit_cards_json(
                    out_json_path,
                    cards=cards,
                    run_meta=run_meta,
                    mkdirs=(not no_mkdirs),
                    overwrite=force,
                )
            typer.echo(f"Generated {len(cards)} cards in {out_path}")
            exit_code = 0
    except (*INPUT_ERRORS, RuntimeError) as e:
        logger.error("%s", e)
        exit_code = 2

    raise typer.Exit(code=exit_code)


@app.command()
def check(
    tiles: str = typer.Option(None, "--tiles", help="Tiles file, one phrase per line"),
    dist: int = typer.Option(
        None, "--dist", min=0, help="Report tiles within this Levenshtein distance of each other"
    ),
    config: str = typer.Option(None, "--config", help="Path to config file (YAML/JSON)"),
    log_level: str = typer.Option(None, "--log-level", help="DEBUG|INFO|WARN|ERROR"),
) -> None:
    """Only check the tiles for duplicates and near-duplicates."""
    cli_overrides: Dict[str, Any] = {}
    if tiles:
        cli_overrides["tiles"] = tiles
    if dist is not None:
        cli_overrides["dist"] = dist
    if log_level:
        cli_overrides["log_level"] = log_level

    resolved, _params_hash = _resolve(config, cli_overrides)
    try:
        tile_list, findings = _load_and_check(Path(resolved["tiles"]), resolved["dist"])
    except INPUT_ERRORS as e:
        logger.error("%s", e)
        raise typer.Exit(code=2)

    typer.echo(f"{len(tile_list)} tiles, {len(findings)} duplicate or similar pairs")
    raise typer.Exit(code=1 if findings else 0)


def main(_argv: list[str] | None = None) -> int:
    try:
        app(args=_argv, standalone_mode=True)
        return 0
    except SystemExit as e:
        return int(e.code) if e.code is not None else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
