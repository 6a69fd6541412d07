"""Parameter resolution: CLI over environment over config file over defaults."""

from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Set, Tuple

import yaml

ENV_PREFIX = "BINGO_CARDS_"

PATH_KEYS = ("tiles", "out", "out_json", "log_file")
INT_KEYS = {"dist", "seed.value"}
BOOL_KEYS = {"strict"}
LIST_KEYS = {"people"}


def _read_config_file(config_path: Path | None) -> Dict[str, Any]:
    if not config_path:
        return {}
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    suffix = config_path.suffix.lower()
    text = config_path.read_text(encoding="utf-8")
    if suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
        if not isinstance(data, dict):
            raise ValueError("Top-level YAML config must be a mapping")
        return data
    if suffix == ".json":
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Top-level JSON config must be a mapping")
        return data
    raise ValueError(f"Unsupported config extension: {suffix}")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_people(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _coerce_int(key: str, value: Any) -> int:
    # bool is an int subclass; YAML turns "yes" into True
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValueError(f"{key} must be an integer, got {value!r}")


def _check_values(merged: Dict[str, Any]) -> None:
    """Coerce integer settings in place; a bare ``seed: N`` means ``seed.value``."""
    merged["dist"] = _coerce_int("dist", merged.get("dist"))
    if merged["dist"] < 0:
        raise ValueError(f"dist must be >= 0, got {merged['dist']}")

    seed = merged.get("seed")
    if not isinstance(seed, dict):
        seed = {"engine": "py_random", "value": seed}
    if seed.get("value") is not None:
        seed["value"] = _coerce_int("seed.value", seed["value"])
    merged["seed"] = seed


def _collect_env_vars(env: Mapping[str, str]) -> Dict[str, Any]:
    """Map ENV variables with BINGO_CARDS_ prefix to config keys.

    Keys not present are ignored.
    """
    mapping: Dict[str, str] = {
        f"{ENV_PREFIX}TILES": "tiles",
        f"{ENV_PREFIX}PEOPLE": "people",
        f"{ENV_PREFIX}DIST": "dist",
        f"{ENV_PREFIX}FREE_SQUARE": "free_square",
        f"{ENV_PREFIX}TITLE": "title",
        f"{ENV_PREFIX}STRICT": "strict",
        # Seed
        f"{ENV_PREFIX}SEED_VALUE": "seed.value",
        f"{ENV_PREFIX}SEED_ENGINE": "seed.engine",
        # Output & logging
        f"{ENV_PREFIX}OUT": "out",
        f"{ENV_PREFIX}OUT_JSON": "out_json",
        f"{ENV_PREFIX}LOG_LEVEL": "log_level",
        f"{ENV_PREFIX}LOG_FORMAT": "log_format",
        f"{ENV_PREFIX}LOG_FILE": "log_file",
    }

    result: Dict[str, Any] = {}
    for env_key, cfg_key in mapping.items():
        if env_key not in env:
            continue
        raw = env[env_key]
        if cfg_key in INT_KEYS:
            try:
                result[cfg_key] = int(raw)
            except ValueError:
                raise ValueError(f"{env_key} must be an integer, got {raw!r}") from None
        elif cfg_key in BOOL_KEYS:
            result[cfg_key] = _parse_bool(raw)
        elif cfg_key in LIST_KEYS:
            result[cfg_key] = parse_people(raw)
        else:
            result[cfg_key] = raw

    return result


def _set_nested(config: Dict[str, Any], dotted_key: str, value: Any) -> None:
    parts = dotted_key.split(".")
    cursor = config
    for part in parts[:-1]:
        if part not in cursor or not isinstance(cursor[part], dict):
            cursor[part] = {}
        cursor = cursor[part]
    cursor[parts[-1]] = value


def _apply_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = json.loads(json.dumps(base))  # deep copy via JSON
    for key, value in overrides.items():
        if "." in key:
            _set_nested(merged, key, value)
        elif isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def canonical_json_dumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=True, sort_keys=True, separators=(",", ":"))


def compute_params_hash(resolved: Mapping[str, Any]) -> str:
    """Hash the parameters that determine card contents for a given tile list."""
    seed = resolved.get("seed") or {}
    contract: Dict[str, Any] = {
        "people": list(resolved.get("people") or []),
        "dist": resolved.get("dist"),
        "free_square": resolved.get("free_square"),
        "title": resolved.get("title"),
        "seed.engine": seed.get("engine"),
        "seed.value": seed.get("value"),
    }
    digest = hashlib.sha256(canonical_json_dumps(contract).encode("utf-8")).hexdigest()
    return f"sha256:{digest}"


def resolve_paths(
    resolved: Dict[str, Any],
    config_file: Path | None,
    from_config: Set[str],
) -> Dict[str, Any]:
    """Normalize paths per policy.

    - Paths from config file: resolve relative to config directory
    - Paths from CLI, ENV or defaults: resolve relative to CWD
    """
    cwd = Path.cwd()
    cfg_dir = config_file.parent if config_file else None

    def normalize(path_value: str | None, relative_to_config: bool) -> str | None:
        if path_value is None or path_value == "":
            return None
        p = Path(path_value)
        if p.is_absolute():
            return str(p)
        base = (cfg_dir or cwd) if relative_to_config else cwd
        return str((base / p).resolve())

    result = dict(resolved)
    for key in PATH_KEYS:
        value = resolved.get(key)
        if value is None:
            continue
        result[key] = normalize(str(value), key in from_config)
    return result


def resolve_parameters(
    *,
    config_path_str: str | None,
    cli_overrides: Dict[str, Any],
    env: Mapping[str, str] | None = None,
) -> Tuple[Dict[str, Any], str, Path | None]:
    """Resolve parameters with precedence CLI > ENV > config > defaults.

    Returns (resolved_params, params_hash, config_path)
    """
    config_path = Path(config_path_str).resolve() if config_path_str else None
    file_cfg = _read_config_file(config_path) if config_path else {}
    env_map = _collect_env_vars(os.environ if env is None else env)

    defaults: Dict[str, Any] = {
        "tiles": "tiles.txt",
        "people": ["Alice", "Bob"],
        "dist": 3,
        "free_square": "FREE SQUARE",
        "title": "SUMO BINGO!",
        "out": "bingo.xlsx",
        "seed": {"engine": "py_random", "value": None},
        "strict": False,
        "log_level": "INFO",
        "log_format": "text",
    }

    merged = _apply_overrides(defaults, file_cfg)
    merged = _apply_overrides(merged, env_map)
    merged = _apply_overrides(merged, cli_overrides)

    if isinstance(merged.get("people"), str):
        merged["people"] = parse_people(merged["people"])
    _check_values(merged)

    # paths that still hold the config file's value resolve against its directory
    from_config = {
        key
        for key in PATH_KEYS
        if key in file_cfg and key not in env_map and key not in cli_overrides
    }
    merged = resolve_paths(merged, config_path, from_config)

    params_hash = compute_params_hash(merged)
    return merged, params_hash, config_path
