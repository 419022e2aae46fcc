"""Settings lookup: environment, then `.env`, then `.env.defaults`.

`.env.defaults` is the version-controlled catalog of every key newsdesk
reads; `.env` overrides it locally and may be partial.
"""
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, List

TRUE_VALUES = {"1", "true", "yes", "on"}

# Later layers override earlier ones
ENV_LAYERS = (".env.defaults", ".env")


def _search_dirs() -> List[Path]:
    root = Path(__file__).resolve().parents[2]
    found = [root]
    try:
        cwd = Path.cwd().resolve()
    except OSError:
        # Working directory was removed under us
        return found
    if cwd != root:
        found.append(cwd)
    return found


@lru_cache(maxsize=1)
def load_defaults() -> Dict[str, str]:
    """Merged key/value pairs of every env layer found; empty when none exist."""
    merged: Dict[str, str] = {}
    for layer in ENV_LAYERS:
        for directory in _search_dirs():
            candidate = directory / layer
            if candidate.is_file():
                merged.update(_parse_env_file(candidate))
    return merged


def get_default(key: str, fallback: str | None = None) -> str | None:
    return load_defaults().get(key, fallback)


def require_default(key: str) -> str:
    """Like get_default, but a missing key is a RuntimeError."""
    try:
        return load_defaults()[key]
    except KeyError:
        raise RuntimeError(f"'{key}' is not defined in .env or .env.defaults") from None


def get_setting(key: str, fallback: str | None = None) -> str | None:
    """Environment variable first, then the env files, then fallback."""
    if key in os.environ:
        return os.environ[key]
    return get_default(key, fallback)


def get_bool(key: str, fallback: bool = False) -> bool:
    value = get_setting(key)
    if value is None:
        return fallback
    return value.strip().lower() in TRUE_VALUES


def get_int(key: str, fallback: int) -> int:
    value = get_setting(key)
    if value is None or not value.strip():
        return fallback
    return int(value)


def _unquote(value: str) -> str:
    if len(value) > 1 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def _parse_env_file(env_path: Path) -> Dict[str, str]:
    parsed: Dict[str, str] = {}
    for raw in env_path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if sep:
            parsed[key.strip()] = _unquote(value.strip())
    return parsed
