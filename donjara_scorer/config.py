from __future__ import annotations
from typing import Any, Dict, Iterable, Optional
import logging
import os

import yaml

from .data.constants import (
    HAND_SIZE,
    LIST_DELIMITER,
    MIN_NAME_OVERLAP,
    ULTIMATE_SET_TILES,
    UNKNOWN_TILE,
    WILDCARD_TILE,
)

ENV_PREFIX = "DONJARA__"

_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")

DEFAULTS: Dict[str, Any] = {
    "data": {
        "tiles": os.path.join(_DATA_DIR, "tiles.csv"),
        "basic_roles": os.path.join(_DATA_DIR, "basic_roles.csv"),
        "bonus_roles": os.path.join(_DATA_DIR, "bonus_roles.csv"),
        "list_delimiter": LIST_DELIMITER,
    },
    "tokens": {
        "unknown": UNKNOWN_TILE,
        "wildcard": WILDCARD_TILE,
    },
    "rules": {
        "ultimate_tiles": sorted(ULTIMATE_SET_TILES),
    },
    "matcher": {
        "min_overlap": MIN_NAME_OVERLAP,
        "hand_size": HAND_SIZE,
    },
    "recognition": {
        "lang": "jpn",
        "psm": 6,
    },
    "logging": {
        "level": "WARNING",
    },
    "service": {
        "host": "127.0.0.1",
        "port": 8000,
    },
}


def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _load_one(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    # YAML is a superset of JSON, so one parser covers both
    d = yaml.safe_load(text)
    if d is None:
        return {}
    if not isinstance(d, dict):
        raise ValueError(f"Config file {path!r} must contain a mapping, got {type(d).__name__}")
    return d


def load_configs(paths: Iterable[str] | None) -> Dict[str, Any]:
    cfg: Dict[str, Any] = {}
    for p in (paths or []):
        cfg = _deep_merge(cfg, _load_one(p))
    return cfg


def env_overrides(prefix: str = ENV_PREFIX) -> Dict[str, Any]:
    # Nested via double underscores: DONJARA__MATCHER__MIN_OVERLAP=4
    out: Dict[str, Any] = {}
    for k, v in os.environ.items():
        if not k.startswith(prefix):
            continue
        parts = k[len(prefix):].split("__")
        cur = out
        for i, part in enumerate(parts):
            key = part.lower()
            if i == len(parts) - 1:
                cur[key] = _coerce(v)
            else:
                cur = cur.setdefault(key, {})
    return out


def _coerce(s: str) -> Any:
    t = s.strip().lower()
    if t in ("true", "false"):
        return t == "true"
    try:
        if "." in t:
            return float(t)
        return int(t)
    except ValueError:
        return s


def apply_cli_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    return _deep_merge(base, overrides or {})


def load_settings(
    paths: Iterable[str] | None = None,
    env_prefix: str = ENV_PREFIX,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Defaults <- config files <- environment <- explicit overrides."""
    cfg = _deep_merge(DEFAULTS, load_configs(paths))
    cfg = _deep_merge(cfg, env_overrides(env_prefix))
    return apply_cli_overrides(cfg, overrides or {})


def configure_logging(settings: Dict[str, Any], level: Optional[str] = None) -> None:
    name = (level or settings.get("logging", {}).get("level") or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = [
    "DEFAULTS",
    "ENV_PREFIX",
    "load_configs",
    "load_settings",
    "env_overrides",
    "apply_cli_overrides",
    "configure_logging",
    "_deep_merge",
]
