"""Unified configuration layer for the dispatcher.

Merge order (later wins)
------------------------
1. Built-in defaults (:mod:`crux_dispatch.config.defaults`)
2. Optional JSON file pointed to by ``DISPATCH_CONFIG_FILE``
3. Environment variables: ``DISPATCH_BASE_URL``, ``DISPATCH_TIMEOUT_MS``,
   ``DISPATCH_UNWRAP_ENVELOPE``
4. In-code overrides passed to :func:`get_dispatch_config`

The file may hold the keys at top level or under a ``"dispatch"`` section::

    {"dispatch": {"base_url": "https://api.example.com", "timeout_ms": 15000}}

Public API
----------
* get_dispatch_config(overrides: dict | None = None) -> dict
* reset_config_cache() -> None
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .defaults import (
    DISPATCH_DEFAULT_BASE_URL,
    DISPATCH_DEFAULT_TIMEOUT_MS,
    DISPATCH_DEFAULT_UNWRAP_ENVELOPE,
)

DEFAULTS: Dict[str, Any] = {
    "base_url": DISPATCH_DEFAULT_BASE_URL,
    "timeout_ms": DISPATCH_DEFAULT_TIMEOUT_MS,
    "unwrap_envelope": DISPATCH_DEFAULT_UNWRAP_ENVELOPE,
}

ENV_FIELD_MAP = {
    "base_url": "DISPATCH_BASE_URL",
    "timeout_ms": "DISPATCH_TIMEOUT_MS",
    "unwrap_envelope": "DISPATCH_UNWRAP_ENVELOPE",
}

_FILE_CACHE: Optional[Dict[str, Any]] = None
_FILE_CACHE_PATH: Optional[str] = None


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "t", "true", "y", "yes", "on"}


def _load_external_config() -> Dict[str, Any]:
    """Load the JSON file named by ``DISPATCH_CONFIG_FILE`` (cached per path).

    Missing files and unreadable JSON yield an empty mapping.
    """
    global _FILE_CACHE, _FILE_CACHE_PATH
    path = os.getenv("DISPATCH_CONFIG_FILE")
    if _FILE_CACHE is not None and _FILE_CACHE_PATH == path:
        return _FILE_CACHE
    data: Dict[str, Any] = {}
    if path and Path(path).is_file():
        try:
            loaded = json.loads(Path(path).read_text(encoding="utf-8"))
        except ValueError:
            loaded = {}
        if isinstance(loaded, dict):
            section = loaded.get("dispatch", loaded)
            data = dict(section) if isinstance(section, dict) else {}
    _FILE_CACHE, _FILE_CACHE_PATH = data, path
    return data


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field, env_name in ENV_FIELD_MAP.items():
        raw = os.getenv(env_name)
        if raw is None or raw.strip() == "":
            continue
        if field == "timeout_ms":
            try:
                out[field] = float(raw)
            except ValueError:
                continue
        elif field == "unwrap_envelope":
            out[field] = _parse_bool(raw)
        else:
            out[field] = raw.strip()
    return out


def get_dispatch_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged dispatcher configuration as a plain dict.

    Merge order (later wins): defaults -> external file -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored.
    """
    cfg: Dict[str, Any] = dict(DEFAULTS)
    cfg |= {k: v for k, v in _load_external_config().items() if k in DEFAULTS or k == "headers"}
    cfg |= _env_overrides()
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


def reset_config_cache() -> None:
    """Forget the cached external config file (used by tests)."""
    global _FILE_CACHE, _FILE_CACHE_PATH
    _FILE_CACHE = None
    _FILE_CACHE_PATH = None


__all__ = ["get_dispatch_config", "reset_config_cache", "DEFAULTS", "ENV_FIELD_MAP"]
