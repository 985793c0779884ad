"""Cached configuration access with command-line overrides."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from bitcoin_donation.config.loader import get_config_path, load_config
from bitcoin_donation.config.schema import Config, RpcConfig

_lock = threading.RLock()
_cache: dict[str, Config] = {}


def _cache_key(config_path: Path | None = None) -> str:
    return str(Path(config_path or get_config_path()).expanduser().resolve())


def get_config(*, config_path: Path | None = None, force_reload: bool = False) -> Config:
    """Load config once per path; ``force_reload`` re-reads the file."""
    key = _cache_key(config_path)
    with _lock:
        if force_reload or key not in _cache:
            _cache[key] = load_config(Path(key))
        return _cache[key]


def clear_config_cache(*, config_path: Path | None = None) -> None:
    """Drop one cached entry, or all of them."""
    with _lock:
        if config_path is None:
            _cache.clear()
        else:
            _cache.pop(_cache_key(config_path), None)


def get_rpc_config(*, config_path: Path | None = None, **overrides: Any) -> RpcConfig:
    """RPC settings from the cached config, with non-None ``overrides`` applied."""
    base = get_config(config_path=config_path).rpc
    updates = {k: v for k, v in overrides.items() if v is not None}
    unknown = set(updates) - set(RpcConfig.model_fields)
    if unknown:
        raise TypeError(f"Unknown RPC settings: {', '.join(sorted(unknown))}")
    return base.model_copy(update=updates)
