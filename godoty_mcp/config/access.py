"""Process-wide config cache used by the CLI."""

from __future__ import annotations

import os
import threading
from pathlib import Path

from godoty_mcp.config.loader import LEGACY_URL_ENV, get_config_path, load_config
from godoty_mcp.config.schema import Config

_lock = threading.RLock()
_cache: dict[tuple[Path, str], Config] = {}


def _resolve(config_path: Path | None) -> Path:
    return Path(config_path or get_config_path()).expanduser().resolve()


def get_config(*, config_path: Path | None = None, force_reload: bool = False) -> Config:
    """
    Return the config for ``config_path`` (default ~/.godoty/config.json).

    Entries are keyed by file and by the current GODOT_WS_URL, so changing the
    URL override in-process never returns a stale connection target.
    """
    path = _resolve(config_path)
    key = (path, os.environ.get(LEGACY_URL_ENV, ""))
    with _lock:
        cfg = None if force_reload else _cache.get(key)
        if cfg is None:
            cfg = _cache[key] = load_config(path)
        return cfg


def clear_config_cache(*, config_path: Path | None = None) -> None:
    """Drop cached entries for one file, or everything when no path is given."""
    with _lock:
        if config_path is None:
            _cache.clear()
            return
        path = _resolve(config_path)
        for key in [k for k in _cache if k[0] == path]:
            del _cache[key]
