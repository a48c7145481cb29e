from __future__ import annotations

import os
from pathlib import Path

KV_FILENAME = "kv.json"


def data_root() -> Path:
    env_root = os.getenv("COST_CENTER_DATA_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path(__file__).resolve().parents[2] / "var"


def ensure_data_root() -> Path:
    """Ensure the local data directory exists and return it."""

    root = data_root()
    root.mkdir(parents=True, exist_ok=True)
    return root


def kv_path() -> Path:
    return ensure_data_root() / KV_FILENAME
