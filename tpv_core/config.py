"""Environment-driven configuration.

Environment variables:
    TPV_STATE_DIR: Directory holding the persisted session (default: ~/.tpv)
    TPV_STORAGE_KEY: Name of the persisted session blob (default: tpv_matet_v1)
    TPV_CATALOG_PATH: Optional JSON file with the product catalog
    TPV_LOG_LEVEL: structlog filtering level (default: INFO)
    TPV_STRONG_IDS: "0" forces the weak timestamp-based id policy (default: 1)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_STORAGE_KEY = "tpv_matet_v1"
DEFAULT_STATE_DIR = "~/.tpv"


@dataclass(frozen=True)
class Config:
    state_dir: Path
    storage_key: str = DEFAULT_STORAGE_KEY
    catalog_path: Optional[Path] = None
    log_level: str = "INFO"
    strong_ids: bool = True


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Build a Config from the environment (os.environ by default)."""
    env = os.environ if environ is None else environ

    catalog_path = env.get("TPV_CATALOG_PATH", "").strip()

    return Config(
        state_dir=Path(env.get("TPV_STATE_DIR", DEFAULT_STATE_DIR)).expanduser(),
        storage_key=env.get("TPV_STORAGE_KEY", "").strip() or DEFAULT_STORAGE_KEY,
        catalog_path=Path(catalog_path).expanduser() if catalog_path else None,
        log_level=env.get("TPV_LOG_LEVEL", "INFO").upper(),
        strong_ids=env.get("TPV_STRONG_IDS", "1").strip().lower() not in ("0", "false", "no", "off"),
    )
