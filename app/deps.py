from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict

import yaml
from dotenv import load_dotenv

from core.pitr.timeline import MERGE_TOLERANCE_MS
from storage.cache.redis_client import CacheClient

ROOT = Path(__file__).resolve().parent.parent

logger = logging.getLogger(__name__)


def _load_yaml(path: Path) -> Dict:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _tolerance_from(cfg: Dict) -> int:
    raw = os.getenv("PITR_MERGE_TOLERANCE_MS") or cfg.get("timeline", {}).get("merge_tolerance_ms")
    if raw is None:
        return MERGE_TOLERANCE_MS
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid merge tolerance %r; using %d ms", raw, MERGE_TOLERANCE_MS)
        return MERGE_TOLERANCE_MS
    return max(0, value)


@dataclass
class AppState:
    pitr_cfg: Dict
    cache: CacheClient
    merge_tolerance_ms: int
    grid_cells: int
    snapshot_ttl_seconds: int


@lru_cache(maxsize=1)
def get_app_state() -> AppState:
    load_dotenv(ROOT / ".env")
    pitr_cfg = _load_yaml(Path(os.getenv("PITR_CONFIG", ROOT / "config" / "pitr.yaml")))
    snapshots = pitr_cfg.get("snapshots", {})
    cache = CacheClient(os.getenv("REDIS_URL"), key_prefix=snapshots.get("key_prefix", "pitrwindow"))
    return AppState(
        pitr_cfg=pitr_cfg,
        cache=cache,
        merge_tolerance_ms=_tolerance_from(pitr_cfg),
        grid_cells=int(pitr_cfg.get("calendar", {}).get("grid_cells", 42)),
        snapshot_ttl_seconds=int(snapshots.get("ttl_seconds", 3600)),
    )


def get_merge_tolerance_ms() -> int:
    return get_app_state().merge_tolerance_ms


def get_cache() -> CacheClient:
    return get_app_state().cache
