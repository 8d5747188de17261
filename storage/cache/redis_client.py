from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional, Tuple

import redis

from storage.cache.keys import make_cache_key

logger = logging.getLogger(__name__)


class CacheClient:
    """JSON snapshot store backed by redis, with an in-process dict when redis is absent."""

    def __init__(self, url: str | None, key_prefix: str = "pitrwindow"):
        # key -> (payload, monotonic expiry or None)
        self.fallback: dict[str, Tuple[str, Optional[float]]] = {}
        self.key_prefix = key_prefix
        self.client = None
        if url:
            try:
                self.client = redis.from_url(url)
            except (ValueError, redis.RedisError) as exc:
                logger.warning("Redis unavailable at %s (%s); using in-process snapshots", url, exc)
                self.client = None

    def key(self, kind: str, ident: str) -> str:
        return make_cache_key(self.key_prefix, kind, ident)

    def set(self, key: str, value: Any, ex: Optional[int] = None) -> None:
        payload = json.dumps(value)
        if self.client:
            try:
                self.client.set(key, payload, ex=ex)
                self.fallback.pop(key, None)
                return
            except redis.RedisError as exc:
                logger.warning("Redis SET %s failed: %s", key, exc)
        expires_at = time.monotonic() + ex if ex is not None else None
        self.fallback[key] = (payload, expires_at)

    def _fallback_get(self, key: str) -> Optional[str]:
        entry = self.fallback.get(key)
        if entry is None:
            return None
        payload, expires_at = entry
        if expires_at is not None and time.monotonic() >= expires_at:
            del self.fallback[key]
            return None
        return payload

    def get(self, key: str) -> Any | None:
        if self.client:
            try:
                value = self.client.get(key)
                if value is not None:
                    return json.loads(value)
            except redis.RedisError as exc:
                logger.warning("Redis GET %s failed: %s", key, exc)
        payload = self._fallback_get(key)
        return json.loads(payload) if payload else None

    def delete(self, key: str) -> None:
        if self.client:
            try:
                self.client.delete(key)
            except redis.RedisError as exc:
                logger.warning("Redis DEL %s failed: %s", key, exc)
        self.fallback.pop(key, None)

    def clear(self) -> None:
        if self.client:
            try:
                self.client.flushdb()
            except redis.RedisError as exc:
                logger.warning("Redis FLUSHDB failed: %s", exc)
        self.fallback.clear()
