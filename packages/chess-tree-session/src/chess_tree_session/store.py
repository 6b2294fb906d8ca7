"""Durable storage for encoded move trees."""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable
from uuid import uuid4

import redis
from loguru import logger

from chess_tree_model import NotFound, Settings


@runtime_checkable
class TreeStore(Protocol):
    """Protocol for stores that keep encoded trees by session."""

    def put(self, session_id: str, blob: str) -> str:
        """Store `blob` for `session_id` and return an opaque reference."""
        ...

    def get(self, ref: str) -> str:
        """Return the blob stored under `ref`, or raise NotFound."""
        ...


def _new_ref(prefix: str, session_id: str) -> str:
    return f"{prefix}{session_id}:{uuid4().hex}"


class MemoryTreeStore:
    def __init__(self, prefix: str = "move-tree:") -> None:
        self.prefix = prefix
        self._blobs: dict[str, str] = {}
        self._lock = threading.Lock()

    def put(self, session_id: str, blob: str) -> str:
        ref = _new_ref(self.prefix, session_id)
        with self._lock:
            self._blobs[ref] = blob
        return ref

    def get(self, ref: str) -> str:
        with self._lock:
            blob = self._blobs.get(ref)
        if blob is None:
            raise NotFound(ref, "stored tree")
        return blob

    def __len__(self) -> int:
        return len(self._blobs)


class RedisTreeStore:
    """Redis-backed store; each saved tree is one string key, optionally expiring.

    Storage layout:
    - key: <prefix><session_id>:<uuid>
    - value: the encoded tree
    """

    def __init__(
        self,
        client: redis.Redis | None = None,
        *,
        redis_url: str | None = None,
        ttl_seconds: int = 0,
        prefix: str = "move-tree:",
    ) -> None:
        self.ttl_seconds = int(ttl_seconds)
        self.prefix = prefix
        if client is None:
            client = redis.Redis.from_url(redis_url or Settings.from_env().redis_url, decode_responses=True)
        self._r = client

    @classmethod
    def from_settings(cls, settings: Settings) -> RedisTreeStore:
        return cls(
            redis_url=settings.redis_url,
            ttl_seconds=settings.store_ttl,
            prefix=settings.key_prefix,
        )

    def put(self, session_id: str, blob: str) -> str:
        ref = _new_ref(self.prefix, session_id)
        self._r.set(ref, blob, ex=self.ttl_seconds or None)
        logger.debug("Stored {} ({} bytes, ttl {})", ref, len(blob), self.ttl_seconds)
        return ref

    def get(self, ref: str) -> str:
        blob = self._r.get(ref)
        if blob is None:
            raise NotFound(ref, "stored tree")
        if isinstance(blob, bytes):
            blob = blob.decode("utf-8")
        return blob
