"""Settings for move tree sessions, read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import get_args

from .types import DuplicatePolicy, PlyPolicy

DEFAULT_REDIS_URL = "redis://localhost:6379/0"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _flag(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{key}: expected a boolean, got {raw!r}")


def _choice(env: Mapping[str, str], key: str, allowed: tuple[str, ...], default: str) -> str:
    value = env.get(key, default).strip().lower()
    if value not in allowed:
        raise ValueError(f"{key}: expected one of {allowed}, got {value!r}")
    return value


@dataclass(frozen=True, slots=True)
class Settings:
    ply_policy: PlyPolicy = "lenient"
    duplicate_policy: DuplicatePolicy = "branch"
    validate_on_mutation: bool = False
    redis_url: str = DEFAULT_REDIS_URL
    store_ttl: int = 0  # seconds; 0 keeps blobs forever
    key_prefix: str = "move-tree:"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if env is None else env
        ttl_raw = env.get("MOVE_TREE_STORE_TTL", "0")
        try:
            ttl = int(ttl_raw)
        except ValueError:
            raise ValueError(f"MOVE_TREE_STORE_TTL: expected seconds, got {ttl_raw!r}") from None
        if ttl < 0:
            raise ValueError("MOVE_TREE_STORE_TTL: must be >= 0")
        return cls(
            ply_policy=_choice(env, "MOVE_TREE_PLY_POLICY", get_args(PlyPolicy), "lenient"),  # type: ignore[arg-type]
            duplicate_policy=_choice(
                env, "MOVE_TREE_DUPLICATE_MOVES", get_args(DuplicatePolicy), "branch"
            ),  # type: ignore[arg-type]
            validate_on_mutation=_flag(env, "MOVE_TREE_VALIDATE_ON_MUTATION", False),
            redis_url=env.get("MOVE_TREE_REDIS_URL") or env.get("REDIS_URL") or DEFAULT_REDIS_URL,
            store_ttl=ttl,
            key_prefix=env.get("MOVE_TREE_KEY_PREFIX", "move-tree:"),
        )
