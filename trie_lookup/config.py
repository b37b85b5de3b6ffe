"""Environment-driven settings for the trie and the lookup service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from trie_lookup.errors import ConfigurationError

DEFAULT_MAX_LEAF_ENTRIES = 50
DEFAULT_LIMIT = 25
MAX_LIMIT = 100


def _int_setting(env: Mapping[str, str], name: str, default: int, minimum: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    max_leaf_entries: int = DEFAULT_MAX_LEAF_ENTRIES
    seed_file: str | None = None
    default_limit: int = DEFAULT_LIMIT
    max_limit: int = MAX_LIMIT
    port: int = 8080
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``os.environ`` (or *env* when given)."""
        if env is None:
            env = os.environ
        default_limit = _int_setting(env, "TRIE_DEFAULT_LIMIT", DEFAULT_LIMIT, 1)
        max_limit = _int_setting(env, "TRIE_MAX_LIMIT", MAX_LIMIT, 1)
        if default_limit > max_limit:
            raise ConfigurationError(
                f"TRIE_DEFAULT_LIMIT ({default_limit}) exceeds TRIE_MAX_LIMIT ({max_limit})"
            )
        return cls(
            max_leaf_entries=_int_setting(
                env, "TRIE_MAX_LEAF_ENTRIES", DEFAULT_MAX_LEAF_ENTRIES, 1
            ),
            seed_file=env.get("TRIE_SEED_FILE") or None,
            default_limit=default_limit,
            max_limit=max_limit,
            port=_int_setting(env, "PORT", 8080, 1),
            debug=env.get("FLASK_DEBUG", "0") == "1",
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


def default_max_leaf_entries() -> int:
    """Leaf capacity used when a trie is built without an explicit one."""
    return _int_setting(os.environ, "TRIE_MAX_LEAF_ENTRIES", DEFAULT_MAX_LEAF_ENTRIES, 1)
