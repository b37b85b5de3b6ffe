"""Thread-safe wrapper around :class:`~trie_lookup.trie.Trie`.

One re-entrant lock serialises writers.  Searches take the same lock for
the descent and copy out at most ``limit`` results before releasing it, so
callers get a plain list that later writes cannot disturb.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Iterable, Iterator, Optional

from trie_lookup.trie import _ANY, Key, Trie, TrieStats


class LockedTrie:
    """A :class:`Trie` guarded by a single lock, for use behind a server."""

    def __init__(self, max_leaf_entries: Optional[int] = None) -> None:
        self._trie = Trie(max_leaf_entries)
        self._lock = threading.RLock()

    @property
    def max_leaf_entries(self) -> int:
        return self._trie.max_leaf_entries

    def insert(self, key: Key, value: Any = True) -> None:
        with self._lock:
            self._trie.insert(key, value)

    def insert_many(self, pairs: Iterable[tuple[Key, Any]]) -> int:
        """Insert every pair while holding the lock once; return the count."""
        inserted = 0
        with self._lock:
            for key, value in pairs:
                self._trie.insert(key, value)
                inserted += 1
        return inserted

    def search_prefix(
        self, prefix: Key = "", limit: Optional[int] = None
    ) -> list[tuple[str, Any]]:
        with self._lock:
            return list(self._trie.search_prefix(prefix, limit))

    def delete(
        self,
        key: Key,
        value: Any = _ANY,
        *,
        where: Optional[Callable[[Any], bool]] = None,
    ) -> int:
        with self._lock:
            return self._trie.delete(key, value, where=where)

    def values(self, key: Key) -> list[Any]:
        with self._lock:
            return self._trie.values(key)

    def count(self) -> int:
        return len(self._trie)

    def clear(self) -> None:
        with self._lock:
            self._trie.clear()

    def stats(self) -> TrieStats:
        with self._lock:
            return self._trie.stats()

    def check_invariants(self) -> None:
        with self._lock:
            self._trie.check_invariants()

    def __len__(self) -> int:
        return len(self._trie)

    def __contains__(self, key: Key) -> bool:
        with self._lock:
            return key in self._trie

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(self.search_prefix(""))
