"""
Trie (prefix index) with compact leaves, backed by a node arena.

Techniques used:
  - Hybrid nodes: a subtree starts life as one ``CompactLeaf`` holding up to
    ``max_leaf_entries`` key suffixes.  When a new suffix would overflow it,
    the leaf is expanded in place into an ``InnerNode`` whose children are
    new, smaller leaves.
  - Arena storage: nodes live in a flat list and refer to their children by
    slot index.  Pruned slots go on a free list and are reused by later
    inserts, so no node is ever referenced from two places.
  - Iterative traversal: every operation walks with a loop or an explicit
    stack, so key length never touches the recursion limit.
  - Generator-based enumeration: ``search_prefix`` yields results lazily in
    key order and stops as soon as ``limit`` pairs have been produced.

Complexity (n = key/prefix length, m = results produced, L = leaf capacity):
  insert                     -- O(n + L) (L only when a leaf expands)
  delete / values            -- O(n)
  search_prefix              -- O(n + L log L + m) to first m results
  count / len                -- O(1)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Union

from trie_lookup.config import default_max_leaf_entries
from trie_lookup.errors import ConfigurationError, InvalidKeyEncoding
from trie_lookup.node import (
    CompactLeaf,
    InnerNode,
    Node,
    add_value,
    child_for,
    expand_leaf,
    is_empty,
)

logger = logging.getLogger(__name__)

Key = Union[str, bytes]

ROOT = 0

# Sentinel for "no value selector given" in delete(); None is a legal value.
_ANY = object()


def normalize_key(key: Key) -> str:
    """Return *key* as a ``str`` of whole code points.

    ``bytes`` are decoded as strict UTF-8.  A ``str`` holding lone surrogates
    is rejected, since it does not describe real characters.
    """
    if isinstance(key, bytes):
        try:
            return key.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidKeyEncoding(key, exc.reason) from exc
    if not isinstance(key, str):
        raise TypeError(f"keys must be str or bytes, not {type(key).__name__}")
    try:
        key.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidKeyEncoding(key, exc.reason) from exc
    return key


@dataclass(frozen=True)
class TrieStats:
    entries: int
    inner_nodes: int
    compact_leaves: int
    free_slots: int
    max_leaf_entries: int


class Trie:
    """Prefix index mapping string keys to multisets of arbitrary values.

    >>> t = Trie()
    >>> t.insert("go", 1)
    >>> t.insert("git", 2)
    >>> t.insert("gob", 3)
    >>> t.insert("go", 4)
    >>> list(t.search_prefix("go", 10))
    [('go', 1), ('go', 4), ('gob', 3)]
    >>> len(t)
    4
    """

    def __init__(self, max_leaf_entries: Optional[int] = None) -> None:
        if max_leaf_entries is None:
            max_leaf_entries = default_max_leaf_entries()
        elif max_leaf_entries < 1:
            raise ConfigurationError(
                f"max_leaf_entries must be >= 1, got {max_leaf_entries}"
            )
        self.max_leaf_entries = max_leaf_entries
        self._nodes: list[Optional[Node]] = [InnerNode()]
        self._free: list[int] = []
        self._size = 0
        # Bumped on every mutation so live search generators can notice.
        self._version = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def insert(self, key: Key, value: Any = True) -> None:
        """Add *value* under *key*.  Repeated inserts accumulate."""
        key = normalize_key(key)
        idx = ROOT
        i = 0
        while True:
            node = self._nodes[idx]
            if isinstance(node, InnerNode):
                if i == len(key):
                    add_value(node, value)
                    break
                ch = key[i]
                child = child_for(node, ch)
                if child is None:
                    # New branch: one leaf holding the rest of the key.
                    node.children[ch] = self._allocate(
                        CompactLeaf(groups={key[i + 1 :]: [value]})
                    )
                    break
                idx = child
                i += 1
                continue

            suffix = key[i:]
            if suffix in node.groups or len(node.groups) < self.max_leaf_entries:
                add_value(node, value, suffix)
                assert len(node.groups) <= self.max_leaf_entries, "compact leaf overflow"
                break
            # Full leaf and a new suffix: expand in place, then retry from
            # the same slot, which is now an inner node.
            self._nodes[idx] = expand_leaf(node, self._allocate)
            logger.debug(
                "Expanded compact leaf at slot %d (%d suffixes, key=%r)",
                idx, len(node.groups), key,
            )
        self._size += 1
        self._version += 1

    def search_prefix(
        self, prefix: Key = "", limit: Optional[int] = None
    ) -> Iterator[tuple[str, Any]]:
        """Yield ``(key, value)`` pairs whose key starts with *prefix*.

        Pairs come in ascending key order (by code point); values under the
        same key come in insertion order.  At most *limit* pairs are
        produced; ``None`` or ``0`` means no limit.  The trie must not be
        modified while the returned iterator is being consumed.
        """
        prefix = normalize_key(prefix)
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        return self._search(prefix, limit or None)

    def delete(
        self,
        key: Key,
        value: Any = _ANY,
        *,
        where: Optional[Callable[[Any], bool]] = None,
    ) -> int:
        """Remove values stored under *key*; return how many were removed.

        With no selector every value under *key* goes.  With *value* only
        the oldest equal occurrence goes.  With *where* every value the
        predicate accepts goes.  A missing key removes nothing.
        """
        if value is not _ANY and where is not None:
            raise TypeError("delete() takes either a value or a where= predicate, not both")
        key = normalize_key(key)

        path: list[tuple[int, str]] = []
        idx = ROOT
        i = 0
        while True:
            node = self._nodes[idx]
            if isinstance(node, InnerNode):
                if i == len(key):
                    bucket = node.values
                    break
                child = child_for(node, key[i])
                if child is None:
                    return 0
                path.append((idx, key[i]))
                idx = child
                i += 1
                continue
            suffix = key[i:]
            bucket = node.groups.get(suffix)
            if bucket is None:
                return 0
            break

        removed = _remove_matching(bucket, value, where)
        if not removed:
            return 0
        if isinstance(node, CompactLeaf) and not bucket:
            del node.groups[suffix]
        self._size -= removed
        self._version += 1
        self._prune(idx, path)
        return removed

    def count(self) -> int:
        """Total number of stored ``(key, value)`` pairs."""
        return self._size

    def values(self, key: Key) -> list[Any]:
        """Return a copy of the values stored under exactly *key*."""
        key = normalize_key(key)
        idx = ROOT
        for i, ch in enumerate(key):
            node = self._nodes[idx]
            if isinstance(node, CompactLeaf):
                return list(node.groups.get(key[i:], ()))
            child = child_for(node, ch)
            if child is None:
                return []
            idx = child
        node = self._nodes[idx]
        if isinstance(node, CompactLeaf):
            return list(node.groups.get("", ()))
        return list(node.values)

    def clear(self) -> None:
        self._nodes = [InnerNode()]
        self._free = []
        self._size = 0
        self._version += 1

    def stats(self) -> TrieStats:
        inner = leaves = 0
        for node in self._nodes:
            if isinstance(node, InnerNode):
                inner += 1
            elif isinstance(node, CompactLeaf):
                leaves += 1
        return TrieStats(
            entries=self._size,
            inner_nodes=inner,
            compact_leaves=leaves,
            free_slots=len(self._free),
            max_leaf_entries=self.max_leaf_entries,
        )

    def check_invariants(self) -> None:
        """Assert the structural invariants of the arena; for tests and debugging."""
        assert isinstance(self._nodes[ROOT], InnerNode), "root must be an inner node"
        seen: set[int] = set()
        entries = 0
        stack = [ROOT]
        while stack:
            idx = stack.pop()
            assert idx not in seen, f"slot {idx} reachable from two parents"
            seen.add(idx)
            node = self._nodes[idx]
            assert node is not None, f"slot {idx} is reachable but freed"
            if idx != ROOT:
                assert not is_empty(node), f"empty node left at slot {idx}"
            if isinstance(node, InnerNode):
                entries += len(node.values)
                for ch, child in node.children.items():
                    assert len(ch) == 1, f"child selector {ch!r} is not one code point"
                    stack.append(child)
            else:
                assert len(node.groups) <= self.max_leaf_entries, (
                    f"compact leaf at slot {idx} holds {len(node.groups)} suffixes"
                )
                for suffix, bucket in node.groups.items():
                    assert bucket, f"empty suffix group {suffix!r} at slot {idx}"
                    entries += len(bucket)
        assert entries == self._size, f"counter {self._size} != stored {entries}"
        for idx in self._free:
            assert self._nodes[idx] is None, f"free slot {idx} still holds a node"
        assert len(seen) + len(self._free) == len(self._nodes), "leaked arena slots"

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: Key) -> bool:
        return bool(self.values(key))

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return self.search_prefix("")

    def __repr__(self) -> str:
        return f"Trie(entries={self._size}, max_leaf_entries={self.max_leaf_entries})"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _allocate(self, node: Node) -> int:
        if self._free:
            idx = self._free.pop()
            self._nodes[idx] = node
            return idx
        self._nodes.append(node)
        return len(self._nodes) - 1

    def _release(self, idx: int) -> None:
        self._nodes[idx] = None
        self._free.append(idx)

    def _prune(self, idx: int, path: list[tuple[int, str]]) -> None:
        """Free empty nodes from *idx* upward; the root always stays."""
        while path and is_empty(self._nodes[idx]):
            parent_idx, ch = path.pop()
            parent = self._nodes[parent_idx]
            del parent.children[ch]
            self._release(idx)
            logger.debug("Pruned empty node at slot %d", idx)
            idx = parent_idx

    def _locate(self, prefix: str) -> Optional[tuple[int, int]]:
        """Walk *prefix* without creating nodes.

        Returns ``(slot, consumed)`` where *consumed* is how many code points
        were matched through inner nodes; the rest must be matched against
        the suffixes of the compact leaf at *slot*.
        """
        idx = ROOT
        for i, ch in enumerate(prefix):
            node = self._nodes[idx]
            if isinstance(node, CompactLeaf):
                return idx, i
            child = child_for(node, ch)
            if child is None:
                return None
            idx = child
        return idx, len(prefix)

    def _search(self, prefix: str, limit: Optional[int]) -> Iterator[tuple[str, Any]]:
        version = self._version
        found = self._locate(prefix)
        if found is None:
            return
        idx, consumed = found
        produced = 0
        # DFS with explicit stack: (slot, key so far, suffix filter).  Only
        # the starting leaf can carry a non-empty filter.
        stack: list[tuple[int, str, str]] = [(idx, prefix[:consumed], prefix[consumed:])]
        while stack:
            self._check_unchanged(version)
            slot, acc, wanted = stack.pop()
            node = self._nodes[slot]
            if isinstance(node, InnerNode):
                for value in node.values:
                    yield acc, value
                    self._check_unchanged(version)
                    produced += 1
                    if produced == limit:
                        return
                for ch in sorted(node.children, reverse=True):
                    stack.append((node.children[ch], acc + ch, ""))
                continue
            for suffix in sorted(s for s in node.groups if s.startswith(wanted)):
                for value in node.groups[suffix]:
                    yield acc + suffix, value
                    self._check_unchanged(version)
                    produced += 1
                    if produced == limit:
                        return

    def _check_unchanged(self, version: int) -> None:
        if self._version != version:
            raise RuntimeError("trie was modified during prefix search")


def _remove_matching(
    bucket: list[Any], value: Any, where: Optional[Callable[[Any], bool]]
) -> int:
    if where is not None:
        kept = [item for item in bucket if not where(item)]
        removed = len(bucket) - len(kept)
        bucket[:] = kept
        return removed
    if value is _ANY:
        removed = len(bucket)
        bucket.clear()
        return removed
    for pos, item in enumerate(bucket):
        if item == value:
            del bucket[pos]
            return 1
    return 0
