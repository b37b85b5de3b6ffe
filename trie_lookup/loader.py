"""Bulk loading of ``(key, value)`` pairs into a trie."""

from __future__ import annotations

import logging
import os
from typing import Any, Iterable, Union

from trie_lookup.errors import InvalidKeyEncoding
from trie_lookup.locked import LockedTrie
from trie_lookup.trie import Key, Trie, normalize_key

logger = logging.getLogger(__name__)

AnyTrie = Union[Trie, LockedTrie]


def load_pairs(trie: AnyTrie, pairs: Iterable[tuple[Key, Any]]) -> int:
    """Insert every pair from *pairs*; return how many were inserted."""
    if isinstance(trie, LockedTrie):
        return trie.insert_many(pairs)
    inserted = 0
    for key, value in pairs:
        trie.insert(key, value)
        inserted += 1
    return inserted


def read_word_file(path: Union[str, os.PathLike]) -> Iterable[tuple[str, str]]:
    """Yield ``(key, value)`` pairs from a UTF-8 word list.

    One entry per line, either ``word`` (the word is its own value) or
    ``key<TAB>value``.  Blank lines, lines starting with ``#`` and lines
    whose key is empty are skipped.
    """
    with open(path, "rb") as f:
        for lineno, raw in enumerate(f, start=1):
            try:
                line = normalize_key(raw)
            except InvalidKeyEncoding as exc:
                raise InvalidKeyEncoding(raw, f"{path}:{lineno}: {exc.reason}") from exc
            line = line.rstrip("\r\n")
            if not line.strip() or line.lstrip().startswith("#"):
                continue
            key, sep, value = line.partition("\t")
            key = key.strip()
            if not key:
                logger.warning("Skipping %s:%d: empty key", path, lineno)
                continue
            yield key, (value.strip() if sep else key)


def load_word_file(trie: AnyTrie, path: Union[str, os.PathLike]) -> int:
    """Load the word list at *path* into *trie*; return the entry count."""
    count = load_pairs(trie, read_word_file(path))
    logger.info("Loaded %s entries from %s", f"{count:,}", path)
    return count
