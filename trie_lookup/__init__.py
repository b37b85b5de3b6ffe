"""Trie Lookup -- in-memory prefix index for suggest-as-you-type."""

from trie_lookup.errors import ConfigurationError, InvalidKeyEncoding, TrieLookupError
from trie_lookup.trie import Trie, TrieStats, normalize_key
from trie_lookup.locked import LockedTrie
from trie_lookup.loader import load_pairs, load_word_file, read_word_file
from trie_lookup.config import DEFAULT_MAX_LEAF_ENTRIES, Settings

__all__ = [
    "DEFAULT_MAX_LEAF_ENTRIES",
    "ConfigurationError",
    "InvalidKeyEncoding",
    "LockedTrie",
    "Settings",
    "Trie",
    "TrieLookupError",
    "TrieStats",
    "load_pairs",
    "load_word_file",
    "normalize_key",
    "read_word_file",
]
