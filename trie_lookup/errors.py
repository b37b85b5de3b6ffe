"""Exceptions raised by the trie lookup package."""

from __future__ import annotations

from typing import Any


class TrieLookupError(Exception):
    """Base class for every error raised by this package."""


class InvalidKeyEncoding(TrieLookupError, ValueError):
    """A key could not be turned into a clean sequence of code points."""

    def __init__(self, key: Any, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"invalid key encoding for {key!r}: {reason}")


class ConfigurationError(TrieLookupError, ValueError):
    """A configuration value is missing or out of range."""
