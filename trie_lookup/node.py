"""
Node variants stored in the trie arena.

A slot in the arena holds exactly one of two shapes:

  - ``InnerNode``: branches on a single code point.  ``children`` maps each
    code point to the arena slot of the child, and ``values`` is the multiset
    of payloads whose key ends exactly here.
  - ``CompactLeaf``: holds the remaining key suffixes of a whole subtree as a
    flat mapping ``suffix -> values`` instead of one node per character.  The
    empty suffix is a valid group (the key ends at the leaf itself).

The trie converts a full leaf into an inner node with ``expand_leaf``; that is
the only place one variant turns into the other.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Union


@dataclass
class InnerNode:
    """Branching node: one child slot per code point."""

    children: dict[str, int] = field(default_factory=dict)
    values: list[Any] = field(default_factory=list)


@dataclass
class CompactLeaf:
    """Flat group of ``suffix -> values`` standing in for a small subtree."""

    groups: dict[str, list[Any]] = field(default_factory=dict)


Node = Union[InnerNode, CompactLeaf]


def child_for(node: Node, ch: str) -> int | None:
    """Return the arena slot of *node*'s child for *ch*, if any."""
    if not isinstance(node, InnerNode):
        raise TypeError("child_for() only applies to inner nodes")
    return node.children.get(ch)


def add_value(node: Node, value: Any, suffix: str = "") -> None:
    """Append *value* to the multiset for *suffix* (always ``""`` on inner nodes)."""
    if isinstance(node, InnerNode):
        assert suffix == "", "inner nodes only hold values for the empty suffix"
        node.values.append(value)
    else:
        node.groups.setdefault(suffix, []).append(value)


def is_empty(node: Node) -> bool:
    if isinstance(node, InnerNode):
        return not node.values and not node.children
    return not node.groups


def expand_leaf(leaf: CompactLeaf, allocate: Callable[[Node], int]) -> InnerNode:
    """Turn *leaf* into an equivalent inner node.

    Each group moves one level down: its first code point selects (or
    creates, via *allocate*) a child leaf, and the rest of the suffix becomes
    a group in that child.  The empty-suffix group becomes the inner node's
    own values.  Groups are moved in sorted order so children are created
    deterministically.
    """
    inner = InnerNode()
    leaves: dict[str, CompactLeaf] = {}
    for suffix in sorted(leaf.groups):
        values = leaf.groups[suffix]
        if not suffix:
            inner.values.extend(values)
            continue
        head, rest = suffix[0], suffix[1:]
        child = leaves.get(head)
        if child is None:
            child = leaves[head] = CompactLeaf()
            inner.children[head] = allocate(child)
        child.groups[rest] = values
    return inner
