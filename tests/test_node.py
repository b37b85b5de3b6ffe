import pytest

from trie_lookup.node import (
    CompactLeaf,
    InnerNode,
    add_value,
    child_for,
    expand_leaf,
    is_empty,
)


def _arena():
    slots = []

    def allocate(node):
        slots.append(node)
        return len(slots) - 1

    return slots, allocate


def test_child_for_inner_node():
    node = InnerNode(children={"a": 3})
    assert child_for(node, "a") == 3
    assert child_for(node, "b") is None


def test_child_for_rejects_leaf():
    with pytest.raises(TypeError):
        child_for(CompactLeaf(), "a")


def test_add_value_accumulates():
    inner = InnerNode()
    add_value(inner, 1)
    add_value(inner, 1)
    assert inner.values == [1, 1]

    leaf = CompactLeaf()
    add_value(leaf, "x", "bc")
    add_value(leaf, "y", "bc")
    add_value(leaf, "z", "")
    assert leaf.groups == {"bc": ["x", "y"], "": ["z"]}


def test_is_empty():
    assert is_empty(InnerNode())
    assert not is_empty(InnerNode(values=[1]))
    assert not is_empty(InnerNode(children={"a": 1}))
    assert is_empty(CompactLeaf())
    assert not is_empty(CompactLeaf(groups={"": [1]}))


def test_expand_leaf_moves_groups_down_one_level():
    leaf = CompactLeaf(groups={"": [0], "b": [1], "bc": [2], "d": [3, 4]})
    slots, allocate = _arena()

    inner = expand_leaf(leaf, allocate)

    assert inner.values == [0]
    assert sorted(inner.children) == ["b", "d"]
    b = slots[inner.children["b"]]
    d = slots[inner.children["d"]]
    assert b.groups == {"": [1], "c": [2]}
    assert d.groups == {"": [3, 4]}
    assert len(slots) == 2


def test_expand_leaf_allocates_children_in_sorted_order():
    leaf = CompactLeaf(groups={"z": [1], "a": [2], "m": [3]})
    slots, allocate = _arena()
    inner = expand_leaf(leaf, allocate)
    assert [inner.children[ch] for ch in "amz"] == [0, 1, 2]
