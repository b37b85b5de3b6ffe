import pytest

from trie_lookup import Trie


@pytest.fixture
def scenario_trie():
    """The go/git/gob/go example used throughout the docs."""
    trie = Trie()
    trie.insert("go", 1)
    trie.insert("git", 2)
    trie.insert("gob", 3)
    trie.insert("go", 4)
    return trie


@pytest.fixture(params=[1, 2, 4, 50], ids=lambda n: f"leaf{n}")
def make_trie(request):
    """Factory building tries across a spread of leaf capacities."""

    def factory():
        return Trie(max_leaf_entries=request.param)

    return factory
