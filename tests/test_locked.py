import threading

from trie_lookup import LockedTrie


def test_search_returns_a_list_snapshot():
    index = LockedTrie(max_leaf_entries=2)
    index.insert("go", 1)
    index.insert("gob", 3)
    results = index.search_prefix("go", 10)
    index.insert("goal", 5)
    assert results == [("go", 1), ("gob", 3)]
    assert index.search_prefix("go", 10) == [("go", 1), ("goal", 5), ("gob", 3)]


def test_same_surface_as_trie():
    index = LockedTrie()
    assert index.insert_many([("a", 1), ("b", 2), ("a", 3)]) == 3
    assert len(index) == 3
    assert index.count() == 3
    assert "a" in index
    assert index.values("a") == [1, 3]
    assert index.delete("a", 1) == 1
    assert list(index) == [("a", 3), ("b", 2)]
    assert index.stats().entries == 2
    index.clear()
    assert len(index) == 0
    index.check_invariants()


def test_concurrent_writers_and_readers():
    index = LockedTrie(max_leaf_entries=3)
    errors = []

    def writer(tag):
        for i in range(200):
            index.insert(f"{tag}{i:03d}", i)

    def reader():
        try:
            for _ in range(200):
                index.search_prefix("w", 5)
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=writer, args=(f"w{n}",)) for n in range(4)]
    threads += [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(index) == 800
    assert len(index.search_prefix("w2")) == 200
    index.check_invariants()
