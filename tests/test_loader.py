import logging

import pytest

from trie_lookup import InvalidKeyEncoding, LockedTrie, Trie, load_pairs, load_word_file


def test_load_pairs_into_plain_trie():
    trie = Trie()
    assert load_pairs(trie, [("go", 1), ("git", 2)]) == 2
    assert list(trie.search_prefix("g")) == [("git", 2), ("go", 1)]


def test_load_pairs_into_locked_trie():
    index = LockedTrie()
    assert load_pairs(index, (("w%d" % i, i) for i in range(10))) == 10
    assert len(index) == 10


def test_load_word_file(tmp_path, caplog):
    path = tmp_path / "words.txt"
    path.write_text(
        "# people\n"
        "alice\n"
        "\n"
        "bob\tuser:2\n"
        "bob\tuser:7\n"
        "zoë\r\n",
        encoding="utf-8",
    )
    trie = Trie()
    with caplog.at_level(logging.INFO, logger="trie_lookup.loader"):
        assert load_word_file(trie, path) == 4
    assert list(trie) == [
        ("alice", "alice"),
        ("bob", "user:2"),
        ("bob", "user:7"),
        ("zoë", "zoë"),
    ]
    assert "Loaded 4 entries" in caplog.text


def test_load_word_file_rejects_bad_utf8(tmp_path):
    path = tmp_path / "broken.txt"
    path.write_bytes(b"fine\n\xff\xfeoops\n")
    with pytest.raises(InvalidKeyEncoding) as excinfo:
        load_word_file(Trie(), path)
    assert ":2:" in excinfo.value.reason


def test_load_word_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_word_file(Trie(), tmp_path / "nope.txt")


def test_load_word_file_skips_empty_keys_and_strips_values(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("\torphan\n  \tghost\nbob\tuser:2 \n", encoding="utf-8")
    trie = Trie()
    assert load_word_file(trie, path) == 1
    assert list(trie) == [("bob", "user:2")]
    assert "" not in trie
