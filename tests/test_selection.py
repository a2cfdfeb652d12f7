# tests/test_selection.py
"""Tests for lexisnap.services.selection"""

import threading

from lexisnap.services.selection import SelectionSet


def _fixed_clock(value: float = 1.5):
    return lambda: value


class TestSelectionSetAdd:
    def test_add_returns_snippet_with_timestamp_prefix_id(self):
        selection = SelectionSet(clock=_fixed_clock())
        snippet = selection.add("hello world")
        assert snippet is not None
        assert snippet.text == "hello world"
        assert snippet.id == "1500-hello worl"

    def test_duplicate_text_is_ignored(self):
        selection = SelectionSet()
        first = selection.add("apple")
        second = selection.add("apple")
        assert first is not None
        assert second is None
        assert selection.texts() == ["apple"]

    def test_preserves_insertion_order(self):
        selection = SelectionSet()
        for text in ["b", "a", "c"]:
            selection.add(text)
        assert selection.texts() == ["b", "a", "c"]

    def test_ids_are_unique_within_same_millisecond(self):
        selection = SelectionSet(clock=_fixed_clock())
        # Same first 10 characters, same clock tick
        first = selection.add("abcdefghij-one")
        second = selection.add("abcdefghij-two")
        assert first.id != second.id
        assert second.id == f"{first.id}-1"


class TestSelectionSetRemove:
    def test_remove_existing(self):
        selection = SelectionSet()
        snippet = selection.add("apple")
        assert selection.remove(snippet.id) is True
        assert len(selection) == 0

    def test_remove_unknown_id_is_noop(self):
        selection = SelectionSet()
        selection.add("apple")
        assert selection.remove("missing") is False
        assert selection.texts() == ["apple"]

    def test_text_can_be_added_again_after_removal(self):
        selection = SelectionSet()
        snippet = selection.add("apple")
        selection.remove(snippet.id)
        assert selection.add("apple") is not None


class TestSelectionSetMisc:
    def test_clear(self):
        selection = SelectionSet()
        selection.add("a")
        selection.add("b")
        selection.clear()
        assert len(selection) == 0
        assert selection.list() == []

    def test_contains(self):
        selection = SelectionSet()
        selection.add("apple")
        assert "apple" in selection
        assert "pear" not in selection

    def test_list_is_a_snapshot(self):
        selection = SelectionSet()
        selection.add("a")
        snapshot = selection.list()
        selection.add("b")
        assert [s.text for s in snapshot] == ["a"]

    def test_concurrent_adds_of_same_text_keep_one(self):
        selection = SelectionSet()
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            selection.add("same")

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert selection.texts() == ["same"]
