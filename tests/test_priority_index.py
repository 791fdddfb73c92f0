"""Unit tests for the sorted priority buckets."""

from __future__ import annotations

from psp_core.priority_index import PriorityIndex


def test_insert_keeps_priorities_sorted_without_duplicates() -> None:
    index = PriorityIndex()
    for priority, subscriber_id in [(5, "a"), (-3, "b"), (100, "c"), (5, "d"), (0, "e"), (-3, "f")]:
        index.insert(priority, subscriber_id)

    assert index.order == (-3, 0, 5, 100)
    assert index.descending() == (100, 5, 0, -3)
    assert index.bucket(5) == ("a", "d")
    assert index.bucket(-3) == ("b", "f")
    assert len(index) == 6


def test_ids_follow_publish_order() -> None:
    index = PriorityIndex()
    index.insert(1, "low")
    index.insert(9, "high-1")
    index.insert(9, "high-2")
    index.insert(-40, "lowest")

    assert list(index.ids()) == ["high-1", "high-2", "low", "lowest"]


def test_remove_compacts_empty_buckets() -> None:
    index = PriorityIndex()
    index.insert(2, "x")
    index.insert(2, "y")
    index.insert(7, "z")

    assert index.remove(2, "x")
    assert index.order == (2, 7)
    assert index.remove(2, "y")
    assert index.order == (7,)
    assert 2 not in index
    assert index.bucket(2) == ()


def test_remove_missing_entries_is_harmless() -> None:
    index = PriorityIndex()
    index.insert(3, "present")

    assert not index.remove(3, "absent")
    assert not index.remove(4, "present")
    assert index.bucket(3) == ("present",)


def test_large_and_negative_priorities_are_not_clamped() -> None:
    index = PriorityIndex()
    index.insert(10**12, "huge")
    index.insert(-(10**12), "tiny")

    assert index.descending() == (10**12, -(10**12))


def test_next_below_follows_live_order() -> None:
    index = PriorityIndex()
    assert index.highest() is None
    for priority in (10, 3, -2):
        index.insert(priority, f"id{priority}")

    assert index.highest() == 10
    assert index.next_below(10) == 3
    index.insert(-1, "late")
    assert index.next_below(3) == -1
    index.remove(3, "id3")
    assert index.next_below(3) == -1
    assert index.next_below(-2) is None
