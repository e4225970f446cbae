"""Tests for label compaction."""

import numpy as np

from chinese_whispers.compaction import compact_labels, compact_labels_inplace


def test_first_seen_order():
    compacted, k = compact_labels([5, 5, 2, 7, 2])
    assert compacted.tolist() == [0, 0, 1, 2, 1]
    assert k == 3


def test_not_sorted_by_value():
    compacted, k = compact_labels([9, 1, 9, 0])
    assert compacted.tolist() == [0, 1, 0, 2]
    assert k == 3


def test_idempotent():
    once, k1 = compact_labels([4, 4, 1, 3, 1, 0])
    twice, k2 = compact_labels(once)
    assert np.array_equal(once, twice)
    assert k1 == k2 == 4


def test_empty():
    compacted, k = compact_labels(np.empty(0, dtype=np.int64))
    assert compacted.size == 0
    assert k == 0


def test_inplace():
    labels = np.array([3, 1, 3, 3], dtype=np.int64)
    k = compact_labels_inplace(labels)
    assert k == 2
    assert labels.tolist() == [0, 1, 0, 0]
