"""
Remapping of converged labels into a contiguous cluster-id range.
"""
import numpy as np


def compact_labels(labels):
    """
    Relabel so cluster ids are 0..k-1, numbered in order of first appearance
    when scanning nodes by index (not sorted by raw value).

    Parameters:
    -----------
    labels : array-like of int
        Raw labels, one per node.

    Returns:
    --------
    compacted : numpy.ndarray
        int64 array of cluster ids, same shape as labels.
    k : int
        Number of distinct clusters.
    """
    labels = np.asarray(labels, dtype=np.int64)
    if labels.size == 0:
        return np.empty(0, dtype=np.int64), 0

    uniq, first_idx, inverse = np.unique(labels, return_index=True, return_inverse=True)
    # rank of each unique value by where it first shows up
    rank = np.empty(uniq.shape[0], dtype=np.int64)
    rank[np.argsort(first_idx, kind='stable')] = np.arange(uniq.shape[0], dtype=np.int64)
    return rank[inverse.ravel()].reshape(labels.shape), int(uniq.shape[0])


def compact_labels_inplace(labels):
    """Compact an int64 label array in place and return k."""
    compacted, k = compact_labels(labels)
    labels[...] = compacted
    return k
