"""
Edge accumulation and normalization for Chinese Whispers clustering.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np


@dataclass(frozen=True)
class Edge:
    """Undirected weighted edge between two node indices."""
    source: int
    target: int
    weight: float = 1.0

    @property
    def is_self_edge(self) -> bool:
        return self.source == self.target

    def mirrored(self) -> "Edge":
        return Edge(self.target, self.source, self.weight)


def as_node_ids(values) -> np.ndarray:
    """
    Convert node ids to an int64 array, refusing values that are not whole
    numbers (0.9 must not silently become node 0).
    """
    arr = np.asarray(values)
    if arr.dtype.kind in 'iu':
        return arr.astype(np.int64, copy=False)
    if arr.dtype.kind == 'f' and np.all(np.isfinite(arr)) and np.all(arr % 1 == 0):
        return arr.astype(np.int64)
    raise ValueError(f"Node ids must be integers, got {arr.ravel()[:5].tolist()!r}")


def _sorted_by_endpoints(sources: np.ndarray, targets: np.ndarray) -> bool:
    """True when edges are ordered by source, then target."""
    if sources.size < 2:
        return True
    ds = np.diff(sources)
    dt = np.diff(targets)
    return bool(np.all((ds > 0) | ((ds == 0) & (dt >= 0))))


def _mirror_edges(sources, targets, weights):
    # self-edges are kept once
    off_diag = sources != targets
    return targets[off_diag], sources[off_diag], weights[off_diag]


class EdgeStore:
    """
    Insertion-ordered edge list that can be normalized into a symmetric,
    (source, target)-sorted sequence.

    Edges are buffered as Python lists while they are being added and
    converted to contiguous numpy arrays on normalization. The normalized
    arrays replace the store contents; edges added afterwards are kept
    pending until the next call to normalize().
    """

    def __init__(self):
        self._sources = np.empty(0, dtype=np.int64)
        self._targets = np.empty(0, dtype=np.int64)
        self._weights = np.empty(0, dtype=np.float64)
        self._pending_sources = []
        self._pending_targets = []
        self._pending_weights = []

    def __len__(self):
        return self._sources.shape[0] + len(self._pending_sources)

    def __iter__(self) -> Iterator[Edge]:
        for u, v, w in zip(self._sources, self._targets, self._weights):
            yield Edge(int(u), int(v), float(w))
        for u, v, w in zip(self._pending_sources, self._pending_targets,
                           self._pending_weights):
            yield Edge(int(u), int(v), float(w))

    def __repr__(self):
        return (f"EdgeStore({len(self)} edges, "
                f"{len(self._pending_sources)} pending)")

    @property
    def has_pending(self) -> bool:
        return len(self._pending_sources) > 0

    def add(self, edge: Edge):
        """Append one edge. Ids must be whole numbers; signs are checked at normalization."""
        self.add_edge(edge.source, edge.target, edge.weight)

    def add_edge(self, source, target, weight=1.0):
        self._pending_sources.append(int(as_node_ids(source)))
        self._pending_targets.append(int(as_node_ids(target)))
        self._pending_weights.append(float(weight))

    def add_edges(self, sources, targets, weights=None):
        """
        Append many edges at once.

        Parameters:
        -----------
        sources, targets : array-like of int
            Endpoint indices, same length.
        weights : array-like of float, optional
            Edge weights. Defaults to 1.0 for every edge.
        """
        sources = as_node_ids(sources).ravel()
        targets = as_node_ids(targets).ravel()
        if weights is None:
            weights = np.ones(sources.shape[0], dtype=np.float64)
        else:
            weights = np.asarray(weights, dtype=np.float64).ravel()

        if not (sources.shape[0] == targets.shape[0] == weights.shape[0]):
            raise ValueError(
                f"Edge arrays must have equal length, got "
                f"{sources.shape[0]}, {targets.shape[0]}, {weights.shape[0]}"
            )

        self._pending_sources.extend(sources.tolist())
        self._pending_targets.extend(targets.tolist())
        self._pending_weights.extend(weights.tolist())

    def _pending_arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return (np.asarray(self._pending_sources, dtype=np.int64),
                np.asarray(self._pending_targets, dtype=np.int64),
                np.asarray(self._pending_weights, dtype=np.float64))

    def normalize(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Make the stored edges symmetric and sorted by (source, target).

        If the stored sequence (including pending edges) is already sorted
        and symmetric it is kept as is. Otherwise every pending non-self edge
        gets a mirrored copy and the whole sequence is stably re-sorted.
        The result replaces the store contents.

        Returns:
        --------
        sources, targets, weights : numpy.ndarray
            The normalized edge arrays.
        """
        if not self.has_pending:
            return self.arrays

        new_s, new_t, new_w = self._pending_arrays()
        if new_s.size and (new_s.min() < 0 or new_t.min() < 0):
            raise ValueError("Node indices must be non-negative")

        sources = np.concatenate([self._sources, new_s])
        targets = np.concatenate([self._targets, new_t])
        weights = np.concatenate([self._weights, new_w])

        if not (_sorted_by_endpoints(sources, targets)
                and _is_symmetric(sources, targets, weights)):
            mir_s, mir_t, mir_w = _mirror_edges(new_s, new_t, new_w)
            sources = np.concatenate([sources, mir_s])
            targets = np.concatenate([targets, mir_t])
            weights = np.concatenate([weights, mir_w])

            order = np.lexsort((targets, sources))
            sources = sources[order]
            targets = targets[order]
            weights = weights[order]

        self._sources = np.ascontiguousarray(sources)
        self._targets = np.ascontiguousarray(targets)
        self._weights = np.ascontiguousarray(weights)
        self._pending_sources = []
        self._pending_targets = []
        self._pending_weights = []
        return self.arrays

    @property
    def arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """(sources, targets, weights) of the normalized part of the store."""
        return self._sources, self._targets, self._weights

    @property
    def n_nodes(self) -> int:
        """max(endpoint) + 1 over every stored edge, 0 when empty."""
        max_idx = -1
        if self._sources.size:
            max_idx = max(int(self._sources.max()), int(self._targets.max()))
        if self._pending_sources:
            max_idx = max(max_idx, max(self._pending_sources),
                          max(self._pending_targets))
        return max_idx + 1

    def is_sorted(self) -> bool:
        s, t, _ = self._all_arrays()
        return _sorted_by_endpoints(s, t)

    def is_symmetric(self) -> bool:
        return _is_symmetric(*self._all_arrays())

    def _all_arrays(self):
        if not self.has_pending:
            return self.arrays
        new_s, new_t, new_w = self._pending_arrays()
        return (np.concatenate([self._sources, new_s]),
                np.concatenate([self._targets, new_t]),
                np.concatenate([self._weights, new_w]))


def _is_symmetric(sources, targets, weights) -> bool:
    """Every non-self edge (u, v, w) has a matching (v, u, w)."""
    off_diag = sources != targets
    s, t, w = sources[off_diag], targets[off_diag], weights[off_diag]
    if s.size == 0:
        return True
    fwd = np.lexsort((w, t, s))
    rev = np.lexsort((w, s, t))
    return bool(np.array_equal(s[fwd], t[rev])
                and np.array_equal(t[fwd], s[rev])
                and np.array_equal(w[fwd], w[rev]))
