"""
Asynchronous label propagation over a NeighborIndex.
"""
from __future__ import annotations
from typing import Optional, Sequence, Union

import numpy as np
from numba import njit

from .neighbor_index import NeighborIndex


# ============================================================================
# NODE SAMPLERS
# ============================================================================

class NodeSampler:
    """Source of the node ids visited by the propagation steps."""

    def reset(self):
        """Called once at the start of every run."""

    def sample(self, n_nodes: int, size: int) -> np.ndarray:
        raise NotImplementedError


class RandomNodeSampler(NodeSampler):
    """
    Uniform node sampling backed by a numpy Generator.

    An integer (or None) random_state is re-seeded on every reset(), so two
    runs with the same seed visit the same nodes. A Generator instance is
    used as is and keeps advancing across runs.
    """

    def __init__(self, random_state: Union[None, int, np.random.Generator] = None):
        self.random_state = random_state
        self._rng = None
        self.reset()

    def reset(self):
        if isinstance(self.random_state, np.random.Generator):
            self._rng = self.random_state
        else:
            self._rng = np.random.default_rng(self.random_state)

    def sample(self, n_nodes, size):
        return self._rng.integers(0, n_nodes, size=size, dtype=np.int64)


class FixedNodeSampler(NodeSampler):
    """Replays a fixed node sequence, wrapping around when exhausted."""

    def __init__(self, sequence: Sequence[int]):
        self.sequence = np.asarray(sequence, dtype=np.int64)
        if self.sequence.ndim != 1 or self.sequence.size == 0:
            raise ValueError("FixedNodeSampler needs a non-empty 1-D sequence")
        self._pos = 0

    def reset(self):
        self._pos = 0

    def sample(self, n_nodes, size):
        idx = (self._pos + np.arange(size)) % self.sequence.size
        self._pos = (self._pos + size) % self.sequence.size
        return self.sequence[idx]


def check_sampler(sampler: Optional[NodeSampler], random_state=None) -> NodeSampler:
    if sampler is None:
        return RandomNodeSampler(random_state)
    if not isinstance(sampler, NodeSampler):
        raise TypeError(f"Expected a NodeSampler, got {type(sampler).__name__}")
    return sampler


# ============================================================================
# NUMBA KERNEL
# ============================================================================

@njit(cache=True)
def _propagate(indptr, targets, weights, labels, order, scores, seen, touched):
    # scores/seen are all-zero on entry and reset before returning
    for s in range(order.shape[0]):
        node = order[s]
        n_touched = 0
        for e in range(indptr[node], indptr[node + 1]):
            lab = labels[targets[e]]
            if not seen[lab]:
                seen[lab] = True
                touched[n_touched] = lab
                n_touched += 1
            scores[lab] += weights[e]

        best_label = labels[node]
        best_score = -np.inf
        for i in range(n_touched):
            lab = touched[i]
            if scores[lab] > best_score:
                best_score = scores[lab]
                best_label = lab
            scores[lab] = 0.0
            seen[lab] = False

        labels[node] = best_label


# ============================================================================
# ENGINE
# ============================================================================

class PropagationEngine:
    """
    Owns the label array for one clustering instance and mutates it in place.

    Every step visits one node, sums the weights of its edges per neighbor
    label and gives the node the label with the largest sum. Labels are
    tallied in the order they are first met along the node's edge range and
    only a strictly greater sum replaces the current best, so ties go to the
    label met first. A node without edges keeps its label. Updates are
    visible to later steps immediately.
    """

    def __init__(self, index: NeighborIndex):
        self.index = index
        self.n_nodes = index.n_nodes
        self.labels = np.empty(0, dtype=np.int64)
        self.n_steps = 0
        # scratch buffers for the kernel
        self._scores = np.zeros(self.n_nodes, dtype=np.float64)
        self._seen = np.zeros(self.n_nodes, dtype=np.bool_)
        self._touched = np.zeros(self.n_nodes, dtype=np.int64)

    def initialize(self):
        """Every node starts as its own cluster."""
        self.labels = np.arange(self.n_nodes, dtype=np.int64)
        self.n_steps = 0
        return self.labels

    def _apply(self, order):
        _propagate(self.index.indptr, self.index.targets, self.index.weights,
                   self.labels, order, self._scores, self._seen, self._touched)
        self.n_steps += order.shape[0]

    def _check_order(self, order, size):
        # the kernel does no bounds checking
        order = np.asarray(order)
        if order.shape != (size,):
            raise ValueError(f"Sampler returned shape {order.shape}, expected ({size},)")
        if order.dtype.kind not in 'iu':
            raise ValueError(f"Sampler must return integer node ids, got dtype {order.dtype}")
        if order.min() < 0 or order.max() >= self.n_nodes:
            raise ValueError(f"Sampled node index out of range [0, {self.n_nodes-1}]")
        return np.ascontiguousarray(order, dtype=np.int64)

    def step(self, node_idx):
        """Update a single node and return its new label."""
        if node_idx < 0 or node_idx >= self.n_nodes:
            raise ValueError(f"Node index {node_idx} out of range [0, {self.n_nodes-1}]")
        if self.labels.shape[0] != self.n_nodes:
            self.initialize()
        self._apply(np.array([node_idx], dtype=np.int64))
        return int(self.labels[node_idx])

    def run(self, num_iterations, sampler: Optional[NodeSampler] = None,
            batch_size=1 << 20):
        """
        Run n_nodes * num_iterations propagation steps from fresh labels.

        Parameters:
        -----------
        num_iterations : int
            Steps per node, on average.
        sampler : NodeSampler, optional
            Source of visited nodes. Defaults to an unseeded RandomNodeSampler.
        batch_size : int, default=1<<20
            Number of node ids drawn from the sampler at a time.

        Returns:
        --------
        labels : numpy.ndarray
            The (uncompacted) label array, one entry per node.
        """
        if num_iterations < 0:
            raise ValueError(f"num_iterations must be non-negative, got {num_iterations}")
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        sampler = check_sampler(sampler)
        sampler.reset()
        self.initialize()

        total = self.n_nodes * int(num_iterations)
        done = 0
        while done < total:
            size = min(batch_size, total - done)
            order = self._check_order(sampler.sample(self.n_nodes, size), size)
            self._apply(order)
            done += size
        return self.labels
