"""
NeighborIndex - per-node edge ranges over a source-sorted edge list.
"""
import numpy as np
from scipy.sparse import csr_matrix


class NeighborIndex:
    """
    Maps every node to the half-open range [start, end) of the sorted edge
    arrays whose source is that node.

    The ranges partition the edge arrays, so they are stored CSR-style as a
    single ``indptr`` of length n_nodes + 1; node i owns
    ``indptr[i]:indptr[i+1]``. Isolated nodes get an empty range.
    """

    def __init__(self, indptr, targets, weights):
        self.indptr = indptr
        self.targets = targets
        self.weights = weights
        self.n_nodes = indptr.shape[0] - 1

    @classmethod
    def build(cls, sources, targets, weights, n_nodes=None, validate=True):
        """
        Build the index from edges sorted by source (then target).

        Parameters:
        -----------
        sources, targets : numpy.ndarray
            Edge endpoints, sorted by source.
        weights : numpy.ndarray
            Edge weights, aligned with sources/targets.
        n_nodes : int, optional
            Number of nodes. Defaults to max(endpoint) + 1, or 0 without edges.
            Every endpoint must be below it.
        validate : bool, default=True
            Raise ValueError when sources are not sorted. With validate=False
            unsorted input yields meaningless ranges instead of an error.

        Returns:
        --------
        NeighborIndex
        """
        sources = np.ascontiguousarray(sources, dtype=np.int64)
        targets = np.ascontiguousarray(targets, dtype=np.int64)
        weights = np.ascontiguousarray(weights, dtype=np.float64)

        if n_nodes is None:
            if sources.size == 0:
                n_nodes = 0
            else:
                n_nodes = int(max(sources.max(), targets.max())) + 1
        n_nodes = int(n_nodes)
        if n_nodes < 0:
            raise ValueError(f"n_nodes must be non-negative, got {n_nodes}")

        if not (sources.shape[0] == targets.shape[0] == weights.shape[0]):
            raise ValueError("Edge arrays must have equal length")
        # the propagation kernel indexes labels by these without bounds checks
        if sources.size and (min(sources.min(), targets.min()) < 0
                             or max(sources.max(), targets.max()) >= n_nodes):
            raise ValueError(f"Edge endpoints must lie in [0, {n_nodes-1}]")

        if validate and sources.size > 1 and np.any(np.diff(sources) < 0):
            raise ValueError("Edges must be sorted by source node before indexing")

        # each node's range starts where its first edge would be inserted
        indptr = np.searchsorted(sources, np.arange(n_nodes + 1), side='left')
        indptr[-1] = sources.shape[0]
        return cls(indptr.astype(np.int64, copy=False), targets, weights)

    @property
    def ranges(self):
        """(n_nodes, 2) array of [start, end) pairs."""
        return np.column_stack((self.indptr[:-1], self.indptr[1:]))

    @property
    def n_edges(self):
        return self.targets.shape[0]

    def _check_node(self, node_idx):
        if node_idx < 0 or node_idx >= self.n_nodes:
            raise ValueError(f"Node index {node_idx} out of range [0, {self.n_nodes-1}]")

    def range_of(self, node_idx):
        self._check_node(node_idx)
        return int(self.indptr[node_idx]), int(self.indptr[node_idx + 1])

    def get_neighbors(self, node_idx):
        """
        Get neighbors of a node.

        Returns:
        --------
        neighbors : numpy.ndarray
            Neighbor indices, in edge order
        weights : numpy.ndarray
            Corresponding edge weights
        """
        start, end = self.range_of(node_idx)
        return self.targets[start:end], self.weights[start:end]

    def get_degree(self, node_idx):
        start, end = self.range_of(node_idx)
        return end - start

    def get_all_degrees(self):
        return np.diff(self.indptr)

    def to_csr(self):
        """Weighted adjacency as a scipy CSR matrix (duplicate edges kept)."""
        return csr_matrix((self.weights, self.targets, self.indptr),
                          shape=(self.n_nodes, self.n_nodes))

    def __str__(self):
        return f"NeighborIndex with {self.n_nodes} nodes, {self.n_edges} directed edges"

    def __repr__(self):
        return self.__str__()
