"""
ChineseWhispers - label-propagation clustering of weighted graphs.
"""
import numpy as np
from scipy import sparse

from .compaction import compact_labels_inplace
from .config import ChineseWhispersConfig
from .core_utilities import TimingStats
from .edges import Edge, EdgeStore
from .neighbor_index import NeighborIndex
from .propagation import PropagationEngine, check_sampler


class ChineseWhispers:
    """
    Chinese Whispers graph clustering.

    Edges are added with add_edge()/add_edges(); run() then normalizes them
    into a symmetric sorted edge list, indexes each node's neighbors,
    propagates labels for n_nodes * num_iterations random steps and compacts
    the surviving labels into cluster ids 0..k-1.
    """

    def __init__(self, num_iterations=100, random_state=None, sampler=None,
                 batch_size=1 << 20, verbose=False):
        """
        Initialize a ChineseWhispers instance.

        Parameters:
        -----------
        num_iterations : int, default=100
            Propagation steps per node. 0 leaves every node in its own cluster.
        random_state : int or numpy.random.Generator, optional
            Seed for the default node sampler. Ignored when sampler is given.
        sampler : NodeSampler, optional
            Source of the visited nodes, e.g. a FixedNodeSampler in tests.
        batch_size : int, default=1<<20
            Number of node ids drawn from the sampler at a time.
        verbose : bool, default=False
            Print progress and phase timings.
        """
        if num_iterations < 0:
            raise ValueError(f"num_iterations must be non-negative, got {num_iterations}")
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        self.num_iterations = int(num_iterations)
        self.random_state = random_state
        self.sampler = check_sampler(sampler, random_state)
        self.batch_size = int(batch_size)
        self.verbose = verbose

        self.edges = EdgeStore()
        self.index = None
        self.labels = None
        self._n_clusters = 0
        self._cluster_sizes = None
        self.timing = TimingStats()

    @classmethod
    def from_config(cls, config: ChineseWhispersConfig, sampler=None):
        return cls(num_iterations=config.num_iterations,
                   random_state=config.random_state,
                   sampler=sampler,
                   batch_size=config.batch_size,
                   verbose=config.verbose)

    @classmethod
    def from_edge_list(cls, edges, **kwargs):
        """Create an instance from an iterable of Edge or (source, target[, weight]) tuples."""
        cw = cls(**kwargs)
        for edge in edges:
            if isinstance(edge, Edge):
                cw.edges.add(edge)
            else:
                cw.add_edge(*edge)
        return cw

    @classmethod
    def from_csr(cls, graph_matrix, **kwargs):
        """
        Create an instance from a square sparse adjacency matrix.

        Only the upper triangle and the diagonal are read, so a symmetric
        matrix contributes each undirected edge once.
        """
        if graph_matrix.shape[0] != graph_matrix.shape[1]:
            raise ValueError(f"Adjacency matrix must be square, got {graph_matrix.shape}")
        upper = sparse.triu(graph_matrix, format='coo')
        cw = cls(**kwargs)
        cw.add_edges(upper.row, upper.col, upper.data)
        return cw

    def add_edge(self, source, target, weight=1.0):
        """Add one undirected edge between node indices source and target."""
        self.edges.add_edge(source, target, weight)

    def add_edges(self, sources, targets, weights=None):
        """Add many undirected edges from parallel arrays."""
        self.edges.add_edges(sources, targets, weights)

    def run(self):
        """
        Run the clustering.

        Returns:
        --------
        n_clusters : int
            Number of clusters found, 0 for a graph without edges.
        """
        self.timing.reset()

        with self.timing.timed("normalize", verbose=self.verbose):
            sources, targets, weights = self.edges.normalize()

        with self.timing.timed("index", verbose=self.verbose):
            self.index = NeighborIndex.build(sources, targets, weights)
        n_nodes = self.index.n_nodes

        if self.verbose:
            print(f"Normalized {len(sources):,} directed edges over {n_nodes:,} nodes")

        engine = PropagationEngine(self.index)
        with self.timing.timed("propagate", verbose=self.verbose):
            labels = engine.run(self.num_iterations, self.sampler,
                                batch_size=self.batch_size)

        with self.timing.timed("compact", verbose=self.verbose):
            self._n_clusters = compact_labels_inplace(labels)

        self.labels = labels
        self._cluster_sizes = np.bincount(labels, minlength=self._n_clusters)

        if self.verbose:
            print(f"Found {self.n_clusters:,} clusters after {engine.n_steps:,} steps")
        return self.n_clusters

    @property
    def n_nodes(self):
        """Node count over every added edge, including ones added since the last run."""
        return self.edges.n_nodes

    def _require_run(self):
        if self.labels is None:
            raise RuntimeError("Labels are not available until run() has been called")

    @property
    def n_clusters(self):
        """Number of clusters found by the last run."""
        self._require_run()
        return self._n_clusters

    @property
    def cluster_sizes(self):
        """Node count per cluster id."""
        self._require_run()
        return self._cluster_sizes

    def get_label(self, idx):
        """Get the cluster id of node idx."""
        self._require_run()
        if idx < 0 or idx >= self.labels.shape[0]:
            raise ValueError(f"Node index {idx} out of range [0, {self.labels.shape[0]-1}]")
        return int(self.labels[idx])

    def get_labels(self):
        """Get the cluster ids of all nodes, in node order."""
        self._require_run()
        return self.labels.copy()

    label_of = get_label
    all_labels = get_labels

    def get_cluster(self, cluster_idx):
        """
        Get nodes in a specific cluster.

        Parameters:
        -----------
        cluster_idx : int
            Index of the cluster

        Returns:
        --------
        nodes : numpy.ndarray
            Indices of nodes in the cluster
        """
        self._require_run()
        if cluster_idx < 0 or cluster_idx >= self.n_clusters:
            raise ValueError(f"Cluster index {cluster_idx} out of range [0, {self.n_clusters-1}]")
        return np.where(self.labels == cluster_idx)[0]

    def get_clusters(self):
        """List of node-index arrays, one per cluster id."""
        self._require_run()
        order = np.argsort(self.labels, kind='stable')
        bounds = np.cumsum(self.cluster_sizes)[:-1]
        return np.split(order, bounds) if self.n_clusters else []

    def timing_report(self):
        return self.timing.report()

    def __str__(self):
        if self.labels is None:
            return f"ChineseWhispers with {len(self.edges)} edges (not run)"
        return (f"ChineseWhispers with {self.n_nodes} nodes, "
                f"{self.n_clusters} clusters")

    def __repr__(self):
        return self.__str__()
