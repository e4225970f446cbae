"""Shared test fixtures - small graphs with known structure."""

import numpy as np
import pytest


@pytest.fixture
def triangle_edges():
    """Triangle dominated by the 0-1 edge."""
    return [(0, 1, 5.0), (1, 2, 0.1), (0, 2, 0.1)]


@pytest.fixture
def two_cliques_edges():
    """Two 4-cliques (nodes 0-3 and 4-7) joined by one weak bridge 3-4."""
    edges = []
    for block in (range(0, 4), range(4, 8)):
        nodes = list(block)
        for i, u in enumerate(nodes):
            for v in nodes[i + 1:]:
                edges.append((u, v, 1.0))
    edges.append((3, 4, 0.01))
    return edges


@pytest.fixture
def random_graph():
    """Random sparse graph as parallel arrays, seeded for repeatability."""
    rng = np.random.default_rng(7)
    n_edges = 120
    sources = rng.integers(0, 40, size=n_edges)
    targets = rng.integers(0, 40, size=n_edges)
    weights = rng.random(n_edges)
    return sources, targets, weights
