"""
Chinese Whispers - Label-propagation clustering for weighted graphs.
"""

# Import main classes for easy access
from .chinese_whispers import ChineseWhispers
from .config import ChineseWhispersConfig
from .edges import Edge, EdgeStore
from .neighbor_index import NeighborIndex
from .propagation import (
    PropagationEngine,
    NodeSampler,
    RandomNodeSampler,
    FixedNodeSampler,
)
from .compaction import compact_labels, compact_labels_inplace
from .core_utilities import TimingStats

__all__ = [
    # Main classes
    'ChineseWhispers',
    'ChineseWhispersConfig',

    # Building blocks
    'Edge',
    'EdgeStore',
    'NeighborIndex',
    'PropagationEngine',
    'NodeSampler',
    'RandomNodeSampler',
    'FixedNodeSampler',
    'TimingStats',

    # Core functions
    'compact_labels',
    'compact_labels_inplace',
]

# Package metadata
__version__ = '1.0.0'
