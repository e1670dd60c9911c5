"""
Adversarial search engine.

This module contains the search core:
- Node layer with configurable successor copying
- Heuristic move ordering
- Hash-bucketed transposition table with depth-preferred replacement
- Alpha-beta search (plain and memoized) and MTD(f)
- Wall-clock bounded execution with cooperative cancellation
"""

from alpha_beta_light.engine.node import MemorySavingMode, Node, LinkedNode
from alpha_beta_light.engine.move_ordering import HeuristicComparator, order_nodes
from alpha_beta_light.engine.transposition_table import (
    TranspositionTable, TTEntry, ExactEntry, BoundsEntry, BUCKET_SIZE
)
from alpha_beta_light.engine.alphabeta import AlphaBetaEngine, SearchResult
from alpha_beta_light.engine.mtdf import MTDf
from alpha_beta_light.engine.time_limit import run_with_time_limit

__all__ = [
    'MemorySavingMode',
    'Node',
    'LinkedNode',
    'HeuristicComparator',
    'order_nodes',
    'TranspositionTable',
    'TTEntry',
    'ExactEntry',
    'BoundsEntry',
    'BUCKET_SIZE',
    'AlphaBetaEngine',
    'SearchResult',
    'MTDf',
    'run_with_time_limit',
]
