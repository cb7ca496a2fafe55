"""
Monte Carlo Tree Search モジュール

UCB1方式のMCTS実装を提供
"""

from .node import MCTSNode
from .playout import normalize_outcome, outcome_value, simulate
from .tree import MCTree, RootStatistics

__all__ = [
    "MCTree",
    "MCTSNode",
    "RootStatistics",
    "normalize_outcome",
    "outcome_value",
    "simulate",
]
