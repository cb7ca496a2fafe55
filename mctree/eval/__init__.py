"""
評価システムモジュール

エンジンの強さを測定するための対戦・評価機能を提供
"""

from .agents import (
    Agent,
    RandomAgent,
    MCTSAgent,
    HumanAgent,
)
from .arena import Arena, MatchResult, evaluate_agent

__all__ = [
    "Agent",
    "RandomAgent",
    "MCTSAgent",
    "HumanAgent",
    "Arena",
    "MatchResult",
    "evaluate_agent",
]
