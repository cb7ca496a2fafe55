"""
ゲーム実装モジュール

探索エンジンが要求するインターフェース (GameState) と具体的なゲームを提供
"""

from typing import Dict, Type

from mctree.errors import ConfigurationError
from .base import (
    Action,
    Continuing,
    Draw,
    GameState,
    Outcome,
    Player,
    Win,
    is_decisive,
)
from .connect4 import Connect4State
from .ultimate import UltimateMove, UltimateState

GAMES: Dict[str, Type[GameState]] = {
    "connect4": Connect4State,
    "ultimate": UltimateState,
}


def get_game(name: str) -> Type[GameState]:
    """名前からゲームクラスを取得"""
    try:
        return GAMES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown game: {name}",
            context={"available": ", ".join(sorted(GAMES))},
        ) from None


__all__ = [
    "Action",
    "Continuing",
    "Draw",
    "GameState",
    "Outcome",
    "Player",
    "Win",
    "is_decisive",
    "Connect4State",
    "UltimateMove",
    "UltimateState",
    "GAMES",
    "get_game",
]
