"""
テスト共通フィクスチャ

探索結果を検証しやすい小さなゲーム (Nim) を提供する
"""

from typing import List, Optional

import pytest

from mctree.errors import InvalidActionError
from mctree.games.base import Continuing, GameState, Outcome, Player, Win


class NimState(GameState):
    """
    石を1個か2個取り、最後の石を取ったプレイヤーが勝つ

    山の数が3の倍数でない局面では手番側に必勝手がある
    """

    def __init__(self, pile: int = 5, to_move: Player = Player.P1, winner: Optional[Player] = None):
        self.pile = pile
        self.next = to_move
        self.winner = winner

    @classmethod
    def initial(cls) -> "NimState":
        return cls()

    def copy(self) -> "NimState":
        return NimState(self.pile, self.next, self.winner)

    def next_player(self) -> Player:
        return self.next

    def do_action(self, take: int) -> Outcome:
        if take not in self.valid_actions(self.next):
            raise InvalidActionError(f"Cannot take {take}")
        player = self.next
        self.pile -= take
        self.next = player.other()
        if self.pile == 0:
            self.winner = player
            return Win(player)
        return Continuing(self.valid_actions(self.next))

    def valid_actions(self, player: Player) -> List[int]:
        if self.winner is not None:
            return []
        return [take for take in (1, 2) if take <= self.pile]

    def has_won(self, player: Player) -> bool:
        return self.winner == player

    @classmethod
    def parse_action(cls, text: str) -> int:
        if text.strip() not in ("1", "2"):
            raise InvalidActionError(f"Take 1 or 2: {text!r}")
        return int(text)


@pytest.fixture
def nim_class():
    """Nim のゲームクラス"""
    return NimState
