"""
四目並べ (Connect Four)

7列 x 6行。盤面は2つの整数ビットボードで保持する。
ビット位置: row * 7 + col （row 0 が最上段）
"""

from typing import List

from mctree.errors import InvalidActionError
from .base import Continuing, Draw, GameState, Outcome, Player, Win

ROWS = 6
COLS = 7
STREAK = 4
FULL_COUNT = ROWS * COLS


def _line_mask(row: int, col: int, d_row: int, d_col: int) -> int:
    mask = 0
    for i in range(STREAK):
        mask |= 1 << ((row + d_row * i) * COLS + (col + d_col * i))
    return mask


def _build_win_masks() -> List[int]:
    """4連となる全ラインのマスク（縦・横・斜め2方向）"""
    masks = []
    for row in range(ROWS):
        for col in range(COLS):
            for d_row, d_col in ((0, 1), (1, 0), (1, 1), (1, -1)):
                end_row = row + d_row * (STREAK - 1)
                end_col = col + d_col * (STREAK - 1)
                if 0 <= end_row < ROWS and 0 <= end_col < COLS:
                    masks.append(_line_mask(row, col, d_row, d_col))
    return masks


WIN_MASKS = _build_win_masks()


class Connect4State(GameState):
    """
    四目並べの局面

    Attributes:
        xs: P1 (X) の石のビットボード
        os: P2 (O) の石のビットボード
        next: 次の手番
    """

    def __init__(self, xs: int = 0, os: int = 0, to_move: Player = Player.P1):
        self.xs = xs
        self.os = os
        self.next = to_move

    @classmethod
    def initial(cls) -> "Connect4State":
        return cls()

    def copy(self) -> "Connect4State":
        return Connect4State(self.xs, self.os, self.next)

    def get(self, row: int, col: int) -> str:
        """セルの内容 ('X', 'O', ' ')"""
        bit = 1 << (row * COLS + col)
        if self.os & bit:
            return "O"
        if self.xs & bit:
            return "X"
        return " "

    def _board(self, player: Player) -> int:
        return self.xs if player is Player.P1 else self.os

    def full(self) -> bool:
        return bin(self.xs | self.os).count("1") == FULL_COUNT

    def next_player(self) -> Player:
        return self.next

    def do_action(self, col: int) -> Outcome:
        """
        col 列に石を落とす

        Args:
            col: 列番号 (0-6)

        Returns:
            Outcome: 着手後の結果

        Raises:
            InvalidActionError: 列が範囲外または満杯
        """
        if not 0 <= col < COLS:
            raise InvalidActionError(f"Column out of range: {col}")

        for row in range(ROWS - 1, -1, -1):
            if self.get(row, col) == " ":
                player = self.next
                bit = 1 << (row * COLS + col)
                if player is Player.P1:
                    self.xs |= bit
                else:
                    self.os |= bit
                self.next = player.other()

                if self.has_won(player):
                    return Win(player)
                if self.full():
                    return Draw()
                return Continuing(self.valid_actions(self.next))

        raise InvalidActionError(f"Column is full: {col}", context={"col": col})

    def valid_actions(self, player: Player) -> List[int]:
        # 決着後は合法手なし
        if self.has_won(Player.P1) or self.has_won(Player.P2):
            return []
        return [col for col in range(COLS) if self.get(0, col) == " "]

    def has_won(self, player: Player) -> bool:
        board = self._board(player)
        return any(board & mask == mask for mask in WIN_MASKS)

    @classmethod
    def parse_action(cls, text: str) -> int:
        text = text.strip()
        if text not in [str(col) for col in range(COLS)]:
            raise InvalidActionError(f"Enter a column between 0 and {COLS - 1}: {text!r}")
        return int(text)

    def __str__(self) -> str:
        lines = []
        for row in range(ROWS):
            cells = " ".join(self.get(row, col) for col in range(COLS))
            lines.append(f"|{cells}|")
        lines.append("+-------------+")
        lines.append("|0 1 2 3 4 5 6|")
        lines.append("+-------------+")
        return "\n".join(lines)
