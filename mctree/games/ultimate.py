"""
ウルティメット三目並べ (Ultimate tic-tac-toe)

3x3 の小盤 (micro) を 3x3 に並べた大盤 (macro) で対局する。
直前の手の micro 位置に対応する小盤に打たなければならない
（その小盤が満杯なら任意の小盤に打てる）。
小盤は最初に3つ並べたプレイヤーのものになり、
小盤を3つ並べたプレイヤーが勝ち。
"""

from typing import List, NamedTuple, Optional

from mctree.errors import InvalidActionError
from .base import Continuing, Draw, GameState, Outcome, Player, Win

LINES = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

BLANK = " "


def piece(player: Player) -> str:
    return "X" if player is Player.P1 else "O"


def three_in_a_row(cells: List[str], mark: str) -> bool:
    return any(all(cells[i] == mark for i in line) for line in LINES)


class UltimateMove(NamedTuple):
    """大盤の位置 macro と小盤内の位置 micro の組"""

    macro: int
    micro: int


class MicroBoard:
    """3x3 の小盤"""

    def __init__(self):
        self.cells = [BLANK] * 9
        self.winner = BLANK

    def copy(self) -> "MicroBoard":
        board = MicroBoard()
        board.cells = list(self.cells)
        board.winner = self.winner
        return board

    def full(self) -> bool:
        return all(c != BLANK for c in self.cells)

    def blanks(self) -> List[int]:
        return [i for i in range(9) if self.cells[i] == BLANK]

    def play(self, place: int, player: Player) -> bool:
        """
        着手する。小盤の勝者は最初に確定したものから変わらない

        Returns:
            bool: 着手できたか
        """
        if not 0 <= place < 9 or self.cells[place] != BLANK:
            return False
        mark = piece(player)
        self.cells[place] = mark
        if self.winner == BLANK and three_in_a_row(self.cells, mark):
            self.winner = mark
        return True


class UltimateState(GameState):
    """ウルティメット三目並べの局面"""

    def __init__(self):
        self.boards = [MicroBoard() for _ in range(9)]
        self.next = Player.P1
        self.next_board: Optional[int] = None
        self.winner = BLANK

    @classmethod
    def initial(cls) -> "UltimateState":
        return cls()

    def copy(self) -> "UltimateState":
        state = UltimateState()
        state.boards = [b.copy() for b in self.boards]
        state.next = self.next
        state.next_board = self.next_board
        state.winner = self.winner
        return state

    def full(self) -> bool:
        return all(b.full() for b in self.boards)

    def next_player(self) -> Player:
        return self.next

    def do_action(self, move: UltimateMove) -> Outcome:
        """
        手を適用する

        Args:
            move: (macro, micro)

        Returns:
            Outcome: 着手後の結果

        Raises:
            InvalidActionError: 指定の小盤に打てない場合
        """
        try:
            macro, micro = move
        except (TypeError, ValueError):
            raise InvalidActionError(f"Not a (macro, micro) move: {move!r}") from None
        if self.next_board is not None and self.next_board != macro:
            raise InvalidActionError(
                f"Must play on board {self.next_board}",
                context={"macro": macro, "micro": micro},
            )
        if not 0 <= macro < 9 or not self.boards[macro].play(micro, self.next):
            raise InvalidActionError(
                "Cell is not available",
                context={"macro": macro, "micro": micro},
            )

        player = self.next
        if self.winner == BLANK and self.has_won(player):
            self.winner = piece(player)
        self.next = player.other()
        self.next_board = None if self.boards[micro].full() else micro

        if self.winner == piece(player):
            return Win(player)
        if self.full():
            return Draw()
        return Continuing(self.valid_actions(self.next))

    def valid_actions(self, player: Player) -> List[UltimateMove]:
        if self.next_board is not None:
            return [
                UltimateMove(self.next_board, micro)
                for micro in self.boards[self.next_board].blanks()
            ]
        return [
            UltimateMove(macro, micro)
            for macro in range(9)
            for micro in self.boards[macro].blanks()
        ]

    def has_won(self, player: Player) -> bool:
        winners = [b.winner for b in self.boards]
        return three_in_a_row(winners, piece(player))

    @classmethod
    def parse_action(cls, text: str) -> UltimateMove:
        """'macro micro' 形式 (例: '4 0')"""
        parts = text.replace(",", " ").split()
        digits = [str(i) for i in range(9)]
        if len(parts) != 2 or any(p not in digits for p in parts):
            raise InvalidActionError(f"Enter a macro and a micro board (0-8): {text!r}")
        return UltimateMove(int(parts[0]), int(parts[1]))

    def __str__(self) -> str:
        lines = []
        for macro_row in range(3):
            for micro_row in range(3):
                segments = []
                for macro_col in range(3):
                    cells = self.boards[3 * macro_row + macro_col].cells
                    segments.append("".join(cells[3 * micro_row: 3 * micro_row + 3]))
                line = " | ".join(segments)
                # 中段の右側に各小盤の勝者を表示
                if macro_row == 1:
                    winners = "".join(self.boards[3 * micro_row + i].winner for i in range(3))
                    line += "     " + winners
                lines.append(line)
            if macro_row != 2:
                lines.append("----+-----+----")
        return "\n".join(lines)
