"""四目並べのテスト

初期配置、合法手生成、勝利判定、引き分けが正しいことを確認する。
"""

import pytest

from mctree.errors import InvalidActionError
from mctree.games.base import Continuing, Draw, Player, Win
from mctree.games.connect4 import COLS, ROWS, Connect4State


def play(state, columns):
    """列のリストを順に着手し、最後の結果を返す"""
    outcome = None
    for col in columns:
        outcome = state.do_action(col)
    return outcome


def bit(row, col):
    return 1 << (row * COLS + col)


class TestConnect4Init:
    """初期化テスト"""

    def test_initial_position(self):
        """初期局面は空で先手は P1"""
        state = Connect4State.initial()

        assert state.xs == 0
        assert state.os == 0
        assert state.next_player() == Player.P1
        assert not state.has_won(Player.P1)
        assert not state.has_won(Player.P2)

    def test_initial_legal_moves(self):
        """初期状態ではすべての列に打てる"""
        state = Connect4State.initial()

        assert state.valid_actions(Player.P1) == [0, 1, 2, 3, 4, 5, 6]
        assert state.outcome() == Continuing([0, 1, 2, 3, 4, 5, 6])

    def test_copy_is_independent(self):
        """複製への着手が元の局面に影響しない"""
        state = Connect4State.initial()
        clone = state.copy()
        clone.do_action(3)

        assert state.xs == 0
        assert state.next_player() == Player.P1
        assert clone.get(ROWS - 1, 3) == "X"


class TestConnect4Moves:
    """着手テスト"""

    def test_piece_drops_to_bottom(self):
        """石は列の最下段の空きマスに落ちる"""
        state = Connect4State.initial()

        outcome = state.do_action(3)
        assert isinstance(outcome, Continuing)
        assert state.get(5, 3) == "X"
        assert state.next_player() == Player.P2

        state.do_action(3)
        assert state.get(4, 3) == "O"
        assert state.next_player() == Player.P1

    def test_full_column_is_not_valid(self):
        """満杯の列は合法手に含まれず、着手すると例外"""
        state = Connect4State.initial()
        play(state, [0] * ROWS)

        assert 0 not in state.valid_actions(state.next_player())
        assert not state.is_legal(0)
        with pytest.raises(InvalidActionError):
            state.do_action(0)

    def test_column_out_of_range(self):
        """範囲外の列は例外"""
        state = Connect4State.initial()
        with pytest.raises(InvalidActionError):
            state.do_action(COLS)


class TestConnect4Wins:
    """勝利判定テスト"""

    def test_horizontal_win_on_fourth_piece(self):
        """横に3つ並べた後、4つ目で勝利が確定する"""
        state = Connect4State.initial()
        play(state, [0, 0, 1, 1, 2, 2])

        assert state.next_player() == Player.P1
        assert not state.has_won(Player.P1)
        assert 3 in state.valid_actions(Player.P1)

        outcome = state.do_action(3)

        assert outcome == Win(Player.P1)
        assert state.has_won(Player.P1)
        assert not state.has_won(Player.P2)
        # 決着後は合法手なし
        assert state.valid_actions(Player.P2) == []
        assert state.outcome() == Win(Player.P1)

    def test_vertical_win(self):
        """縦4つで勝利"""
        state = Connect4State.initial()
        outcome = play(state, [0, 1, 0, 1, 0, 1, 0])

        assert outcome == Win(Player.P1)

    def test_second_player_win(self):
        """後手の勝利"""
        state = Connect4State.initial()
        outcome = play(state, [6, 0, 6, 1, 5, 2, 6, 3])

        assert outcome == Win(Player.P2)
        assert state.has_won(Player.P2)

    def test_diagonal_win(self):
        """右上がりの斜め4つ"""
        xs = bit(5, 0) | bit(4, 1) | bit(3, 2) | bit(2, 3)
        state = Connect4State(xs=xs)

        assert state.has_won(Player.P1)

    def test_anti_diagonal_win(self):
        """左上がりの斜め4つ"""
        os = bit(5, 3) | bit(4, 2) | bit(3, 1) | bit(2, 0)
        state = Connect4State(os=os)

        assert state.has_won(Player.P2)
        assert not state.has_won(Player.P1)

    def test_three_is_not_a_win(self):
        """3つ並びでは勝利しない"""
        xs = bit(5, 0) | bit(5, 1) | bit(5, 2)
        state = Connect4State(xs=xs)

        assert not state.has_won(Player.P1)


class TestConnect4Draw:
    """引き分けテスト"""

    @staticmethod
    def drawn_board():
        """4連のない埋まった盤面（2行ごとに市松模様をずらす）"""
        xs = 0
        os = 0
        for row in range(ROWS):
            for col in range(COLS):
                if (row // 2 + col) % 2 == 0:
                    xs |= bit(row, col)
                else:
                    os |= bit(row, col)
        return xs, os

    def test_last_piece_draws(self):
        """最後の1マスを埋めると引き分け"""
        xs, os = self.drawn_board()
        xs &= ~bit(0, 0)
        state = Connect4State(xs=xs, os=os, to_move=Player.P1)

        assert state.valid_actions(Player.P1) == [0]

        outcome = state.do_action(0)

        assert outcome == Draw()
        assert state.full()
        assert not state.has_won(Player.P1)
        assert not state.has_won(Player.P2)
        assert state.outcome() == Draw()


class TestConnect4Text:
    """入出力テスト"""

    def test_parse_action(self):
        assert Connect4State.parse_action("3") == 3
        assert Connect4State.parse_action(" 0\n") == 0

    @pytest.mark.parametrize("text", ["7", "a", "", "12", "-1"])
    def test_parse_invalid_action(self, text):
        with pytest.raises(InvalidActionError):
            Connect4State.parse_action(text)

    def test_render(self):
        state = Connect4State.initial()
        state.do_action(0)
        text = str(state)
        lines = text.split("\n")

        assert lines[5] == "|X" + " " * 12 + "|"
        assert "|0 1 2 3 4 5 6|" in text
        assert len(lines) == ROWS + 3
