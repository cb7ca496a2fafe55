"""
ゲーム状態の共通インターフェース

探索エンジンが要求する操作の集合:
- initial: 初期局面の生成
- next_player: 手番
- do_action: 着手して結果 (Outcome) を返す
- valid_actions: 合法手の列挙（順序は呼び出しごとに安定）
- has_won: 勝利判定
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Hashable, Sequence, Tuple, Union

# ゲームごとの手の型。等価比較さえできればよい
Action = Hashable


class Player(Enum):
    """二人ゲームのプレイヤー"""

    P1 = 1
    P2 = 2

    def other(self) -> "Player":
        """相手プレイヤー"""
        return Player.P2 if self is Player.P1 else Player.P1

    @classmethod
    def parse(cls, text: str) -> "Player":
        """'p1' / 'p2' 形式の文字列から変換"""
        return cls[text.strip().upper()]


@dataclass(frozen=True)
class Win:
    """指定プレイヤーの勝ちで終局"""

    player: Player

    def value(self, perspective: Player) -> float:
        return 1.0 if self.player == perspective else 0.0


@dataclass(frozen=True)
class Draw:
    """引き分けで終局"""

    def value(self, perspective: Player) -> float:
        return 0.5


@dataclass(frozen=True)
class Continuing:
    """
    対局継続中

    Attributes:
        actions: 次の手番プレイヤーの合法手
    """

    actions: Tuple[Any, ...]

    def __init__(self, actions: Sequence[Any]):
        object.__setattr__(self, "actions", tuple(actions))


Outcome = Union[Win, Draw, Continuing]


def is_decisive(outcome: Outcome) -> bool:
    """終局（勝ち・引き分け）かどうか"""
    return isinstance(outcome, (Win, Draw))


class GameState(ABC):
    """
    探索対象となるゲーム局面の基底クラス

    do_action は (局面, 手) に対して決定的でなければならない。
    変更していない局面に対する valid_actions は同じ順序で同じ手を返す。
    """

    @classmethod
    @abstractmethod
    def initial(cls) -> "GameState":
        """初期局面を生成"""

    @abstractmethod
    def next_player(self) -> Player:
        """次に着手するプレイヤー"""

    @abstractmethod
    def do_action(self, action: Action) -> Outcome:
        """
        局面に手を適用する（合法性は呼び出し側の責任）

        Args:
            action: 着手

        Returns:
            Outcome: 着手後の結果
        """

    @abstractmethod
    def valid_actions(self, player: Player) -> Sequence[Action]:
        """player の合法手リスト"""

    @abstractmethod
    def has_won(self, player: Player) -> bool:
        """player が既に勝っているか"""

    @abstractmethod
    def copy(self) -> "GameState":
        """独立した複製を返す"""

    @classmethod
    @abstractmethod
    def parse_action(cls, text: str) -> Action:
        """
        文字列から手を解釈（コンソール入力用）

        Raises:
            InvalidActionError: 解釈できない場合
        """

    def outcome(self) -> Outcome:
        """現在局面の結果を判定"""
        if self.has_won(Player.P1):
            return Win(Player.P1)
        if self.has_won(Player.P2):
            return Win(Player.P2)
        actions = self.valid_actions(self.next_player())
        if len(actions) == 0:
            return Draw()
        return Continuing(actions)

    def is_legal(self, action: Action) -> bool:
        """手番プレイヤーにとって合法な手か"""
        return action in self.valid_actions(self.next_player())
