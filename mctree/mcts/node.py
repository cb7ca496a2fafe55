"""
MCTSノード定義

UCB1方式のMCTSで使用する木構造のノードクラス
訪問回数・価値の統計と未展開の手を管理する
"""

import math
from collections import deque
from typing import Any, Iterable, List, Optional, Tuple

from mctree.games.base import Player


class MCTSNode:
    """
    MCTSの木構造ノード

    各ノードは以下の情報を保持:
    - 直前の手 (action) と、その手を指したプレイヤー (just_acted)
    - 訪問回数 (visits) - 生成時に1回シミュレーションするので常に1以上
    - 価値 (value) - 視点プレイヤーの勝率推定 [0, 1] の移動平均
    - 未展開の手 (untried_actions) - 合法手の列挙順に展開される
    - 子ノード

    UCB1式:
        Q + sqrt(ln(2 * N_parent) / N_child)

    Q は相手番の子では 1 - value として評価する
    """

    def __init__(
        self,
        action: Optional[Any],
        just_acted: Player,
        value: float,
        untried_actions: Iterable[Any] = (),
    ):
        """
        Args:
            action: 親からこのノードに至る手（ルートは None）
            just_acted: action を指したプレイヤー
            value: 生成時のシミュレーション結果
            untried_actions: このノードの局面の合法手
        """
        self.action = action
        self.just_acted = just_acted

        # 統計情報
        self.visits = 1
        self.value = value

        # 未展開の手: 先頭から順に取り出す
        self.untried_actions = deque(untried_actions)

        self.children: List[MCTSNode] = []

    def is_leaf(self) -> bool:
        """リーフノードかどうか"""
        return len(self.children) == 0

    def is_fully_expanded(self) -> bool:
        """すべての合法手が展開済みか"""
        return len(self.untried_actions) == 0

    def is_terminal(self) -> bool:
        """終局ノード（未展開の手も子ノードもない）かどうか"""
        return self.is_fully_expanded() and self.is_leaf()

    def pop_untried_action(self) -> Any:
        """次に展開する手を取り出す"""
        return self.untried_actions.popleft()

    def add_child(self, child: "MCTSNode") -> "MCTSNode":
        self.children.append(child)
        return child

    def update(self, result: float):
        """
        統計情報を更新（バックプロパゲーション）

        Args:
            result (float): 視点プレイヤーから見たシミュレーション結果 [0, 1]
        """
        self.value = (self.value * self.visits + result) / (self.visits + 1)
        self.visits += 1

    def ucb_score(self, child: "MCTSNode", maximize: bool) -> float:
        """
        子ノードの UCB1 スコア

        Args:
            child: 評価する子ノード
            maximize: 視点プレイヤーの勝率を最大化する手番か
        """
        exploit = child.value if maximize else 1.0 - child.value
        explore = math.sqrt(math.log(2 * self.visits) / child.visits)
        return exploit + explore

    def select_child(self, maximize: bool) -> "MCTSNode":
        """
        UCB1スコアが最大の子ノードを選択

        同点の場合は先に見つかった子を選ぶ

        Args:
            maximize (bool): 視点プレイヤーの勝率を最大化するか

        Returns:
            MCTSNode: 選択された子ノード
        """
        best_score = -float("inf")
        best_child = None

        for child in self.children:
            score = self.ucb_score(child, maximize)
            if score > best_score:
                best_score = score
                best_child = child

        return best_child

    def best_child(self) -> Optional["MCTSNode"]:
        """価値が最大の子ノード（探索項なし）。子がなければ None"""
        best = None
        for child in self.children:
            if best is None or child.value > best.value:
                best = child
        return best

    def find_child(self, action: Any) -> Optional[int]:
        """action に対応する子ノードのインデックス"""
        for index, child in enumerate(self.children):
            if child.action == action:
                return index
        return None

    def min_depth(self) -> int:
        """すべての手を読み切った深さ"""
        if not self.children:
            return 0
        return min(child.min_depth() + 1 for child in self.children)

    def max_depth(self) -> int:
        """最も深く読んだ深さ"""
        if not self.children:
            return 0
        return max(child.max_depth() + 1 for child in self.children)

    def get_action_statistics(self) -> List[Tuple[Any, int, float]]:
        """
        子ノードの統計情報を取得

        Returns:
            List[Tuple[Any, int, float]]: 展開順の [(action, visits, value), ...]
        """
        return [(child.action, child.visits, child.value) for child in self.children]

    def __repr__(self) -> str:
        """デバッグ用の文字列表現"""
        return (f"MCTSNode(just_acted={self.just_acted.name}, "
                f"action={self.action!r}, "
                f"N={self.visits}, "
                f"value={self.value:.3f}, "
                f"untried={list(self.untried_actions)!r}, "
                f"children={len(self.children)})")
