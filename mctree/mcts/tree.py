"""
モンテカルロ木探索 (Monte Carlo Tree Search)

UCB1方式のMCTS実装:
- UCB1式による選択（視点プレイヤーの手番で最大化、相手番で最小化）
- 1反復につき1ノードを展開し、生成時に1回ランダムプレイアウト
- 結果をルートまで逆伝播
- 実際の着手に合わせてルートを付け替え、部分木の統計を引き継ぐ
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import numpy as np

from mctree.errors import ActionNotFoundError, NoLegalMovesError, WrongTurnError
from mctree.games.base import Continuing, GameState, Outcome, Player
from .node import MCTSNode
from .playout import normalize_outcome, simulate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RootStatistics:
    """
    ルートノードの統計情報

    Attributes:
        visits: シミュレーション回数
        value: 視点プレイヤーの勝率推定
        min_depth: すべての手を読み切った深さ
        max_depth: 最も深く読んだ深さ
    """
    visits: int
    value: float
    min_depth: int
    max_depth: int


class MCTree:
    """
    モンテカルロ探索木

    ルートノード、ルートに対応する実際の局面、乱数生成器、
    および勝率を推定する視点プレイヤーを保持する。

    探索アルゴリズム:
    1. Select: 未展開の手がなくなるまで UCB1 で子ノードを下る
    2. Expand: 未展開の手を1つ展開し、プレイアウトで価値を初期化
    3. Backpropagate: 得られた価値を経路上のノードに反映
    """

    def __init__(
        self,
        state: GameState,
        perspective: Player,
        to_move: Player,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        """
        Args:
            state: 探索開始局面（複製して保持する）
            perspective: 勝率を推定するプレイヤー
            to_move: state で次に着手するプレイヤー
            rng: 乱数生成器（省略時は seed から生成）
            seed: 乱数シード
        """
        self._perspective = perspective
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self._state = state.copy()
        self._root = self._create_node(
            action=None,
            just_acted=to_move.other(),
            state=self._state.copy(),
            outcome=self._state.outcome(),
        )

    @property
    def root(self) -> MCTSNode:
        """現在のルートノード"""
        return self._root

    @property
    def perspective(self) -> Player:
        """勝率を推定するプレイヤー"""
        return self._perspective

    @property
    def state(self) -> GameState:
        """ルートに対応する局面の複製"""
        return self._state.copy()

    def _create_node(
        self,
        action: Optional[Any],
        just_acted: Player,
        state: GameState,
        outcome: Outcome,
    ) -> MCTSNode:
        """
        ノードを生成し、1回のプレイアウトで価値を初期化

        Args:
            action: ノードに至る手
            just_acted: action を指したプレイヤー
            state: action 適用後の局面（プレイアウトで変更される）
            outcome: action 適用後の結果
        """
        outcome = normalize_outcome(outcome)
        untried = outcome.actions if isinstance(outcome, Continuing) else ()
        value = simulate(state, outcome, self.perspective, self.rng)
        return MCTSNode(
            action=action,
            just_acted=just_acted,
            value=value,
            untried_actions=untried,
        )

    def _expand(self, node: MCTSNode, state: GameState) -> MCTSNode:
        """未展開の手を1つ展開して子ノードを追加"""
        action = node.pop_untried_action()
        outcome = state.do_action(action)
        child = self._create_node(
            action=action,
            just_acted=node.just_acted.other(),
            state=state,
            outcome=outcome,
        )
        return node.add_child(child)

    def _run_iteration(self) -> float:
        """
        1回の探索反復を実行

        Select -> Expand & Simulate -> Backpropagate のサイクル

        Returns:
            float: 逆伝播した価値（視点プレイヤー視点）
        """
        # 盤面のコピー（各反復で独立）
        state = self._state.copy()

        # 1. Select: 未展開の手が残るノードか終局ノードまで下降
        node = self.root
        path = [node]
        while node.is_fully_expanded() and not node.is_leaf():
            maximize = self.perspective != node.just_acted
            node = node.select_child(maximize)
            state.do_action(node.action)
            path.append(node)

        if node.is_fully_expanded():
            # 2a. 終局ノード: 新たなシミュレーションは行わない
            node.visits += 1
            result = node.value
            path.pop()
        else:
            # 2b. Expand & Simulate
            result = self._expand(node, state).value

        # 3. Backpropagate
        for visited in reversed(path):
            visited.update(result)

        return result

    def run_iterations(self, num_iterations: int) -> int:
        """
        指定回数の探索反復を実行

        Args:
            num_iterations (int): 反復回数

        Returns:
            int: 実行した反復回数
        """
        for _ in range(num_iterations):
            self._run_iteration()
        return num_iterations

    def run_for(self, duration_ms: int) -> int:
        """
        制限時間まで探索反復を繰り返す

        時間は反復の間でのみ確認する（実行中の反復は中断しない）

        Args:
            duration_ms (int): 探索時間（ミリ秒）

        Returns:
            int: 実行した反復回数
        """
        start = time.perf_counter()
        deadline = start + duration_ms / 1000.0
        searches = 0
        while time.perf_counter() < deadline:
            self._run_iteration()
            searches += 1

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.debug("Did %d searches in %.0f milliseconds", searches, elapsed_ms)
        return searches

    def best_action(self) -> Optional[Any]:
        """
        価値が最大の子ノードの手（探索項なし）

        Returns:
            子ノードがなければ None
        """
        child = self.root.best_child()
        return child.action if child is not None else None

    def recommend_and_commit(self) -> Any:
        """
        推奨手を選び、その手で木を進める

        Returns:
            推奨手

        Raises:
            NoLegalMovesError: ルートに子ノードがない場合
            WrongTurnError: 視点プレイヤーの手番でない場合
        """
        child = self.root.best_child()
        if child is None:
            raise NoLegalMovesError(
                "Root has no expanded children",
                context={"visits": self.root.visits},
            )
        if self.root.just_acted == self.perspective:
            raise WrongTurnError(
                "Cannot commit a move for the opponent",
                context={"perspective": self.perspective.name},
            )
        action = child.action
        self.advance(action)
        return action

    def advance(self, action: Any, seed_if_missing: bool = False):
        """
        実際の着手に合わせてルートを付け替える

        action に対応する子ノードを新しいルートにし、それ以外の部分木は破棄する。

        Args:
            action: 着手
            seed_if_missing: 子ノードが存在しない場合に、局面から
                新しいルートを1回のプレイアウトで生成するか

        Raises:
            ActionNotFoundError: 子ノードが存在しない（seed_if_missing=False の場合）、
                または合法手でない場合。木と局面は変更されない
        """
        index = self.root.find_child(action)
        if index is None:
            if not seed_if_missing:
                raise ActionNotFoundError(action)
            self._seed_root(action)
            return

        self._state.do_action(action)
        self._root = self._root.children.pop(index)
        logger.debug("Advanced tree by %r, new root has %d visits", action, self.root.visits)

    def _seed_root(self, action: Any):
        """未展開の手について新しい単独ノードをルートにする"""
        if not self._state.is_legal(action):
            raise ActionNotFoundError(action, context={"legal": False})

        just_acted = self.root.just_acted.other()
        outcome = self._state.do_action(action)
        self._root = self._create_node(
            action=action,
            just_acted=just_acted,
            state=self._state.copy(),
            outcome=outcome,
        )
        logger.info("Seeded a fresh subtree for unexplored action %r", action)

    def root_statistics(self) -> RootStatistics:
        """ルートの統計情報のスナップショット"""
        return RootStatistics(
            visits=self.root.visits,
            value=self.root.value,
            min_depth=self.root.min_depth(),
            max_depth=self.root.max_depth(),
        )

    def action_statistics(self) -> List[Tuple[Any, int, float]]:
        """ルートの子ノードごとの (action, visits, value)"""
        return self.root.get_action_statistics()
