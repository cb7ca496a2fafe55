"""
対局エージェント

評価用の様々なエージェントを実装:
- RandomAgent: 合法手からランダムに着手
- MCTSAgent: MCTSベースのAI
- HumanAgent: 標準入力から着手
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import numpy as np

from mctree.errors import InvalidActionError, NoLegalMovesError
from mctree.games.base import GameState, Player
from mctree.mcts.tree import MCTree


class Agent(ABC):
    """
    エージェントの基底クラス
    """

    def __init__(self, name: str):
        """
        Args:
            name: エージェント名
        """
        self.name = name

    @abstractmethod
    def get_action(self, state: GameState) -> Any:
        """
        着手を選択

        Args:
            state: 現在の局面（変更してよい複製）

        Returns:
            着手
        """
        pass

    def reset(self, state: GameState, player: Player):
        """ゲーム開始時の初期化（必要に応じてオーバーライド）"""
        pass

    def observe(self, action: Any):
        """両者の着手が盤面に適用されるたびに呼ばれる"""
        pass


class RandomAgent(Agent):
    """
    ランダムエージェント

    合法手の中から一様ランダムに選択
    """

    def __init__(self, name: str = "Random", seed: Optional[int] = None):
        super().__init__(name)
        self.rng = np.random.default_rng(seed)

    def get_action(self, state: GameState) -> Any:
        """ランダムに着手を選択"""
        legal_moves = state.valid_actions(state.next_player())

        if len(legal_moves) == 0:
            raise NoLegalMovesError("No legal moves in the current position")

        return legal_moves[int(self.rng.integers(len(legal_moves)))]


class MCTSAgent(Agent):
    """
    MCTSベースのAIエージェント

    対局中は探索木を保持し、両者の着手に合わせて付け替える
    """

    def __init__(
        self,
        num_iterations: Optional[int] = 200,
        thinking_time_ms: Optional[int] = None,
        seed: Optional[int] = None,
        seed_unexplored: bool = True,
        name: str = "MCTS-AI",
    ):
        """
        Args:
            num_iterations: 1手あたりの探索反復回数
            thinking_time_ms: 1手あたりの探索時間（指定時は反復回数より優先）
            seed: 乱数シード
            seed_unexplored: 未探索の相手の手から新しい部分木を作るか
            name: エージェント名
        """
        super().__init__(name)
        if num_iterations is None and thinking_time_ms is None:
            raise ValueError("Either num_iterations or thinking_time_ms is required")

        self.num_iterations = num_iterations
        self.thinking_time_ms = thinking_time_ms
        self.seed_unexplored = seed_unexplored
        self.rng = np.random.default_rng(seed)
        self.tree: Optional[MCTree] = None

    def reset(self, state: GameState, player: Player):
        """新しい対局用の探索木を作成"""
        self.tree = MCTree(
            state,
            perspective=player,
            to_move=state.next_player(),
            rng=self.rng,
        )

    def get_action(self, state: GameState) -> Any:
        """MCTSで最良の手を選択"""
        if self.tree is None:
            self.reset(state, state.next_player())

        if self.thinking_time_ms is not None:
            self.tree.run_for(self.thinking_time_ms)
        else:
            self.tree.run_iterations(self.num_iterations)

        action = self.tree.best_action()
        if action is None:
            raise NoLegalMovesError(
                "Search produced no candidate moves",
                context={"visits": self.tree.root.visits},
            )
        return action

    def observe(self, action: Any):
        """着手に合わせて探索木を進める"""
        if self.tree is not None:
            self.tree.advance(action, seed_if_missing=self.seed_unexplored)


class HumanAgent(Agent):
    """
    人間エージェント（CLI用）

    標準入力から着手を受け付ける
    """

    def __init__(
        self,
        name: str = "Human",
        input_fn: Optional[Callable[[str], str]] = None,
    ):
        super().__init__(name)
        self.input_fn = input_fn if input_fn is not None else input

    def get_action(self, state: GameState) -> Any:
        """標準入力から着手を受け付ける"""
        while True:
            text = self.input_fn("Enter a move: ")
            try:
                action = state.parse_action(text)
            except InvalidActionError as e:
                print(e.message)
                continue

            if state.is_legal(action):
                return action
            print("Invalid move!")
