"""
シミュレーション方策（ランダムプレイアウト）

終局まで合法手を一様ランダムに選び続け、
視点プレイヤーから見た結果 (勝ち 1.0 / 負け 0.0 / 引き分け 0.5) を返す。
手数の上限は設けない（対応ゲームは有限手で必ず終局する）。
"""

import logging

import numpy as np

from mctree.games.base import Continuing, Draw, GameState, Outcome, Player, Win

logger = logging.getLogger(__name__)


def normalize_outcome(outcome: Outcome) -> Outcome:
    """合法手が空の Continuing は引き分けとして扱う"""
    if isinstance(outcome, Continuing) and len(outcome.actions) == 0:
        logger.warning("Continuing outcome carried no actions; treating it as a draw")
        return Draw()
    return outcome


def outcome_value(outcome: Outcome, perspective: Player) -> float:
    """終局結果を視点プレイヤーの価値に変換"""
    if isinstance(outcome, (Win, Draw)):
        return outcome.value(perspective)
    raise ValueError(f"Outcome is not decisive: {outcome!r}")


def simulate(
    state: GameState,
    outcome: Outcome,
    perspective: Player,
    rng: np.random.Generator,
) -> float:
    """
    state から終局までランダムに対局する

    終局済みの outcome が渡された場合は乱数を消費せずに値を返す。

    Args:
        state: 開始局面（破壊的に変更される）
        outcome: state に至った着手の結果
        perspective: 価値を評価するプレイヤー
        rng: 乱数生成器

    Returns:
        float: perspective から見た結果 [0, 1]
    """
    outcome = normalize_outcome(outcome)
    while isinstance(outcome, Continuing):
        actions = outcome.actions
        action = actions[int(rng.integers(len(actions)))]
        outcome = normalize_outcome(state.do_action(action))
    return outcome_value(outcome, perspective)
