"""
対戦管理システム (Arena)

2つのエージェントを対戦させ、結果を記録する
"""

import time
from collections import Counter
from dataclasses import dataclass
from typing import List, Type

from mctree.games.base import Continuing, GameState, Player, Win
from mctree.mcts.playout import normalize_outcome
from .agents import Agent


@dataclass
class MatchResult:
    """
    対戦結果

    Attributes:
        agent1_name: エージェント1の名前
        agent2_name: エージェント2の名前
        winner: 勝者 (1: agent1, -1: agent2, 0: 引き分け)
        num_moves: 総手数
        duration: 対戦時間（秒）
    """
    agent1_name: str
    agent2_name: str
    winner: int
    num_moves: int
    duration: float

    def __str__(self) -> str:
        """結果の文字列表現"""
        if self.winner == 1:
            result = f"{self.agent1_name} wins"
        elif self.winner == -1:
            result = f"{self.agent2_name} wins"
        else:
            result = "Draw"

        return (
            f"{result} | "
            f"Moves: {self.num_moves} | "
            f"Time: {self.duration:.2f}s"
        )


class Arena:
    """
    対戦管理システム

    2つのエージェントを対戦させ、結果を記録する
    """

    def __init__(self, game_class: Type[GameState], verbose: bool = True):
        """
        Args:
            game_class: 対局するゲームのクラス
            verbose: 詳細な出力を行うか
        """
        self.game_class = game_class
        self.verbose = verbose

    def play_game(
        self,
        agent1: Agent,
        agent2: Agent,
        starting_player: int = 1,
    ) -> MatchResult:
        """
        1ゲームを実行

        Args:
            agent1: エージェント1
            agent2: エージェント2
            starting_player: 先手 (1: agent1, -1: agent2)

        Returns:
            MatchResult: 対戦結果
        """
        state = self.game_class.initial()

        # 先手・後手の割り当て（先手が P1）
        if starting_player == 1:
            sides = {Player.P1: agent1, Player.P2: agent2}
        else:
            sides = {Player.P1: agent2, Player.P2: agent1}

        for player, agent in sides.items():
            agent.reset(state.copy(), player)

        start_time = time.time()
        num_moves = 0
        outcome = normalize_outcome(state.outcome())

        # ゲームループ
        while isinstance(outcome, Continuing):
            current = sides[state.next_player()]
            action = current.get_action(state.copy())

            if self.verbose:
                print(f"{current.name} plays: {action!r}")

            outcome = normalize_outcome(state.do_action(action))
            num_moves += 1

            for agent in sides.values():
                agent.observe(action)

        duration = time.time() - start_time

        # エージェント視点での勝者判定
        if isinstance(outcome, Win):
            winner = 1 if sides[outcome.player] is agent1 else -1
        else:
            winner = 0

        result = MatchResult(
            agent1_name=agent1.name,
            agent2_name=agent2.name,
            winner=winner,
            num_moves=num_moves,
            duration=duration,
        )

        if self.verbose:
            print(state)
            print(f"\n{result}\n")

        return result

    def play_matches(
        self,
        agent1: Agent,
        agent2: Agent,
        num_games: int = 10,
        alternate_colors: bool = True,
    ) -> List[MatchResult]:
        """
        複数ゲームを実行

        Args:
            agent1: エージェント1
            agent2: エージェント2
            num_games: ゲーム数
            alternate_colors: 先後を交代するか

        Returns:
            List[MatchResult]: 対戦結果のリスト
        """
        results = []

        for game_idx in range(num_games):
            if self.verbose:
                print(f"=== Game {game_idx + 1}/{num_games} ===")

            if alternate_colors:
                starting_player = 1 if (game_idx % 2 == 0) else -1
            else:
                starting_player = 1

            result = self.play_game(agent1, agent2, starting_player)
            results.append(result)

        if self.verbose:
            self._print_summary(results, agent1.name, agent2.name)

        return results

    def _print_summary(
        self,
        results: List[MatchResult],
        agent1_name: str,
        agent2_name: str,
    ):
        """勝ち数と agent1 の得点率（引き分けは0.5勝）を表示"""
        tally = Counter(r.winner for r in results)
        score = tally[1] + 0.5 * tally[0]
        score_rate = score / len(results) if results else 0.0

        print(f"\n--- {agent1_name} vs {agent2_name}: {len(results)} games ---")
        print(f"{agent1_name:>12}: {tally[1]} wins")
        print(f"{agent2_name:>12}: {tally[-1]} wins")
        print(f"{'Draws':>12}: {tally[0]}")
        print(f"{agent1_name} score: {score:.1f} ({score_rate:.1%})\n")


def evaluate_agent(
    game_class: Type[GameState],
    agent: Agent,
    opponent: Agent,
    num_games: int = 10,
    verbose: bool = True,
) -> dict:
    """
    エージェントを評価

    Args:
        game_class: 対局するゲームのクラス
        agent: 評価対象のエージェント
        opponent: 対戦相手
        num_games: ゲーム数
        verbose: 詳細な出力

    Returns:
        dict: 評価結果
            - win_rate: 勝率
            - draw_rate: 引き分け率
            - avg_moves: 平均手数
            - results: 対戦結果リスト
    """
    arena = Arena(game_class, verbose=verbose)
    results = arena.play_matches(agent, opponent, num_games=num_games)

    wins = sum(1 for r in results if r.winner == 1)
    draws = sum(1 for r in results if r.winner == 0)

    return {
        "win_rate": wins / num_games if num_games > 0 else 0,
        "draw_rate": draws / num_games if num_games > 0 else 0,
        "avg_moves": sum(r.num_moves for r in results) / num_games if num_games > 0 else 0,
        "results": results,
    }
