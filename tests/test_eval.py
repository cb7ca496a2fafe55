"""
評価システムのテストケース

- エージェントの動作テスト
- Arena（対戦管理）のテスト
- 統合テスト
"""

import pytest

from mctree.errors import NoLegalMovesError
from mctree.eval.agents import HumanAgent, MCTSAgent, RandomAgent
from mctree.eval.arena import Arena, MatchResult, evaluate_agent
from mctree.games.base import Player
from mctree.games.connect4 import Connect4State


class TestAgents:
    """エージェントクラスのテスト"""

    def test_random_agent(self):
        """RandomAgentは合法手を選ぶ"""
        agent = RandomAgent(seed=0)
        state = Connect4State.initial()

        action = agent.get_action(state)

        assert action in state.valid_actions(Player.P1)

    def test_random_agent_is_seeded(self):
        """同じシードなら同じ手順"""
        state = Connect4State.initial()
        a = RandomAgent(seed=5)
        b = RandomAgent(seed=5)

        assert [a.get_action(state) for _ in range(5)] == [b.get_action(state) for _ in range(5)]

    def test_random_agent_without_moves(self, nim_class):
        agent = RandomAgent(seed=0)
        state = nim_class(pile=0, winner=Player.P2)

        with pytest.raises(NoLegalMovesError):
            agent.get_action(state)

    def test_mcts_agent(self):
        """MCTSAgentは探索木の子から合法手を選ぶ"""
        agent = MCTSAgent(num_iterations=20, seed=0)
        state = Connect4State.initial()
        agent.reset(state, Player.P1)

        action = agent.get_action(state.copy())

        assert action in state.valid_actions(Player.P1)
        assert agent.tree.root.visits == 21

    def test_mcts_agent_follows_moves(self):
        """両者の着手に合わせて探索木を進める"""
        agent = MCTSAgent(num_iterations=20, seed=0)
        state = Connect4State.initial()
        agent.reset(state, Player.P2)

        agent.observe(3)

        assert agent.tree.root.action == 3
        assert agent.tree.state.get(5, 3) == "X"

    def test_mcts_agent_requires_budget(self):
        with pytest.raises(ValueError):
            MCTSAgent(num_iterations=None, thinking_time_ms=None)

    def test_human_agent_reprompts(self, capsys):
        """解釈できない入力や不正な手は再入力を求める"""
        inputs = iter(["x", "9", "3"])
        agent = HumanAgent(input_fn=lambda prompt: next(inputs))
        state = Connect4State.initial()

        assert agent.get_action(state) == 3
        assert "column" in capsys.readouterr().out

    def test_human_agent_rejects_full_column(self, capsys):
        state = Connect4State.initial()
        for _ in range(6):
            state.do_action(0)
        inputs = iter(["0", "1"])
        agent = HumanAgent(input_fn=lambda prompt: next(inputs))

        assert agent.get_action(state) == 1
        assert "Invalid move!" in capsys.readouterr().out


class TestArena:
    """Arenaクラスのテスト"""

    def test_play_single_game(self):
        """1ゲームの実行テスト"""
        arena = Arena(Connect4State, verbose=False)

        agent1 = RandomAgent("Agent1", seed=1)
        agent2 = RandomAgent("Agent2", seed=2)

        result = arena.play_game(agent1, agent2)

        assert isinstance(result, MatchResult)
        assert result.agent1_name == "Agent1"
        assert result.agent2_name == "Agent2"
        assert result.winner in [-1, 0, 1]
        assert 7 <= result.num_moves <= 42
        assert result.duration >= 0

    def test_play_multiple_games(self):
        """複数ゲームの実行テスト"""
        arena = Arena(Connect4State, verbose=False)

        results = arena.play_matches(
            RandomAgent("Agent1", seed=1),
            RandomAgent("Agent2", seed=2),
            num_games=4,
            alternate_colors=True,
        )

        assert len(results) == 4
        for result in results:
            assert result.winner in [-1, 0, 1]

    def test_mcts_wins_nim_as_first_player(self, nim_class):
        """先手のMCTSは山5のNimで必ず勝つ"""
        arena = Arena(nim_class, verbose=False)

        result = arena.play_game(
            MCTSAgent(num_iterations=200, seed=0, name="MCTS"),
            RandomAgent("Random", seed=0),
            starting_player=1,
        )

        assert result.winner == 1

    def test_second_player_assignment(self, nim_class):
        """starting_player=-1 なら agent2 が先手"""
        arena = Arena(nim_class, verbose=False)

        result = arena.play_game(
            RandomAgent("Random", seed=0),
            MCTSAgent(num_iterations=200, seed=0, name="MCTS"),
            starting_player=-1,
        )

        assert result.winner == -1

    def test_verbose_output(self, nim_class, capsys):
        arena = Arena(nim_class, verbose=True)
        result = arena.play_game(RandomAgent("A", seed=0), RandomAgent("B", seed=1))

        out = capsys.readouterr().out
        assert "plays" in out
        assert str(result) in out

    def test_match_summary(self, nim_class, capsys):
        """先手固定なら MCTS の全勝で得点率100%"""
        arena = Arena(nim_class, verbose=True)
        arena.play_matches(
            MCTSAgent(num_iterations=200, seed=0, name="MCTS"),
            RandomAgent("Random", seed=0),
            num_games=2,
            alternate_colors=False,
        )

        out = capsys.readouterr().out
        assert "MCTS vs Random: 2 games" in out
        assert "MCTS score: 2.0 (100.0%)" in out

    def test_match_result_str(self):
        result = MatchResult("A", "B", winner=0, num_moves=42, duration=1.5)
        assert str(result).startswith("Draw")
        result = MatchResult("A", "B", winner=-1, num_moves=10, duration=0.5)
        assert str(result).startswith("B wins")


class TestEvaluation:
    """評価関数のテスト"""

    def test_evaluate_agent(self, nim_class):
        result = evaluate_agent(
            nim_class,
            MCTSAgent(num_iterations=100, seed=0),
            RandomAgent(seed=0),
            num_games=4,
            verbose=False,
        )

        assert set(result) == {"win_rate", "draw_rate", "avg_moves", "results"}
        assert 0.0 <= result["win_rate"] <= 1.0
        assert result["draw_rate"] == 0.0
        assert len(result["results"]) == 4
        # 先手番の2局は必勝
        assert result["win_rate"] >= 0.5
