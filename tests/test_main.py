"""
CLIのテストケース
"""

import itertools
import json

import main


class TestCLI:
    """コマンドラインのテスト"""

    def test_no_command_prints_help(self, capsys):
        assert main.main([]) == 1
        assert "play" in capsys.readouterr().out

    def test_eval_command(self, capsys):
        """AI vs ランダムの評価"""
        code = main.main([
            "eval", "--game", "connect4",
            "--games", "2", "--iterations", "10", "--seed", "0",
        ])

        out = capsys.readouterr().out
        assert code == 0
        assert "Win Rate" in out
        assert "MCTS iterations per move: 10" in out

    def test_eval_saves_results(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        code = main.main([
            "eval", "--games", "1", "--iterations", "5", "--seed", "1", "--save-results",
        ])

        files = list((tmp_path / "data" / "eval").glob("eval_connect4_*.json"))
        assert code == 0
        assert len(files) == 1
        data = json.loads(files[0].read_text())
        assert data["games"] == 1
        assert data["mcts_iterations"] == 5

    def test_unknown_game_is_reported(self, capsys):
        code = main.main(["eval", "--game", "chess"])

        assert code == 1
        assert "CONFIGURATION_ERROR" in capsys.readouterr().out

    def test_malformed_config_is_reported(self, tmp_path, capsys):
        path = tmp_path / "config.yaml"
        path.write_text("search: 5\n", encoding="utf-8")

        code = main.main(["eval", "--config", str(path), "--games", "1", "--seed", "0"])

        assert code == 1
        assert "CONFIGURATION_ERROR" in capsys.readouterr().out

    def test_play_command(self, monkeypatch, capsys):
        """人間 vs AI の対局が終局まで進む"""
        columns = itertools.cycle("0123456")
        monkeypatch.setattr("builtins.input", lambda prompt="": next(columns))

        code = main.main(["play", "--game", "connect4", "--time", "5", "--seed", "0"])

        out = capsys.readouterr().out
        assert code == 0
        assert "The AI played" in out
        assert "Won!" in out or "Draw" in out

    def test_play_aborts_on_eof(self, monkeypatch, capsys):
        def eof(prompt=""):
            raise EOFError

        monkeypatch.setattr("builtins.input", eof)

        code = main.main(["play", "--time", "5", "--seed", "0"])

        assert code == 1
        assert "Aborted" in capsys.readouterr().out
