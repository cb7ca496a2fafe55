"""
設定ファイルの読み込み

YAML形式の設定を既定値にマージして返す
"""

import copy
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

from mctree.errors import ConfigurationError
from mctree.games import GAMES
from mctree.games.base import Player

DEFAULT_CONFIG: Dict[str, Any] = {
    "game": "connect4",
    "search": {
        "thinking_time_ms": 3000,
        "seed": None,
    },
    "play": {
        "engine_player": "p2",
        "seed_unexplored": True,
    },
    "eval": {
        "games": 10,
        "iterations": 200,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        # 空のセクション (例: "search:") は既定値のまま
        if value is None and isinstance(merged.get(key), dict):
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> dict:
    """
    YAML設定ファイルを読み込む

    Args:
        config_path: 設定ファイルのパス（None なら既定値のみ）

    Returns:
        dict: 既定値にマージした設定辞書

    Raises:
        ConfigurationError: ファイルが読めない、または形式が不正な場合
    """
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Failed to load config: {e}",
            context={"path": config_path},
        ) from e

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ConfigurationError("Config root must be a mapping", context={"path": config_path})

    merged = _merge(DEFAULT_CONFIG, config)
    for name, default in DEFAULT_CONFIG.items():
        if isinstance(default, dict):
            _section(merged, name)
    return merged


def _section(config: dict, name: str) -> dict:
    section = config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"{name} must be a mapping", context={name: section})
    return section


def _positive_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive integer", context={name: value})
    return value


@dataclass
class SearchConfig:
    """
    検証済みの設定

    Attributes:
        game: ゲーム名
        thinking_time_ms: 1手あたりの探索時間（ミリ秒）
        seed: 乱数シード（None なら非決定的）
        engine_player: エンジンが担当するプレイヤー
        seed_unexplored: 未探索の相手の手に新しい部分木を作るか
        eval_games: 評価対局数
        eval_iterations: 評価時の1手あたりの探索反復回数
    """
    game: str = "connect4"
    thinking_time_ms: int = 3000
    seed: Optional[int] = None
    engine_player: Player = Player.P2
    seed_unexplored: bool = True
    eval_games: int = 10
    eval_iterations: int = 200

    @classmethod
    def from_dict(cls, config: dict) -> "SearchConfig":
        """
        設定辞書から生成

        Raises:
            ConfigurationError: 値が不正な場合
        """
        game = config.get("game", "connect4")
        if not isinstance(game, str) or game not in GAMES:
            raise ConfigurationError(
                f"Unknown game: {game}",
                context={"available": ", ".join(sorted(GAMES))},
            )

        search = _section(config, "search")
        play = _section(config, "play")
        evaluation = _section(config, "eval")

        seed = search.get("seed")
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            raise ConfigurationError("search.seed must be an integer or null", context={"seed": seed})

        try:
            engine_player = Player.parse(str(play.get("engine_player", "p2")))
        except KeyError:
            raise ConfigurationError(
                "play.engine_player must be p1 or p2",
                context={"engine_player": play.get("engine_player")},
            ) from None

        seed_unexplored = play.get("seed_unexplored", True)
        if not isinstance(seed_unexplored, bool):
            raise ConfigurationError(
                "play.seed_unexplored must be true or false",
                context={"seed_unexplored": seed_unexplored},
            )

        return cls(
            game=game,
            thinking_time_ms=_positive_int(search.get("thinking_time_ms", 3000), "thinking_time_ms"),
            seed=seed,
            engine_player=engine_player,
            seed_unexplored=seed_unexplored,
            eval_games=_positive_int(evaluation.get("games", 10), "games"),
            eval_iterations=_positive_int(evaluation.get("iterations", 200), "iterations"),
        )
