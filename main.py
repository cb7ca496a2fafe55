"""
mctree - CLIエントリポイント

人間 vs エンジンの対局と、エンジンの評価用のコマンドラインインターフェース
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from mctree.config import SearchConfig, load_config
from mctree.errors import MCTreeError
from mctree.eval.agents import HumanAgent, MCTSAgent, RandomAgent
from mctree.eval.arena import evaluate_agent
from mctree.games import get_game
from mctree.games.base import Draw, Player, Win
from mctree.mcts.tree import MCTree

logger = logging.getLogger(__name__)

MARKS = {Player.P1: "X", Player.P2: "O"}


def setup_logging(level: str):
    """ログ出力を設定"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_config(args) -> SearchConfig:
    """
    設定ファイルとコマンドライン引数から設定を作成

    Args:
        args: argparseの引数

    Returns:
        SearchConfig: 検証済みの設定
    """
    config = load_config(args.config)

    # コマンドライン引数で上書き
    if args.game is not None:
        config["game"] = args.game
    if args.time is not None:
        config["search"]["thinking_time_ms"] = args.time
    if args.seed is not None:
        config["search"]["seed"] = args.seed

    return SearchConfig.from_dict(config)


def print_engine_report(tree: MCTree, action):
    """エンジンの着手と探索統計を表示"""
    stats = tree.root_statistics()
    print(f"The AI played {action!r}")
    print(f" it has played {stats.visits} games from this position")
    print(f" and it believes it will win with p = {stats.value:.3f}")
    print(
        f" it has explored {stats.min_depth} moves ahead fully, "
        f"and has ventured as far as {stats.max_depth} moves"
    )


def play_command(args) -> int:
    """
    対局コマンド（人間 vs AI）

    Args:
        args: argparseの引数
    """
    config = build_config(args)
    game_class = get_game(config.game)
    engine_player = config.engine_player

    state = game_class.initial()
    tree = MCTree(
        state,
        perspective=engine_player,
        to_move=state.next_player(),
        seed=config.seed,
    )
    human = HumanAgent()

    print(f"Game: {config.game} | You are {MARKS[engine_player.other()]}")
    print(f"Thinking time: {config.thinking_time_ms} ms")

    # 相手の手番中も先読みしておく
    tree.run_for(config.thinking_time_ms)
    print(state)

    while True:
        if state.next_player() == engine_player:
            tree.run_for(config.thinking_time_ms)
            action = tree.recommend_and_commit()
            outcome = state.do_action(action)
            print_engine_report(tree, action)
        else:
            action = human.get_action(state.copy())
            outcome = state.do_action(action)
            tree.advance(action, seed_if_missing=config.seed_unexplored)

        print(state)

        if isinstance(outcome, Win):
            print(f"{MARKS[outcome.player]} Won!")
            return 0
        if isinstance(outcome, Draw) or len(outcome.actions) == 0:
            print("Draw")
            return 0


def eval_command(args) -> int:
    """
    評価コマンド（AI vs ランダム）

    Args:
        args: argparseの引数
    """
    config = build_config(args)
    game_class = get_game(config.game)
    num_games = args.games if args.games is not None else config.eval_games
    iterations = args.iterations if args.iterations is not None else config.eval_iterations

    print("=" * 70)
    print("Engine Evaluation")
    print("=" * 70)
    print(f"\nGame: {config.game}")
    print(f"Games: {num_games}")
    print(f"MCTS iterations per move: {iterations}")

    agent = MCTSAgent(
        num_iterations=iterations,
        seed=config.seed,
        seed_unexplored=True,
        name=f"MCTS-{iterations}it",
    )
    opponent = RandomAgent(name="Random", seed=config.seed)

    eval_result = evaluate_agent(
        game_class,
        agent,
        opponent,
        num_games=num_games,
        verbose=args.verbose,
    )

    print(f"\nResult vs {opponent.name}:")
    print(f"  Win Rate: {eval_result['win_rate'] * 100:.1f}%")
    print(f"  Draw Rate: {eval_result['draw_rate'] * 100:.1f}%")
    print(f"  Avg Moves: {eval_result['avg_moves']:.1f}")

    # 結果を保存（オプション）
    if args.save_results:
        output_dir = Path("data/eval")
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        result_file = output_dir / f"eval_{config.game}_{timestamp}.json"

        eval_data = {
            "game": config.game,
            "timestamp": datetime.now().isoformat(),
            "mcts_iterations": iterations,
            "games": num_games,
            "win_rate": eval_result["win_rate"],
            "draw_rate": eval_result["draw_rate"],
            "avg_moves": eval_result["avg_moves"],
        }

        with open(result_file, "w") as f:
            json.dump(eval_data, f, indent=2)

        print(f"\nResults saved to: {result_file}")

    print("\n" + "=" * 70)
    return 0


def add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to config file (e.g. configs/default.yaml)'
    )
    parser.add_argument(
        '--game',
        type=str,
        default=None,
        help='Game to play: connect4 or ultimate'
    )
    parser.add_argument(
        '--time',
        type=int,
        default=None,
        help='Thinking time per move in milliseconds (default: 3000)'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed for reproducible search'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default='WARNING',
        help='Logging level (default: WARNING)'
    )


def main(argv=None) -> int:
    """メインエントリポイント"""
    parser = argparse.ArgumentParser(description="mctree - Monte Carlo Tree Search CLI")

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Play コマンド
    play_parser = subparsers.add_parser('play', help='Play against the engine')
    add_common_arguments(play_parser)
    play_parser.set_defaults(func=play_command)

    # Eval コマンド
    eval_parser = subparsers.add_parser('eval', help='Evaluate the engine against a random agent')
    add_common_arguments(eval_parser)
    eval_parser.add_argument(
        '--games',
        type=int,
        default=None,
        help='Number of games (default: from config)'
    )
    eval_parser.add_argument(
        '--iterations',
        type=int,
        default=None,
        help='MCTS iterations per move (default: from config)'
    )
    eval_parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show detailed game progress'
    )
    eval_parser.add_argument(
        '--save-results',
        action='store_true',
        help='Save evaluation results to JSON file'
    )
    eval_parser.set_defaults(func=eval_command)

    args = parser.parse_args(argv)

    if not hasattr(args, 'func'):
        parser.print_help()
        return 1

    setup_logging(args.log_level)

    try:
        return args.func(args)
    except MCTreeError as e:
        logger.error("%s", e)
        print(f"Error: {e}")
        return 1
    except (KeyboardInterrupt, EOFError):
        print("\nAborted")
        return 1


if __name__ == "__main__":
    sys.exit(main())
