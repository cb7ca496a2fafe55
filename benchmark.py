"""プレイアウトと探索のベンチマーク

各ゲームについて、ランダムプレイアウトの1秒あたりの対局数（Games/sec）と
探索反復の1秒あたりの回数（Iterations/sec）を計測する。

使用方法:
    python benchmark.py
"""

import time

import numpy as np

from mctree.games import GAMES
from mctree.games.base import Player
from mctree.mcts.playout import simulate
from mctree.mcts.tree import MCTree


def benchmark_playouts(game_class, duration: float = 1.0, seed: int = 0) -> float:
    """ランダムプレイアウトの Games/sec を計測"""
    rng = np.random.default_rng(seed)
    start = time.perf_counter()
    games = 0
    while time.perf_counter() - start < duration:
        state = game_class.initial()
        simulate(state, state.outcome(), Player.P1, rng)
        games += 1
    return games / (time.perf_counter() - start)


def benchmark_search(game_class, duration_ms: int = 1000, seed: int = 0) -> float:
    """探索反復の Iterations/sec を計測"""
    state = game_class.initial()
    tree = MCTree(state, perspective=Player.P1, to_move=state.next_player(), seed=seed)
    start = time.perf_counter()
    iterations = tree.run_for(duration_ms)
    return iterations / (time.perf_counter() - start)


def main():
    print("=" * 60)
    print("mctree Benchmark")
    print("=" * 60)

    for name, game_class in GAMES.items():
        playouts = benchmark_playouts(game_class)
        iterations = benchmark_search(game_class)
        print(f"{name:10s}: {playouts:10.1f} games/sec | {iterations:10.1f} iterations/sec")

    print("=" * 60)


if __name__ == "__main__":
    main()
