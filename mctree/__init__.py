"""
mctree - 二人零和完全情報ゲーム向けのモンテカルロ木探索エンジン

UCB1による木探索とランダムプレイアウトで勝率を推定し、
実際の着手に合わせて探索木を付け替える
"""

__version__ = "0.1.0"
