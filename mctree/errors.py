"""
mctree のエラー階層

すべての独自例外は MCTreeError を継承する。
いずれも呼び出し元で回復可能なエラーで、エンジン内部ではリトライしない。

使用例:
    from mctree.errors import ActionNotFoundError

    try:
        tree.advance(action)
    except ActionNotFoundError as e:
        logger.warning(f"未探索の手: {e.action}")
"""

from typing import Any, Dict, Optional

__all__ = [
    "MCTreeError",
    "ActionNotFoundError",
    "NoLegalMovesError",
    "InvalidActionError",
    "ConfigurationError",
]


class MCTreeError(Exception):
    """
    mctree の基底例外

    Attributes:
        code: 機械可読なエラーコード
        message: エラー内容
        context: デバッグ用の追加情報
    """

    code: str = "MCTREE_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """JSON出力用の辞書に変換"""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class ActionNotFoundError(MCTreeError):
    """
    ルートの子ノードに存在しない手で木を進めようとした

    探索で一度も展開されていない手には統計情報がないため、
    呼び出し元で新しい部分木を作るかどうかを決める。
    """

    code: str = "ACTION_NOT_FOUND"

    def __init__(self, action: Any, context: Optional[Dict[str, Any]] = None):
        super().__init__(f"Action {action!r} is not among the root's children", context=context)
        self.action = action
        self.context["action"] = repr(action)


class NoLegalMovesError(MCTreeError):
    """ルートに子ノードがなく推奨手を返せない（未探索または終局）"""

    code: str = "NO_LEGAL_MOVES"


class InvalidActionError(MCTreeError):
    """入力された手が解釈できない、または合法手でない"""

    code: str = "INVALID_ACTION"


class ConfigurationError(MCTreeError):
    """設定値が不正"""

    code: str = "CONFIGURATION_ERROR"


class WrongTurnError(MCTreeError):
    """視点プレイヤーの手番でないのに推奨手で木を進めようとした"""

    code: str = "WRONG_TURN"
