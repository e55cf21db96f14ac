# app/errors.py
from __future__ import annotations

from typing import Any, Dict, Optional


class SeoEngineError(Exception):
    """
    アプリ内で扱う例外の基底クラス。
    code / message / status_code を持ち、API 層でそのまま JSON に変換する。
    """

    code: str = "seo_engine_error"
    status_code: int = 500

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_payload(self) -> Dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message}}


# ------------------------------------------------------------
# (1) 設定エラー: APIキー未設定。呼び出し前に即失敗させる
# ------------------------------------------------------------
class ConfigurationError(SeoEngineError):
    code = "configuration_error"
    status_code = 503


# ------------------------------------------------------------
# (2) 入力エラー: 必須フィールドが空
# ------------------------------------------------------------
class InputValidationError(SeoEngineError):
    code = "input_validation_error"
    status_code = 422


# ------------------------------------------------------------
# (3)(4) 生成エラー
# ユーザーには同じ「再試行してください」メッセージを出すが、
# ログ上は category で区別する
# ------------------------------------------------------------
class GenerationError(SeoEngineError):
    code = "generation_error"
    status_code = 502
    category: str = "generation"


class UpstreamError(GenerationError):
    """LLM エンドポイントの呼び出し自体が失敗した。"""

    category = "upstream"


class EmptyResponseError(GenerationError):
    """LLM から本文が返ってこなかった。"""

    category = "empty"


class ResponseParseError(GenerationError):
    """コードフェンス除去後も JSON として読めなかった。"""

    category = "parse"


class ResponseShapeError(ResponseParseError):
    """JSON としては読めたが、期待する結果の形になっていない。"""

    category = "shape"


# ------------------------------------------------------------
# ワークスペース関連
# ------------------------------------------------------------
class WorkspaceBusyError(SeoEngineError):
    code = "workspace_busy"
    status_code = 409


class SessionNotFoundError(SeoEngineError):
    code = "session_not_found"
    status_code = 404
