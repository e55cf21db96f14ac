# app/workspace/state.py
from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, PrivateAttr

from agents.seo_generator_agent import generate
from app.config import settings
from app.errors import (
    ConfigurationError,
    GenerationError,
    InputValidationError,
    SessionNotFoundError,
    WorkspaceBusyError,
)
from models.request_models import (
    GENERATION_FAILED_MESSAGES,
    ContentSubType,
    FeatureType,
    validate_inputs,
)
from models.seo_models import SeoResult
from services.markdown_renderer import copy_text

logger = logging.getLogger(__name__)

Generator = Callable[..., Awaitable[SeoResult]]


class WorkspaceState(BaseModel):
    """
    画面 1 枚分の状態（選択中タブ・モード・入力値・実行中フラグ・結果・エラー）。

    - タブを切り替えると結果とエラーは必ず消える
    - 実行中（busy）の間は次の生成を受け付けない
    - 結果はメモリ上にだけ持ち、次の生成 or タブ切り替えで捨てる
    """

    session_id: str = Field(default_factory=lambda: uuid4().hex)
    active_feature: FeatureType = FeatureType.KEYWORD_RESEARCH
    content_sub_type: ContentSubType = ContentSubType.PRODUCT

    # フォームごとの入力値。キーは _form_key() の戻り値
    form_values: Dict[str, Dict[str, str]] = Field(default_factory=dict)

    busy: bool = False
    result: Optional[Any] = None
    error: Optional[str] = None

    # タブ・モードが切り替わるたびに進める。実行中の生成が古くなったかの判定用
    _epoch: int = PrivateAttr(default=0)

    # ------------------------------
    # 状態参照
    # ------------------------------
    @property
    def current_sub_type(self) -> Optional[ContentSubType]:
        if self.active_feature == FeatureType.CONTENT_ENGINE:
            return self.content_sub_type
        return None

    def _form_key(self) -> str:
        sub = self.current_sub_type
        return f"{self.active_feature.value}:{sub.value}" if sub else self.active_feature.value

    def current_fields(self) -> Dict[str, str]:
        return dict(self.form_values.get(self._form_key(), {}))

    # ------------------------------
    # 状態変更
    # ------------------------------
    def switch_feature(self, feature: FeatureType) -> None:
        """タブ切り替え。前回の結果とエラーは無条件にクリアする。"""
        self.active_feature = FeatureType(feature)
        self._epoch += 1
        self.result = None
        self.error = None

    def set_content_sub_type(self, sub_type: ContentSubType) -> None:
        sub_type = ContentSubType(sub_type)
        if sub_type != self.content_sub_type:
            self._epoch += 1
        self.content_sub_type = sub_type

    def update_fields(self, **values: str) -> None:
        form = self.form_values.setdefault(self._form_key(), {})
        form.update(values)

    async def run(self, generator: Optional[Generator] = None) -> Optional[SeoResult]:
        """
        現在のタブ・入力値で生成を 1 回実行する。

        - 入力不足: error にメッセージを入れて終了（LLM は呼ばない。表示中の結果はそのまま）
        - 生成失敗: error に「再試行してください」系メッセージを入れ、結果はクリア
        - 設定エラー: error に入れたうえで呼び出し元へ再送出
        - 実行中にタブ・モードが切り替わった場合、結果もエラーも書き戻さない
        """
        if self.busy:
            raise WorkspaceBusyError("A generation is already in progress.")

        generator = generator or generate
        feature = self.active_feature
        sub_type = self.current_sub_type
        inputs = self.current_fields()

        try:
            validate_inputs(feature, inputs, sub_type)
        except InputValidationError as e:
            logger.info("[workspace] input missing session=%s feature=%s", self.session_id, feature.value)
            self.error = e.message
            return None

        epoch = self._epoch
        self.busy = True
        try:
            result = await generator(feature, inputs, sub_type=sub_type)
        except ConfigurationError as e:
            if epoch == self._epoch:
                self.error = e.message
                self.result = None
            raise
        except GenerationError as e:
            logger.warning(
                "[workspace] generation failed session=%s feature=%s category=%s",
                self.session_id,
                feature.value,
                e.category,
            )
            if epoch == self._epoch:
                self.error = GENERATION_FAILED_MESSAGES[feature]
                self.result = None
            return None
        finally:
            self.busy = False

        if epoch != self._epoch:
            logger.info(
                "[workspace] stale result dropped session=%s feature=%s active=%s",
                self.session_id,
                feature.value,
                self.active_feature.value,
            )
            return None

        self.result = result
        self.error = None
        return result

    def snapshot(self) -> Dict[str, Any]:
        """API で返す用の dict。結果は camelCase の JSON 形で出す。"""
        result = self.result
        return {
            "sessionId": self.session_id,
            "activeFeature": self.active_feature.value,
            "contentSubType": self.content_sub_type.value,
            "fields": self.current_fields(),
            "busy": self.busy,
            "error": self.error,
            "resultKind": result.kind.value if result is not None else None,
            "result": result.model_dump(by_alias=True) if result is not None else None,
            "copyText": copy_text(result) if result is not None else None,
        }


class WorkspaceStore:
    """
    セッション ID → WorkspaceState のインメモリ置き場（永続化はしない）。
    上限を超えたら、最後に使われたのが最も古いセッションから捨てる。
    """

    def __init__(self, max_sessions: Optional[int] = None) -> None:
        self.max_sessions = max_sessions or settings.workspace_max_sessions
        self._sessions: "OrderedDict[str, WorkspaceState]" = OrderedDict()

    def create(self) -> WorkspaceState:
        state = WorkspaceState()
        self._sessions[state.session_id] = state
        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info("[workspace] session evicted session=%s", evicted_id)
        logger.info("[workspace] session created session=%s", state.session_id)
        return state

    def get(self, session_id: str) -> WorkspaceState:
        try:
            state = self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(f"Session not found: {session_id}") from None
        self._sessions.move_to_end(session_id)
        return state

    def delete(self, session_id: str) -> None:
        self.get(session_id)
        del self._sessions[session_id]
        logger.info("[workspace] session deleted session=%s", session_id)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
