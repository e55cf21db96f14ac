# app/api/routes.py
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Response

from agents.seo_generator_agent import generate
from app.config import settings
from app.errors import GenerationError
from app.workspace.state import WorkspaceStore
from models.request_models import (
    GENERATION_FAILED_MESSAGES,
    ContentModeRequest,
    GenerateRequest,
    SwitchFeatureRequest,
    UpdateFieldsRequest,
    resolve_sub_type,
    validate_inputs,
)
from services.markdown_renderer import copy_text, render_markdown

logger = logging.getLogger(__name__)

router = APIRouter()

# セッションはプロセス内メモリのみ（再起動で消える）
workspace_store = WorkspaceStore()


# --------- エンドポイント ---------


@router.get("/health")
def api_health() -> Dict[str, Any]:
    return {"status": "ok", "llm_configured": bool(settings.openai_api_key)}


@router.post("/generate")
async def api_generate(payload: GenerateRequest) -> Dict[str, Any]:
    """
    フォーム入力を受け取り、1 回だけ生成して結果を返すステートレス API。
    失敗理由は区別せず、機能ごとの「再試行してください」メッセージで返す。
    """
    sub_type = resolve_sub_type(payload.feature, payload.sub_type, payload.inputs)
    logger.info(
        "[api.generate] feature=%s sub_type=%s fields=%s",
        payload.feature.value,
        sub_type.value if sub_type else None,
        sorted(payload.inputs.keys()),
    )

    validate_inputs(payload.feature, payload.inputs, sub_type)

    try:
        result = await generate(payload.feature, payload.inputs, sub_type=sub_type)
    except GenerationError as e:
        raise GenerationError(GENERATION_FAILED_MESSAGES[payload.feature]) from e

    return {
        "kind": result.kind.value,
        "result": result.model_dump(by_alias=True),
        "markdown": render_markdown(result),
        "copyText": copy_text(result),
    }


# --------- ワークスペース（タブ UI の状態） ---------


@router.post("/sessions", status_code=201)
def api_create_session() -> Dict[str, Any]:
    return workspace_store.create().snapshot()


@router.get("/sessions/{session_id}")
def api_get_session(session_id: str) -> Dict[str, Any]:
    return workspace_store.get(session_id).snapshot()


@router.put("/sessions/{session_id}/feature")
def api_switch_feature(session_id: str, payload: SwitchFeatureRequest) -> Dict[str, Any]:
    state = workspace_store.get(session_id)
    state.switch_feature(payload.feature)
    return state.snapshot()


@router.put("/sessions/{session_id}/content-mode")
def api_set_content_mode(session_id: str, payload: ContentModeRequest) -> Dict[str, Any]:
    state = workspace_store.get(session_id)
    state.set_content_sub_type(payload.sub_type)
    return state.snapshot()


@router.put("/sessions/{session_id}/fields")
def api_update_fields(session_id: str, payload: UpdateFieldsRequest) -> Dict[str, Any]:
    state = workspace_store.get(session_id)
    state.update_fields(**payload.fields)
    return state.snapshot()


@router.post("/sessions/{session_id}/generate")
async def api_session_generate(session_id: str) -> Dict[str, Any]:
    """
    セッションの現在の入力で生成する。
    入力不足・生成失敗はセッションの error に入り、200 でスナップショットを返す。
    """
    state = workspace_store.get(session_id)
    await state.run()
    return state.snapshot()


@router.delete("/sessions/{session_id}", status_code=204)
def api_delete_session(session_id: str) -> Response:
    workspace_store.delete(session_id)
    return Response(status_code=204)
