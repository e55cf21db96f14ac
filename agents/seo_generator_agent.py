# agents/seo_generator_agent.py

from __future__ import annotations

import logging
from typing import Mapping, Optional

from openai import AsyncOpenAI, OpenAIError

from app.config import settings
from app.errors import (
    ConfigurationError,
    EmptyResponseError,
    ResponseParseError,
    UpstreamError,
)
from models.request_models import (
    ContentSubType,
    FeatureType,
    expected_result_kind,
    resolve_sub_type,
)
from models.seo_models import (
    KeywordResearchResult,
    PageOptimizationResult,
    SeoResult,
)
from services.llm_client import ensure_api_key, get_openai_client
from services.prompt_builder import SYSTEM_INSTRUCTION, build_final_prompt
from services.response_parser import parse_seo_result

# ============================================================
# ロガー設定
# ============================================================

logger = logging.getLogger(__name__)

# 開発中は必ずコンソールに出したいので、ハンドラを直付け
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            "%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)

logger.setLevel(settings.log_level)

# パース失敗時にログへ残す生レスポンスの最大文字数
MAX_LOGGED_CONTENT = 2000


def _describe(result: SeoResult) -> str:
    """ログ用に結果の概要を 1 行にまとめる。"""
    if isinstance(result, KeywordResearchResult):
        counts = {k: len(v) for k, v in result.by_category().items()}
        return f"keywords={len(result.keywords)} by_category={counts}"
    if isinstance(result, PageOptimizationResult):
        return (
            f"headings={len(result.headings)} "
            f"strategic_summary={result.has_strategic_summary()}"
        )
    if hasattr(result, "features"):
        return f"features={len(result.features)}"
    return f"sections={len(result.body)}"


# ============================================================
# 公開関数
# ============================================================

async def generate(
    feature: FeatureType,
    inputs: Mapping[str, str],
    *,
    sub_type: Optional[ContentSubType] = None,
    client: Optional[AsyncOpenAI] = None,
) -> SeoResult:
    """
    指定機能のプロンプトを LLM に 1 回だけ投げ、JSON 応答を結果モデルにして返す。

    失敗パターン（いずれも GenerationError 系 or ConfigurationError）:
    1. OPENAI_API_KEY 未設定 → ConfigurationError（通信前に即失敗）
    2. エンドポイント呼び出し失敗 → UpstreamError
    3. 本文が空 → EmptyResponseError
    4. フェンス除去後も JSON でない / 形が違う → ResponseParseError / ResponseShapeError

    リトライ・タイムアウト上書き・部分結果の返却はしない。
    """
    feature = FeatureType(feature)
    resolved = resolve_sub_type(feature, sub_type, inputs)
    expected = expected_result_kind(feature, resolved)

    try:
        ensure_api_key()
    except ConfigurationError:
        logger.error("[seo_generator] generation aborted feature=%s category=config", feature.value)
        raise

    client = client or get_openai_client()
    model_name = settings.openai_model
    final_prompt = build_final_prompt(feature, resolved, inputs)

    logger.info(
        "[seo_generator] LLM call start feature=%s sub_type=%s model=%s prompt_len=%d",
        feature.value,
        resolved.value if resolved else None,
        model_name,
        len(final_prompt),
    )

    try:
        response = await client.chat.completions.create(
            model=model_name,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": SYSTEM_INSTRUCTION},
                {"role": "user", "content": final_prompt},
            ],
        )
    except OpenAIError as e:
        logger.error(
            "[seo_generator] LLM call failed feature=%s category=upstream error=%s",
            feature.value,
            e,
        )
        raise UpstreamError(f"LLM endpoint call failed: {e}") from e

    usage = getattr(response, "usage", None)
    logger.info(
        "[seo_generator] LLM response received feature=%s total_tokens=%s",
        feature.value,
        getattr(usage, "total_tokens", None) if usage else None,
    )

    content = response.choices[0].message.content if response.choices else None
    if not content:
        logger.error("[seo_generator] empty response feature=%s category=empty", feature.value)
        raise EmptyResponseError("No response generated")

    try:
        result = parse_seo_result(content, expected=expected)
    except ResponseParseError as e:
        logger.error(
            "[seo_generator] response rejected feature=%s category=%s error=%s content=%r",
            feature.value,
            e.category,
            e,
            content[:MAX_LOGGED_CONTENT],
        )
        raise

    logger.info(
        "[seo_generator] generation success feature=%s kind=%s %s",
        feature.value,
        result.kind.value,
        _describe(result),
    )
    return result
