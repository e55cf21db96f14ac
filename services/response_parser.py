# services/response_parser.py
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from app.errors import ResponseParseError, ResponseShapeError
from models.seo_models import RESULT_MODELS, ResultKind, SeoResult

logger = logging.getLogger(__name__)

# ```json（直後の改行も含む）と ``` を丸ごと取り除く
_FENCE_PATTERN = re.compile(r"```json\n?|```")

# 構造で判定するときの必須キー。判定順はこの並びで固定
_REQUIRED_KEYS: Tuple[Tuple[ResultKind, Tuple[str, ...]], ...] = (
    (ResultKind.KEYWORD_RESEARCH, ("keywords",)),
    (ResultKind.PAGE_OPTIMIZATION, ("keywordCluster", "headings")),
    (ResultKind.PRODUCT_COPY, ("features", "intro")),
    (ResultKind.BLOG_CONTENT, ("introduction", "body")),
)

# "type" フィールドを持つ 2 種類は明示的に判別できる
_TYPE_TAGS: Dict[str, ResultKind] = {
    "product": ResultKind.PRODUCT_COPY,
    "blog": ResultKind.BLOG_CONTENT,
}


def clean_json_output(text: Optional[str]) -> str:
    """
    LLM がコードフェンスで包んで返してきた場合に備えてフェンスを外す。
    壊れた JSON の修復まではしない。空なら "{}" を返す。
    """
    if not text:
        return "{}"
    return _FENCE_PATTERN.sub("", text).strip()


def detect_result_kind(data: Any) -> ResultKind:
    """
    パース済み JSON がどの結果の形かを判定する。

    1. "type" が product / blog ならそれで確定
    2. それ以外は必須キーの有無で判定
       - どれにも当てはまらない / 複数に当てはまる場合は ResponseShapeError
    """
    if not isinstance(data, dict):
        raise ResponseShapeError(
            f"LLM response is not a JSON object (got {type(data).__name__})"
        )

    tag = data.get("type")
    if isinstance(tag, str) and tag in _TYPE_TAGS:
        return _TYPE_TAGS[tag]

    matches = [
        kind for kind, keys in _REQUIRED_KEYS
        if all(key in data for key in keys)
    ]
    if not matches:
        raise ResponseShapeError(
            f"LLM response matches no known result shape keys={sorted(data.keys())}"
        )
    if len(matches) > 1:
        raise ResponseShapeError(
            "LLM response is ambiguous, matches shapes="
            + ",".join(kind.value for kind in matches)
        )
    return matches[0]


def parse_seo_result(
    text: Optional[str],
    expected: Optional[ResultKind] = None,
) -> SeoResult:
    """
    生テキスト → フェンス除去 → JSON パース → 形の判定 → モデル化。

    expected を渡した場合、判定結果がそれと違えば ResponseShapeError。
    途中まで読めたオブジェクトを返すことはない。
    """
    cleaned = clean_json_output(text)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"LLM response is not valid JSON: {e}") from e

    kind = detect_result_kind(data)
    if expected is not None and kind != expected:
        raise ResponseShapeError(
            f"LLM response shape mismatch expected={expected.value} actual={kind.value}"
        )

    model = RESULT_MODELS[kind]
    try:
        result = model.model_validate(data)
    except ValidationError as e:
        raise ResponseShapeError(
            f"LLM response failed {kind.value} validation: {e.error_count()} error(s)"
        ) from e

    logger.debug("[response_parser] parsed kind=%s", kind.value)
    return result
