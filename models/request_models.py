# models/request_models.py

from __future__ import annotations

from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from app.errors import InputValidationError
from models.seo_models import ResultKind


# -----------------------------------------
# 機能タブ / コンテンツモード
# -----------------------------------------
class FeatureType(str, Enum):
    KEYWORD_RESEARCH = "KEYWORD_RESEARCH"
    PAGE_OPTIMIZATION = "PAGE_OPTIMIZATION"
    CONTENT_ENGINE = "CONTENT_ENGINE"


class ContentSubType(str, Enum):
    PRODUCT = "PRODUCT"
    BLOG = "BLOG"


# -----------------------------------------
# 機能ごとの必須フィールドと、未入力時のメッセージ
# キーは (feature, sub_type)。sub_type はコンテンツエンジン以外では None
# -----------------------------------------
REQUIRED_FIELDS: Dict[Tuple[FeatureType, Optional[ContentSubType]], Tuple[str, ...]] = {
    (FeatureType.KEYWORD_RESEARCH, None): ("domain", "description"),
    (FeatureType.PAGE_OPTIMIZATION, None): ("domain", "focusKeyword", "description"),
    (FeatureType.CONTENT_ENGINE, ContentSubType.PRODUCT): ("productName", "description", "focusKeyword"),
    (FeatureType.CONTENT_ENGINE, ContentSubType.BLOG): ("focusKeyword",),
}

MISSING_FIELDS_MESSAGES: Dict[Tuple[FeatureType, Optional[ContentSubType]], str] = {
    (FeatureType.KEYWORD_RESEARCH, None): "Please provide both Domain Name and Short Description.",
    (FeatureType.PAGE_OPTIMIZATION, None): "All fields are required for page optimization.",
    (FeatureType.CONTENT_ENGINE, ContentSubType.PRODUCT): "Product Name, Description, and Focus Keyword are required.",
    (FeatureType.CONTENT_ENGINE, ContentSubType.BLOG): "Focus Keyword is required for blog content.",
}

# 生成失敗時にユーザーへ出すメッセージ（失敗の種類は区別しない）
GENERATION_FAILED_MESSAGES: Dict[FeatureType, str] = {
    FeatureType.KEYWORD_RESEARCH: "Failed to generate keywords. Please try again.",
    FeatureType.PAGE_OPTIMIZATION: "Failed to optimize page. Please try again.",
    FeatureType.CONTENT_ENGINE: "Failed to generate content. The AI engine might be busy, please try again.",
}


def resolve_sub_type(
    feature: FeatureType,
    sub_type: Optional[ContentSubType] = None,
    inputs: Optional[Mapping[str, str]] = None,
) -> Optional[ContentSubType]:
    """
    コンテンツエンジンのモードを決める。

    - コンテンツエンジン以外では常に None
    - 明示指定があればそれを使う
    - 無ければ inputs["subType"] が PRODUCT のときだけ PRODUCT、それ以外は BLOG
    """
    if feature != FeatureType.CONTENT_ENGINE:
        return None
    if sub_type is not None:
        return ContentSubType(sub_type)
    raw = (inputs or {}).get("subType")
    if raw == ContentSubType.PRODUCT.value:
        return ContentSubType.PRODUCT
    return ContentSubType.BLOG


def required_fields(
    feature: FeatureType,
    sub_type: Optional[ContentSubType] = None,
) -> Tuple[str, ...]:
    return REQUIRED_FIELDS[(feature, resolve_sub_type(feature, sub_type))]


def validate_inputs(
    feature: FeatureType,
    inputs: Mapping[str, str],
    sub_type: Optional[ContentSubType] = None,
) -> None:
    """
    必須フィールドがすべて埋まっているか確認する。
    空文字・空白のみ・キー欠落はいずれも未入力扱い。
    """
    key = (feature, resolve_sub_type(feature, sub_type, inputs))
    missing = [
        name for name in REQUIRED_FIELDS[key]
        if not str(inputs.get(name) or "").strip()
    ]
    if missing:
        raise InputValidationError(MISSING_FIELDS_MESSAGES[key])


def expected_result_kind(
    feature: FeatureType,
    sub_type: Optional[ContentSubType] = None,
) -> ResultKind:
    """機能とモードから、返ってくるべき結果の種類を決める。"""
    if feature == FeatureType.KEYWORD_RESEARCH:
        return ResultKind.KEYWORD_RESEARCH
    if feature == FeatureType.PAGE_OPTIMIZATION:
        return ResultKind.PAGE_OPTIMIZATION
    if sub_type == ContentSubType.PRODUCT:
        return ResultKind.PRODUCT_COPY
    return ResultKind.BLOG_CONTENT


# -----------------------------------------
# API 用リクエストモデル
# -----------------------------------------
class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    feature: FeatureType
    sub_type: Optional[ContentSubType] = Field(None, alias="subType")
    inputs: Dict[str, str] = Field(default_factory=dict)


class SwitchFeatureRequest(BaseModel):
    feature: FeatureType


class ContentModeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sub_type: ContentSubType = Field(..., alias="subType")


class UpdateFieldsRequest(BaseModel):
    fields: Dict[str, str] = Field(default_factory=dict)
