# models/seo_models.py

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Dict, List, Literal, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# -----------------------------------------
# 結果の種類（パース時に付与する明示的な判別子）
# -----------------------------------------
class ResultKind(str, Enum):
    KEYWORD_RESEARCH = "keyword_research"
    PAGE_OPTIMIZATION = "page_optimization"
    PRODUCT_COPY = "product_copy"
    BLOG_CONTENT = "blog_content"


KeywordCategory = Literal["Focus", "Short-tail", "Long-tail", "Related"]
IndicationLevel = Literal["Very Important", "Important", "Less Important"]
HeadingLevel = Literal["H1", "H2", "H3"]

# 表示・レポート用のカテゴリ順
KEYWORD_CATEGORIES: tuple = ("Focus", "Short-tail", "Long-tail", "Related")

_CATEGORY_ALIASES = {
    "focus": "Focus",
    "shorttail": "Short-tail",
    "longtail": "Long-tail",
    "related": "Related",
}

_INDICATION_ALIASES = {
    "veryimportant": "Very Important",
    "important": "Important",
    "lessimportant": "Less Important",
}


def _squash(value: str) -> str:
    """大小文字・空白・ハイフン・アンダースコアの揺れを吸収した比較用キー。"""
    return "".join(ch for ch in value.lower() if ch not in " -_")


class _CamelModel(BaseModel):
    """
    LLM の JSON は camelCase、Python 側は snake_case で扱うための共通ベース。
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------------------------
# キーワードリサーチ
# -----------------------------------------
class KeywordItem(_CamelModel):
    """キーワードマトリクスの 1 行。

    Attributes:
        keyword (str): キーワード文字列。
        category (KeywordCategory): Focus / Short-tail / Long-tail / Related。
        indication_level (IndicationLevel): 重要度ラベル。
    """

    keyword: str
    category: KeywordCategory
    indication_level: IndicationLevel

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value):
        # "Short Tail" / "short-tail" などの揺れを既定の 4 分類に寄せる
        if isinstance(value, str):
            return _CATEGORY_ALIASES.get(_squash(value), value)
        return value

    @field_validator("indication_level", mode="before")
    @classmethod
    def _normalize_indication(cls, value):
        if isinstance(value, str):
            return _INDICATION_ALIASES.get(_squash(value), value)
        return value


class KeywordResearchResult(_CamelModel):
    """キーワードリサーチ結果（戦略サマリ + キーワード一覧）。"""

    kind: ClassVar[ResultKind] = ResultKind.KEYWORD_RESEARCH

    strategy_summary: str
    keywords: List[KeywordItem] = Field(default_factory=list)

    def by_category(self) -> Dict[str, List[KeywordItem]]:
        """カテゴリ別にキーワードをまとめる（順序は KEYWORD_CATEGORIES 固定）。

        Returns:
            Dict[str, List[KeywordItem]]: カテゴリ名をキーとしたキーワードリスト。
                該当なしのカテゴリも空リストで含む。
        """
        groups: Dict[str, List[KeywordItem]] = {c: [] for c in KEYWORD_CATEGORIES}
        for item in self.keywords:
            groups[item.category].append(item)
        return groups


# -----------------------------------------
# ページ最適化（ブループリント）
# -----------------------------------------
class KeywordCluster(_CamelModel):
    short_tail: List[str] = Field(default_factory=list)
    long_tail: List[str] = Field(default_factory=list)
    related: List[str] = Field(default_factory=list)


class HeadingItem(_CamelModel):
    """見出し 1 件。親子関係は level とリスト内の位置で表す。"""

    level: HeadingLevel
    text: str
    description: str = ""

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value


class PageOptimizationResult(_CamelModel):
    kind: ClassVar[ResultKind] = ResultKind.PAGE_OPTIMIZATION

    meta_title: str
    meta_description: str
    keyword_cluster: KeywordCluster
    headings: List[HeadingItem] = Field(default_factory=list)

    def has_strategic_summary(self) -> bool:
        """最後の見出しが「まとめ」の H2 になっているか（生成品質の目安）。"""
        if not self.headings:
            return False
        last = self.headings[-1]
        return last.level == "H2" and "summary" in last.text.lower()


# -----------------------------------------
# コンテンツエンジン: 商品コピー
# -----------------------------------------
class KeywordMapping(_CamelModel):
    focus: List[str] = Field(default_factory=list)
    short_tail: List[str] = Field(default_factory=list)
    long_tail: List[str] = Field(default_factory=list)
    related: List[str] = Field(default_factory=list)


class FeatureItem(_CamelModel):
    heading: str
    explanation: str


class ProductCopyResult(_CamelModel):
    kind: ClassVar[ResultKind] = ResultKind.PRODUCT_COPY

    type: Literal["product"] = "product"
    keyword_mapping: KeywordMapping = Field(default_factory=KeywordMapping)
    meta_title: str
    meta_description: str
    intro: str
    marketing_desc: str
    features: List[FeatureItem] = Field(default_factory=list)
    conclusion: str


# -----------------------------------------
# コンテンツエンジン: ブログ記事
# -----------------------------------------
class BlogIntroduction(_CamelModel):
    para1: str
    para2: str
    para3: str

    def paragraphs(self) -> List[str]:
        return [self.para1, self.para2, self.para3]


class BlogSubheading(_CamelModel):
    heading: str
    content: str


class BlogSection(_CamelModel):
    heading: str
    content: str
    subheadings: List[BlogSubheading] = Field(default_factory=list)


class BlogContentResult(_CamelModel):
    kind: ClassVar[ResultKind] = ResultKind.BLOG_CONTENT

    type: Literal["blog"] = "blog"
    meta_title: str
    meta_description: str
    introduction: BlogIntroduction
    body: List[BlogSection] = Field(default_factory=list)
    conclusion: str


SeoResult = Union[
    KeywordResearchResult,
    PageOptimizationResult,
    ProductCopyResult,
    BlogContentResult,
]

RESULT_MODELS: Dict[ResultKind, Type[_CamelModel]] = {
    ResultKind.KEYWORD_RESEARCH: KeywordResearchResult,
    ResultKind.PAGE_OPTIMIZATION: PageOptimizationResult,
    ResultKind.PRODUCT_COPY: ProductCopyResult,
    ResultKind.BLOG_CONTENT: BlogContentResult,
}
