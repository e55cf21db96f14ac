# services/markdown_renderer.py
"""
生成結果を Markdown テキストに整形する（UI のコピー用テキスト / エクスポート用）。
"""

from __future__ import annotations

from typing import Iterable, List

from models.seo_models import (
    BlogContentResult,
    KeywordResearchResult,
    PageOptimizationResult,
    ProductCopyResult,
    ResultKind,
    SeoResult,
)

_CATEGORY_TITLES = {
    "Focus": "Focus Keywords (Commercial/Intent Pillars)",
    "Short-tail": "Short-Tail Keywords",
    "Long-tail": "Long-Tail Keywords",
    "Related": "Related / LSI Keywords",
}

_HEADING_MARKS = {"H1": "#", "H2": "##", "H3": "###"}


def _cell(text: str) -> str:
    # テーブルのセル区切りと改行だけエスケープする
    return text.replace("|", "\\|").replace("\n", " ")


def _bullets(items: Iterable[str]) -> List[str]:
    return [f"- {item}" for item in items]


def _meta_block(title: str, description: str) -> List[str]:
    return [
        f"**Meta Title** ({len(title)} chars): {title}",
        "",
        f"**Meta Description** ({len(description)} chars): {description}",
    ]


# ------------------------------------------------------------
# 機能別レンダラ
# ------------------------------------------------------------

def _render_keyword_research(result: KeywordResearchResult) -> List[str]:
    lines = [f"> {result.strategy_summary}"]
    for category, items in result.by_category().items():
        if not items:
            continue
        lines += [
            "",
            f"## {_CATEGORY_TITLES[category]} ({len(items)})",
            "",
            "| Keyword | Indication |",
            "| --- | --- |",
        ]
        lines += [f"| {_cell(k.keyword)} | {k.indication_level} |" for k in items]
    return lines


def _render_page_optimization(result: PageOptimizationResult) -> List[str]:
    lines = _meta_block(result.meta_title, result.meta_description)

    cluster = result.keyword_cluster
    for title, words in (
        ("Short Tail", cluster.short_tail),
        ("Long Tail", cluster.long_tail),
        ("Related", cluster.related),
    ):
        lines += ["", f"**{title}**", ""] + _bullets(words)

    for heading in result.headings:
        lines += ["", f"{_HEADING_MARKS[heading.level]} {heading.text}"]
        if heading.description:
            lines += ["", f"_Technical Brief:_ {heading.description}"]
    return lines


def _render_product_copy(result: ProductCopyResult) -> List[str]:
    lines = _meta_block(result.meta_title, result.meta_description)

    mapping = result.keyword_mapping
    for title, words in (
        ("Focus", mapping.focus),
        ("Short-Tail", mapping.short_tail),
        ("Long-Tail", mapping.long_tail),
        ("Related", mapping.related),
    ):
        if words:
            lines += ["", f"**{title}:** " + ", ".join(words)]

    lines += ["", result.intro, "", result.marketing_desc, "", "## Extended Features"]
    for i, feature in enumerate(result.features, start=1):
        lines += ["", f"### {i}. {feature.heading}", "", feature.explanation]
    lines += ["", result.conclusion]
    return lines


def _render_blog_content(result: BlogContentResult) -> List[str]:
    lines = _meta_block(result.meta_title, result.meta_description)
    for para in result.introduction.paragraphs():
        lines += ["", para]
    for section in result.body:
        lines += ["", f"## {section.heading}", "", section.content]
        for sub in section.subheadings:
            lines += ["", f"### {sub.heading}", "", sub.content]
    lines += ["", "## Conclusion", "", result.conclusion]
    return lines


_RENDERERS = {
    ResultKind.KEYWORD_RESEARCH: _render_keyword_research,
    ResultKind.PAGE_OPTIMIZATION: _render_page_optimization,
    ResultKind.PRODUCT_COPY: _render_product_copy,
    ResultKind.BLOG_CONTENT: _render_blog_content,
}


# ------------------------------------------------------------
# 公開関数
# ------------------------------------------------------------

def render_markdown(result: SeoResult) -> str:
    return "\n".join(_RENDERERS[result.kind](result)).strip() + "\n"


def copy_text(result: SeoResult) -> str:
    """
    「まとめてコピー」用のテキスト。
    キーワードリサーチはキーワードを 1 行 1 件で、それ以外は Markdown 全体。
    """
    if isinstance(result, KeywordResearchResult):
        return "\n".join(k.keyword for k in result.keywords)
    return render_markdown(result)
