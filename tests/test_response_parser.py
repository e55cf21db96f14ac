"""レスポンスのフェンス除去・形判定・モデル化のテスト"""

import json

import pytest

from app.errors import GenerationError, ResponseParseError, ResponseShapeError
from models.seo_models import (
    BlogContentResult,
    KeywordResearchResult,
    PageOptimizationResult,
    ProductCopyResult,
    ResultKind,
)
from services.response_parser import clean_json_output, detect_result_kind, parse_seo_result


class TestCleanJsonOutput:
    def test_strips_json_fence(self) -> None:
        assert clean_json_output('```json\n{"a":1}\n```') == '{"a":1}'

    def test_strips_bare_fence(self) -> None:
        assert clean_json_output('```\n{"a":1}\n```') == '{"a":1}'

    def test_no_fence_is_trimmed(self) -> None:
        assert clean_json_output('  \n{"a": 1}\t\n') == '{"a": 1}'

    def test_empty_becomes_empty_object(self) -> None:
        assert clean_json_output("") == "{}"
        assert clean_json_output(None) == "{}"

    def test_idempotent(self) -> None:
        once = clean_json_output('```json\n{"a":1}\n```')
        assert clean_json_output(once) == once


class TestDetectResultKind:
    def test_each_shape(
        self,
        keyword_research_payload,
        page_optimization_payload,
        product_copy_payload,
        blog_content_payload,
    ) -> None:
        assert detect_result_kind(keyword_research_payload) == ResultKind.KEYWORD_RESEARCH
        assert detect_result_kind(page_optimization_payload) == ResultKind.PAGE_OPTIMIZATION
        assert detect_result_kind(product_copy_payload) == ResultKind.PRODUCT_COPY
        assert detect_result_kind(blog_content_payload) == ResultKind.BLOG_CONTENT

    def test_untagged_content_shapes_detected_structurally(
        self, product_copy_payload, blog_content_payload
    ) -> None:
        product_copy_payload.pop("type")
        blog_content_payload.pop("type")
        assert detect_result_kind(product_copy_payload) == ResultKind.PRODUCT_COPY
        assert detect_result_kind(blog_content_payload) == ResultKind.BLOG_CONTENT

    def test_type_tag_wins(self, keyword_research_payload) -> None:
        keyword_research_payload["type"] = "blog"
        assert detect_result_kind(keyword_research_payload) == ResultKind.BLOG_CONTENT

    def test_no_match(self) -> None:
        with pytest.raises(ResponseShapeError):
            detect_result_kind({"foo": "bar"})

    def test_ambiguous_match(self, keyword_research_payload, page_optimization_payload) -> None:
        merged = {**keyword_research_payload, **page_optimization_payload}
        with pytest.raises(ResponseShapeError) as exc_info:
            detect_result_kind(merged)
        assert "ambiguous" in exc_info.value.message

    def test_non_object(self) -> None:
        with pytest.raises(ResponseShapeError):
            detect_result_kind([1, 2, 3])


class TestParseSeoResult:
    def test_keyword_research_round_trip(self, keyword_research_payload) -> None:
        result = parse_seo_result(json.dumps(keyword_research_payload))
        assert isinstance(result, KeywordResearchResult)
        assert [k.category for k in result.keywords] == [
            k["category"] for k in keyword_research_payload["keywords"]
        ]
        assert result.keywords[0].indication_level == "Very Important"

    def test_minimal_keyword_research(self) -> None:
        result = parse_seo_result('{"strategySummary":"x","keywords":[]}')
        assert isinstance(result, KeywordResearchResult)
        assert result.strategy_summary == "x"
        assert result.keywords == []

    def test_page_optimization(self, page_optimization_payload) -> None:
        result = parse_seo_result(
            "```json\n" + json.dumps(page_optimization_payload) + "\n```",
            expected=ResultKind.PAGE_OPTIMIZATION,
        )
        assert isinstance(result, PageOptimizationResult)
        assert [h.level for h in result.headings] == ["H1", "H2", "H3", "H2"]
        assert result.keyword_cluster.long_tail == ["how to set standing desk height"]
        assert result.has_strategic_summary()

    def test_product_copy(self, product_copy_payload) -> None:
        result = parse_seo_result(json.dumps(product_copy_payload))
        assert isinstance(result, ProductCopyResult)
        assert result.type == "product"
        assert result.marketing_desc == "Built for long days."
        assert result.features[0].heading == "Dual Motor Lift"
        assert result.keyword_mapping.short_tail == ["standing desk"]

    def test_blog_content(self, blog_content_payload) -> None:
        result = parse_seo_result(json.dumps(blog_content_payload))
        assert isinstance(result, BlogContentResult)
        assert result.introduction.para3 == "Para three."
        assert result.body[0].subheadings[1].heading == "Autophagy"

    def test_dump_uses_wire_keys(self, product_copy_payload) -> None:
        result = parse_seo_result(json.dumps(product_copy_payload))
        dumped = result.model_dump(by_alias=True)
        assert dumped["marketingDesc"] == product_copy_payload["marketingDesc"]
        assert dumped["keywordMapping"]["longTail"] == ["quiet motor standing desk"]

    def test_category_and_level_variants_are_normalized(self) -> None:
        payload = {
            "strategySummary": "s",
            "keywords": [
                {"keyword": "a", "category": "short tail", "indicationLevel": "very important"},
                {"keyword": "b", "category": "LONG-TAIL", "indicationLevel": "less_important"},
            ],
        }
        result = parse_seo_result(json.dumps(payload))
        assert [k.category for k in result.keywords] == ["Short-tail", "Long-tail"]
        assert [k.indication_level for k in result.keywords] == ["Very Important", "Less Important"]

    def test_unknown_category_is_shape_error(self) -> None:
        payload = {
            "strategySummary": "s",
            "keywords": [{"keyword": "a", "category": "Medium-tail", "indicationLevel": "Important"}],
        }
        with pytest.raises(ResponseShapeError):
            parse_seo_result(json.dumps(payload))

    def test_not_json(self) -> None:
        with pytest.raises(ResponseParseError) as exc_info:
            parse_seo_result("Sure! Here is your keyword list:")
        assert isinstance(exc_info.value, GenerationError)
        assert exc_info.value.category == "parse"

    def test_empty_text_is_shape_error(self) -> None:
        with pytest.raises(ResponseShapeError):
            parse_seo_result("")

    def test_expected_kind_mismatch(self, blog_content_payload) -> None:
        with pytest.raises(ResponseShapeError) as exc_info:
            parse_seo_result(json.dumps(blog_content_payload), expected=ResultKind.PRODUCT_COPY)
        assert "mismatch" in exc_info.value.message

    def test_missing_required_field(self, page_optimization_payload) -> None:
        del page_optimization_payload["metaTitle"]
        with pytest.raises(ResponseShapeError):
            parse_seo_result(json.dumps(page_optimization_payload))
