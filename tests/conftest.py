"""共通フィクスチャ"""

from typing import Any, Callable, Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.config import settings


@pytest.fixture
def api_key(monkeypatch: pytest.MonkeyPatch) -> str:
    """テスト用の APIキーを設定"""
    key = "test-api-key-12345"
    monkeypatch.setattr(settings, "openai_api_key", key)
    return key


@pytest.fixture
def no_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "openai_api_key", None)


@pytest.fixture
def make_completion() -> Callable[[Optional[str]], MagicMock]:
    """chat.completions.create のレスポンスを作る"""

    def _make(content: Optional[str]) -> MagicMock:
        response = MagicMock()
        response.choices = [
            MagicMock(message=MagicMock(content=content), finish_reason="stop")
        ]
        response.usage = MagicMock(prompt_tokens=10, completion_tokens=20, total_tokens=30)
        return response

    return _make


@pytest.fixture
def make_client(make_completion: Callable) -> Callable[..., MagicMock]:
    """AsyncOpenAI クライアントのモック"""

    def _make(content: Optional[str] = None, side_effect: Any = None) -> MagicMock:
        client = MagicMock()
        client.chat.completions.create = AsyncMock(
            return_value=make_completion(content),
            side_effect=side_effect,
        )
        return client

    return _make


# ------------------------------------------------------------
# 各結果の最小サンプル
# ------------------------------------------------------------

@pytest.fixture
def keyword_research_payload() -> Dict[str, Any]:
    return {
        "strategySummary": "Own the ergonomic niche. Lead with desks.",
        "keywords": [
            {"keyword": "ergonomic office chair", "category": "Focus", "indicationLevel": "Very Important"},
            {"keyword": "standing desk", "category": "Short-tail", "indicationLevel": "Very Important"},
            {"keyword": "best chair for lower back pain", "category": "Long-tail", "indicationLevel": "Important"},
            {"keyword": "posture support seat", "category": "Related", "indicationLevel": "Less Important"},
        ],
    }


@pytest.fixture
def page_optimization_payload() -> Dict[str, Any]:
    return {
        "metaTitle": "Standing Desk Guide: Pick the Right Height Today",
        "metaDescription": "Learn how to choose a standing desk.",
        "keywordCluster": {
            "shortTail": ["standing desk"],
            "longTail": ["how to set standing desk height"],
            "related": ["sit stand workstation"],
        },
        "headings": [
            {"level": "H1", "text": "Standing Desk Guide", "description": "Overview."},
            {"level": "H2", "text": "Why Height Matters", "description": "Ergonomics."},
            {"level": "H3", "text": "Elbow Angle", "description": "90 degrees."},
            {"level": "H2", "text": "Strategic Summary", "description": "Wrap up."},
        ],
    }


@pytest.fixture
def product_copy_payload() -> Dict[str, Any]:
    return {
        "type": "product",
        "keywordMapping": {
            "focus": ["ergonomic standing desk"],
            "shortTail": ["standing desk"],
            "longTail": ["quiet motor standing desk"],
            "related": ["sit stand desk"],
        },
        "metaTitle": "ErgoLift X1 Ergonomic Standing Desk",
        "metaDescription": "Meet the ErgoLift X1.",
        "intro": "The ergonomic standing desk you have waited for.",
        "marketingDesc": "Built for long days.",
        "features": [
            {"heading": "Dual Motor Lift", "explanation": "Two motors raise the top smoothly."},
        ],
        "conclusion": "Add to Cart today.",
    }


@pytest.fixture
def blog_content_payload() -> Dict[str, Any]:
    return {
        "type": "blog",
        "metaTitle": "Benefits of Intermittent Fasting",
        "metaDescription": "What the research says.",
        "introduction": {"para1": "Para one.", "para2": "Para two.", "para3": "Para three."},
        "body": [
            {
                "heading": "How It Works",
                "content": "Section intro.",
                "subheadings": [
                    {"heading": "Insulin", "content": "Sub one."},
                    {"heading": "Autophagy", "content": "Sub two."},
                ],
            }
        ],
        "conclusion": "Closing words about intermittent fasting.",
    }

