# services/llm_client.py
from openai import AsyncOpenAI

from app.config import settings
from app.errors import ConfigurationError

_client: AsyncOpenAI | None = None


def ensure_api_key() -> str:
    """APIキーが無ければ、通信を試みる前に ConfigurationError にする。"""
    if not settings.openai_api_key:
        raise ConfigurationError("OPENAI_API_KEY が設定されていません")
    return settings.openai_api_key


def get_openai_client() -> AsyncOpenAI:
    global _client
    if _client is None:
        api_key = ensure_api_key()
        _client = AsyncOpenAI(api_key=api_key, base_url=settings.openai_base_url)
    return _client
