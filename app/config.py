# app/config.py

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """
    SEO Core Engine の設定。
    起動時に環境変数 / .env から 1 回だけ読み込む。
    """

    # ---------- 生成 API ----------
    # キーが無いと生成は ConfigurationError で止まる（代替動作はしない）
    openai_api_key: str | None = None

    # 4 機能すべてで同じモデルを使う
    openai_model: str = "gpt-4.1-mini"

    # OpenAI 互換エンドポイント（Gemini など）に向けるときだけ指定
    openai_base_url: str | None = None

    # ---------- ワークスペース ----------
    # メモリ上に保持するセッション数の上限。超えたら最も古いものから捨てる
    workspace_max_sessions: int = 1000

    # ---------- ログ ----------
    log_level: LogLevel = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        # LOG_LEVEL=debug のような小文字指定も受け付ける
        if isinstance(value, str):
            return value.strip().upper()
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
