"""Settings（環境変数 / .env 読み込み）のテスト"""

import pytest
from pydantic import ValidationError

from app.config import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("WORKSPACE_MAX_SESSIONS", raising=False)
    s = Settings(_env_file=None)
    assert s.log_level == "INFO"
    assert s.workspace_max_sessions == 1000


@pytest.mark.parametrize("raw", ["debug", " Debug ", "DEBUG"])
def test_log_level_is_upper_cased(raw: str) -> None:
    assert Settings(_env_file=None, log_level=raw).log_level == "DEBUG"


def test_log_level_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "warning")
    assert Settings(_env_file=None).log_level == "WARNING"


def test_unknown_log_level_is_rejected() -> None:
    """未知のレベルは logging に渡る前に設定エラーになる"""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="LOUD")
