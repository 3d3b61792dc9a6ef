import pytest

from config import Settings
from enums import ModelProvider, StorageBackend
from storage import MemStorage, create_storage


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "SQL")
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///tmp.db")
    monkeypatch.setenv("AI_PROVIDER", "openai")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("VERIFY_PAYMENTS", "true")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("ACTIVITY_FANOUT_WARN_THRESHOLD", "not-a-number")

    settings = Settings.from_env()
    assert settings.storage_backend == StorageBackend.SQL
    assert settings.ai_provider == ModelProvider.OPENAI
    assert settings.ai_api_key == "sk-test"
    assert settings.verify_payments is True
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.activity_fanout_warn_threshold == 1000


def test_memory_is_the_default_backend():
    assert isinstance(create_storage(Settings()), MemStorage)


def test_sql_backend_requires_database_url():
    with pytest.raises(ValueError):
        create_storage(Settings(storage_backend=StorageBackend.SQL, database_url=None))
