"""
Tests for environment configuration loading.
"""
from unittest.mock import patch

import pytest

from roomstage.config import load_config

ENV_VARS = [
    "LLM_PROVIDER",
    "OPENAI_API_KEY",
    "GOOGLE_API_KEY",
    "OPENAI_MODEL",
    "GOOGLE_MODEL",
    "OPENAI_EMBEDDING_MODEL",
    "GOOGLE_EMBEDDING_MODEL",
    "REQUESTS_PER_MINUTE",
    "MAX_CONCURRENT_REQUESTS",
    "MAX_RETRIES",
    "RETRY_BACKOFF_SECONDS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    with patch("roomstage.config.load_dotenv"):
        yield monkeypatch


def test_defaults_for_openai(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "sk-test")

    config = load_config()

    assert config.llm_provider == "openai"
    assert config.openai_model == "gpt-4o-mini"
    assert config.openai_embedding_model == "text-embedding-3-small"
    assert config.requests_per_minute == 8
    assert config.max_concurrent_requests == 4
    assert config.max_retries == 3


def test_google_provider(clean_env):
    clean_env.setenv("LLM_PROVIDER", "Google")
    clean_env.setenv("GOOGLE_API_KEY", "g-test")
    clean_env.setenv("REQUESTS_PER_MINUTE", "30")

    config = load_config()

    assert config.llm_provider == "google"
    assert config.google_embedding_model == "models/text-embedding-004"
    assert config.requests_per_minute == 30


def test_missing_key_raises(clean_env):
    clean_env.setenv("LLM_PROVIDER", "google")
    with pytest.raises(ValueError, match="GOOGLE_API_KEY"):
        load_config()


def test_unknown_provider_raises(clean_env):
    clean_env.setenv("LLM_PROVIDER", "anthropic")
    with pytest.raises(ValueError, match="Unsupported"):
        load_config()
