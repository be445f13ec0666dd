"""Tests for settings.py: defaults and environment overrides."""
from __future__ import annotations

import pytest

from site_rag.settings import AISettings, CrawlSettings, Paths, load_settings

ENV_VARS = ["AI_BASE_URL", "AI_API_KEY", "EMBED_MODEL", "AI_MODEL", "CRAWL_MAX_PAGES", "CRAWL_TIMEOUT", "PRODUCT_NAME"]


@pytest.fixture()
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("site_rag.settings.load_dotenv", lambda: False)
    return monkeypatch


class TestAISettings:
    def test_defaults(self):
        s = AISettings()
        assert s.embedding_model == "text-embedding-3-small"
        assert s.chat_model == "gpt-4o-mini"
        assert s.temperature == 0.2

    def test_api_base_appends_v1(self):
        assert AISettings(base_url="https://llm.example.com/").api_base == "https://llm.example.com/v1"

    def test_api_base_none_without_base_url(self):
        assert AISettings().api_base is None


class TestCrawlSettings:
    def test_defaults(self):
        s = CrawlSettings()
        assert s.max_pages == 20
        assert s.fan_out == 20
        assert s.timeout > 0


class TestPaths:
    def test_corpus_path(self):
        assert Paths().corpus_path.replace("\\", "/") == "data/embeddings.json"


class TestLoadSettings:
    def test_defaults_when_env_vars_absent(self, clean_env):
        ai, crawl, paths = load_settings()
        assert ai.base_url is None
        assert ai.embedding_model == "text-embedding-3-small"
        assert crawl.max_pages == 20
        assert isinstance(paths, Paths)

    def test_env_vars_override_defaults(self, clean_env):
        clean_env.setenv("AI_BASE_URL", "http://localhost:11434")
        clean_env.setenv("AI_API_KEY", "secret")
        clean_env.setenv("EMBED_MODEL", "nomic-embed-text")
        clean_env.setenv("AI_MODEL", "llama3")
        clean_env.setenv("PRODUCT_NAME", "Acme Remote")
        clean_env.setenv("CRAWL_MAX_PAGES", "5")
        clean_env.setenv("CRAWL_TIMEOUT", "2.5")
        ai, crawl, _ = load_settings()
        assert ai.base_url == "http://localhost:11434"
        assert ai.api_key == "secret"
        assert ai.embedding_model == "nomic-embed-text"
        assert ai.chat_model == "llama3"
        assert ai.product_name == "Acme Remote"
        assert crawl.max_pages == 5
        assert crawl.timeout == 2.5
