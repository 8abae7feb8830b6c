"""Unit tests for configuration management."""

import os
from pathlib import Path
from unittest.mock import patch

from helpcenter_rag.core.config import DEFAULT_INDEX_URLS, Settings


class TestSettings:
    """Test Settings configuration class."""

    def test_default_values(self):
        """Test default configuration values."""
        with patch.dict(os.environ, {"OPENAI_API_KEY": "test-key"}, clear=True):
            settings = Settings()

            assert settings.log_level == "INFO"

            assert settings.redis_url.get_secret_value() == "redis://localhost:6379/0"
            assert settings.redis_password is None
            assert settings.openai_api_key == "test-key"

            assert settings.embedding_model == "text-embedding-3-small"
            assert settings.vector_dim == 1536
            assert settings.docs_index_name == "helpcenter_docs"

            assert settings.output_dir == Path("output") / "docs"
            assert settings.index_urls == DEFAULT_INDEX_URLS
            assert settings.index_page_concurrency == 2
            assert settings.article_delay_seconds == 0.5
            assert settings.embed_batch_size == 10

    def test_environment_overrides(self):
        env = {
            "OPENAI_API_KEY": "test-key",
            "REDIS_URL": "redis://redis:6380/1",
            "DOCS_INDEX_NAME": "other_docs",
            "OUTPUT_DIR": "/data/articles",
            "EMBED_BATCH_SIZE": "25",
            "INDEX_URLS": '["https://help.example.com/support/solutions/folders/1"]',
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings()

            assert settings.redis_url.get_secret_value() == "redis://redis:6380/1"
            assert settings.docs_index_name == "other_docs"
            assert settings.output_dir == Path("/data/articles")
            assert settings.embed_batch_size == 25
            assert settings.index_urls == ["https://help.example.com/support/solutions/folders/1"]

    def test_openai_key_is_optional(self):
        with patch.dict(os.environ, {}, clear=True):
            assert Settings().openai_api_key is None

    def test_default_index_urls(self):
        assert len(DEFAULT_INDEX_URLS) == 14
        assert all("/support/solutions/folders/" in url for url in DEFAULT_INDEX_URLS)
        assert len(set(DEFAULT_INDEX_URLS)) == 14
