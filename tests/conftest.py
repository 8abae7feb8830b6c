"""
Test configuration and fixtures for the help-center RAG pipeline.
"""

import os

import pytest

# Set test defaults BEFORE any package imports read settings
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")

from tests.fakes import FakeVectorizer, FakeVectorStore  # noqa: E402


@pytest.fixture
def fake_vector_store():
    return FakeVectorStore()


@pytest.fixture
def fake_vectorizer():
    return FakeVectorizer()
