"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from contextqa.db.connection import Database
from contextqa.embeddings.base import EmbeddingProvider
from contextqa.errors import ProviderUnavailable

_CONTEXTQA_ENV = (
    "CONTEXTQA_EMBEDDING_PROVIDER",
    "CONTEXTQA_EMBEDDING_MODEL",
    "CONTEXTQA_EMBEDDING_DIMENSIONS",
    "CONTEXTQA_GENERATION_MODEL",
    "CONTEXTQA_DB",
)


class StubEmbedder(EmbeddingProvider):
    """Embedding provider with canned vectors, a failure list, and a call log."""

    name = "stub"

    def __init__(self, vectors=None, fail_on=(), dimensions=4):
        super().__init__(dimensions)
        self.vectors = dict(vectors or {})
        self.fail_on = set(fail_on)
        self.calls: list[str] = []

    def _generate(self, text):
        self.calls.append(text)
        if text in self.fail_on:
            raise ProviderUnavailable(f"stub failure for {text!r}")
        return self.vectors.get(text, [1.0, 0.0, 0.0, 0.0][: self.dimensions])


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.contextqa and CONTEXTQA_* env vars."""
    monkeypatch.setattr(
        "contextqa.config._GLOBAL_CONFIG_PATH", tmp_path / "home" / "config.yaml"
    )
    for var in _CONTEXTQA_ENV:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path (migrated by connect()), closed after test."""
    conn = Database(tmp_path / ".contextqa.db").connect()
    yield conn
    conn.close()


@pytest.fixture
def stub_embedder():
    """Factory for StubEmbedder instances."""
    return StubEmbedder
