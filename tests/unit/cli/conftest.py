"""Fixtures for CLI tests: an initialised project directory with mock embeddings."""

from __future__ import annotations

from pathlib import Path

import pytest

from contextqa.db.connection import Database
from contextqa.db.repository import ChatHistoryRepository, ContextRepository


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """CWD is tmp_path, the mock provider is selected, and .contextqa.db exists."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CONTEXTQA_EMBEDDING_PROVIDER", "mock")
    db_path = tmp_path / ".contextqa.db"
    Database(db_path).connect().close()
    return db_path


@pytest.fixture
def seed(project: Path):
    """Insert rows directly through the repositories (1536-dim vectors)."""

    def _seed(title: str, content: str, embedded: bool = True, question: str | None = None) -> int:
        with Database(project) as conn:
            contexts = ContextRepository(conn, dimensions=1536)
            embedding = [1.0] + [0.0] * 1535 if embedded else None
            context = contexts.create(title, content, embedding)
            if question is not None:
                ChatHistoryRepository(conn).append(question, f"Answer to {question}", context.id)
        return context.id

    return _seed
