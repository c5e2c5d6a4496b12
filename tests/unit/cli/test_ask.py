"""Tests for contextqa ask."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from contextqa.cli.main import app
from contextqa.db.connection import Database
from contextqa.db.repository import ChatHistoryRepository
from contextqa.embeddings.mock import MockEmbeddingProvider
from contextqa.errors import ProviderUnavailable

runner = CliRunner()


def _completion(text: str) -> MagicMock:
    response = MagicMock()
    response.choices[0].message.content = text
    return response


def test_ask_no_database_exit_1(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["ask", "Anything?"])

    assert result.exit_code == 1
    assert "No database found" in result.output
    assert "contextqa init" in result.output


def test_ask_no_contexts(project: Path) -> None:
    result = runner.invoke(app, ["ask", "Anything?"])

    assert result.exit_code == 0, result.output
    assert "No contexts available" in result.output
    with Database(project) as conn:
        assert ChatHistoryRepository(conn).count() == 0


def test_ask_blank_question_exit_2(project: Path) -> None:
    result = runner.invoke(app, ["ask", "   "])

    assert result.exit_code == 2
    assert "cannot be empty" in result.output


def test_ask_answers_and_records_history(
    project: Path, seed, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "g-test")
    context_id = seed("Capital", "Paris is the capital of France.")

    with patch(
        "contextqa.rag.llm_client.litellm.completion",
        return_value=_completion("The capital of France is Paris."),
    ) as mock_completion:
        result = runner.invoke(app, ["ask", "What is the capital of France?"])

    assert result.exit_code == 0, result.output
    assert "The capital of France is Paris." in result.output
    prompt = mock_completion.call_args.kwargs["messages"][0]["content"]
    assert "Paris is the capital of France." in prompt

    with Database(project) as conn:
        [message] = ChatHistoryRepository(conn).list_all()
    assert message.context_id == context_id


def test_ask_missing_generation_key_prints_fallback(
    project: Path, seed, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    seed("Capital", "Paris is the capital of France.")

    result = runner.invoke(app, ["ask", "Capital?"])

    assert result.exit_code == 0, result.output
    assert "Error generating answer" in result.output


def test_ask_embedding_provider_failure_exit_1(project: Path, seed) -> None:
    seed("Capital", "Paris is the capital of France.")

    with patch.object(
        MockEmbeddingProvider, "_generate", side_effect=ProviderUnavailable("timed out")
    ):
        result = runner.invoke(app, ["ask", "Capital?"])

    assert result.exit_code == 1
    assert "unavailable" in result.output
    assert "timed out" in result.output


def test_ask_explicit_db_flag(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CONTEXTQA_EMBEDDING_PROVIDER", "mock")
    other = tmp_path / "elsewhere.db"
    with Database(other):
        pass
    assert not (tmp_path / ".contextqa.db").exists()

    result = runner.invoke(app, ["ask", "Anything?", "--db", str(other)])

    assert result.exit_code == 0, result.output
    assert "No contexts available" in result.output


def test_ask_corrupt_database_exit_1(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CONTEXTQA_EMBEDDING_PROVIDER", "mock")
    (tmp_path / ".contextqa.db").write_bytes(b"this is not an sqlite file" * 100)

    result = runner.invoke(app, ["ask", "Anything?"])

    assert result.exit_code == 1
    assert "Database operation failed" in result.output
