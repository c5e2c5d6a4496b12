"""Tests for contextqa rich error messages."""

from __future__ import annotations

import pytest

from contextqa.cli.errors import (
    err_config,
    err_context_not_found,
    err_invalid_input,
    err_no_db,
    err_provider_unavailable,
    err_store_failure,
    warn_missing_embeddings,
)


def _has_action(msg: str) -> bool:
    """Every error must tell the user what to do next."""
    lower = msg.lower()
    return any(kw in lower for kw in ["run:", "export ", "check ", "contextqa "])


def test_err_no_db_names_path_and_init() -> None:
    msg = err_no_db("data/qa.db")
    assert "data/qa.db" in msg
    assert "contextqa init" in msg


def test_err_provider_unavailable_names_provider() -> None:
    msg = err_provider_unavailable("429 RateLimitError", "openai")
    assert "openai" in msg
    assert "429 RateLimitError" in msg
    assert "CONTEXTQA_EMBEDDING_PROVIDER=mock" in msg


def test_err_context_not_found_contains_id() -> None:
    msg = err_context_not_found(17)
    assert "17" in msg
    assert "contexts list" in msg


def test_warn_missing_embeddings_count() -> None:
    msg = warn_missing_embeddings(3)
    assert "3 context(s)" in msg
    assert "regenerate-embeddings" in msg


def test_markup_in_messages_is_escaped() -> None:
    msg = err_invalid_input("Title [bold]x[/bold] cannot be empty.")
    assert "\\[bold]" in msg


@pytest.mark.parametrize(
    "msg",
    [
        err_no_db(),
        err_provider_unavailable("boom", "gemini"),
        err_store_failure("database is locked"),
        err_context_not_found(1),
        warn_missing_embeddings(2),
    ],
)
def test_errors_have_action(msg: str) -> None:
    assert _has_action(msg)


def test_err_config_wraps_message() -> None:
    msg = err_config("dimensions must be a positive integer")
    assert "Invalid configuration" in msg
    assert "dimensions must be a positive integer" in msg
