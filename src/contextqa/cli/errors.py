"""contextqa rich error messages: actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from contextqa.cli.errors import err_no_db
    console.print(err_no_db(".contextqa.db"))
    raise typer.Exit(1)
"""

from __future__ import annotations

from rich.markup import escape


def err_no_db(db_path: str = ".contextqa.db") -> str:
    """No database found at *db_path*."""
    return (
        f"[red]Error:[/] No database found at '{escape(db_path)}'.\n"
        "  Run:  contextqa init"
    )


def err_invalid_input(message: str) -> str:
    """Caller-supplied text failed validation."""
    return f"[red]Error:[/] {escape(message)}"


def err_provider_unavailable(message: str, provider: str) -> str:
    """Embedding or generation provider failed."""
    return (
        f"[red]Error:[/] The '{escape(provider)}' provider is unavailable: {escape(message)}\n"
        "  Check your API key and network connection, or use the mock provider:\n"
        "    export CONTEXTQA_EMBEDDING_PROVIDER=mock"
    )


def err_store_failure(message: str) -> str:
    """Database read or write failed."""
    return (
        f"[red]Error:[/] Database operation failed: {escape(message)}\n"
        "  Check that the database file is writable and not locked by another process."
    )


def err_context_not_found(context_id: int) -> str:
    """Context id not in the database."""
    return (
        f"[yellow]Context not found:[/] {context_id}\n"
        "  Run:  contextqa contexts list  to see all contexts."
    )


def err_config(message: str) -> str:
    """Configuration file or environment contains an invalid value."""
    return f"[red]Error:[/] Invalid configuration.\n  {escape(message)}"


def warn_missing_embeddings(count: int) -> str:
    """Some contexts could not be embedded during backfill."""
    return (
        f"[yellow]⚠[/] {count} context(s) still have no embedding.\n"
        "  They are skipped when answering questions. Retry later with:\n"
        "    contextqa regenerate-embeddings"
    )
