"""Shared helpers for contextqa CLI commands: config, database, error rendering."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from contextqa.cli.errors import (
    err_config,
    err_invalid_input,
    err_no_db,
    err_provider_unavailable,
    err_store_failure,
)
from contextqa.config import ConfigError, ContextQAConfig, load_config
from contextqa.db.connection import Database
from contextqa.errors import InvalidInput, NotFound, ProviderUnavailable, StoreFailure
from contextqa.rag.orchestrator import RetrievalOrchestrator

console = Console()


def load_cli_config(db: Path | None) -> ContextQAConfig:
    """Load config and apply the --db flag (highest priority layer)."""
    try:
        cfg = load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1)
    if db is not None:
        cfg.database.path = str(db)
    return cfg


def open_db(cfg: ContextQAConfig) -> sqlite3.Connection:
    """Connect to the configured database. Exits 1 if it is missing or unreadable."""
    db = Database(cfg.database.path)
    if not db.exists:
        console.print(err_no_db(str(db.db_path)))
        raise typer.Exit(1)
    with core_errors(cfg):
        return db.connect()


def open_orchestrator(cfg: ContextQAConfig) -> tuple[sqlite3.Connection, RetrievalOrchestrator]:
    """Open the configured database and wire an orchestrator."""
    conn = open_db(cfg)
    return conn, RetrievalOrchestrator.from_config(conn, cfg)


@contextmanager
def core_errors(cfg: ContextQAConfig) -> Iterator[None]:
    """Render core errors as actionable messages and exit with the matching code.

    InvalidInput → exit 2; NotFound, ProviderUnavailable, StoreFailure → exit 1.
    """
    try:
        yield
    except InvalidInput as exc:
        console.print(err_invalid_input(str(exc)))
        raise typer.Exit(2)
    except NotFound as exc:
        console.print(f"[yellow]Not found:[/] {escape(str(exc))}")
        raise typer.Exit(1)
    except ProviderUnavailable as exc:
        console.print(err_provider_unavailable(str(exc), cfg.embedding.provider))
        raise typer.Exit(1)
    except StoreFailure as exc:
        console.print(err_store_failure(str(exc)))
        raise typer.Exit(1)
