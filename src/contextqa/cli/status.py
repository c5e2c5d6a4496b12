"""contextqa status: configuration and knowledge base overview."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.panel import Panel

from contextqa.cli.common import console, core_errors, load_cli_config, open_db
from contextqa.cli.errors import warn_missing_embeddings
from contextqa.config import ContextQAConfig
from contextqa.db.migrations import schema_version
from contextqa.db.repository import ChatHistoryRepository, ContextRepository


def status_cmd(
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Path to the contextqa database."),
    ] = None,
) -> None:
    """Show provider configuration, context counts, and chat history size."""
    cfg = load_cli_config(db)

    # ---- Panel 1: Configuration ----
    _show_config_panel(cfg)

    # ---- Panel 2: Knowledge Base ----
    conn = open_db(cfg)
    try:
        with core_errors(cfg):
            version = schema_version(conn)
            contexts = ContextRepository(conn, dimensions=cfg.embedding.dimensions)
            total = contexts.count()
            embedded = contexts.count_embedded()
            messages = ChatHistoryRepository(conn).count()
    finally:
        conn.close()

    db_path = Path(cfg.database.path)
    size_mb = db_path.stat().st_size / (1024 * 1024)
    lines = [
        f"Database:  {db_path} ({size_mb:.1f} MB)",
        f"Schema:    v{version}",
        f"Contexts:  [bold]{total}[/]  |  "
        f"Embedded: [bold]{embedded}[/]  |  "
        f"Missing: [bold]{total - embedded}[/]",
        f"Questions answered: [bold]{messages}[/]",
    ]
    console.print(Panel("\n".join(lines), title="[bold]Knowledge Base[/]", expand=False))

    if total - embedded:
        console.print(warn_missing_embeddings(total - embedded))


def _show_config_panel(cfg: ContextQAConfig) -> None:
    model = cfg.embedding.model or "(provider default)"
    lines = [
        f"Embedding:   [bold]{cfg.embedding.provider}[/]  {model}",
        f"Dimensions:  {cfg.embedding.dimensions}",
        f"Generation:  {cfg.generation.model}",
    ]
    console.print(Panel("\n".join(lines), title="[bold]Configuration[/]", expand=False))
