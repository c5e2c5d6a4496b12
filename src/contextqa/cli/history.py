"""contextqa history: show answered questions, newest first."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.table import Table

from contextqa.cli.common import console, core_errors, load_cli_config, open_orchestrator


def history_cmd(
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", min=1, help="Show at most N messages."),
    ] = None,
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Path to the contextqa database."),
    ] = None,
) -> None:
    """Show chat history (question, answer, matched context)."""
    cfg = load_cli_config(db)
    conn, orchestrator = open_orchestrator(cfg)
    try:
        with core_errors(cfg):
            messages = orchestrator.chat_history(limit=limit)
    finally:
        conn.close()

    if not messages:
        console.print("[dim]No questions asked yet.[/]")
        raise typer.Exit(0)

    table = Table(title="Chat History", show_header=True, header_style="bold", show_lines=True)
    table.add_column("When", style="dim")
    table.add_column("Question", style="bold")
    table.add_column("Answer")
    table.add_column("Context")

    for message in messages:
        if message.context is not None:
            source = escape(message.context.title)
        else:
            source = "[dim](deleted)[/]" if message.context_id is None else "?"
        table.add_row(
            (message.created_at or "")[:16],
            escape(message.question),
            escape(message.answer),
            source,
        )

    console.print(table)
