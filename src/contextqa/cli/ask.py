"""contextqa ask: answer a question from the stored contexts.

Usage:
  contextqa ask "What is the capital of France?"
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape

from contextqa.cli.common import console, core_errors, load_cli_config, open_orchestrator


def ask_cmd(
    question: Annotated[str, typer.Argument(help="Question to answer.")],
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Path to the contextqa database."),
    ] = None,
) -> None:
    """Answer a question using the most relevant stored context."""
    cfg = load_cli_config(db)
    conn, orchestrator = open_orchestrator(cfg)
    try:
        with core_errors(cfg):
            answer = orchestrator.answer(question)
        console.print(escape(answer))
    finally:
        conn.close()
