"""contextqa contexts CLI commands.

Commands:
  contextqa contexts list                         show all contexts, newest first
  contextqa contexts add --title T --content C    embed and store a new context
  contextqa contexts show <id>                    print one context in full
  contextqa contexts remove <id>                  delete a context (history keeps the question)
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from contextqa.cli.common import console, core_errors, load_cli_config, open_orchestrator
from contextqa.cli.errors import err_context_not_found, err_invalid_input
from contextqa.errors import NotFound

contexts_app = typer.Typer(
    name="contexts",
    help="Manage stored contexts (list, add, show, remove).",
    add_completion=False,
)

_PREVIEW_CHARS = 60

_DbOption = Annotated[
    Optional[Path],
    typer.Option("--db", help="Path to the contextqa database."),
]


@contexts_app.command("list")
def contexts_list_cmd(db: _DbOption = None) -> None:
    """List all contexts and whether each has an embedding."""
    cfg = load_cli_config(db)
    conn, orchestrator = open_orchestrator(cfg)
    try:
        with core_errors(cfg):
            contexts = orchestrator.list_contexts()
    finally:
        conn.close()

    if not contexts:
        console.print(
            "[yellow]No contexts stored yet.[/]\n"
            "  Run: contextqa contexts add --title <title> --content <text>"
        )
        raise typer.Exit(0)

    table = Table(title="Contexts", show_header=True, header_style="bold")
    table.add_column("ID", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Content")
    table.add_column("Embedding")
    table.add_column("Created", style="dim")

    for context in contexts:
        preview = context.content.replace("\n", " ")
        if len(preview) > _PREVIEW_CHARS:
            preview = preview[:_PREVIEW_CHARS] + "…"
        embedded = "[green]✓[/]" if context.has_embedding else "[yellow]✗ missing[/]"
        table.add_row(
            str(context.id),
            escape(context.title),
            escape(preview),
            embedded,
            (context.created_at or "")[:16],
        )

    console.print(table)
    missing = sum(1 for c in contexts if not c.has_embedding)
    console.print(f"\n  {len(contexts) - missing}/{len(contexts)} embedded")


@contexts_app.command("add")
def contexts_add_cmd(
    title: Annotated[str, typer.Option("--title", "-t", help="Context title (max 200 chars).")],
    content: Annotated[
        Optional[str],
        typer.Option("--content", "-c", help="Context text."),
    ] = None,
    file: Annotated[
        Optional[Path],
        typer.Option("--file", "-f", help="Read context text from a UTF-8 file."),
    ] = None,
    db: _DbOption = None,
) -> None:
    """Embed and store a new context."""
    if (content is None) == (file is None):
        console.print(err_invalid_input("Provide exactly one of --content or --file."))
        raise typer.Exit(2)
    if file is not None:
        if not file.is_file():
            console.print(err_invalid_input(f"File not found: {file}"))
            raise typer.Exit(2)
        content = file.read_text(encoding="utf-8")

    cfg = load_cli_config(db)
    conn, orchestrator = open_orchestrator(cfg)
    try:
        with core_errors(cfg):
            context = orchestrator.add_context(title, content)
    finally:
        conn.close()

    console.print(
        f"[green]✓[/] Added context {context.id}: [bold]{escape(context.title)}[/]"
        f"  ({len(context.embedding or [])} dims)"
    )


@contexts_app.command("show")
def contexts_show_cmd(
    context_id: Annotated[int, typer.Argument(help="Context id.")],
    db: _DbOption = None,
) -> None:
    """Print a context in full."""
    cfg = load_cli_config(db)
    conn, orchestrator = open_orchestrator(cfg)
    try:
        with core_errors(cfg):
            try:
                context = orchestrator.get_context(context_id)
            except NotFound:
                console.print(err_context_not_found(context_id))
                raise typer.Exit(1)
    finally:
        conn.close()

    status = "[green]embedded[/]" if context.has_embedding else "[yellow]no embedding[/]"
    console.print(
        Panel(
            escape(context.content),
            title=f"[bold]{context.id}: {escape(context.title)}[/]",
            subtitle=f"{status}  [dim]updated {context.updated_at}[/]",
            expand=False,
        )
    )


@contexts_app.command("remove")
def contexts_remove_cmd(
    context_id: Annotated[int, typer.Argument(help="Context id.")],
    db: _DbOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Delete a context. Chat history entries that used it are kept."""
    cfg = load_cli_config(db)
    conn, orchestrator = open_orchestrator(cfg)
    try:
        with core_errors(cfg):
            try:
                context = orchestrator.get_context(context_id)
            except NotFound:
                console.print(err_context_not_found(context_id))
                raise typer.Exit(0)

            console.print(f"\nRemove context {context.id}: [bold]{escape(context.title)}[/]")
            if not yes:
                if not typer.confirm("Confirm removal?", default=False):
                    console.print("[dim]Cancelled.[/]")
                    raise typer.Exit(0)

            orchestrator.delete_context(context_id)
    finally:
        conn.close()

    console.print(f"[green]✓[/] Removed context {context_id}")
