"""contextqa CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from contextqa.cli.ask import ask_cmd
from contextqa.cli.contexts import contexts_app
from contextqa.cli.history import history_cmd
from contextqa.cli.init import init_cmd
from contextqa.cli.regenerate import regenerate_cmd
from contextqa.cli.status import status_cmd


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"contextqa {_installed_version()}")
        raise typer.Exit()


def _installed_version() -> str:
    try:
        return importlib.metadata.version("contextqa")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # LiteLLM logs request details at INFO; keep it quiet unless debugging.
    logging.getLogger("LiteLLM").setLevel(logging.DEBUG if verbose else logging.WARNING)


app = typer.Typer(
    name="contextqa",
    help=(
        "contextqa: answer questions from stored reference contexts.\n\n"
        "  contextqa contexts add   Store a context (embedded on write).\n"
        "  contextqa ask            Answer from the closest context via an LLM."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
) -> None:
    """contextqa: answer questions from stored reference contexts."""
    _configure_logging(verbose)


app.command("init")(init_cmd)
app.command("ask")(ask_cmd)
app.command("history")(history_cmd)
app.command("regenerate-embeddings")(regenerate_cmd)
app.command("status")(status_cmd)
app.add_typer(contexts_app, name="contexts")


@app.command("version")
def version_cmd() -> None:
    """Show the installed contextqa version."""
    typer.echo(f"contextqa {_installed_version()}")


if __name__ == "__main__":
    app()
