"""contextqa init: create the database and a project config.

Creates:
  .contextqa.db             empty database with schema
  contextqa.yaml            project config (embedding/generation/database)
  ~/.contextqa/config.yaml  global model config (created once, mode 0o600)

Re-running is safe: existing files are left untouched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from contextqa.cli.errors import err_store_failure
from contextqa.config import EMBEDDING_PROVIDERS, ensure_global_config
from contextqa.db.connection import Database
from contextqa.errors import StoreFailure

console = Console()

_DEFAULT_PROJECT_DIR = Path(".")
_DB_NAME = ".contextqa.db"

_PROJECT_YAML = """\
# contextqa project configuration.
# API keys are read from the environment (OPENAI_API_KEY, GEMINI_API_KEY).

embedding:
  provider: {provider}   # mock | openai | gemini
  dimensions: 1536       # shorter provider vectors are zero-padded
  timeout: 30

generation:
  model: gemini/gemini-2.5-flash
  max_tokens: 1024
  timeout: 60

database:
  path: {db_name}
"""


def init_cmd(
    project_dir: Annotated[
        Path,
        typer.Argument(help="Directory to initialize. Defaults to current directory."),
    ] = _DEFAULT_PROJECT_DIR,
    provider: Annotated[
        str,
        typer.Option("--provider", help="Embedding provider: mock, openai or gemini."),
    ] = "openai",
    global_config: Annotated[
        bool,
        typer.Option("--global-config/--no-global-config", help="Create ~/.contextqa/config.yaml."),
    ] = True,
) -> None:
    """Initialize a contextqa project (database + config)."""
    if provider not in EMBEDDING_PROVIDERS:
        console.print(f"[red]Error:[/] Unknown provider '{provider}'. Use mock, openai or gemini.")
        raise typer.Exit(2)

    project_dir = project_dir.resolve()
    project_dir.mkdir(parents=True, exist_ok=True)

    console.print(f"\n[bold]Initializing contextqa in {project_dir} …[/]\n")

    _create_database(project_dir)
    _create_project_yaml(project_dir, provider)

    if global_config:
        cfg_path = ensure_global_config()
        console.print(f"  [green]✓[/] {cfg_path} (global config)")

    console.print("\nNext steps:")
    console.print("  1. contextqa contexts add --title <title> --content <text>")
    console.print("  2. contextqa ask \"<question>\"")


def _create_database(project_dir: Path) -> None:
    db = Database(project_dir / _DB_NAME)
    existed = db.exists
    try:
        db.connect().close()
    except StoreFailure as exc:
        console.print(err_store_failure(str(exc)))
        raise typer.Exit(1)
    if existed:
        console.print(f"  [dim]–[/] {_DB_NAME} (exists, schema up to date)")
    else:
        console.print(f"  [green]✓[/] {_DB_NAME}")


def _create_project_yaml(project_dir: Path, provider: str) -> None:
    path = project_dir / "contextqa.yaml"
    if path.exists():
        console.print("  [dim]–[/] contextqa.yaml (exists, left unchanged)")
        return
    path.write_text(
        _PROJECT_YAML.format(provider=provider, db_name=_DB_NAME), encoding="utf-8"
    )
    console.print("  [green]✓[/] contextqa.yaml")
