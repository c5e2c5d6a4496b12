"""contextqa regenerate-embeddings: backfill contexts that lack an embedding.

Best effort: a provider failure on one context is logged and the pass
continues. The command always exits 0; remaining gaps are reported.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer

from contextqa.cli.common import console, core_errors, load_cli_config, open_orchestrator
from contextqa.cli.errors import warn_missing_embeddings


def regenerate_cmd(
    db: Annotated[
        Optional[Path],
        typer.Option("--db", help="Path to the contextqa database."),
    ] = None,
) -> None:
    """Generate embeddings for all contexts that do not have one."""
    cfg = load_cli_config(db)
    conn, orchestrator = open_orchestrator(cfg)
    try:
        with core_errors(cfg):
            report = orchestrator.regenerate_missing_embeddings()
    finally:
        conn.close()

    if report.attempted == 0:
        console.print("[green]✓[/] All contexts already have embeddings.")
        return

    console.print(f"[green]✓[/] Embeddings regenerated: {len(report.embedded)}")
    if report.failed:
        console.print(warn_missing_embeddings(len(report.failed)))
