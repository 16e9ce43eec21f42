from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from tableseed.domain.models import GeneratedArtifact


@dataclass
class TableOutcome:
    """What happened to one table of a CLI invocation."""

    table: str
    status: str  # "created", "skipped" or "failed"
    artifact: Optional[GeneratedArtifact] = None
    error: Optional[str] = None


_STATUS_STYLES = {
    "created": "green",
    "skipped": "yellow",
    "failed": "bold red",
}


def print_results(outcomes: List[TableOutcome], console: Optional[Console] = None) -> None:
    """
    Render per-table outcomes as a rich table.
    """
    console = console or Console()

    if not outcomes:
        console.print("[yellow]No tables processed.[/yellow]")
        return

    table = Table(title="Seed Generation Results", box=box.ROUNDED)
    table.add_column("Table", style="cyan", no_wrap=True)
    table.add_column("Seeder", style="magenta")
    table.add_column("Rows", justify="right")
    table.add_column("Batches", justify="right")
    table.add_column("Status")
    table.add_column("File / Error", style="dim")

    for outcome in outcomes:
        artifact = outcome.artifact
        style = _STATUS_STYLES.get(outcome.status, "white")
        if artifact:
            detail = str(artifact.path)
        elif outcome.error:
            # first line only; exception messages carry multi-line suggestions
            detail = outcome.error.splitlines()[0]
        else:
            detail = ""
        table.add_row(
            outcome.table,
            artifact.class_name if artifact else "-",
            f"{artifact.rows:,}" if artifact else "-",
            str(artifact.batches) if artifact else "-",
            f"[{style}]{outcome.status}[/{style}]",
            detail,
        )

    console.print(table)


__all__ = ["TableOutcome", "print_results"]
