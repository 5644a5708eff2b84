"""
Tracks command - write a text listing of an XMF module's played sections.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from xmfconv.analysis.track_listing import render_track_listing
from xmfconv.formats.xmf.reader import XMFReader
from xmfconv.utils.validation import ModuleFormatError

console = Console()
app = typer.Typer()


@app.command()
def tracks(
    source: Path = typer.Argument(..., help="XMF file"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Listing file (default: <source>_Tracks.txt)"
    ),
) -> None:
    """
    Write the played sections of an XMF module as a text listing.

    Each line is one row; each column shows note, sample and both
    effects as NNN NNN [F1(P1), F2(P2)].

    Examples:

        xmfconv tracks MAIN1.XMF

        xmfconv tracks MAIN1.XMF -o main1.txt
    """
    if not source.exists():
        console.print(f"[red]Error: File not found: {source}[/red]")
        raise typer.Exit(1)

    output_path = output or source.with_name(source.name + "_Tracks.txt")

    try:
        module = XMFReader.read(source)
        output_path.write_text(render_track_listing(module), encoding="ascii")
    except (ModuleFormatError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Wrote:[/green] {output_path}")
    console.print(
        f"[dim]{len(module.section_indexes)} sections played, "
        f"{module.sample_count} columns[/dim]"
    )


if __name__ == "__main__":
    app()
