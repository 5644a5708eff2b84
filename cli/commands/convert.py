"""
Convert command - XMF to ULT conversion of one file or a whole directory.
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from cli.display.tables import display_batch_results
from xmfconv.converters.batch import convert_directory
from xmfconv.converters.xmf_to_ult import XMFToULTConverter, default_output_path
from xmfconv.utils.validation import ModuleFormatError

console = Console()
app = typer.Typer()


def parse_pans(value: Optional[str]) -> Optional[List[int]]:
    """Parse a comma-separated pan list such as "3,12,12,3"."""
    if not value:
        return None
    try:
        pans = [int(part, 0) for part in value.split(",")]
    except ValueError:
        raise typer.BadParameter(f"Invalid pan list: {value}")
    if any(not 0 <= pan <= 0xFF for pan in pans):
        raise typer.BadParameter("Pan values must be 0-255")
    return pans


@app.command()
def convert(
    source: Path = typer.Argument(..., help="XMF file, or a directory of XMF files"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output file (single file) or directory"
    ),
    pans: Optional[str] = typer.Option(
        None, "--pans", "-p", help="Comma-separated pan value per track"
    ),
    compress: bool = typer.Option(
        False, "--compress", "-c", help="Run-length compress repeated cells"
    ),
) -> None:
    """
    Convert XMF modules to UltraTracker ULT format.

    The output name is the source name with .ULT appended
    (MAIN1.XMF -> MAIN1.XMF.ULT). A directory converts every .XMF
    file in it; a failing file does not stop the others.

    Examples:

        xmfconv convert MAIN1.XMF

        xmfconv convert MAIN1.XMF -o main1.ult

        xmfconv convert music/ -o converted/
    """
    if not source.exists():
        console.print(f"[red]Error: Source not found: {source}[/red]")
        raise typer.Exit(1)

    pan_table = parse_pans(pans)

    if source.is_dir():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(f"Converting {source}...", total=None)
            results = convert_directory(source, output, pan_table, compress)

        if not results:
            console.print(f"[yellow]No .XMF files found in {source}[/yellow]")
            return

        display_batch_results(results)
        if not all(r.success for r in results):
            raise typer.Exit(1)
        return

    output_path = output or default_output_path(source)
    if output is not None and output.is_dir():
        output_path = output / default_output_path(source).name

    try:
        XMFToULTConverter(pan_table).convert_and_save(source, output_path, compress=compress)
    except (ModuleFormatError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Converted:[/green] {source} -> {output_path}")
    console.print(f"[dim]Output size: {output_path.stat().st_size} bytes[/dim]")


if __name__ == "__main__":
    app()
