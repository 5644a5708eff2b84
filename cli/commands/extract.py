"""
Extract command - export XMF samples as WAV files.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from xmfconv.formats.xmf.reader import XMFReader
from xmfconv.utils.validation import ModuleFormatError
from xmfconv.utils.wav import export_samples

console = Console()
app = typer.Typer()


@app.command()
def extract(
    source: Path = typer.Argument(..., help="XMF file"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output directory (default: next to the source)"
    ),
    rate: Optional[int] = typer.Option(
        None, "--rate", "-r", help="Sample rate for every WAV (default: per-sample frequency)"
    ),
) -> None:
    """
    Export every sample of an XMF module as 8-bit mono WAV.

    Files are named after the source: MAIN1.XMF_001.wav, MAIN1.XMF_002.wav, ...

    Examples:

        xmfconv extract MAIN1.XMF

        xmfconv extract MAIN1.XMF -o samples/ --rate 22050
    """
    if not source.exists():
        console.print(f"[red]Error: File not found: {source}[/red]")
        raise typer.Exit(1)

    if rate is not None and rate <= 0:
        raise typer.BadParameter("Sample rate must be positive")

    try:
        module = XMFReader.read(source)
        written = export_samples(module, output or source.parent, source.name, rate)
    except (ModuleFormatError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    for path, sample in zip(written, module.samples):
        console.print(f"  {path.name}  [dim]{sample.length} bytes[/dim]")
    console.print(f"[green]Extracted {len(written)} samples[/green]")


if __name__ == "__main__":
    app()
