"""
Info command - display module information.
"""

from pathlib import Path

import typer
from rich.console import Console

from cli.display.tables import display_ult_info, display_xmf_info
from xmfconv.formats.ult.reader import ULTReader
from xmfconv.formats.xmf.reader import XMFReader
from xmfconv.utils.validation import ModuleFormatError

console = Console()
app = typer.Typer()


@app.command()
def info(
    file: Path = typer.Argument(..., help="Module file (.ULT or .XMF)"),
) -> None:
    """
    Display module information.

    ULT files are recognized by their magic; anything else is read as XMF.

    Examples:

        xmfconv info MAIN1.XMF

        xmfconv info MAIN1.XMF.ULT
    """
    if not file.exists():
        console.print(f"[red]Error: File not found: {file}[/red]")
        raise typer.Exit(1)

    try:
        if ULTReader.can_read(file):
            display_ult_info(ULTReader.read(file), file)
        else:
            display_xmf_info(XMFReader.read(file), file)
    except ModuleFormatError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
