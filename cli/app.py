"""
xmfconv - Converter for Imperium Galactica XMF music modules.

A CLI tool for converting XMF modules to UltraTracker and inspecting them.
"""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from cli.commands.convert import convert
from cli.commands.extract import extract
from cli.commands.info import info
from cli.commands.tracks import tracks
from xmfconv import __version__

console = Console()

# Main app
app = typer.Typer(
    name="xmfconv",
    help="Convert and inspect Imperium Galactica XMF music modules.",
    add_completion=False,
    rich_markup_mode="rich",
)

# Add commands directly
app.command(name="info")(info)
app.command(name="convert")(convert)
app.command(name="extract")(extract)
app.command(name="tracks")(tracks)


def setup_logging(verbose: bool) -> None:
    """Route library logging through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]xmfconv[/bold] version {__version__}")
    console.print("[dim]XMF to UltraTracker module converter[/dim]")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version_flag: bool = typer.Option(False, "--version", "-V", help="Show version"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """
    xmfconv - Convert Imperium Galactica music to UltraTracker.

    [bold]Quick Start:[/bold]

        xmfconv convert MAIN1.XMF       # Writes MAIN1.XMF.ULT
        xmfconv convert music/          # Converts every .XMF in a directory

    [bold]Analysis Commands:[/bold]

        xmfconv info MAIN1.XMF          # Registry and section summary
        xmfconv info MAIN1.XMF.ULT      # ULT header and samples
        xmfconv tracks MAIN1.XMF        # Row-by-row section listing

    [bold]Utility Commands:[/bold]

        xmfconv extract MAIN1.XMF       # Samples as WAV files

    Use --help with any command for more details.
    """
    setup_logging(verbose)

    if version_flag:
        version()
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
