"""
Rich table displays for module information.
"""

from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from cli.display.formatters import format_size, pan_to_string, value_bar
from xmfconv.analysis.track_listing import describe_voice_flags
from xmfconv.converters.batch import ConversionResult
from xmfconv.models.ult import ULTModule
from xmfconv.models.xmf import XMFModule

console = Console()


def display_ult_info(module: ULTModule, filepath: Path) -> None:
    """Display ULT module information with Rich formatting."""
    texts = "\n".join(f"  {escape(text.rstrip())}" for text in module.texts)

    header_content = f"""[bold]Title:[/bold] {escape(module.title.rstrip()) or "N/A"}
[bold]Magic:[/bold] {module.magic}
[bold]Version:[/bold] {module.version}
[bold]File Size:[/bold] {format_size(filepath.stat().st_size)}
[bold]Tracks:[/bold] {module.track_count}
[bold]Patterns:[/bold] {module.pattern_count} ({module.active_patterns} orders)
[bold]Texts:[/bold]
{texts or "  [dim]none[/dim]"}"""

    console.print(
        Panel(
            header_content,
            title=f"[bold blue]ULT Module: {filepath.name}[/bold blue]",
            border_style="blue",
            expand=False,
        )
    )

    sample_table = Table(
        title="Samples", box=box.ROUNDED, show_header=True, header_style="bold magenta"
    )
    sample_table.add_column("#", style="dim", width=4)
    sample_table.add_column("Name", style="cyan", width=32)
    sample_table.add_column("DOS Name", width=12)
    sample_table.add_column("Range", width=19)
    sample_table.add_column("Volume", width=14)
    sample_table.add_column("Flags", width=6)
    sample_table.add_column("Finetune", justify="right", width=8)
    sample_table.add_column("Freq", justify="right", width=6)

    for number, sample in enumerate(module.samples, start=1):
        sample_table.add_row(
            f"{number:03d}",
            escape(sample.name.rstrip()),
            escape(sample.dos_name.rstrip()),
            f"{sample.size_start:08X}-{sample.size_end:08X}",
            value_bar(sample.volume),
            f"0x{sample.flags:02X}",
            str(sample.finetune),
            str(sample.frequency),
        )

    console.print(sample_table)

    pans = " ".join(pan_to_string(pan) for pan in module.track_pans)
    console.print(f"[bold]Pans:[/bold] {pans}")


def display_xmf_info(module: XMFModule, filepath: Path) -> None:
    """Display XMF module information with Rich formatting."""
    header_content = f"""[bold]Version:[/bold] {module.version}
[bold]File Size:[/bold] {format_size(filepath.stat().st_size)}
[bold]Sample Entries:[/bold] {len(module.samples)}
[bold]Sample Count (for music):[/bold] {module.sample_count}
[bold]Section Count:[/bold] {module.section_count}
[bold]Sections Played:[/bold] {len(module.section_indexes)}"""

    console.print(
        Panel(
            header_content,
            title=f"[bold blue]XMF Module: {filepath.name}[/bold blue]",
            border_style="blue",
            expand=False,
        )
    )

    registry_table = Table(
        title="Sample Registry", box=box.ROUNDED, show_header=True, header_style="bold green"
    )
    registry_table.add_column("#", style="dim", width=4)
    registry_table.add_column("Length", justify="right", width=7)
    registry_table.add_column("P1", width=14)
    registry_table.add_column("Control", width=40)
    registry_table.add_column("Frequency", justify="right", width=9)

    for number, entry in enumerate(module.samples, start=1):
        registry_table.add_row(
            f"{number:03d}",
            str(entry.length),
            value_bar(entry.param0),
            describe_voice_flags(entry.voice_control_flags),
            str(entry.frequency),
        )

    console.print(registry_table)

    order = " ".join(f"{index:02X}" for index in module.section_indexes)
    console.print(f"[bold]Section order:[/bold] {order or '[dim]empty[/dim]'}")


def display_batch_results(results: List[ConversionResult]) -> None:
    """Display one row per converted file."""
    table = Table(title="Conversion", box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Source", style="cyan")
    table.add_column("Output")
    table.add_column("Status", width=8)
    table.add_column("Reason", style="dim")

    for result in results:
        status = "[green]OK[/green]" if result.success else "[red]FAILED[/red]"
        output = result.output.name if result.output and result.success else "-"
        table.add_row(result.source.name, output, status, result.error)

    console.print(table)

    failed = sum(1 for r in results if not r.success)
    style = "red" if failed else "green"
    console.print(
        f"[bold]{len(results) - failed}[/bold] converted, [{style}]{failed} failed[/{style}]"
    )
