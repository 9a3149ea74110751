"""
Banner and UI components for Booking Ingest
"""

from typing import Dict, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from core._version import __version__
from core.models import FieldMapping, FieldPreview, ParsedTable, ValidationReport, IGNORE_COLUMN
from core.schema import FieldSpec

# Global console instance
console = Console()


TAGLINE = "Normalize booking exports and webhook payloads"


def show_banner():
    """Display the title panel"""
    panel = Panel(
        f"[bold cyan]Booking Ingest[/bold cyan]\n[dim]{TAGLINE}[/dim]\n[dim]v{__version__}[/dim]",
        border_style="cyan",
        padding=(1, 3),
    )
    console.print(panel)


def show_step(step: int, title: str, description: str = ""):
    """Show a step header"""
    console.print()
    header = f"[bold cyan]Step {step}: {title}[/bold cyan]"
    if description:
        console.print(f"{header}\n[dim]{description}[/dim]")
    else:
        console.print(header)


def show_success(message: str):
    """Show success message"""
    console.print(f"☉ [green]{message}[/green]")


def show_error(message: str):
    """Show error message"""
    console.print(f"☿ [red]{message}[/red]")


def show_warning(message: str):
    """Show warning message"""
    console.print(f"▲ [yellow]{message}[/yellow]")


def show_info(message: str):
    """Show info message"""
    console.print(f"◈ [blue]{message}[/blue]")


def show_headers_table(table: ParsedTable):
    """Display parsed columns with their sample values"""
    view = Table(title="Columns", show_header=True, header_style="bold cyan")
    view.add_column("#", style="dim", width=4)
    view.add_column("Column Name", style="cyan")
    view.add_column("Sample Value", overflow="fold")

    for header in table.headers:
        view.add_row(str(header.index + 1), header.name, header.sample_value or "[dim]<empty>[/dim]")

    console.print(view)
    console.print(f"[dim]{table.total_row_count} data rows · {len(table.rejected_rows)} rejected[/dim]")


def show_mapping_table(mapping: FieldMapping, fields: Sequence[FieldSpec], title: str = "Field Mapping"):
    """Display target fields with their locators and required markers"""
    view = Table(title=title, show_header=True, header_style="bold cyan")
    view.add_column("Field", style="cyan")
    view.add_column("Source")
    view.add_column("Status", justify="center")

    for spec in fields:
        locator = mapping.get(spec.name)
        if mapping.is_mapped(spec.name):
            status = "[green]☉[/green]"
        elif spec.required:
            status = "[red]☿[/red]"
        else:
            status = "[dim]—[/dim]"
        shown = "[dim]ignored[/dim]" if locator == IGNORE_COLUMN else (locator or "[dim]-[/dim]")
        label = f"◆ {spec.label}" if spec.required else f"  {spec.label}"
        view.add_row(label, shown, status)

    console.print(view)


def show_validation_report(report: ValidationReport):
    """Show missing fields and extraction errors of a mapping check"""
    if report.is_valid:
        show_success("All required fields are mapped and produce values")
        return
    for name in report.missing_fields:
        show_error(f"{name} is required and must be mapped")
    for message in report.errors:
        show_warning(message)


def show_field_preview(previews: Dict[str, FieldPreview], mapping: FieldMapping):
    """Display the value each mapping produces"""
    view = Table(title="Extracted Values", show_header=True, header_style="bold cyan")
    view.add_column("Field", style="cyan")
    view.add_column("Path", style="dim", overflow="fold")
    view.add_column("Value", overflow="fold")

    for name, preview in previews.items():
        style = "white" if preview.value is not None else "dim"
        view.add_row(name, mapping.get(name) or "", f"[{style}]{preview.preview}[/{style}]")

    console.print(view)


def show_extraction_summary(total: int, rows_in_error: int, fields_in_error: int):
    """Show row/field error counts of an extraction"""
    valid = total - rows_in_error
    percent = f"{valid / total * 100:.0f}%" if total else "0%"
    panel = Panel(
        f"[bold]Extraction Summary[/bold]\n\n"
        f"Total rows: [white]{total}[/white]\n"
        f"☉ Clean rows: [green]{valid}[/green] ({percent})\n"
        f"▲ Rows with errors: [yellow]{rows_in_error}[/yellow]\n"
        f"Field errors: [yellow]{fields_in_error}[/yellow]",
        border_style="cyan",
        padding=(1, 2)
    )
    console.print(panel)


def show_export_summary(records_exported: int, output_path: str):
    """Show export summary"""
    panel = Panel(
        f"[bold green]Export Complete![/bold green]\n\n"
        f"Records exported: [white]{records_exported}[/white]\n"
        f"Output: [cyan]{output_path}[/cyan]",
        border_style="green",
        padding=(1, 2)
    )
    console.print(panel)
