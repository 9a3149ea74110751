"""
Interactive field mapper

Provides an interactive UI for manually mapping CSV columns to booking fields.
"""

from typing import List, Optional, Sequence, Tuple
from rich.table import Table
from rich.prompt import Prompt, Confirm
from core.models import FieldMapping, ParsedTable, IGNORE_COLUMN
from core.schema import FieldSpec, CSV_BOOKING_FIELDS, required_fields
from ..banner import console, show_mapping_table


class InteractiveMapper:
    """
    Interactive field mapping with Rich UI.

    Example:
        mapper = InteractiveMapper(table)
        mapping = mapper.map(auto_mapping)
    """

    def __init__(self, table: ParsedTable, fields: Sequence[FieldSpec] = CSV_BOOKING_FIELDS):
        """
        Initialize interactive mapper.

        Args:
            table: Parsed CSV (headers plus rows for previews)
            fields: Booking fields to prompt for
        """
        self.table = table
        self.source_headers = table.header_names
        self.fields = list(fields)
        self.required = required_fields(self.fields)

    def map(self, auto_mapping: Optional[FieldMapping] = None) -> FieldMapping:
        """
        Interactively map fields.

        Args:
            auto_mapping: Optional pre-detected mapping to use as defaults

        Returns:
            FieldMapping with user-selected mappings
        """
        console.print()
        console.rule("[bold cyan]Field Mapping[/bold cyan]", style="cyan")
        console.print("[dim]Type a column [bold]#[/bold] or [bold]name[/bold] at each prompt · "
                      "Enter = accept suggestion / skip · [bold]-[/bold] = ignore[/dim]")

        console.print()
        self._show_source_columns()

        if auto_mapping and auto_mapping.is_complete(self.required):
            console.print()
            console.print("[green]☉ All required fields auto-detected[/green]")
            show_mapping_table(auto_mapping, self.fields, title="Auto-Detected Mapping")

            if Confirm.ask("\n[cyan]Use auto-detected mapping?[/cyan]", default=True):
                console.print("[green]☉ Auto-mapping accepted[/green]")
                return auto_mapping

            console.print("\n[yellow]Manual mapping mode[/yellow]")

        mapping = FieldMapping()
        groups = [
            ("Required", "cyan", [f for f in self.fields if f.required]),
            ("Optional", "yellow", [f for f in self.fields if not f.required]),
        ]

        for title, style, specs in groups:
            console.print()
            console.rule(f"[bold {style}]{title}[/bold {style}]", style=style)
            for position, spec in enumerate(specs, 1):
                default = auto_mapping.get(spec.name) if auto_mapping else None
                mapping.set(spec.name, self._map_field(spec, default, step=f"{position}/{len(specs)}"))

        console.print()
        console.rule("[bold green]Mapping Complete[/bold green]", style="green")
        show_mapping_table(mapping, self.fields, title="Mapping Summary")

        missing = mapping.missing_fields(self.required)
        if missing:
            console.print(f"[red]☿ Unmapped required fields: {', '.join(missing)}[/red]")
        else:
            console.print("[bold green]☉ All required fields mapped[/bold green]")

        return mapping

    def resolve_choice(self, user_input: str) -> Tuple[Optional[str], Optional[str]]:
        """
        Interpret one prompt answer.

        Returns:
            Tuple of (column, message). ``column`` is the selected header, or
            IGNORE_COLUMN for '-'; ``message`` explains a rejected answer.
        """
        if user_input == '-':
            return IGNORE_COLUMN, None

        if user_input.isdigit():
            index = int(user_input) - 1
            if 0 <= index < len(self.source_headers):
                return self.source_headers[index], None
            return None, f"Invalid — must be 1–{len(self.source_headers)}"

        if user_input in self.source_headers:
            return user_input, None

        matches = [h for h in self.source_headers if user_input.lower() in h.lower()]
        if len(matches) == 1:
            return matches[0], None
        if matches:
            return None, f"Did you mean: {', '.join(matches[:5])}"

        short = ', '.join(self.source_headers[:5])
        more = f' (+{len(self.source_headers) - 5} more)' if len(self.source_headers) > 5 else ''
        return None, f"Not found: '{user_input}'. Columns: {short}{more}"

    def _show_source_columns(self):
        """Display available source columns with sample data."""
        table = Table(title="Source Columns", show_header=True)
        table.add_column("#", style="dim", width=4)
        table.add_column("Column Name", style="cyan bold", width=25)
        table.add_column("Sample Values", style="white", overflow="fold")

        for header in self.table.headers:
            samples = self._sample_values(header.index, limit=3)
            sample_text = " | ".join(samples) if samples else "[dim]<empty>[/dim]"
            table.add_row(f"{header.index + 1}.", header.name, sample_text)

        console.print(table)

    def _sample_values(self, column: int, limit: int = 5) -> List[str]:
        values = []
        for row in self.table.rows[:limit]:
            value = row[column].strip() if column < len(row) else ''
            if value:
                values.append(value[:40] + ("..." if len(value) > 40 else ""))
        return values

    def _inline_preview(self, column_name: str) -> str:
        """Return e.g. "John Smith · Ana Lee  (100%)" for the selected column."""
        index = self.table.column_index(column_name)
        total = min(5, len(self.table.rows))
        if index is None or not total:
            return ""

        values = self._sample_values(index, limit=total)
        if not values:
            return ""

        fill_rate = len(values) / total * 100
        samples = " · ".join(values[:3])
        if fill_rate < 50:
            return f"▲ {samples}  ({fill_rate:.0f}% sparse)"
        return f"{samples}  ({fill_rate:.0f}%)"

    def _map_field(self, spec: FieldSpec, default: Optional[str] = None, step: str = "") -> Optional[str]:
        """
        Map a single field interactively.

        Returns:
            Selected column name, IGNORE_COLUMN, or None when skipped
        """
        step_tag = f" [dim]({step})[/dim]" if step else ""
        console.print(f"[bold cyan]{spec.label}[/bold cyan]{step_tag}  [dim]{spec.kind}[/dim]")

        if default:
            console.print(f"  [green]☉ auto:[/green] [white]{default}[/white]")

        while True:
            user_input = Prompt.ask("  [cyan]→[/cyan]", default=default or "", show_default=False)

            if not user_input:
                console.print("  [dim]— skipped[/dim]")
                return None

            selected, message = self.resolve_choice(user_input)
            if selected is None:
                console.print(f"  [yellow]{message}[/yellow]")
                continue

            if selected == IGNORE_COLUMN:
                console.print("  [dim]— ignored[/dim]")
                return selected

            preview = self._inline_preview(selected)
            console.print(f"  [green]☉ {selected}[/green]  [dim]{preview}[/dim]" if preview else f"  [green]☉ {selected}[/green]")
            return selected
