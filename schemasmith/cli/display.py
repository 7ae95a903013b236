"""
Rich terminal display utilities for CLI.

Provides formatted output using the Rich library for:
- Syntax-highlighted JSON
- Validation errors with context
- Rewrite change tables
- Document summaries
- Success/failure indicators
"""

import json
from typing import Any, List, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from schemasmith.schema.document import Document
from schemasmith.schema.rewriter import Change
from schemasmith.validation.error_formatter import suggest_fix
from schemasmith.validation.validator import ValidationError


console = Console()


def print_header(title: str) -> None:
    """Print a formatted header."""
    console.print()
    console.print(f"[bold cyan]{title}[/bold cyan]")
    console.print("=" * len(title))
    console.print()


def print_success(message: str) -> None:
    """Print a success message with checkmark."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message with X mark."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]ℹ[/blue] {message}")


def print_json(data: Any, title: Optional[str] = None) -> None:
    """
    Print JSON data with syntax highlighting.

    Args:
        data: JSON-serializable data or JSON string
        title: Optional title for the panel
    """
    if isinstance(data, str):
        json_str = data
    else:
        json_str = json.dumps(data, indent=2)

    syntax = Syntax(json_str, "json", theme="monokai", line_numbers=False)

    if title:
        panel = Panel(syntax, title=f"[bold]{title}[/bold]", border_style="cyan")
        console.print(panel)
    else:
        console.print(syntax)


def print_schema(schema: Any, title: str = "Schema") -> None:
    """Print a schema with syntax highlighting."""
    print_json(schema, title)


def print_validation_errors(errors: List[ValidationError]) -> None:
    """
    Print validation errors in a table, one row per error.

    Args:
        errors: Errors from validate()
    """
    if not errors:
        return

    table = Table(title="Validation Errors", show_header=True, header_style="bold red")
    table.add_column("#", style="dim", width=4)
    table.add_column("Path", style="cyan")
    table.add_column("Problem", style="white")
    table.add_column("Suggestion", style="yellow")

    for i, error in enumerate(errors, 1):
        table.add_row(str(i), error.path or "root", error.message, suggest_fix(error))

    console.print()
    console.print(table)
    console.print()


def print_messages(messages: Sequence[str], title: str) -> None:
    """Print a bulleted list of plain messages."""
    if not messages:
        return

    console.print()
    console.print(f"[bold red]{title}:[/bold red]")
    for message in messages:
        console.print(f"  [red]•[/red] {message}")
    console.print()


def print_changes(changes: List[Change]) -> None:
    """
    Print the steps taken by the rewriter.

    Args:
        changes: Changes collected by a RecordingTracer
    """
    if not changes:
        print_info("No changes were needed")
        return

    table = Table(title="Rewrite Changes", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Change", style="cyan")
    table.add_column("Path", style="white")
    table.add_column("Summary", style="white")

    for i, change in enumerate(changes, 1):
        path = "/".join(str(segment) for segment in change.path)
        table.add_row(str(i), change.name, path, change.summary)

    console.print()
    console.print(table)
    console.print()


def print_document_summary(document: Document, title: str = "Document") -> None:
    """
    Print the dialect and definitions of a document.

    Args:
        document: Document to summarize
        title: Table title
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="cyan", width=20)
    table.add_column("Value", style="white", width=50)

    table.add_row("Dialect", document.dialect.value)
    table.add_row("Definitions", str(len(document.definitions)))
    if document.definitions:
        table.add_row("Names", ", ".join(document.definitions))

    console.print()
    console.print(table)
    console.print()


def print_separator() -> None:
    """Print a visual separator line."""
    console.print("[dim]" + "─" * 70 + "[/dim]")

