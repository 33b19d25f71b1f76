# tfm_deploy/cli/utils/output.py
"""Output formatting utilities"""

import json
from typing import Any, Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich import box

from ...models import DeployResult, DeleteResult, ModuleDescriptor, Result
from ...constants import EMOJI_SUCCESS, EMOJI_WARNING

console = Console()


def format_deploy_result(result: DeployResult) -> None:
    """Format and display deploy operation result"""
    descriptor = result.descriptor
    lines = []

    if result.is_success:
        lines.append(f"[green]✓[/green] {result.message}")
    elif result.is_failed:
        lines.append(f"[red]✗ Deploy failed:[/red] {result.message}")
    else:
        lines.append(f"[red]✗ Deploy aborted:[/red] {result.message}")

    if descriptor:
        lines.append("")
        lines.append(f"[bold]Module:[/bold] {descriptor.module_path}")
        lines.append(f"[bold]Version:[/bold] {descriptor.version}")

    if result.archive_size:
        lines.append(f"[bold]Archive:[/bold] {_format_size(result.archive_size)}")

    if result.verify_attempts:
        status = "[green]Passed[/green]" if result.verified else "[red]Failed[/red]"
        lines.append(f"[bold]Verification:[/bold] {status} ({result.verify_attempts} lookup(s))")

    _append_issues(lines, result)

    if result.duration is not None:
        lines.append(f"\n[dim]Duration: {result.duration:.2f}s[/dim]")

    console.print(Panel(
        "\n".join(lines),
        title="Deploy Result" if result.is_success else "Deploy Error",
        border_style="green" if result.is_success else "red"
    ))


def format_delete_result(result: DeleteResult) -> None:
    """Format and display delete operation result"""
    lines = []

    if result.is_success:
        lines.append(f"[green]✓[/green] {result.message}")
    else:
        lines.append(f"[red]✗ Delete failed:[/red] {result.message}")

    _append_issues(lines, result)

    console.print(Panel(
        "\n".join(lines),
        title="Delete Result" if result.is_success else "Delete Error",
        border_style="green" if result.is_success else "red"
    ))


def format_descriptor(descriptor: ModuleDescriptor,
                      remote: Optional[Dict[str, str]] = None) -> None:
    """Display a module descriptor, optionally with registry state"""
    table = Table(title="Module", box=box.ROUNDED, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Package", descriptor.package_name or "")
    table.add_row("Organization", descriptor.organization or "[dim]not set[/dim]")
    table.add_row("Provider", descriptor.provider)
    table.add_row("Name", descriptor.name)
    table.add_row("Version", descriptor.version)
    table.add_row("Registry path", descriptor.module_path)

    for key, value in (remote or {}).items():
        table.add_row(key, value)

    console.print(table)


def format_json(data: Any, title: Optional[str] = None) -> None:
    """Format and display JSON data with syntax highlighting"""
    json_str = json.dumps(data, indent=2, default=str)
    syntax = Syntax(json_str, "json", theme="monokai", line_numbers=False)

    if title:
        console.print(Panel(syntax, title=title, border_style="blue"))
    else:
        console.print(syntax)


def print_result_json(result: Result) -> None:
    """Print a result as plain JSON for scripts"""
    console.print_json(json.dumps(result.to_dict(), default=str))


def _append_issues(lines, result: Result) -> None:
    if result.warnings:
        lines.append("")
        lines.append("[bold yellow]Warnings:[/bold yellow]")
        for warning in result.warnings:
            lines.append(f"  [yellow]• {warning}[/yellow]")

    if result.errors:
        lines.append("")
        lines.append("[bold red]Errors:[/bold red]")
        for error in result.errors:
            lines.append(f"  [red]• [{error.code}] {error.message}[/red]")


def _format_size(size_bytes: int) -> str:
    """Format file size in human-readable format"""
    if size_bytes == 0:
        return "0B"

    units = ['B', 'KB', 'MB', 'GB', 'TB']
    unit_index = 0

    while size_bytes >= 1024 and unit_index < len(units) - 1:
        size_bytes /= 1024.0
        unit_index += 1

    return f"{size_bytes:.1f}{units[unit_index]}"


def print_error(message: str, error: Optional[Exception] = None) -> None:
    """Print error message"""
    if error:
        console.print(f"[red]Error:[/red] {message}: {str(error)}")
    else:
        console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    """Print warning message"""
    console.print(f"[yellow]{EMOJI_WARNING}  {message}[/yellow]")


def print_success(message: str) -> None:
    console.print(f"[green]{EMOJI_SUCCESS}[/green]  {message}")
