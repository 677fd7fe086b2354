"""Utility functions for Image Uploader.

Provides clipboard operations, output formatting, console messages and
logging setup.
"""

import json
import logging

import pyperclip
from rich.console import Console
from rich.logging import RichHandler

from .models import VariantResult


console = Console()


def copy_to_clipboard(text: str) -> bool:
    """Copy text to system clipboard.

    Args:
        text: Text to copy

    Returns:
        True if successful, False otherwise
    """
    try:
        pyperclip.copy(text)
        return True
    except pyperclip.PyperclipException:
        return False


def format_plain(results: list[VariantResult]) -> str:
    """Format variant results as newline-separated paths."""
    return '\n'.join(str(r.path) for r in results)


def format_markdown(results: list[VariantResult]) -> str:
    """Format variant results as Markdown image syntax."""
    return '\n'.join(f"![{r.name}]({r.path})" for r in results)


def format_json(results: list[VariantResult]) -> str:
    """Format variant results as a JSON array."""
    return json.dumps(
        [
            {
                "path": str(r.path),
                "name": r.name,
                "size": r.size_bytes,
                "hash": r.content_hash,
                "width": r.width,
                "height": r.height,
            }
            for r in results
        ],
        indent=2,
    )


def format_output(results: list[VariantResult], format_type: str) -> str:
    """Format variant results based on output format setting.

    Args:
        results: List of variant results
        format_type: Output format (plain, markdown, json)

    Returns:
        Formatted output string
    """
    formatters = {
        'plain': format_plain,
        'markdown': format_markdown,
        'json': format_json,
    }

    formatter = formatters.get(format_type, format_plain)
    return formatter(results)


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB")
    """
    size = float(size_bytes)
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]![/yellow] {message}")


def setup_logging(verbose: bool = False) -> None:
    """Route library logging through Rich.

    Args:
        verbose: Log at DEBUG instead of WARNING
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
