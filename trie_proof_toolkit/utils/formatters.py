"""Shared formatting and file utilities for commands."""

import json
from pathlib import Path
from typing import Any, Dict

from rich.console import Console
from rich.table import Table

# Shared console instances: data goes to stdout, status to stderr
console = Console()
status_console = Console(stderr=True)


def format_hex_preview(data: bytes, length: int = 10) -> str:
    """
    Format bytes as a shortened hex string.

    Args:
        data: Bytes to show
        length: Number of leading bytes kept

    Returns:
        Formatted string like "0x12ab...ef (532 bytes)"
    """
    if not data:
        return "0x"
    if len(data) <= length:
        return "0x" + data.hex()
    return f"0x{data[:length].hex()}... ({len(data)} bytes)"


def save_text_output(
    text: str,
    filename: str,
    output_dir: str = "output",
    print_path: bool = True,
) -> str:
    """
    Save text to a file with automatic directory creation.

    Args:
        text: Text to save
        filename: Output filename (can include subdirectories)
        output_dir: Base output directory (default: 'output')
        print_path: Whether to print the saved file path

    Returns:
        Full path to saved file
    """
    filepath = Path(output_dir) / filename
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_text(text)

    if print_path:
        status_console.print(f"[cyan]Data saved to:[/cyan] {filepath}")

    return str(filepath)


def save_json_output(
    data: Dict[str, Any],
    filename: str,
    output_dir: str = "output",
    print_path: bool = True,
) -> str:
    """Save data as indented JSON, see save_text_output."""
    return save_text_output(
        json.dumps(data, indent=2), filename, output_dir, print_path
    )


def load_json(file_path: str) -> Dict[str, Any]:
    """Load and parse a JSON file."""
    with open(file_path, "r") as file:
        return json.load(file)


def create_proof_table(title: str) -> Table:
    """
    Create a Rich table for summarizing a proof.

    Returns:
        Configured Rich Table with field/value columns
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold cyan",
        show_lines=False,
        pad_edge=False,
        box=None,
    )
    table.add_column("Field", width=14)
    table.add_column("Value")
    return table
