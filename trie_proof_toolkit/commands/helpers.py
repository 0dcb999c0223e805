"""Shared command helpers and utilities."""

import sys
from typing import Callable, Optional

from rich import print as rprint

from trie_proof_toolkit.shared.exceptions import (
    ConfigurationException,
    TrieProofStructureError,
)


def handle_command_error(
    error: Exception, show_usage_fn: Optional[Callable[[], None]] = None
) -> None:
    """
    Standard error handling for commands.

    Args:
        error: The exception that occurred
        show_usage_fn: Optional function to display usage instructions
    """
    if isinstance(error, (ValueError, ConfigurationException)):
        rprint(f"[red]Error:[/red] {str(error)}", file=sys.stderr)
    elif isinstance(error, TrieProofStructureError):
        rprint(f"[red]Malformed proof:[/red] {str(error)}", file=sys.stderr)
    else:
        rprint(f"[red]Unexpected error:[/red] {str(error)}", file=sys.stderr)

    if show_usage_fn:
        show_usage_fn()

    sys.exit(1)
