from trie_proof_toolkit.utils.formatters import (
    console,
    create_proof_table,
    format_hex_preview,
    load_json,
    save_json_output,
    save_text_output,
    status_console,
)

__all__ = [
    "console",
    "create_proof_table",
    "format_hex_preview",
    "load_json",
    "save_json_output",
    "save_text_output",
    "status_console",
]
