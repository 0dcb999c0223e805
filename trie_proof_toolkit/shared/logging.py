"""
Logging for the trie proof toolkit.

Every module logs through a child of the `trie_proof_toolkit` logger, which
gets a single stderr handler the first time any of them is requested. The
level comes from TRIE_PROOFS_LOG_LEVEL (INFO when unset); DEBUG shows why a
proof was rejected.
"""

import logging
import os
from typing import Optional

ROOT_LOGGER_NAME = "trie_proof_toolkit"

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        root.addHandler(handler)

        level_str = os.getenv("TRIE_PROOFS_LOG_LEVEL", "INFO").upper()
        root.setLevel(getattr(logging, level_str, logging.INFO))
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger below the package logger."""
    root = _configure_root()
    if not name or name == ROOT_LOGGER_NAME:
        return root
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
