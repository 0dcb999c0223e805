"""Trie Proof Toolkit - fixed-shape RLP decoding and Merkle-Patricia proofs."""

__version__ = "0.1.0"

from .core import verify_state_root, verify_storage_root, verify_trie_proof
from .core.types import StateProof, StorageProof, TrieProof
from .proofs import TrieProofManager, preprocess_proof

__all__ = [
    "StateProof",
    "StorageProof",
    "TrieProof",
    "TrieProofManager",
    "preprocess_proof",
    "verify_state_root",
    "verify_storage_root",
    "verify_trie_proof",
]
