"""
Type definitions for fetched trie proofs.
"""

from typing import Optional, TypedDict

from trie_proof_toolkit.core.types import TrieProof


class ProofBundle(TypedDict):
    """A preprocessed proof together with the root it resolves under."""

    root: bytes  # Storage root (storage proofs) or state root (state proofs)
    proof: TrieProof  # Padded, flattened proof
    block_number: int  # Block the proof was fetched at
    address: str  # Checksummed account address
    key: Optional[str]  # Storage slot (hex), None for state proofs
