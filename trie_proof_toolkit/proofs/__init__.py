from trie_proof_toolkit.proofs.manager import TrieProofManager
from trie_proof_toolkit.proofs.preprocess import (
    check_padding,
    left_pad,
    preprocess_proof,
)
from trie_proof_toolkit.proofs.types import ProofBundle

__all__ = [
    "TrieProofManager",
    "ProofBundle",
    "check_padding",
    "left_pad",
    "preprocess_proof",
]
