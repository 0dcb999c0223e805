from trie_proof_toolkit.proofs.generators.state_proof import fetch_state_proof
from trie_proof_toolkit.proofs.generators.storage_proof import (
    fetch_storage_proof,
)

__all__ = ["fetch_state_proof", "fetch_storage_proof"]
