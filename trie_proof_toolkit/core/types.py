"""
Fixed-layout trie proof types.

A TrieProof is built once by the preprocessor (or loaded from a file) and
read once by the verifier. Its byte fields are fixed size:

    key    KEY_LENGTH bytes
    value  value_length bytes, left-padded with zeros
    proof  max_depth * max_node_len bytes, one right-padded node per slot,
           root first; slots past `depth` are all zero
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple

from trie_proof_toolkit.core.constants import (
    ACCOUNT_KEY_LENGTH,
    MAX_ACCOUNT_STATE_LENGTH,
    MAX_STORAGE_VALUE_LENGTH,
    MAX_TRIE_NODE_LENGTH,
    STORAGE_KEY_LENGTH,
)
from trie_proof_toolkit.shared.exceptions import ProofLayoutError


@dataclass(frozen=True)
class TrieProof:
    """Padded and flattened Merkle-Patricia inclusion proof."""

    key: bytes
    value: bytes
    proof: bytes
    depth: int
    max_node_len: int = MAX_TRIE_NODE_LENGTH

    KEY_LENGTHS: ClassVar[Tuple[int, ...]] = (
        STORAGE_KEY_LENGTH,
        ACCOUNT_KEY_LENGTH,
    )
    MAX_VALUE_LENGTH: ClassVar[Optional[int]] = None

    def __post_init__(self):
        # Accept HexBytes, bytearray and friends, store plain bytes
        object.__setattr__(self, "key", bytes(self.key))
        object.__setattr__(self, "value", bytes(self.value))
        object.__setattr__(self, "proof", bytes(self.proof))
        self._validate()

    def _validate(self) -> None:
        if len(self.key) not in self.KEY_LENGTHS:
            raise ProofLayoutError(
                f"Key of {len(self.key)} bytes, expected one of "
                f"{self.KEY_LENGTHS}"
            )
        if (
            self.MAX_VALUE_LENGTH is not None
            and len(self.value) > self.MAX_VALUE_LENGTH
        ):
            raise ProofLayoutError(
                f"Value of {len(self.value)} bytes exceeds "
                f"{self.MAX_VALUE_LENGTH} bytes"
            )
        if self.max_node_len <= 0:
            raise ProofLayoutError("Maximum node length must be positive")
        if len(self.proof) % self.max_node_len:
            raise ProofLayoutError(
                f"Proof length {len(self.proof)} is not a multiple of the "
                f"node length {self.max_node_len}"
            )
        if not 0 <= self.depth <= self.max_depth:
            raise ProofLayoutError(
                f"Depth {self.depth} outside [0, {self.max_depth}]"
            )

    @property
    def max_depth(self) -> int:
        """Number of node slots in the padded proof."""
        return len(self.proof) // self.max_node_len

    @property
    def value_length(self) -> int:
        return len(self.value)

    def node_slot(self, index: int) -> bytes:
        """Return the padded slot of the `index`-th node."""
        if not 0 <= index < self.max_depth:
            raise IndexError(f"Node slot {index} out of range")
        start = index * self.max_node_len
        return self.proof[start : start + self.max_node_len]

    def padding_is_zero(self) -> bool:
        """Check that every node slot past `depth` is all zero."""
        return not any(self.proof[self.depth * self.max_node_len :])


@dataclass(frozen=True)
class StorageProof(TrieProof):
    """Proof of a storage slot under an account's storage root."""

    KEY_LENGTHS: ClassVar[Tuple[int, ...]] = (STORAGE_KEY_LENGTH,)
    MAX_VALUE_LENGTH: ClassVar[Optional[int]] = MAX_STORAGE_VALUE_LENGTH


@dataclass(frozen=True)
class StateProof(TrieProof):
    """Proof of an account's RLP-encoded state under a state root."""

    KEY_LENGTHS: ClassVar[Tuple[int, ...]] = (ACCOUNT_KEY_LENGTH,)
    MAX_VALUE_LENGTH: ClassVar[Optional[int]] = MAX_ACCOUNT_STATE_LENGTH
