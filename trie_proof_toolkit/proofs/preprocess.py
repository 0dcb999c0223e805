"""
Proof preprocessing: padding real trie nodes into the fixed proof layout.

eth_getProof returns a variable number of variable-length nodes. The
verifier wants exactly `max_depth` slots of `max_node_len` bytes each, so
every node is right-padded with zeros, missing slots are appended as all
zero, and the resolved value is left-padded to its maximum length.
"""

from typing import Sequence

from trie_proof_toolkit.core.constants import (
    ACCOUNT_KEY_LENGTH,
    STORAGE_KEY_LENGTH,
)
from trie_proof_toolkit.core.types import StateProof, StorageProof, TrieProof
from trie_proof_toolkit.shared.exceptions import ProofLayoutError


def left_pad(value: bytes, max_len: int) -> bytes:
    """
    Left-pad a byte string with zeros.

    Args:
        value: Bytes to pad
        max_len: Desired size of the padded value

    Returns:
        bytes: `value` preceded by `max_len - len(value)` zero bytes
    """
    if len(value) > max_len:
        raise ProofLayoutError(
            f"Value of {len(value)} bytes exceeds its maximum expected "
            f"dimension of {max_len} bytes"
        )
    return bytes(max_len - len(value)) + bytes(value)


def proof_class_for_key(key: bytes) -> type:
    """Pick the proof variant matching a key length."""
    if len(key) == STORAGE_KEY_LENGTH:
        return StorageProof
    if len(key) == ACCOUNT_KEY_LENGTH:
        return StateProof
    return TrieProof


def preprocess_proof(
    proof: Sequence[bytes],
    key: bytes,
    value: bytes,
    max_depth: int,
    max_node_len: int,
    max_value_len: int,
) -> TrieProof:
    """
    Pad and flatten a trie proof into the layout the verifier expects.

    Args:
        proof: Trie nodes, root first, each an RLP-encoded byte string
        key: Key the proof resolves (32-byte slot or 20-byte address)
        value: Value the key resolves to
        max_depth: Maximum admissible depth of the proof
        max_node_len: Maximum admissible length of a node
        max_value_len: Maximum admissible length of the value

    Returns:
        TrieProof: StorageProof for 32-byte keys, StateProof for 20-byte keys

    Raises:
        ProofLayoutError: if the proof is deeper than `max_depth`, a node is
            longer than `max_node_len` or the value longer than
            `max_value_len`
    """
    depth = len(proof)
    if depth > max_depth:
        raise ProofLayoutError(
            f"The depth of this proof ({depth}) exceeds the maximum depth "
            f"specified ({max_depth})!"
        )

    slots = []
    for node in proof:
        node = bytes(node)
        if len(node) > max_node_len:
            raise ProofLayoutError(
                f"Node length ({len(node)}) cannot exceed the given "
                f"maximum ({max_node_len})."
            )
        slots.append(node + bytes(max_node_len - len(node)))
    slots.extend(bytes(max_node_len) for _ in range(max_depth - depth))

    key = bytes(key)
    return proof_class_for_key(key)(
        key=key,
        value=left_pad(bytes(value), max_value_len),
        proof=b"".join(slots),
        depth=depth,
        max_node_len=max_node_len,
    )


def check_padding(proof: TrieProof) -> bool:
    """Check that every node slot past the proof's depth is all zero."""
    return proof.padding_is_zero()
