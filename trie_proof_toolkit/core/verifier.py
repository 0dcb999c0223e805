"""
Merkle-Patricia trie inclusion proof verification.

The walk runs one step per node slot of the padded proof, whatever the real
depth is. A step past `proof.depth`, or after the walk has reached its leaf
or been rejected, does nothing. Each real step:

1. takes the node out of its slot and checks its keccak hash against the
   hash the previous step committed to (the root, for the first node);
2. decodes it as an RLP list of at most 17 fields;
3. follows it: a branch (17 fields) by the next key nibble, an extension
   (2 fields) by its path segment, and a leaf (2 fields) ends the walk by
   comparing its path and value.

Structural problems in hash-verified nodes raise TrieProofStructureError
subclasses. A proof that simply does not match (wrong hash, path or value,
empty branch slot, no leaf reached) returns False.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from eth_utils import keccak

from trie_proof_toolkit.core.constants import (
    ACCOUNT_KEY_LENGTH,
    BRANCH_NUM_FIELDS,
    EXT_OR_LEAF_NUM_FIELDS,
    HASH_LENGTH,
    HASH_NIBBLE_LENGTH,
    MAX_ACCOUNT_STATE_LENGTH,
    MAX_LEN_IN_BYTES,
    MAX_NUM_FIELDS,
    MAX_STORAGE_VALUE_LENGTH,
    RLP_LONG_LIST,
    RLP_SHORT_LIST,
    STORAGE_KEY_LENGTH,
)
from trie_proof_toolkit.core.nibbles import (
    HexPrefixPath,
    NodeKind,
    bytes_to_nibbles,
    decode_hex_prefix,
)
from trie_proof_toolkit.core.rlp_decoder import (
    RlpKind,
    RlpList,
    decode_list,
    decode_small_list,
    decode_string,
)
from trie_proof_toolkit.core.types import TrieProof
from trie_proof_toolkit.shared.exceptions import ProofLayoutError
from trie_proof_toolkit.shared.logging import get_logger

_logger = get_logger(__name__)


class NodeShape(Enum):
    """Trie node layout, told apart by its number of RLP fields."""

    BRANCH = "branch"
    EXT_OR_LEAF = "ext_or_leaf"


def node_shape(field_count: int) -> Optional[NodeShape]:
    """Map an RLP field count to a node shape, None if it is neither."""
    if field_count == BRANCH_NUM_FIELDS:
        return NodeShape.BRANCH
    if field_count == EXT_OR_LEAF_NUM_FIELDS:
        return NodeShape.EXT_OR_LEAF
    return None


@dataclass
class _Walk:
    """Mutable state of one verification walk."""

    expected_hash: bytes
    key_nibbles: List[int]
    cursor: int = 0
    done: bool = False
    verified: bool = False

    def reject(self, step: int, reason: str) -> None:
        _logger.debug(f"Proof rejected at node {step}: {reason}")
        self.done = True

    def accept(self, step: int) -> None:
        _logger.debug(f"Proof verified at node {step}")
        self.done = True
        self.verified = True


def _node_extent(slot: bytes) -> Optional[int]:
    """
    Length of the RLP list at the start of a node slot.

    Pure arithmetic on the list header, never raising: a slot that does not
    start with a list header within the supported limits gives None, which
    the walk treats as a hash mismatch.
    """
    prefix = slot[0]
    if prefix < RLP_SHORT_LIST:
        return None
    if prefix <= RLP_LONG_LIST:
        extent = 1 + prefix - RLP_SHORT_LIST
    else:
        len_of_len = prefix - RLP_LONG_LIST
        if len_of_len > MAX_LEN_IN_BYTES:
            return None
        length = int.from_bytes(slot[1 : 1 + len_of_len], byteorder="big")
        extent = 1 + len_of_len + length
    if extent > len(slot):
        return None
    return extent


def _path_matches(walk: _Walk, path: HexPrefixPath) -> bool:
    """Check the path nibbles against the key from the walk's cursor on."""
    if walk.cursor + path.count > HASH_NIBBLE_LENGTH:
        return False
    matches = True
    for j in range(HASH_NIBBLE_LENGTH):
        if j < path.count:
            matches &= path.nibbles[j] == walk.key_nibbles[walk.cursor + j]
    return matches


def _values_match(resolved: bytes, padded_value: bytes) -> bool:
    """
    Compare a resolved big-endian value against its left-padded form.

    The low `len(resolved)` bytes of `padded_value` must equal `resolved`
    and every byte above them must be zero.
    """
    width = len(padded_value)
    if len(resolved) > width:
        return False
    shift = width - len(resolved)
    matches = True
    for j in range(width):
        if j < shift:
            matches &= padded_value[j] == 0
        else:
            matches &= padded_value[j] == resolved[j - shift]
    return matches


def _leaf_value(node: bytes, fields: RlpList, rlp_wrapped: bool) -> bytes:
    value = fields.payload(node, 1)
    if not rlp_wrapped:
        return value
    # Storage leaves hold the RLP encoding of the slot value
    offset, length = decode_string(value)
    return value[offset : offset + length]


def _follow_branch(
    walk: _Walk, step: int, node: bytes, fields: RlpList
) -> None:
    if walk.cursor >= HASH_NIBBLE_LENGTH:
        walk.reject(step, "branch node below a fully consumed key")
        return
    child = fields[walk.key_nibbles[walk.cursor]]
    if child.length == 0:
        walk.reject(step, "empty branch slot on the key path")
        return
    if child.kind is not RlpKind.STRING or child.length != HASH_LENGTH:
        walk.reject(step, "branch child is not a node hash")
        return
    walk.expected_hash = node[child.offset : child.end]
    walk.cursor += 1


def _follow_ext_or_leaf(
    walk: _Walk,
    step: int,
    node: bytes,
    fields: RlpList,
    proof: TrieProof,
    rlp_wrapped_value: bool,
) -> None:
    if fields.kinds[0] is not RlpKind.STRING:
        walk.reject(step, "node path is not a byte string")
        return
    path = decode_hex_prefix(node, fields.offsets[0], fields.lengths[0])
    if not _path_matches(walk, path):
        walk.reject(step, f"{path.kind.value} path does not match the key")
        return

    if path.kind is NodeKind.LEAF:
        if walk.cursor + path.count != HASH_NIBBLE_LENGTH:
            walk.reject(step, "leaf path ends before the key does")
            return
        if fields.lengths[1] == 0:
            walk.reject(step, "leaf holds an empty value")
            return
        resolved = _leaf_value(node, fields, rlp_wrapped_value)
        if not _values_match(resolved, proof.value):
            walk.reject(step, "leaf value does not match")
            return
        walk.cursor += path.count
        walk.accept(step)
        return

    child = fields[1]
    if child.kind is not RlpKind.STRING or child.length != HASH_LENGTH:
        walk.reject(step, "extension child is not a node hash")
        return
    walk.cursor += path.count
    walk.expected_hash = node[child.offset : child.end]


def _visit_node(
    walk: _Walk,
    step: int,
    proof: TrieProof,
    small_list: bool,
    rlp_wrapped_value: bool,
) -> None:
    slot = proof.node_slot(step)
    extent = _node_extent(slot)
    if extent is None or keccak(slot[:extent]) != walk.expected_hash:
        walk.reject(step, "node hash mismatch")
        return

    node = slot[:extent]
    if small_list:
        fields = decode_small_list(node, MAX_NUM_FIELDS)
    else:
        fields = decode_list(node, MAX_NUM_FIELDS)

    shape = node_shape(fields.count)
    if shape is NodeShape.BRANCH:
        _follow_branch(walk, step, node, fields)
    elif shape is NodeShape.EXT_OR_LEAF:
        _follow_ext_or_leaf(
            walk, step, node, fields, proof, rlp_wrapped_value
        )
    else:
        walk.reject(step, f"node with {fields.count} fields")


def _verify(
    proof: TrieProof,
    root: bytes,
    state_proof: bool,
    strict_padding: bool = False,
) -> bool:
    """
    Walk `proof` from `root`.

    Slots past `proof.depth` are never read, so garbage there does not
    change the outcome. With `strict_padding` such a proof is refused with
    ProofLayoutError before the walk starts.
    """
    root = bytes(root)
    if len(root) != HASH_LENGTH:
        raise ProofLayoutError(
            f"Trie root of {len(root)} bytes, expected {HASH_LENGTH}"
        )
    if strict_padding and not proof.padding_is_zero():
        raise ProofLayoutError(
            f"Node slots past depth {proof.depth} are not all zero"
        )

    walk = _Walk(
        expected_hash=root,
        key_nibbles=bytes_to_nibbles(keccak(proof.key)),
    )

    for step in range(proof.max_depth):
        if not walk.done and step < proof.depth:
            # Account states are long strings, so only a state proof's
            # last node needs the general list decoder
            small_list = not state_proof or step < proof.depth - 1
            _visit_node(
                walk,
                step,
                proof,
                small_list=small_list,
                rlp_wrapped_value=not state_proof,
            )

    if not walk.done:
        walk.reject(proof.depth, "no leaf within the proof depth")
    return walk.verified


def _require_dimensions(
    proof: TrieProof, key_length: int, max_value_length: int
) -> None:
    if len(proof.key) != key_length:
        raise ProofLayoutError(
            f"Key of {len(proof.key)} bytes, expected {key_length}"
        )
    if proof.value_length > max_value_length:
        raise ProofLayoutError(
            f"Value of {proof.value_length} bytes exceeds "
            f"{max_value_length} bytes"
        )


def verify_storage_root(
    proof: TrieProof, storage_root: bytes, strict_padding: bool = False
) -> bool:
    """
    Verify a storage slot proof against an account's storage root.

    Args:
        proof: Padded proof with a 32-byte slot key and the slot value
            left-padded to at most 32 bytes
        storage_root: 32-byte storage trie root
        strict_padding: Refuse proofs whose slots past `depth` hold
            nonzero bytes

    Returns:
        bool: True if the proof resolves the slot to the value under the
        root, False otherwise

    Raises:
        ProofLayoutError: if the proof or root has the wrong dimensions,
            or the padding is dirty under `strict_padding`
        RlpDecodingError, HexPrefixError: if a node on the path is
            malformed beyond what the fixed-size decoders accept
    """
    _require_dimensions(proof, STORAGE_KEY_LENGTH, MAX_STORAGE_VALUE_LENGTH)
    return _verify(
        proof, storage_root, state_proof=False, strict_padding=strict_padding
    )


def verify_state_root(
    proof: TrieProof, state_root: bytes, strict_padding: bool = False
) -> bool:
    """
    Verify an account proof against a block's state root.

    Args:
        proof: Padded proof with a 20-byte address key and the RLP-encoded
            account state left-padded to at most 134 bytes
        state_root: 32-byte state trie root
        strict_padding: Refuse proofs whose slots past `depth` hold
            nonzero bytes

    Returns:
        bool: True if the address resolves to the account state under the
        root, False otherwise
    """
    _require_dimensions(proof, ACCOUNT_KEY_LENGTH, MAX_ACCOUNT_STATE_LENGTH)
    return _verify(
        proof, state_root, state_proof=True, strict_padding=strict_padding
    )


def verify_trie_proof(
    proof: TrieProof, root: bytes, strict_padding: bool = False
) -> bool:
    """Verify a storage or state proof, chosen by its key length."""
    if len(proof.key) == STORAGE_KEY_LENGTH:
        return verify_storage_root(proof, root, strict_padding=strict_padding)
    return verify_state_root(proof, root, strict_padding=strict_padding)
