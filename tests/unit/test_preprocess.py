"""
Unit tests for proof preprocessing and the padded proof types.
"""

from dataclasses import replace

import pytest

from trie_proof_toolkit.core.constants import (
    MAX_STORAGE_VALUE_LENGTH,
    MAX_TRIE_NODE_LENGTH,
)
from trie_proof_toolkit.core.types import StateProof, StorageProof, TrieProof
from trie_proof_toolkit.proofs.preprocess import (
    check_padding,
    left_pad,
    preprocess_proof,
    proof_class_for_key,
)
from trie_proof_toolkit.shared.exceptions import ProofLayoutError

from tests.helpers import slot_key


class TestLeftPad:
    def test_pads_with_leading_zeros(self):
        assert left_pad(b"\x01\x02", 4) == b"\x00\x00\x01\x02"

    def test_exact_length_is_unchanged(self):
        assert left_pad(b"\xff" * 4, 4) == b"\xff" * 4

    def test_empty_value(self):
        assert left_pad(b"", 3) == b"\x00\x00\x00"

    def test_too_long_raises(self):
        with pytest.raises(
            ProofLayoutError, match="exceeds its maximum expected dimension"
        ):
            left_pad(b"\x01" * 5, 4)


class TestPreprocessProof:
    """Tests for padding real nodes into fixed slots."""

    def test_layout(self, storage_proof_nodes):
        """Each node starts its own slot, followed by zeros."""
        nodes = storage_proof_nodes(3)
        proof = preprocess_proof(
            nodes,
            slot_key(3),
            b"\x2a",
            8,
            MAX_TRIE_NODE_LENGTH,
            MAX_STORAGE_VALUE_LENGTH,
        )

        assert isinstance(proof, StorageProof)
        assert proof.depth == len(nodes)
        assert proof.max_depth == 8
        assert len(proof.proof) == 8 * MAX_TRIE_NODE_LENGTH
        assert len(proof.value) == MAX_STORAGE_VALUE_LENGTH
        assert proof.value[-1] == 0x2A
        for i, node in enumerate(nodes):
            slot = proof.node_slot(i)
            assert slot[: len(node)] == node
            assert not any(slot[len(node) :])
        assert check_padding(proof)

    def test_depth_exceeding_maximum_raises(self, storage_proof_nodes):
        nodes = storage_proof_nodes(3)
        with pytest.raises(
            ProofLayoutError,
            match=r"exceeds the maximum depth specified \(1\)",
        ):
            preprocess_proof(
                nodes, slot_key(3), b"\x01", 1, MAX_TRIE_NODE_LENGTH, 32
            )

    def test_node_exceeding_maximum_raises(self, storage_proof_nodes):
        nodes = storage_proof_nodes(3)
        with pytest.raises(
            ProofLayoutError, match="cannot exceed the given maximum"
        ):
            preprocess_proof(nodes, slot_key(3), b"\x01", 8, 16, 32)

    def test_value_exceeding_maximum_raises(self, storage_proof_nodes):
        with pytest.raises(ProofLayoutError):
            preprocess_proof(
                storage_proof_nodes(3),
                slot_key(3),
                b"\x01" * 33,
                8,
                MAX_TRIE_NODE_LENGTH,
                33,
            )

    def test_state_key_gives_state_proof(self, make_state_proof):
        assert isinstance(make_state_proof(0), StateProof)

    def test_empty_proof(self):
        """A proof without nodes is all padding."""
        proof = preprocess_proof([], slot_key(1), b"", 2, 4, 32)
        assert proof.depth == 0
        assert proof.proof == bytes(8)


class TestProofClassForKey:
    @pytest.mark.parametrize(
        "length, expected",
        [(32, StorageProof), (20, StateProof), (16, TrieProof)],
    )
    def test_by_key_length(self, length, expected):
        assert proof_class_for_key(bytes(length)) is expected


class TestCheckPadding:
    def test_nonzero_padding_is_detected(self, make_storage_proof):
        proof = make_storage_proof(6)
        dirty = replace(proof, proof=proof.proof[:-1] + b"\x01")
        assert check_padding(proof)
        assert not check_padding(dirty)


class TestTrieProofLayout:
    """Dimension checks done when a proof is built."""

    def test_unknown_key_length_raises(self):
        with pytest.raises(ProofLayoutError, match="Key of 16 bytes"):
            TrieProof(
                key=bytes(16),
                value=b"",
                proof=bytes(4),
                depth=0,
                max_node_len=4,
            )

    def test_storage_value_too_long_raises(self):
        with pytest.raises(ProofLayoutError, match="exceeds 32 bytes"):
            StorageProof(
                key=bytes(32),
                value=bytes(33),
                proof=bytes(4),
                depth=0,
                max_node_len=4,
            )

    def test_proof_not_a_multiple_of_node_length_raises(self):
        with pytest.raises(ProofLayoutError, match="not a multiple"):
            StorageProof(
                key=bytes(32),
                value=b"",
                proof=bytes(5),
                depth=0,
                max_node_len=4,
            )

    def test_depth_past_slots_raises(self):
        with pytest.raises(ProofLayoutError, match="Depth 3"):
            StorageProof(
                key=bytes(32),
                value=b"",
                proof=bytes(8),
                depth=3,
                max_node_len=4,
            )

    def test_bytes_like_fields_are_converted(self):
        proof = StateProof(
            key=bytearray(20),
            value=bytearray(b"\x01"),
            proof=bytearray(4),
            depth=1,
            max_node_len=4,
        )
        assert type(proof.key) is bytes
        assert proof.max_depth == 1

    def test_node_slot_out_of_range(self, make_storage_proof):
        proof = make_storage_proof(0, max_depth=5)
        assert len(proof.node_slot(4)) == MAX_TRIE_NODE_LENGTH
        with pytest.raises(IndexError):
            proof.node_slot(5)
