"""
Pytest configuration and shared fixtures.

Reference tries are built with py-trie's HexaryTrie the way Ethereum builds
them: storage slots and account addresses are keccak-hashed into trie keys,
storage values are stored RLP-encoded and account states as the RLP list
[nonce, balance, storageRoot, codeHash].
"""

from typing import Callable, Dict, List, Optional, Tuple
from unittest.mock import MagicMock

import pytest
import rlp
from eth_utils import keccak
from trie import HexaryTrie

from trie_proof_toolkit.core.constants import (
    MAX_ACCOUNT_STATE_LENGTH,
    MAX_STORAGE_VALUE_LENGTH,
    MAX_TRIE_NODE_LENGTH,
)
from trie_proof_toolkit.core.types import StateProof, StorageProof
from trie_proof_toolkit.proofs.preprocess import preprocess_proof

from tests.helpers import (
    DEFAULT_MAX_DEPTH,
    NUM_ACCOUNTS,
    NUM_STORAGE_SLOTS,
    account_address,
    account_state,
    slot_key,
    slot_value,
)


@pytest.fixture(scope="session")
def storage_trie() -> Tuple[HexaryTrie, Dict[int, int]]:
    """Storage trie holding NUM_STORAGE_SLOTS slots."""
    trie = HexaryTrie(db={})
    slots = {}
    for slot in range(NUM_STORAGE_SLOTS):
        slots[slot] = slot_value(slot)
        trie[keccak(slot_key(slot))] = rlp.encode(slots[slot])
    return trie, slots


@pytest.fixture(scope="session")
def state_trie() -> HexaryTrie:
    """State trie holding NUM_ACCOUNTS accounts."""
    trie = HexaryTrie(db={})
    for index in range(NUM_ACCOUNTS):
        trie[keccak(account_address(index))] = account_state(index)
    return trie


@pytest.fixture(scope="session")
def storage_proof_nodes(storage_trie) -> Callable[[int], List[bytes]]:
    """Raw (RLP-encoded) proof nodes of a storage slot, root first."""
    trie, _ = storage_trie

    def _nodes(slot: int) -> List[bytes]:
        proof = trie.get_proof(keccak(slot_key(slot)))
        return [rlp.encode(node) for node in proof]

    return _nodes


@pytest.fixture(scope="session")
def make_storage_proof(
    storage_trie, storage_proof_nodes
) -> Callable[..., StorageProof]:
    """Build a padded storage proof for a slot of the storage trie."""
    _, slots = storage_trie

    def _make(
        slot: int,
        max_depth: int = DEFAULT_MAX_DEPTH,
        value: Optional[int] = None,
    ) -> StorageProof:
        resolved = slots[slot] if value is None else value
        return preprocess_proof(
            storage_proof_nodes(slot),
            slot_key(slot),
            resolved.to_bytes(32, byteorder="big"),
            max_depth,
            MAX_TRIE_NODE_LENGTH,
            MAX_STORAGE_VALUE_LENGTH,
        )

    return _make


@pytest.fixture(scope="session")
def state_proof_nodes(state_trie) -> Callable[[int], List[bytes]]:
    """Raw (RLP-encoded) proof nodes of an account, root first."""

    def _nodes(index: int) -> List[bytes]:
        proof = state_trie.get_proof(keccak(account_address(index)))
        return [rlp.encode(node) for node in proof]

    return _nodes


@pytest.fixture(scope="session")
def make_state_proof(state_proof_nodes) -> Callable[..., StateProof]:
    """Build a padded state proof for an account of the state trie."""

    def _make(
        index: int,
        max_depth: int = DEFAULT_MAX_DEPTH,
        value: Optional[bytes] = None,
    ) -> StateProof:
        return preprocess_proof(
            state_proof_nodes(index),
            account_address(index),
            account_state(index) if value is None else value,
            max_depth,
            MAX_TRIE_NODE_LENGTH,
            MAX_ACCOUNT_STATE_LENGTH,
        )

    return _make


@pytest.fixture
def mock_web3_service():
    """Mock Web3Service for unit tests."""
    service = MagicMock()
    service.get_latest_block_number.return_value = 14194126
    return service


@pytest.fixture
def sample_contract_address() -> str:
    """Sample contract address for tests."""
    return "0xb47e3cd837ddf8e4c57f05d70ab865de6e193bbb"


@pytest.fixture
def sample_block_number() -> int:
    """Sample block number for tests."""
    return 14194126


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line("markers", "slow: mark test as slow-running")
