"""Storage proof fetcher"""

from typing import Any, Union

from hexbytes import HexBytes
from web3 import Web3

from trie_proof_toolkit.core.constants import (
    MAX_STORAGE_VALUE_LENGTH,
    MAX_TRIE_NODE_LENGTH,
    STORAGE_KEY_LENGTH,
)
from trie_proof_toolkit.proofs.preprocess import preprocess_proof
from trie_proof_toolkit.proofs.types import ProofBundle
from trie_proof_toolkit.shared.exceptions import TrieProofFetchException
from trie_proof_toolkit.shared.services.web3_service import Web3Service


def normalize_storage_key(key: Union[int, str, bytes]) -> bytes:
    """
    Turn a storage slot given as int, hex string or bytes into 32 bytes.

    Args:
        key: The storage slot

    Returns:
        bytes: The slot as a 32-byte big-endian word
    """
    if isinstance(key, int):
        slot = key.to_bytes(STORAGE_KEY_LENGTH, byteorder="big")
    else:
        slot = bytes(HexBytes(key))
    if len(slot) > STORAGE_KEY_LENGTH:
        raise ValueError(f"Storage key {key!r} is longer than 32 bytes")
    return bytes(STORAGE_KEY_LENGTH - len(slot)) + slot


def to_int(value: Any) -> int:
    """Read an RPC quantity that may come back as int, hex or HexBytes."""
    if isinstance(value, int):
        return value
    return int.from_bytes(bytes(HexBytes(value)), byteorder="big")


def fetch_storage_proof(
    web3_service: Web3Service,
    block_number: int,
    address: str,
    key: Union[int, str, bytes],
    max_depth: int,
) -> ProofBundle:
    """
    Fetch and preprocess the storage proof of one slot.

    Args:
        web3_service (Web3Service): Connection to the node.
        block_number (int): Block at which the proof is taken.
        address (str): Account whose storage is proven.
        key: The 32-byte storage slot.
        max_depth (int): Maximum admissible depth of the proof.

    Returns:
        ProofBundle: The account's storage root and the padded proof, whose
        value is the slot value as a 32-byte big-endian word.
    """
    address = Web3.to_checksum_address(address.lower())
    slot = normalize_storage_key(key)

    raw_proof = web3_service.get_proof(
        address, ["0x" + slot.hex()], block_number
    )

    storage_proofs = raw_proof["storageProof"]
    if not storage_proofs:
        raise TrieProofFetchException("No storage proof returned")
    storage_proof = storage_proofs[0]

    storage_root = bytes(HexBytes(raw_proof["storageHash"]))
    value = to_int(storage_proof["value"]).to_bytes(
        MAX_STORAGE_VALUE_LENGTH, byteorder="big"
    )
    nodes = [bytes(HexBytes(node)) for node in storage_proof["proof"]]

    proof = preprocess_proof(
        nodes,
        slot,
        value,
        max_depth,
        MAX_TRIE_NODE_LENGTH,
        MAX_STORAGE_VALUE_LENGTH,
    )

    return ProofBundle(
        root=storage_root,
        proof=proof,
        block_number=block_number,
        address=address,
        key="0x" + slot.hex(),
    )
