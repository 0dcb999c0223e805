"""State (account) proof fetcher"""

import rlp
from hexbytes import HexBytes
from web3 import Web3

from trie_proof_toolkit.core.constants import (
    MAX_ACCOUNT_STATE_LENGTH,
    MAX_TRIE_NODE_LENGTH,
)
from trie_proof_toolkit.proofs.preprocess import preprocess_proof
from trie_proof_toolkit.proofs.types import ProofBundle
from trie_proof_toolkit.shared.exceptions import TrieProofFetchException
from trie_proof_toolkit.shared.services.web3_service import Web3Service


def extract_account_state(terminal_node: bytes) -> bytes:
    """
    Extract the RLP-encoded account state from the last account-proof node.

    The terminal node of an inclusion proof is a leaf, `[path, value]`; its
    last element is the account's `[nonce, balance, storageRoot, codeHash]`
    RLP encoding.
    """
    fields = rlp.decode(bytes(terminal_node))
    if not isinstance(fields, list) or not fields:
        raise TrieProofFetchException("Terminal state proof node is empty")
    value = fields[-1]
    if not isinstance(value, bytes):
        raise TrieProofFetchException(
            "Terminal state proof node does not end with a value"
        )
    return value


def fetch_state_proof(
    web3_service: Web3Service,
    block_number: int,
    address: str,
    max_depth: int,
) -> ProofBundle:
    """
    Fetch and preprocess the state proof of an account.

    Args:
        web3_service (Web3Service): Connection to the node.
        block_number (int): Block at which the proof is taken.
        address (str): Account whose state is proven.
        max_depth (int): Maximum admissible depth of the proof.

    Returns:
        ProofBundle: The block's state root and the padded proof, whose value
        is the RLP-encoded account state.
    """
    address = Web3.to_checksum_address(address.lower())

    raw_proof = web3_service.get_proof(address, [], block_number)
    nodes = [bytes(HexBytes(node)) for node in raw_proof["accountProof"]]
    if not nodes:
        raise TrieProofFetchException("State proof empty")

    # The state root lives in the block header
    block = web3_service.get_block(block_number)
    if block is None:
        raise TrieProofFetchException(
            f"Could not fetch block number {block_number}"
        )
    state_root = bytes(HexBytes(block["stateRoot"]))

    proof = preprocess_proof(
        nodes,
        HexBytes(address),
        extract_account_state(nodes[-1]),
        max_depth,
        MAX_TRIE_NODE_LENGTH,
        MAX_ACCOUNT_STATE_LENGTH,
    )

    return ProofBundle(
        root=state_root,
        proof=proof,
        block_number=block_number,
        address=address,
        key=None,
    )
