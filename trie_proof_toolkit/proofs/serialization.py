"""
Serialization of trie proofs.

Two output formats:
- TOML tables of byte arrays, one `0x..` entry per line, as consumed by
  circuit provers (`Prover.toml`)
- JSON objects with hex strings, which can also be loaded back
"""

from typing import Any, Dict

from eth_utils import decode_hex, encode_hex

from trie_proof_toolkit.core.constants import MAX_TRIE_NODE_LENGTH
from trie_proof_toolkit.core.types import TrieProof
from trie_proof_toolkit.proofs.preprocess import proof_class_for_key
from trie_proof_toolkit.proofs.types import ProofBundle
from trie_proof_toolkit.shared.exceptions import ProofLayoutError


def format_byte_array(data: bytes) -> str:
    """Format bytes as a multi-line TOML array of `0x..` entries."""
    if not data:
        return "[]"
    entries = "".join(f"    {byte:#04x},\n" for byte in data)
    return f"[\n{entries}]"


def root_to_toml(name: str, root: bytes) -> str:
    """TOML entry for a trie root."""
    return f"{name} = {format_byte_array(bytes(root))}"


def to_toml_string(proof: TrieProof, proof_name: str) -> str:
    """
    TOML table holding the entries of a TrieProof.

    Args:
        proof: The proof to format
        proof_name: Name of the TOML table

    Returns:
        str: `[proof_name]` followed by key, proof, depth and value entries
    """
    return (
        f"[{proof_name}]\n"
        f"key = {format_byte_array(proof.key)}\n"
        f"proof = {format_byte_array(proof.proof)}\n"
        f"depth = {proof.depth:#04x}\n"
        f"value = {format_byte_array(proof.value)}"
    )


def bundle_to_toml(bundle: ProofBundle, root_name: str, proof_name: str) -> str:
    """Root entry, blank line, then the proof table."""
    return (
        f"{root_to_toml(root_name, bundle['root'])}\n\n"
        f"{to_toml_string(bundle['proof'], proof_name)}\n"
    )


def proof_to_dict(proof: TrieProof) -> Dict[str, Any]:
    """Convert a proof to a JSON-serializable dictionary."""
    return {
        "key": encode_hex(proof.key),
        "value": encode_hex(proof.value),
        "proof": encode_hex(proof.proof),
        "depth": proof.depth,
        "max_node_len": proof.max_node_len,
    }


def proof_from_dict(data: Dict[str, Any]) -> TrieProof:
    """
    Build a proof from the dictionary produced by proof_to_dict.

    Raises:
        ProofLayoutError: if a field is missing or the dimensions are wrong
    """
    try:
        key = decode_hex(data["key"])
        value = decode_hex(data["value"])
        proof = decode_hex(data["proof"])
        depth = int(data["depth"])
    except KeyError as e:
        raise ProofLayoutError(f"Proof is missing the {e} field") from e

    max_node_len = int(data.get("max_node_len", MAX_TRIE_NODE_LENGTH))
    return proof_class_for_key(key)(
        key=key,
        value=value,
        proof=proof,
        depth=depth,
        max_node_len=max_node_len,
    )


def bundle_to_dict(bundle: ProofBundle) -> Dict[str, Any]:
    """Convert a bundle to a JSON-serializable dictionary."""
    return {
        "root": encode_hex(bundle["root"]),
        "block_number": bundle["block_number"],
        "address": bundle["address"],
        "key": bundle["key"],
        "proof": proof_to_dict(bundle["proof"]),
    }


def bundle_from_dict(data: Dict[str, Any]) -> ProofBundle:
    """Build a bundle from the dictionary produced by bundle_to_dict."""
    try:
        root = decode_hex(data["root"])
        proof_data = data["proof"]
    except KeyError as e:
        raise ProofLayoutError(f"Proof file is missing the {e} field") from e

    return ProofBundle(
        root=root,
        proof=proof_from_dict(proof_data),
        block_number=int(data.get("block_number", 0)),
        address=data.get("address", ""),
        key=data.get("key"),
    )
