from trie_proof_toolkit.core.nibbles import (
    HexPrefixPath,
    NodeKind,
    bytes_to_nibbles,
    decode_hex_prefix,
)
from trie_proof_toolkit.core.rlp_decoder import (
    RlpHeader,
    RlpKind,
    RlpList,
    decode_header,
    decode_list,
    decode_small_list,
    decode_string,
)
from trie_proof_toolkit.core.types import StateProof, StorageProof, TrieProof
from trie_proof_toolkit.core.verifier import (
    NodeShape,
    verify_state_root,
    verify_storage_root,
    verify_trie_proof,
)

__all__ = [
    "HexPrefixPath",
    "NodeKind",
    "NodeShape",
    "RlpHeader",
    "RlpKind",
    "RlpList",
    "StateProof",
    "StorageProof",
    "TrieProof",
    "bytes_to_nibbles",
    "decode_header",
    "decode_hex_prefix",
    "decode_list",
    "decode_small_list",
    "decode_string",
    "verify_state_root",
    "verify_storage_root",
    "verify_trie_proof",
]
