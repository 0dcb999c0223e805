"""Reference builders for tries, nodes and keys used across the tests."""

from typing import List

import rlp
from eth_utils import keccak

BLANK_ROOT = keccak(rlp.encode(b""))
EMPTY_CODE_HASH = keccak(b"")

NUM_STORAGE_SLOTS = 300
NUM_ACCOUNTS = 200
DEFAULT_MAX_DEPTH = 8


def slot_key(slot: int) -> bytes:
    return slot.to_bytes(32, byteorder="big")


def slot_value(slot: int) -> int:
    # Values between 1 and 31 bytes wide
    return ((slot + 1) % 255 + 1) << (8 * (slot % 31))


def account_address(index: int) -> bytes:
    return keccak(b"account-%d" % index)[:20]


def account_state(index: int) -> bytes:
    storage_root = BLANK_ROOT if index % 2 else keccak(b"storage-%d" % index)
    return rlp.encode(
        [index, index * 10**18 + 7, storage_root, EMPTY_CODE_HASH]
    )


def hex_prefix_encode(nibbles: List[int], is_leaf: bool) -> bytes:
    """Reference hex-prefix encoder."""
    flag = 2 if is_leaf else 0
    if len(nibbles) % 2:
        prefixed = [flag + 1] + list(nibbles)
    else:
        prefixed = [flag, 0] + list(nibbles)
    return bytes(
        prefixed[i] * 16 + prefixed[i + 1] for i in range(0, len(prefixed), 2)
    )


def hashed_key_nibbles(key: bytes) -> List[int]:
    """Nibbles of keccak(key), the path a key takes through the trie."""
    nibbles = []
    for byte in keccak(key):
        nibbles.extend((byte >> 4, byte & 0x0F))
    return nibbles


def leaf_node(path: List[int], value: bytes) -> bytes:
    return rlp.encode([hex_prefix_encode(path, is_leaf=True), value])


def extension_node(path: List[int], child: bytes) -> bytes:
    return rlp.encode([hex_prefix_encode(path, is_leaf=False), keccak(child)])


def branch_node(children: dict) -> bytes:
    """Branch node with `children` mapping nibble -> child node."""
    items = [b""] * 17
    for nibble, child in children.items():
        items[nibble] = keccak(child)
    return rlp.encode(items)


def flip_byte(data: bytes, index: int) -> bytes:
    return data[:index] + bytes([data[index] ^ 0xFF]) + data[index + 1 :]
