"""
Nibble handling and hex-prefix decoding for trie paths.

Extension and leaf nodes carry their path segment hex-prefix encoded: the
high nibble of the first byte is a flag, `2 * is_leaf + is_odd`. With an
odd number of path nibbles the low nibble of that byte is the first path
nibble; with an even number it is padding and must be zero.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

from trie_proof_toolkit.core.constants import HASH_NIBBLE_LENGTH
from trie_proof_toolkit.shared.exceptions import HexPrefixError

# Flag byte plus one byte per nibble pair of a full-length key
MAX_PATH_BYTES = HASH_NIBBLE_LENGTH // 2 + 1

_ODD_FLAG = 0x1
_LEAF_FLAG = 0x2


class NodeKind(Enum):
    """Kind of a two-field trie node, as told by its hex-prefix flag."""

    EXTENSION = "extension"
    LEAF = "leaf"


@dataclass(frozen=True)
class HexPrefixPath:
    """
    Decoded path segment of an extension or leaf node.

    `nibbles` always has HASH_NIBBLE_LENGTH entries; only the first `count`
    are part of the path.
    """

    is_odd: bool
    kind: NodeKind
    nibbles: List[int]
    count: int


def bytes_to_nibbles(data: bytes) -> List[int]:
    """Split bytes into nibbles, high nibble first."""
    nibbles = []
    for byte in data:
        nibbles.append(byte >> 4)
        nibbles.append(byte & 0x0F)
    return nibbles


def decode_hex_prefix(buf: bytes, offset: int, length: int) -> HexPrefixPath:
    """
    Decode the hex-prefix encoded path stored at `buf[offset:offset+length]`.

    Args:
        buf: Buffer holding the trie node
        offset: Offset of the path string's payload
        length: Length of the path string's payload

    Returns:
        HexPrefixPath with parity, node kind and path nibbles

    Raises:
        HexPrefixError: for an empty path, an unknown flag, nonzero padding
            bits, or a path longer than a full key
    """
    if length == 0:
        raise HexPrefixError("Trie path is empty")
    if length > MAX_PATH_BYTES:
        raise HexPrefixError(
            f"Trie path of {length} bytes exceeds {MAX_PATH_BYTES} bytes"
        )

    first = buf[offset]
    flag = first >> 4
    if flag > (_LEAF_FLAG | _ODD_FLAG):
        raise HexPrefixError(f"Invalid hex-prefix flag nibble {flag:#x}")

    is_odd = bool(flag & _ODD_FLAG)
    kind = NodeKind.LEAF if flag & _LEAF_FLAG else NodeKind.EXTENSION
    if not is_odd and first & 0x0F:
        raise HexPrefixError(
            f"Nonzero padding nibble in even-length trie path ({first:#04x})"
        )

    count = 2 * (length - 1) + int(is_odd)
    if count > HASH_NIBBLE_LENGTH:
        raise HexPrefixError(
            f"Trie path of {count} nibbles exceeds {HASH_NIBBLE_LENGTH}"
        )

    nibbles = [0] * HASH_NIBBLE_LENGTH
    cursor = 0
    if is_odd:
        nibbles[0] = first & 0x0F
        cursor = 1

    for i in range(1, MAX_PATH_BYTES):
        if i < length:
            byte = buf[offset + i]
            nibbles[cursor] = byte >> 4
            nibbles[cursor + 1] = byte & 0x0F
            cursor += 2

    return HexPrefixPath(
        is_odd=is_odd, kind=kind, nibbles=nibbles, count=count
    )
