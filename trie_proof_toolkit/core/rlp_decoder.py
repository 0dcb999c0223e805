"""
Bounded RLP decoding.

Decodes RLP headers and single-level RLP lists into fixed-capacity lookup
tables. Nothing here allocates in proportion to the input: a list is
described by a pre-sized RlpList whose capacity the caller chooses per use
site, and the element scan always runs exactly `capacity` iterations, the
ones past the real elements doing nothing.

Any input that does not fit these limits (a length-of-length above
MAX_LEN_IN_BYTES, more elements than the table holds, an element running
past its list) raises RlpDecodingError.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from trie_proof_toolkit.core.constants import (
    MAX_LEN_IN_BYTES,
    MAX_NUM_FIELDS,
    RLP_LONG_LIST,
    RLP_LONG_STRING,
    RLP_SHORT_LIST,
    RLP_SHORT_STRING,
)
from trie_proof_toolkit.shared.exceptions import RlpDecodingError


class RlpKind(Enum):
    """Kind of an RLP item."""

    STRING = "string"
    LIST = "list"


@dataclass(frozen=True)
class RlpHeader:
    """
    Location of one RLP item's payload.

    Attributes:
        offset: Index of the first payload byte in the decoded buffer
        length: Payload length in bytes
        kind: Whether the payload is a byte string or a list
    """

    offset: int
    length: int
    kind: RlpKind

    @property
    def end(self) -> int:
        return self.offset + self.length


class RlpList:
    """
    Fixed-capacity table describing the elements of a decoded RLP list.

    The three columns are allocated once at `capacity` entries; `count`
    says how many of them hold real elements.
    """

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError("RlpList capacity must be non-negative")
        self.capacity = capacity
        self.offsets: List[int] = [0] * capacity
        self.lengths: List[int] = [0] * capacity
        self.kinds: List[RlpKind] = [RlpKind.STRING] * capacity
        self.count = 0

    def append(self, header: RlpHeader) -> None:
        if self.count >= self.capacity:
            raise RlpDecodingError(
                f"RLP list holds more than {self.capacity} elements"
            )
        self.offsets[self.count] = header.offset
        self.lengths[self.count] = header.length
        self.kinds[self.count] = header.kind
        self.count += 1

    def __len__(self) -> int:
        return self.count

    def __getitem__(self, index: int) -> RlpHeader:
        if not 0 <= index < self.count:
            raise IndexError(
                f"RLP list index {index} out of range (count {self.count})"
            )
        return RlpHeader(
            offset=self.offsets[index],
            length=self.lengths[index],
            kind=self.kinds[index],
        )

    def payload(self, buf: bytes, index: int) -> bytes:
        """Return the payload bytes of element `index` within `buf`."""
        header = self[index]
        return bytes(buf[header.offset : header.end])


def _decode_long_form(
    buf: bytes, start: int, len_of_len: int, kind: RlpKind
) -> RlpHeader:
    if len_of_len > MAX_LEN_IN_BYTES:
        raise RlpDecodingError(
            f"RLP length-of-length {len_of_len} exceeds the supported "
            f"maximum of {MAX_LEN_IN_BYTES} bytes"
        )
    length_start = start + 1
    length_end = length_start + len_of_len
    if length_end > len(buf):
        raise RlpDecodingError(
            f"RLP length field at offset {start} runs past the buffer"
        )
    length = int.from_bytes(buf[length_start:length_end], byteorder="big")
    return RlpHeader(offset=length_end, length=length, kind=kind)


def decode_header(buf: bytes, start: int = 0) -> RlpHeader:
    """
    Classify the RLP header beginning at `buf[start]`.

    Args:
        buf: Buffer holding the encoded item
        start: Index of the header's first byte

    Returns:
        RlpHeader: absolute payload offset, payload length and kind

    Raises:
        RlpDecodingError: if the header is truncated, uses a length field
            longer than MAX_LEN_IN_BYTES, or declares a payload that runs
            past the end of `buf`
    """
    if start >= len(buf):
        raise RlpDecodingError(
            f"RLP header at offset {start} is past the end of the buffer"
        )

    prefix = buf[start]
    if prefix < RLP_SHORT_STRING:
        # A single byte below 0x80 is its own payload
        header = RlpHeader(offset=start, length=1, kind=RlpKind.STRING)
    elif prefix <= RLP_LONG_STRING:
        header = RlpHeader(
            offset=start + 1,
            length=prefix - RLP_SHORT_STRING,
            kind=RlpKind.STRING,
        )
    elif prefix < RLP_SHORT_LIST:
        header = _decode_long_form(
            buf, start, prefix - RLP_LONG_STRING, RlpKind.STRING
        )
    elif prefix <= RLP_LONG_LIST:
        header = RlpHeader(
            offset=start + 1,
            length=prefix - RLP_SHORT_LIST,
            kind=RlpKind.LIST,
        )
    else:
        header = _decode_long_form(
            buf, start, prefix - RLP_LONG_LIST, RlpKind.LIST
        )

    if header.end > len(buf):
        raise RlpDecodingError(
            f"RLP payload at offset {start} declares {header.length} bytes, "
            f"past the end of the buffer"
        )
    return header


def decode_string(buf: bytes, start: int = 0) -> Tuple[int, int]:
    """Decode an RLP byte string, returning its (offset, length)."""
    header = decode_header(buf, start)
    if header.kind is not RlpKind.STRING:
        raise RlpDecodingError(f"Expected an RLP string at offset {start}")
    return header.offset, header.length


def _scan_elements(
    buf: bytes, outer: RlpHeader, capacity: int, short_only: bool
) -> RlpList:
    table = RlpList(capacity)
    cursor = outer.offset
    end = outer.end

    for _ in range(capacity):
        if cursor < end:
            if short_only and buf[cursor] > RLP_LONG_STRING:
                raise RlpDecodingError(
                    f"RLP element at offset {cursor} is not a short string"
                )
            element = decode_header(buf, cursor)
            if element.end > end:
                raise RlpDecodingError(
                    f"RLP element at offset {cursor} runs past the end "
                    f"of its list"
                )
            table.append(element)
            cursor = element.end

    if cursor != end:
        raise RlpDecodingError(
            f"RLP list holds more than {capacity} elements"
        )
    return table


def _decode_outer_list(buf: bytes, start: int) -> RlpHeader:
    outer = decode_header(buf, start)
    if outer.kind is not RlpKind.LIST:
        raise RlpDecodingError(f"Expected an RLP list at offset {start}")
    return outer


def decode_list(
    buf: bytes, capacity: int = MAX_NUM_FIELDS, start: int = 0
) -> RlpList:
    """
    Decode the RLP list at `buf[start]` into a table of `capacity` entries.

    Args:
        buf: Buffer holding the encoded list (may be right-padded)
        capacity: Size of the lookup table, an upper bound on the elements
        start: Index of the list header

    Returns:
        RlpList: offsets (absolute within `buf`), lengths and kinds of the
        list's elements, with `count` set to the number of elements

    Raises:
        RlpDecodingError: if `buf[start]` is not a list, an element header
            is malformed, an element overruns the list, or the list has
            more than `capacity` elements
    """
    outer = _decode_outer_list(buf, start)
    return _scan_elements(buf, outer, capacity, short_only=False)


def decode_small_list(
    buf: bytes, capacity: int = MAX_NUM_FIELDS, start: int = 0
) -> RlpList:
    """
    Decode an RLP list whose elements are all short strings.

    Only valid where the caller knows every element is a single byte or a
    string of at most 55 bytes, as for the children of trie branch and
    extension nodes. An element needing a long-form header (or a nested
    list) raises RlpDecodingError.
    """
    outer = _decode_outer_list(buf, start)
    return _scan_elements(buf, outer, capacity, short_only=True)
