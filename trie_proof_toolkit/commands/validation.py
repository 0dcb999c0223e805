from typing import Optional

from eth_utils import is_address, is_hex, to_checksum_address

from trie_proof_toolkit.core.constants import STORAGE_KEY_LENGTH


def validate_eth_address(address: str, param_name: str = "address") -> str:
    """Validate and return checksum ethereum address"""
    if not address or not isinstance(address, str):
        raise ValueError(
            f"Invalid {param_name}: address must be a non-empty string"
        )
    if not is_address(address):
        raise ValueError(
            f"Invalid {param_name}: {address} is not a valid Ethereum address"
        )
    return to_checksum_address(address)


def validate_storage_key(key: str) -> str:
    """Validate a storage slot and return it as a 0x-prefixed 32-byte word"""
    if not key or not isinstance(key, str) or not is_hex(key):
        raise ValueError(f"Invalid key: {key!r} is not a hex string")
    digits = key[2:] if key.lower().startswith("0x") else key
    if len(digits) > 2 * STORAGE_KEY_LENGTH:
        raise ValueError(f"Invalid key: {key} is longer than 32 bytes")
    return "0x" + digits.lower().zfill(2 * STORAGE_KEY_LENGTH)


def validate_max_depth(max_depth: Optional[int]) -> int:
    """Validate the maximum proof depth"""
    if max_depth is None:
        raise ValueError("--max-depth must be specified!")
    if max_depth <= 0:
        raise ValueError("Maximum depth must be a positive integer")
    return max_depth


def validate_block_number(block_number: Optional[int]) -> Optional[int]:
    """Validate an optional block number"""
    if block_number is not None and block_number < 0:
        raise ValueError("Block number must be a non-negative integer")
    return block_number
