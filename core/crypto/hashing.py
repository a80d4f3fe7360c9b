"""
Hashing Utilities
Keccak-256 hashing and hex helpers for Merkle commitments.

This module provides:
- Keccak-256 hashing for raw bytes (EVM-compatible, via eth_utils)
- Sorted-pair parent hashing
- Hex encoding/decoding with 0x prefix

Determinism Notes:
- Always hash raw bytes exactly as given
- Pair hashing orders the two children by byte value, never by position
"""
from __future__ import annotations

from eth_utils import keccak

from core.schemas.errors import InvalidInputException


# Every node in the tree is a Keccak-256 digest
HASH_SIZE: int = 32


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 hash of raw bytes.

    This is the Ethereum flavour of Keccak (pre-NIST padding), identical
    to Solidity's ``keccak256``.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(data)


def hash_sorted_pair(a: bytes, b: bytes) -> bytes:
    """
    Hash two sibling nodes in canonical (byte) order.

    parent = keccak256(min(a, b) + max(a, b))

    Because the smaller value always goes first, the parent does not
    depend on which side of the tree each child sits on.

    Args:
        a: One child hash
        b: The other child hash

    Returns:
        32-byte parent hash
    """
    if a <= b:
        return keccak256(a + b)
    return keccak256(b + a)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        InvalidInputException: If the value is not a string, doesn't start
            with 0x, has odd length, or contains invalid hex characters
    """
    if not isinstance(hex_string, str):
        raise InvalidInputException(
            f"Expected hex string, got {type(hex_string).__name__}"
        )

    if not hex_string.startswith("0x"):
        raise InvalidInputException(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}...",
            field="hex",
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise InvalidInputException(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}",
            field="hex",
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise InvalidInputException(f"Invalid hex characters in string: {e}", field="hex") from e


def coerce_hash(value: bytes | str, field: str = "hash") -> bytes:
    """
    Accept a 32-byte hash as raw bytes or 0x-hex and return the bytes.

    Raises:
        InvalidInputException: On wrong type, bad hex or wrong length
    """
    if isinstance(value, str):
        raw = from_hex(value)
    elif isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    else:
        raise InvalidInputException(
            f"{field} must be bytes or a 0x-prefixed hex string, "
            f"got {type(value).__name__}",
            field=field,
        )

    if len(raw) != HASH_SIZE:
        raise InvalidInputException(
            f"{field} must be {HASH_SIZE} bytes, got {len(raw)}",
            field=field,
        )
    return raw


__all__ = [
    "HASH_SIZE",
    "keccak256",
    "hash_sorted_pair",
    "to_hex",
    "from_hex",
    "coerce_hash",
]
