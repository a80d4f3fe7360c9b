"""
Core cryptographic utilities.

Keccak-256 hashing, hex helpers and EVM address normalization.
"""
from .hashing import (
    HASH_SIZE,
    keccak256,
    hash_sorted_pair,
    to_hex,
    from_hex,
    coerce_hash,
)
from .addresses import (
    ZERO_ADDRESS,
    is_valid_address,
    normalize_address,
    address_bytes,
)

__all__ = [
    "HASH_SIZE",
    "keccak256",
    "hash_sorted_pair",
    "to_hex",
    "from_hex",
    "coerce_hash",
    "ZERO_ADDRESS",
    "is_valid_address",
    "normalize_address",
    "address_bytes",
]
