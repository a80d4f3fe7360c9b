"""
Address Handling
Validation and normalization of EVM account addresses.

An address is accepted when it is "0x" followed by 40 hex characters.
All-lowercase and all-uppercase forms are taken as-is; mixed case must
carry a valid EIP-55 checksum. Accepted addresses are normalized to
lowercase so case variants collapse to the same Merkle leaf.
"""
from __future__ import annotations

from eth_utils import (
    is_checksum_address,
    is_checksum_formatted_address,
    is_hex_address,
)

from core.schemas.errors import InvalidInputException


ADDRESS_HEX_LENGTH = 40
ZERO_ADDRESS = "0x" + "0" * ADDRESS_HEX_LENGTH


def is_valid_address(address: object) -> bool:
    """Return True if ``address`` is a well-formed, 0x-prefixed EVM address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x") or len(address) != ADDRESS_HEX_LENGTH + 2:
        return False
    if not is_hex_address(address):
        return False
    # Mixed case is a checksum claim and must hold
    if is_checksum_formatted_address(address):
        return is_checksum_address(address)
    return True


def normalize_address(address: object) -> str:
    """
    Validate an address and return its lowercase form.

    Raises:
        InvalidInputException: If the address is malformed or has a bad
            checksum
    """
    if not is_valid_address(address):
        reason = "malformed address"
        if isinstance(address, str) and is_checksum_formatted_address(address):
            reason = "invalid EIP-55 checksum"
        raise InvalidInputException(
            f"Invalid address {address!r}: {reason}",
            field="address",
        )
    return address.lower()


def address_bytes(address: object) -> bytes:
    """Return the 20 raw bytes of a validated address."""
    return bytes.fromhex(normalize_address(address)[2:])


__all__ = [
    "ADDRESS_HEX_LENGTH",
    "ZERO_ADDRESS",
    "is_valid_address",
    "normalize_address",
    "address_bytes",
]
