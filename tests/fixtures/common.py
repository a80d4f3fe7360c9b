"""
Common test fixtures shared by all modules.

Provides factory functions for:
- Deterministic test addresses (lowercase and EIP-55 checksummed)
- Well-known development accounts
"""

from eth_utils import to_checksum_address

from core.crypto.hashing import keccak256


# Hardhat / Anvil default accounts (EIP-55 checksummed)
HARDHAT_ACCOUNTS = [
    "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
    "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
    "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC",
    "0x90F79bf6EB2c4f870365E785982E1f101E93b906",
]


def make_address(seed: int | str) -> str:
    """
    Create a deterministic lowercase address from a seed.

    The address is the last 20 bytes of keccak256("proofx-test-<seed>").
    """
    digest = keccak256(f"proofx-test-{seed}".encode("utf-8"))
    return "0x" + digest[-20:].hex()


def make_addresses(count: int, start: int = 0) -> list[str]:
    """Create ``count`` distinct lowercase addresses."""
    return [make_address(i) for i in range(start, start + count)]


def checksummed(address: str) -> str:
    """EIP-55 checksummed form of an address."""
    return to_checksum_address(address)


def break_checksum(address: str) -> str:
    """
    Flip the case of the first letter in a checksummed address.

    The result is mixed-case but no longer a valid EIP-55 checksum.
    """
    chars = list(address)
    for i in range(2, len(chars)):
        if chars[i].isalpha():
            chars[i] = chars[i].swapcase()
            return "".join(chars)
    raise ValueError(f"Address {address} has no letters to flip")
