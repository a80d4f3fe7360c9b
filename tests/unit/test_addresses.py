"""
Unit tests for core/crypto/addresses.py

Tests:
- Lowercase, uppercase and checksummed addresses are accepted
- Bad checksums, missing prefix, wrong length and non-hex are rejected
- Normalization lower-cases
"""
import pytest

from core.crypto.addresses import (
    ZERO_ADDRESS,
    address_bytes,
    is_valid_address,
    normalize_address,
)
from core.merkle import build_tree
from core.schemas.errors import InvalidInputException
from fixtures import HARDHAT_ACCOUNTS, break_checksum, checksummed, make_address


class TestIsValidAddress:

    def test_checksummed(self):
        for account in HARDHAT_ACCOUNTS:
            assert is_valid_address(account)

    def test_lowercase(self):
        assert is_valid_address(HARDHAT_ACCOUNTS[0].lower())

    def test_uppercase_hex(self):
        """All-uppercase hex carries no checksum and is accepted."""
        addr = HARDHAT_ACCOUNTS[0]
        assert is_valid_address("0x" + addr[2:].upper())

    def test_zero_address(self):
        assert is_valid_address(ZERO_ADDRESS)

    def test_bad_checksum(self):
        assert not is_valid_address(break_checksum(HARDHAT_ACCOUNTS[0]))

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "0x",
            "f39fd6e51aad88f6f4ce6ab8827279cfffb92266",  # no prefix
            "0xf39fd6e51aad88f6f4ce6ab8827279cfffb9226",  # 39 hex chars
            "0xf39fd6e51aad88f6f4ce6ab8827279cfffb922660",  # 41 hex chars
            "0xg39fd6e51aad88f6f4ce6ab8827279cfffb92266",  # non-hex
            None,
            1234,
            b"0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266",
        ],
    )
    def test_malformed(self, value):
        assert not is_valid_address(value)


class TestNormalizeAddress:

    def test_lowercases(self):
        addr = checksummed(make_address(1))
        assert normalize_address(addr) == addr.lower()

    def test_idempotent(self):
        addr = make_address(2)
        assert normalize_address(normalize_address(addr)) == addr

    def test_malformed_raises(self):
        with pytest.raises(InvalidInputException) as exc_info:
            normalize_address("0x1234")
        assert exc_info.value.details["field"] == "address"
        assert "malformed" in exc_info.value.message

    def test_bad_checksum_message(self):
        with pytest.raises(InvalidInputException) as exc_info:
            normalize_address(break_checksum(HARDHAT_ACCOUNTS[1]))
        assert "checksum" in exc_info.value.message

    def test_address_bytes(self):
        addr = make_address(3)
        raw = address_bytes(checksummed(addr))
        assert len(raw) == 20
        assert "0x" + raw.hex() == addr


class TestChecksumEnforcement:
    """A mixed-case address is a checksum claim and must verify."""

    @pytest.mark.parametrize("seed", range(8))
    def test_broken_checksum_rejected(self, seed):
        good = checksummed(make_address(seed))
        assert is_valid_address(good)
        assert not is_valid_address(break_checksum(good))

    def test_alternating_case_rejected(self):
        addr = HARDHAT_ACCOUNTS[2]
        hex_part = "".join(
            c.upper() if i % 2 else c.lower() for i, c in enumerate(addr[2:])
        )
        assert not is_valid_address("0x" + hex_part)

    def test_tree_rejects_broken_checksum(self):
        bad = break_checksum(HARDHAT_ACCOUNTS[0])
        with pytest.raises(InvalidInputException):
            build_tree([bad])
        with pytest.raises(InvalidInputException):
            build_tree([HARDHAT_ACCOUNTS[1], bad])
