"""
Test fixtures package.

This package provides factory functions for creating test objects:
- common.py: Addresses and checksum helpers
- registry_fixtures.py: Registry, treasury sink and clock

Usage:
    from fixtures import make_addresses, make_registry

    def test_something():
        registry, sink, clock = make_registry()
"""

from .common import (
    HARDHAT_ACCOUNTS,
    make_address,
    make_addresses,
    checksummed,
    break_checksum,
)

from .registry_fixtures import (
    DEFAULT_TEST_FEE,
    DEFAULT_TEST_TIME,
    OWNER,
    TREASURY,
    FixedClock,
    make_registry,
)

__all__ = [
    # Common
    "HARDHAT_ACCOUNTS",
    "make_address",
    "make_addresses",
    "checksummed",
    "break_checksum",
    # Registry
    "DEFAULT_TEST_FEE",
    "DEFAULT_TEST_TIME",
    "OWNER",
    "TREASURY",
    "FixedClock",
    "make_registry",
]
