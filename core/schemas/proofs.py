"""
Schemas
File: proofs.py

Purpose: Portable proof documents.
These are the JSON documents handed to list members (one proof) or kept by
the list operator (every proof in a tree). A verifier needs nothing but a
ProofDocument to check membership against a root.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.crypto.addresses import is_valid_address

from .registry import ADDRESS_PATTERN, ROOT_PATTERN
from .versioning import SCHEMA_VERSION, assert_supported_schema_version


HASH_HEX_PATTERN = ROOT_PATTERN


def _check_siblings(proof: list[str]) -> list[str]:
    for i, sibling in enumerate(proof):
        if not re.match(HASH_HEX_PATTERN, sibling):
            raise ValueError(f"proof[{i}] is not a 0x-prefixed 32-byte hex hash")
    return proof


def _lower_valid_address(value: object) -> object:
    # Invalid values pass through untouched and fail the pattern check
    if isinstance(value, str) and is_valid_address(value):
        return value.lower()
    return value


class ProofDocument(BaseModel):
    """Inclusion proof for a single address."""

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(
        default=SCHEMA_VERSION,
        description="Schema version for this document",
    )
    address: str = Field(
        ...,
        description="Member address, stored lowercase; checksummed input accepted",
        pattern=ADDRESS_PATTERN,
    )
    proof: list[str] = Field(
        default_factory=list,
        description="Sibling hashes, leaf to root (0x-prefixed hex)",
    )
    merkle_root: str = Field(
        ...,
        description="Root the proof was generated against",
        pattern=ROOT_PATTERN,
    )

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: str) -> str:
        return assert_supported_schema_version(v)

    @field_validator("address", mode="before")
    @classmethod
    def normalize_address(cls, v: object) -> object:
        return _lower_valid_address(v)

    @field_validator("proof")
    @classmethod
    def validate_proof_hashes(cls, v: list[str]) -> list[str]:
        return _check_siblings(v)


class AddressProof(BaseModel):
    """One row of a TreeProofsDocument."""

    model_config = ConfigDict(extra="forbid")

    address: str = Field(..., pattern=ADDRESS_PATTERN)
    proof: list[str] = Field(default_factory=list)

    @field_validator("address", mode="before")
    @classmethod
    def normalize_address(cls, v: object) -> object:
        return _lower_valid_address(v)

    @field_validator("proof")
    @classmethod
    def validate_proof_hashes(cls, v: list[str]) -> list[str]:
        return _check_siblings(v)


class TreeProofsDocument(BaseModel):
    """
    Every member's proof for one tree.

    Produced by the list operator after building a tree, so proofs can be
    distributed without rebuilding.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(
        default=SCHEMA_VERSION,
        description="Schema version for this document",
    )
    merkle_root: str = Field(
        ...,
        description="Root of the tree",
        pattern=ROOT_PATTERN,
    )
    list_size: int = Field(
        ...,
        description="Number of distinct addresses in the tree",
        ge=1,
    )
    proofs: list[AddressProof] = Field(
        default_factory=list,
        description="Per-address proofs, ordered by address",
    )

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: str) -> str:
        return assert_supported_schema_version(v)

    def proof_for(self, address: str) -> ProofDocument | None:
        """Return the single-address document for ``address``, if present."""
        wanted = address.lower()
        for row in self.proofs:
            if row.address == wanted:
                return ProofDocument(
                    schema_version=self.schema_version,
                    address=row.address,
                    proof=list(row.proof),
                    merkle_root=self.merkle_root,
                )
        return None


__all__ = [
    "ProofDocument",
    "AddressProof",
    "TreeProofsDocument",
]
