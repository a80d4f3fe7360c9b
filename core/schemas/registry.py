"""
Schemas
File: registry.py

Purpose: Registry record schemas.
A RegistryEntry is the ledger-side record for one Merkle root.
"""

from pydantic import BaseModel, ConfigDict, Field


# 0x + 64 lowercase hex chars
ROOT_PATTERN = r"^0x[0-9a-f]{64}$"

# 0x + 40 lowercase hex chars
ADDRESS_PATTERN = r"^0x[0-9a-f]{40}$"


class RegistryEntry(BaseModel):
    """
    On-ledger record for a registered Merkle root.

    Immutable snapshot: every state change produces a new instance via
    ``model_copy(update=...)``, so readers never observe a partially
    applied entry.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    root: str = Field(
        ...,
        description="Merkle root (0x-prefixed, lowercase hex)",
        pattern=ROOT_PATTERN,
    )
    description: str = Field(
        default="",
        description="Free-text label, mutable by the creator only",
    )
    creator: str = Field(
        ...,
        description="Address that registered this root (lowercase)",
        pattern=ADDRESS_PATTERN,
    )
    list_size: int = Field(
        ...,
        description="Declared number of addresses in the committed list",
        ge=1,
    )
    timestamp: int = Field(
        ...,
        description="Registration time (unix seconds)",
        ge=0,
    )
    is_active: bool = Field(
        default=True,
        description="False once the entry has been removed (soft delete)",
    )


__all__ = [
    "ROOT_PATTERN",
    "ADDRESS_PATTERN",
    "RegistryEntry",
]
