"""
Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Version constants
from .versioning import (
    SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    UnsupportedSchemaVersionError,
    assert_supported_schema_version,
)

# Error models and exceptions
from .errors import (
    AlreadyActiveException,
    EmptyInputException,
    ErrorCodes,
    InactiveException,
    InsufficientFeeException,
    InvalidInputException,
    NotFoundException,
    ProofXError,
    ProofXException,
    RegistryStoreException,
    UnauthorizedException,
)

# Registry schemas
from .registry import (
    ADDRESS_PATTERN,
    ROOT_PATTERN,
    RegistryEntry,
)

# Proof documents
from .proofs import (
    AddressProof,
    ProofDocument,
    TreeProofsDocument,
)

__all__ = [
    # Versioning
    "SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    "UnsupportedSchemaVersionError",
    "assert_supported_schema_version",
    # Errors
    "AlreadyActiveException",
    "EmptyInputException",
    "ErrorCodes",
    "InactiveException",
    "InsufficientFeeException",
    "InvalidInputException",
    "NotFoundException",
    "ProofXError",
    "ProofXException",
    "RegistryStoreException",
    "UnauthorizedException",
    # Registry
    "ADDRESS_PATTERN",
    "ROOT_PATTERN",
    "RegistryEntry",
    # Proofs
    "AddressProof",
    "ProofDocument",
    "TreeProofsDocument",
]
