"""
Schemas
File: versioning.py

Purpose: Version tag carried by every exported proof document, so a
verifier can refuse a document laid out differently from what it expects.
Imports nothing from sibling schema files.
"""

SCHEMA_VERSION: str = "v1"

# Versions this build can read
SUPPORTED_SCHEMA_VERSIONS: frozenset[str] = frozenset({SCHEMA_VERSION})


class UnsupportedSchemaVersionError(ValueError):
    """A proof document declares a version this build cannot read."""

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(
            f"Proof document version '{version}' is not readable; "
            f"expected one of {sorted(SUPPORTED_SCHEMA_VERSIONS)}"
        )


def assert_supported_schema_version(version: str) -> str:
    """Return ``version`` unchanged, or raise UnsupportedSchemaVersionError."""
    if version not in SUPPORTED_SCHEMA_VERSIONS:
        raise UnsupportedSchemaVersionError(version)
    return version
