"""
Schemas
File: errors.py

Purpose: Standard error taxonomy for the Merkle engine and the tree registry.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Input Errors
    INVALID_INPUT = "INVALID_INPUT"
    EMPTY_INPUT = "EMPTY_INPUT"

    # Lookup Errors
    NOT_FOUND = "NOT_FOUND"

    # Registry Errors
    ALREADY_ACTIVE = "ALREADY_ACTIVE"
    INSUFFICIENT_FEE = "INSUFFICIENT_FEE"
    UNAUTHORIZED = "UNAUTHORIZED"
    INACTIVE = "INACTIVE"

    # Storage Errors
    STORE_ERROR = "STORE_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class ProofXError(BaseModel):
    """
    Error model for structured error communication.

    Used when an error has to cross a boundary as data (CLI JSON output,
    logs) rather than as a raised exception.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_INPUT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation may succeed if retried later",
    )

    def to_exception(self) -> "ProofXException":
        """Convert this error model to a raised exception."""
        return ProofXException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class ProofXException(Exception):
    """
    Base exception for all engine and registry errors.

    Carries structured error information and can be converted to/from
    ProofXError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "PROOFX_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> ProofXError:
        """Convert this exception to a ProofXError model."""
        return ProofXError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidInputException(ProofXException):
    """Raised for a malformed address, hash, root or argument."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field:
            full_details["field"] = field
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_INPUT,
            details=full_details,
            retryable=False,
        )


class EmptyInputException(ProofXException):
    """Raised when a tree is requested from zero addresses."""

    def __init__(
        self,
        message: str = "Cannot build a Merkle tree from an empty address list",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
            details=details,
            retryable=False,
        )


class NotFoundException(ProofXException):
    """Raised when an address is not in a tree or a root has no entry."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if key:
            full_details["key"] = key
        super().__init__(
            message=message,
            code=ErrorCodes.NOT_FOUND,
            details=full_details,
            retryable=False,
        )


class AlreadyActiveException(ProofXException):
    """Raised when registering a root that already has an active entry."""

    def __init__(
        self,
        message: str,
        root: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if root:
            full_details["root"] = root
        # Another registration may have landed first; ledger state can change.
        super().__init__(
            message=message,
            code=ErrorCodes.ALREADY_ACTIVE,
            details=full_details,
            retryable=True,
        )


class InsufficientFeeException(ProofXException):
    """Raised when the fee paid is below the required fee."""

    def __init__(
        self,
        message: str,
        required: int | None = None,
        paid: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if required is not None:
            full_details["required"] = required
        if paid is not None:
            full_details["paid"] = paid
        super().__init__(
            message=message,
            code=ErrorCodes.INSUFFICIENT_FEE,
            details=full_details,
            retryable=False,
        )


class UnauthorizedException(ProofXException):
    """Raised when the caller is not allowed to perform the operation."""

    def __init__(
        self,
        message: str,
        caller: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if caller:
            full_details["caller"] = caller
        super().__init__(
            message=message,
            code=ErrorCodes.UNAUTHORIZED,
            details=full_details,
            retryable=True,
        )


class InactiveException(ProofXException):
    """Raised when mutating an entry that has been removed."""

    def __init__(
        self,
        message: str,
        root: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if root:
            full_details["root"] = root
        super().__init__(
            message=message,
            code=ErrorCodes.INACTIVE,
            details=full_details,
            retryable=False,
        )


class RegistryStoreException(ProofXException):
    """Raised when the registry store cannot be read or written."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.STORE_ERROR,
            details=details,
            retryable=False,
        )
