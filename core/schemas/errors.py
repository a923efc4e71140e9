"""
Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for the review integrity engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Every failure here is a deterministic logic, input or configuration
problem, so nothing is retryable. Detected tampering is reported as a
normal result value, never raised.
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
    SIZE_MISMATCH = "SIZE_MISMATCH"
    EMPTY_DATASET = "EMPTY_DATASET"
    DUPLICATE_IDENTIFIER = "DUPLICATE_IDENTIFIER"

    # Lookup Errors
    NOT_FOUND = "NOT_FOUND"

    # State Errors
    INVALID_STATE = "INVALID_STATE"
    EMPTY_TREE = "EMPTY_TREE"

    # Persistence Errors
    STORAGE_ERROR = "STORAGE_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class ReviewProofError(BaseModel):
    """
    Error model for structured error communication.

    Used for passing errors across the API boundary without exceptions.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.NOT_FOUND],
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
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "ReviewProofException":
        """Convert this error model to a raised exception."""
        return ReviewProofException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class ReviewProofException(Exception):
    """
    Base exception for all engine errors.

    Carries structured error information and can be converted
    to a ReviewProofError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "REVIEWPROOF_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> ReviewProofError:
        """Convert this exception to a ReviewProofError model."""
        return ReviewProofError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InputError(ReviewProofException):
    """Raised when caller-supplied input is unusable."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.INVALID_INPUT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            retryable=False,
        )


class SizeMismatchError(InputError):
    """Raised when identifier and encoding sequences differ in length."""

    def __init__(self, identifiers: int, encodings: int) -> None:
        super().__init__(
            message=(
                f"Identifier and encoding counts must match "
                f"(got {identifiers} identifiers, {encodings} encodings)"
            ),
            code=ErrorCodes.SIZE_MISMATCH,
            details={"identifiers": identifiers, "encodings": encodings},
        )


class EmptyDatasetError(InputError):
    """Raised when an operation needs at least one record."""

    def __init__(self, message: str = "Dataset contains no records") -> None:
        super().__init__(message=message, code=ErrorCodes.EMPTY_DATASET)


class DuplicateIdentifierError(InputError):
    """Raised when an incremental insert reuses an existing identifier."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            message=f"Identifier already exists: {identifier}",
            code=ErrorCodes.DUPLICATE_IDENTIFIER,
            details={"identifier": identifier},
        )
        self.identifier = identifier


class NotFoundError(ReviewProofException):
    """Raised when an identifier, product or label is unknown."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if key is not None:
            full_details["key"] = key
        super().__init__(
            message=message,
            code=ErrorCodes.NOT_FOUND,
            details=full_details,
            retryable=False,
        )
        self.key = key


class StateError(ReviewProofException):
    """Raised when an operation is invoked in the wrong lifecycle state."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.INVALID_STATE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            retryable=False,
        )


class EmptyTreeError(StateError):
    """Raised when an operation needs a root but the tree has none."""

    def __init__(self, message: str = "Tree is empty; no root has been built") -> None:
        super().__init__(message=message, code=ErrorCodes.EMPTY_TREE)


class StorageError(ReviewProofException):
    """Raised when reading or writing persisted state fails."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if path is not None:
            full_details["path"] = path
        super().__init__(
            message=message,
            code=ErrorCodes.STORAGE_ERROR,
            details=full_details,
            retryable=False,
        )
