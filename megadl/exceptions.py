"""
Defines custom exceptions for the application to allow for more specific error handling.
"""

from enum import Enum


class ErrorKind(Enum):
    """Classification of a transfer failure, used to decide whether to retry."""

    HTTP = "http"  # Transport-level HTTP failure
    NETWORK = "network"  # Connection reset, timeout, DNS, ...
    NOT_FOUND = "not_found"
    DECRYPTION = "decryption"
    PERMISSION = "permission"
    QUOTA = "quota"
    EXISTS = "exists"
    OTHER = "other"

    @property
    def is_transient(self) -> bool:
        return self in TRANSIENT_ERROR_KINDS


TRANSIENT_ERROR_KINDS = frozenset({ErrorKind.HTTP, ErrorKind.NETWORK})


class MegadlError(Exception):
    """Base exception for all application-specific errors."""


class UsageError(MegadlError):
    """Raised when the command line arguments cannot be satisfied."""


class ConfigurationError(MegadlError):
    """Raised for issues related to configuration loading or validation."""


class SessionError(MegadlError):
    """Raised when the remote session cannot be created or a folder cannot be opened."""


class TransferError(MegadlError):
    """
    Raised by a session when fetching an object fails.

    The ``kind`` attribute tells the retry policy whether the failure is worth
    another attempt.
    """

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.OTHER):
        super().__init__(message)
        self.kind = kind


class LocalConflictError(MegadlError):
    """Raised when a local path exists and would have to be overwritten or coerced."""


class StructuralAnomalyError(MegadlError):
    """Raised when the remote folder listing does not have exactly one top-level node."""
