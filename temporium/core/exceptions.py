"""Temporium custom exceptions."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from temporium.core.binary.verifier import VerificationResult


class ErrorKind(Enum):
    """Categories reported to callers of the store."""

    CONNECTIVITY = "connectivity"
    CONSTRAINT = "constraint"
    VERIFICATION = "verification"
    DECODE = "decode"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    FILE_ACCESS = "file_access"


class TemporiumError(Exception):
    """Base exception for Temporium errors."""

    kind: ErrorKind = ErrorKind.CONNECTIVITY


class ConnectivityError(TemporiumError):
    """The database could not be opened or failed mid-operation."""

    kind = ErrorKind.CONNECTIVITY


class ConstraintError(TemporiumError):
    """A uniqueness or value constraint was violated."""

    kind = ErrorKind.CONSTRAINT


class NotFoundError(TemporiumError):
    """Record or owner not found (or owned by someone else)."""

    kind = ErrorKind.NOT_FOUND


class AuthError(TemporiumError):
    """Bad credentials or a forbidden account operation."""

    kind = ErrorKind.AUTH


class FileAccessError(TemporiumError):
    """An export file could not be written."""

    kind = ErrorKind.FILE_ACCESS


class DecodeError(TemporiumError):
    """Binary payload is malformed."""

    kind = ErrorKind.DECODE


class TruncatedInputError(DecodeError):
    """Binary payload is shorter than its declared record count."""


class VerificationError(TemporiumError):
    """A binary file failed integrity verification."""

    kind = ErrorKind.VERIFICATION

    def __init__(self, result: VerificationResult, message: str) -> None:
        super().__init__(message)
        self.result = result
