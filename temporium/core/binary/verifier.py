"""Integrity verification of export files.

Checks run in a fixed order and stop at the first failure:

    1. the file exists and is readable          FILE_NOT_FOUND / READ_ERROR
    2. header magic                             INVALID_MAGIC
    3. header version (current or legacy)       INVALID_VERSION
    4. payload length matches record_count      READ_ERROR
    5. SHA-256 of the payload matches header    HASH_MISMATCH

Only bytes that pass every check are handed to the decoder.
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import structlog

from temporium.core.binary.layout import (
    FILE_MAGIC,
    HEADER_SIZE,
    SUPPORTED_VERSIONS,
    FileHeader,
)
from temporium.core.exceptions import VerificationError
from temporium.core.hashing import digest

log = structlog.stdlib.get_logger()


class VerificationResult(Enum):
    """Outcome of verifying an export file."""

    OK = "ok"
    FILE_NOT_FOUND = "file_not_found"
    INVALID_MAGIC = "invalid_magic"
    INVALID_VERSION = "invalid_version"
    HASH_MISMATCH = "hash_mismatch"
    READ_ERROR = "read_error"


_DESCRIPTIONS = {
    VerificationResult.OK: "File is valid",
    VerificationResult.FILE_NOT_FOUND: "File not found",
    VerificationResult.INVALID_MAGIC: "Invalid file format (not a Temporium export)",
    VerificationResult.INVALID_VERSION: "Unsupported file format version",
    VerificationResult.HASH_MISMATCH: "File is corrupted or was modified (checksum mismatch)",
    VerificationResult.READ_ERROR: "Error reading file",
}


def describe(result: VerificationResult) -> str:
    """Human-readable explanation of a verification outcome."""
    return _DESCRIPTIONS[result]


@dataclass
class VerifiedFile:
    """Header and payload of a file that passed verification."""

    header: FileHeader
    payload: bytes


def _check(data: bytes) -> tuple[VerificationResult, FileHeader | None, bytes]:
    if len(data) < HEADER_SIZE:
        return VerificationResult.READ_ERROR, None, b""

    header = FileHeader.unpack(data)
    if header.magic != FILE_MAGIC:
        return VerificationResult.INVALID_MAGIC, header, b""
    if header.version not in SUPPORTED_VERSIONS:
        return VerificationResult.INVALID_VERSION, header, b""

    payload = data[HEADER_SIZE : HEADER_SIZE + header.payload_size]
    if len(payload) < header.payload_size:
        return VerificationResult.READ_ERROR, header, b""

    expected = digest(payload)
    if not hmac.compare_digest(expected.encode(), header.hash.lower().encode()):
        return VerificationResult.HASH_MISMATCH, header, b""
    return VerificationResult.OK, header, payload


def verify_bytes(data: bytes) -> VerificationResult:
    """Verify the full contents of an export file held in memory."""
    result, _, _ = _check(data)
    return result


def _read(path: Path) -> tuple[VerificationResult, bytes]:
    try:
        return VerificationResult.OK, path.read_bytes()
    except FileNotFoundError:
        return VerificationResult.FILE_NOT_FOUND, b""
    except OSError as e:
        log.warning("Cannot read export file", path=str(path), error=str(e))
        return VerificationResult.READ_ERROR, b""


def verify_file(path: Path) -> VerificationResult:
    """Verify an export file on disk."""
    result, data = _read(path)
    if result is VerificationResult.OK:
        result = verify_bytes(data)
    log.info("Verified export file", path=str(path), result=result.value)
    return result


def load_verified(path: Path) -> VerifiedFile:
    """Read and verify a file in one pass.

    Raises:
        VerificationError: the file did not verify; carries the outcome
    """
    result, data = _read(path)
    header: FileHeader | None = None
    payload = b""
    if result is VerificationResult.OK:
        result, header, payload = _check(data)

    if result is not VerificationResult.OK or header is None:
        log.warning("Export file rejected", path=str(path), result=result.value)
        raise VerificationError(result, f"{path}: {describe(result)}")
    return VerifiedFile(header=header, payload=payload)
