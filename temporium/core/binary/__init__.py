"""
Binary export format.

Components:
    - layout: header/record struct definitions and string field helpers
    - codec: encode_records / decode_records / build_file
    - verifier: verify_file, load_verified and the VerificationResult outcomes

File = 100-byte header (magic, version, record count, hex SHA-256 of the
payload) followed by record_count fixed 2151-byte records, little-endian.
"""

from temporium.core.binary.codec import (
    build_file,
    decode_record,
    decode_records,
    encode_record,
    encode_records,
)
from temporium.core.binary.layout import (
    FILE_MAGIC,
    FILE_VERSION,
    HEADER_SIZE,
    LEGACY_VERSIONS,
    RECORD_SIZE,
    FileHeader,
)
from temporium.core.binary.verifier import (
    VerificationResult,
    VerifiedFile,
    describe,
    load_verified,
    verify_bytes,
    verify_file,
)

__all__ = [
    "FILE_MAGIC",
    "FILE_VERSION",
    "HEADER_SIZE",
    "LEGACY_VERSIONS",
    "RECORD_SIZE",
    "FileHeader",
    "build_file",
    "decode_record",
    "decode_records",
    "encode_record",
    "encode_records",
    "VerificationResult",
    "VerifiedFile",
    "describe",
    "load_verified",
    "verify_bytes",
    "verify_file",
]
