"""Fixed-width layout of the Temporium export format.

All numbers are little-endian. Files written on x86 by earlier releases,
which used native byte order, read back unchanged.

Header (100 bytes):
    magic u32 | version u16 | record_count u32 | hash 64s | reserved 26s

Record (2151 bytes):
    id i32 | name 256s | disk_space f64 | ram_usage f64 | vram_required f64 |
    genre 64s | completed u8 | url 512s | user_id i32 | rating i32 |
    is_favorite u8 | is_installed u8 | notes 1024s | tags 256s
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from temporium.core.exceptions import TruncatedInputError

FILE_MAGIC = 0x54454D50  # "TEMP"
FILE_VERSION = 3
LEGACY_VERSIONS = frozenset({1})
SUPPORTED_VERSIONS = frozenset({FILE_VERSION}) | LEGACY_VERSIONS

HASH_FIELD_SIZE = 64
RESERVED_SIZE = 26

NAME_SIZE = 256
GENRE_SIZE = 64
URL_SIZE = 512
NOTES_SIZE = 1024
TAGS_SIZE = 256

HEADER_STRUCT = struct.Struct(f"<IHI{HASH_FIELD_SIZE}s{RESERVED_SIZE}s")
RECORD_STRUCT = struct.Struct(
    f"<i{NAME_SIZE}sddd{GENRE_SIZE}sB{URL_SIZE}siiBB{NOTES_SIZE}s{TAGS_SIZE}s"
)

HEADER_SIZE = HEADER_STRUCT.size
RECORD_SIZE = RECORD_STRUCT.size


@dataclass
class FileHeader:
    """Header of an export file."""

    record_count: int
    hash: str
    magic: int = FILE_MAGIC
    version: int = FILE_VERSION

    def pack(self) -> bytes:
        """Serialize the header. The hash is stored as ASCII hex, NUL padded."""
        return HEADER_STRUCT.pack(
            self.magic,
            self.version,
            self.record_count,
            self.hash.encode("ascii")[:HASH_FIELD_SIZE],
            b"",
        )

    @classmethod
    def unpack(cls, data: bytes) -> FileHeader:
        """Parse the first HEADER_SIZE bytes of data."""
        if len(data) < HEADER_SIZE:
            raise TruncatedInputError(
                f"Header needs {HEADER_SIZE} bytes, got {len(data)}"
            )
        magic, version, record_count, raw_hash, _reserved = HEADER_STRUCT.unpack_from(data)
        stored_hash = raw_hash.rstrip(b"\0").decode("ascii", errors="replace")
        return cls(record_count=record_count, hash=stored_hash, magic=magic, version=version)

    @property
    def payload_size(self) -> int:
        return self.record_count * RECORD_SIZE


def pack_string(value: str, width: int) -> bytes:
    """Encode as UTF-8, keeping at most width - 1 bytes so a NUL always ends the field."""
    return value.encode("utf-8")[: width - 1]


def unpack_string(raw: bytes) -> str:
    """Read a NUL-terminated (or full width) UTF-8 field."""
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="ignore")
