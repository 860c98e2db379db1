"""Encode and decode game records in the fixed-width export layout."""

from __future__ import annotations

import struct
from collections.abc import Sequence

from temporium.core.binary.layout import (
    GENRE_SIZE,
    NAME_SIZE,
    NOTES_SIZE,
    RECORD_SIZE,
    RECORD_STRUCT,
    TAGS_SIZE,
    URL_SIZE,
    FileHeader,
    pack_string,
    unpack_string,
)
from temporium.core.exceptions import ConstraintError, DecodeError, TruncatedInputError
from temporium.core.hashing import digest
from temporium.core.models import Game


def encode_record(game: Game) -> bytes:
    """Encode one game as a RECORD_SIZE block.

    Strings longer than their field are cut silently.
    """
    try:
        return _pack_record(game)
    except struct.error as e:
        raise ConstraintError(f"Game '{game.name}' cannot be encoded: {e}") from e


def _pack_record(game: Game) -> bytes:
    return RECORD_STRUCT.pack(
        game.id,
        pack_string(game.name, NAME_SIZE),
        game.disk_space,
        game.ram_usage,
        game.vram_required,
        pack_string(game.genre, GENRE_SIZE),
        1 if game.completed else 0,
        pack_string(game.url, URL_SIZE),
        game.user_id,
        game.rating,
        1 if game.is_favorite else 0,
        1 if game.is_installed else 0,
        pack_string(game.notes, NOTES_SIZE),
        pack_string(game.tags, TAGS_SIZE),
    )


def encode_records(games: Sequence[Game]) -> bytes:
    """Concatenate the encoded games in the order given."""
    return b"".join(encode_record(game) for game in games)


def decode_record(block: bytes, offset: int = 0) -> Game:
    """Decode the record starting at offset."""
    (
        game_id,
        name,
        disk_space,
        ram_usage,
        vram_required,
        genre,
        completed,
        url,
        user_id,
        rating,
        is_favorite,
        is_installed,
        notes,
        tags,
    ) = RECORD_STRUCT.unpack_from(block, offset)
    return Game(
        id=game_id,
        name=unpack_string(name),
        disk_space=disk_space,
        ram_usage=ram_usage,
        vram_required=vram_required,
        genre=unpack_string(genre),
        completed=completed != 0,
        url=unpack_string(url),
        user_id=user_id,
        rating=rating,
        is_favorite=is_favorite != 0,
        is_installed=is_installed != 0,
        notes=unpack_string(notes),
        tags=unpack_string(tags),
    )


def decode_records(data: bytes, record_count: int) -> list[Game]:
    """Decode record_count records from the start of data.

    Raises:
        DecodeError: record_count is negative
        TruncatedInputError: data holds fewer than record_count records
    """
    if record_count < 0:
        raise DecodeError(f"Invalid record count {record_count}")
    needed = record_count * RECORD_SIZE
    if len(data) < needed:
        raise TruncatedInputError(
            f"Expected {needed} bytes for {record_count} records, got {len(data)}"
        )
    return [decode_record(data, i * RECORD_SIZE) for i in range(record_count)]


def build_file(games: Sequence[Game]) -> tuple[FileHeader, bytes]:
    """Build the header and full file contents for games."""
    payload = encode_records(games)
    header = FileHeader(record_count=len(games), hash=digest(payload))
    return header, header.pack() + payload
