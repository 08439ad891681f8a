"""Room id normalization and validation helpers."""

from __future__ import annotations

import unicodedata

import regex

MIN_ROOM_ID_GRAPHEMES = 1
MAX_ROOM_ID_GRAPHEMES = 32
_GRAPHEME_PATTERN = regex.compile(r"\X")
_FORBIDDEN_PATTERN = regex.compile(r"[/\p{Cc}]")


class RoomIdValidationError(ValueError):
    """Raised when a room id violates naming rules."""


def normalize_room_id(raw_room_id: str) -> str:
    """Trim and normalize room id to NFC form."""
    return unicodedata.normalize("NFC", raw_room_id.strip())


def count_graphemes(value: str) -> int:
    """Count user-visible characters using grapheme clusters."""
    return len(_GRAPHEME_PATTERN.findall(value))


def validate_room_id(room_id: str) -> None:
    """Validate grapheme length in [1, 32] and reject separators/control chars."""
    grapheme_count = count_graphemes(room_id)
    if grapheme_count < MIN_ROOM_ID_GRAPHEMES or grapheme_count > MAX_ROOM_ID_GRAPHEMES:
        raise RoomIdValidationError(
            f"room id length must be {MIN_ROOM_ID_GRAPHEMES}-{MAX_ROOM_ID_GRAPHEMES} graphemes"
        )
    if _FORBIDDEN_PATTERN.search(room_id):
        raise RoomIdValidationError("room id must not contain '/' or control characters")


def normalize_and_validate_room_id(raw_room_id: str) -> str:
    """Apply trim + NFC and validate naming constraints."""
    normalized = normalize_room_id(raw_room_id)
    validate_room_id(normalized)
    return normalized
