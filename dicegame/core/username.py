"""Username normalization and validation helpers."""

from __future__ import annotations

import unicodedata

import regex

MIN_USERNAME_GRAPHEMES = 1
_GRAPHEME_PATTERN = regex.compile(r"\X")


class UsernameValidationError(ValueError):
    """Raised when a username violates naming rules."""


def normalize_username(raw_username: str) -> str:
    """Trim and normalize username to NFC form."""
    return unicodedata.normalize("NFC", raw_username.strip())


def count_graphemes(value: str) -> int:
    """Count user-visible characters using grapheme clusters."""
    return len(_GRAPHEME_PATTERN.findall(value))


def validate_username_length(username: str, *, max_graphemes: int | None = None) -> None:
    """Require a non-empty name; `max_graphemes` adds an upper bound when given."""
    grapheme_count = count_graphemes(username)
    if grapheme_count < MIN_USERNAME_GRAPHEMES:
        raise UsernameValidationError("username is required and must be a non-empty string")
    if max_graphemes is not None and grapheme_count > max_graphemes:
        raise UsernameValidationError(f"username must be at most {max_graphemes} characters")


def normalize_and_validate_username(raw_username: object, *, max_graphemes: int | None = None) -> str:
    """Apply trim + NFC and validate length constraints."""
    if not isinstance(raw_username, str):
        raise UsernameValidationError("username is required and must be a non-empty string")
    normalized = normalize_username(raw_username)
    validate_username_length(normalized, max_graphemes=max_graphemes)
    return normalized
