"""Note Validation Policy — size and emptiness rules for title and content.

Invariants:
    - validate_title / validate_content are PURE: return the violation, never raise
    - "Empty" = empty after stripping leading/trailing whitespace
    - Text that cannot be encoded as UTF-8 (lone surrogates) is *Invalid
    - Length is measured in UTF-8 bytes of the UNTRIMMED string
    - Order: empty, then encodable, then length. Whitespace-only input is
      always "empty"
    - TITLE_MAX and CONTENT_MAX are the single source of truth for both
      validation and reserved storage capacity (core/note_codec.py)

Design Decisions:
    - Byte length over code points: capacity is reserved in bytes, so a title
      that validates always fits its slot
    - Title checked on create only (immutable afterwards); content on every write
"""

from notevault.core.errors import (
    ContentEmptyError, ContentInvalidError, ContentTooLongError,
    NoteValidationError, TitleEmptyError, TitleInvalidError, TitleTooLongError,
)

TITLE_MAX: int = 100
CONTENT_MAX: int = 1000


def encoded_length(value: str) -> int | None:
    """UTF-8 byte length of value, or None when it has no UTF-8 encoding."""
    try:
        return len(value.encode("utf-8"))
    except UnicodeEncodeError:
        return None


def validate_title(title: str) -> NoteValidationError | None:
    """Return the first title violation, or None if the title is valid."""
    if not title.strip():
        return TitleEmptyError()
    length = encoded_length(title)
    if length is None:
        return TitleInvalidError()
    if length > TITLE_MAX:
        return TitleTooLongError(TITLE_MAX)
    return None


def validate_content(content: str) -> NoteValidationError | None:
    """Return the first content violation, or None if the content is valid."""
    if not content.strip():
        return ContentEmptyError()
    length = encoded_length(content)
    if length is None:
        return ContentInvalidError()
    if length > CONTENT_MAX:
        return ContentTooLongError(CONTENT_MAX)
    return None


def first_violation(title: str, content: str) -> NoteValidationError | None:
    """Create-time check: title first, then content. Fail fast on the first."""
    return validate_title(title) or validate_content(content)
