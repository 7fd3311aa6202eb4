"""Note Codec — fixed-capacity byte layout for a stored note.

Layout (little-endian, no alignment):

    discriminator   8 bytes   sha256(b"account:Note")[:8]
    owner          32 bytes
    title_len       u32
    title          TITLE_MAX bytes, zero-padded
    content_len     u32
    content        CONTENT_MAX bytes, zero-padded
    created_at      i64
    last_updated    i64

Invariants:
    - encode_note ALWAYS returns exactly NOTE_SPACE bytes, whatever the
      actual title/content lengths: capacity is reserved up front, so a
      content update never grows the record or moves it
    - decode_note(encode_note(r)) == r for every valid record
    - decode_note rejects wrong size, foreign discriminator, or a length
      prefix beyond capacity (RecordCorruptError)
    - encode_note raises RecordCorruptError for a record that does not fit
      its slot (oversized text, wrong-size owner, lone surrogates)

Design Decisions:
    - struct over a serialization library: the layout is fixed and tiny
    - Discriminator guards against reading some other record type stored
      under a note address
"""

import hashlib
import struct

from notevault.core.domain_types import IDENTITY_SIZE, Identity, UnixTimestamp
from notevault.core.enforce_note_policy import CONTENT_MAX, TITLE_MAX
from notevault.core.errors import RecordCorruptError
from notevault.core.note_record import NoteRecord

NOTE_DISCRIMINATOR: bytes = hashlib.sha256(b"account:Note").digest()[:8]

_LAYOUT = struct.Struct(
    f"<8s{IDENTITY_SIZE}sI{TITLE_MAX}sI{CONTENT_MAX}sqq",
)

NOTE_SPACE: int = _LAYOUT.size


def encode_note(record: NoteRecord) -> bytes:
    """Serialize a validated record into its NOTE_SPACE-byte slot.

    Raises RecordCorruptError for a record that cannot fit its slot.
    """
    if len(record.owner) != IDENTITY_SIZE:
        raise RecordCorruptError(
            f"owner must be {IDENTITY_SIZE} bytes, got {len(record.owner)}",
        )
    try:
        title = record.title.encode("utf-8")
        content = record.content.encode("utf-8")
    except UnicodeEncodeError:
        raise RecordCorruptError("text has no UTF-8 encoding")
    if len(title) > TITLE_MAX or len(content) > CONTENT_MAX:
        raise RecordCorruptError("record exceeds reserved capacity")
    return _LAYOUT.pack(
        NOTE_DISCRIMINATOR,
        bytes(record.owner),
        len(title), title,
        len(content), content,
        record.created_at, record.last_updated,
    )


def decode_note(data: bytes) -> NoteRecord:
    """Deserialize a stored slot. Raises RecordCorruptError."""
    if len(data) != NOTE_SPACE:
        raise RecordCorruptError(
            f"expected {NOTE_SPACE} bytes, got {len(data)}",
        )
    (
        discriminator, owner,
        title_len, title, content_len, content,
        created_at, last_updated,
    ) = _LAYOUT.unpack(data)
    if discriminator != NOTE_DISCRIMINATOR:
        raise RecordCorruptError("unknown account discriminator")
    if title_len > TITLE_MAX or content_len > CONTENT_MAX:
        raise RecordCorruptError("length prefix exceeds capacity")
    try:
        return NoteRecord(
            owner=Identity(owner),
            title=title[:title_len].decode("utf-8"),
            content=content[:content_len].decode("utf-8"),
            created_at=UnixTimestamp(created_at),
            last_updated=UnixTimestamp(last_updated),
        )
    except UnicodeDecodeError:
        raise RecordCorruptError("text fields are not valid UTF-8")
