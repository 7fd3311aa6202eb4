"""Note Schemas — Pydantic models for the notes API.

Invariants:
    - NoteCreate/NoteUpdate carry raw strings; emptiness and length are
      judged by the core so clients get TITLE_EMPTY, CONTENT_TOO_LONG, ...
    - NoteResponse renders identities and addresses as lowercase hex
"""

from pydantic import BaseModel, Field

from notevault.core.derive_address import ADDRESS_PATTERN
from notevault.core.domain_types import NoteAddress
from notevault.core.identity import identity_to_hex
from notevault.core.note_record import NoteRecord


class NoteCreate(BaseModel):
    """Create a note owned by the authenticated identity."""
    title: str
    content: str


class NoteUpdate(BaseModel):
    """Replace a note's content. Title is immutable (it is part of the address)."""
    content: str


class NoteResponse(BaseModel):
    address: str = Field(pattern=ADDRESS_PATTERN)
    owner: str
    title: str
    content: str
    created_at: int
    last_updated: int

    @classmethod
    def from_record(cls, address: NoteAddress, record: NoteRecord) -> "NoteResponse":
        return cls(
            address=address,
            owner=identity_to_hex(record.owner),
            title=record.title,
            content=record.content,
            created_at=record.created_at,
            last_updated=record.last_updated,
        )


class NoteDeleted(BaseModel):
    status: str = "deleted"
    address: str
    refunded_bytes: int


class AddressResponse(BaseModel):
    address: str
