"""Notes — create, read, update, delete a note by its derived address.

Invariants:
    - The owner on create is ALWAYS the verified bearer identity; clients
      never name an owner they have not proven
    - Address path params must be 64 lowercase hex chars (else 400)
    - Every failure is a NoteVaultError rendered by the global handlers

Design Decisions:
    - PUT for content replacement: the whole mutable state of a note is
      its content, so the update is a full overwrite
    - DELETE returns the refunded capacity so clients can reconcile storage
"""

import logging

from fastapi import APIRouter, Depends, Path, status

from notevault.api.deps import get_authority, get_note_store
from notevault.core.derive_address import ADDRESS_PATTERN
from notevault.core.domain_types import Identity, NoteAddress
from notevault.schemas.note import NoteCreate, NoteDeleted, NoteResponse, NoteUpdate
from notevault.services.note_store import NoteStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/notes", tags=["notes"])

_ADDRESS = Path(pattern=ADDRESS_PATTERN)


@router.post(
    "", response_model=NoteResponse, status_code=status.HTTP_201_CREATED,
)
async def create_note(
    body: NoteCreate,
    authority: Identity = Depends(get_authority),
    store: NoteStore = Depends(get_note_store),
):
    """Create a note owned by the caller."""
    address = await store.create(
        owner=authority, title=body.title, content=body.content,
        authority=authority,
    )
    record = await store.get(address)
    return NoteResponse.from_record(address, record)


@router.get("/{address}", response_model=NoteResponse)
async def get_note(
    address: str = _ADDRESS, store: NoteStore = Depends(get_note_store),
):
    """Read a note. Notes are public; only mutation is owner-gated."""
    record = await store.get(NoteAddress(address))
    return NoteResponse.from_record(NoteAddress(address), record)


@router.put("/{address}", response_model=NoteResponse)
async def update_note(
    body: NoteUpdate,
    address: str = _ADDRESS,
    authority: Identity = Depends(get_authority),
    store: NoteStore = Depends(get_note_store),
):
    """Replace a note's content. Owner only."""
    record = await store.update(
        NoteAddress(address), body.content, authority=authority,
    )
    return NoteResponse.from_record(NoteAddress(address), record)


@router.delete("/{address}", response_model=NoteDeleted)
async def delete_note(
    address: str = _ADDRESS,
    authority: Identity = Depends(get_authority),
    store: NoteStore = Depends(get_note_store),
):
    """Delete a note and refund its reserved capacity. Owner only."""
    refunded = await store.delete(NoteAddress(address), authority=authority)
    return NoteDeleted(address=address, refunded_bytes=refunded)
