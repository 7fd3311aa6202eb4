"""Addresses — compute where a note lives without any index.

Invariants:
    - Pure derivation: no storage read, works for ABSENT and LIVE notes alike
    - Title is validated first; an invalid title has no address
"""

from fastapi import APIRouter, Depends, Query

from notevault.api.deps import get_note_store
from notevault.core.identity import parse_identity
from notevault.schemas.note import AddressResponse
from notevault.services.note_store import NoteStore

router = APIRouter(prefix="/api/v1/addresses", tags=["addresses"])


@router.get("", response_model=AddressResponse)
async def derive_address(
    owner: str = Query(..., description="Owner identity, 64 hex chars"),
    title: str = Query(...),
    store: NoteStore = Depends(get_note_store),
):
    """Derive the address of (owner, title)."""
    return AddressResponse(address=store.address_of(parse_identity(owner), title))
