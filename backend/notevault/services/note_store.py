"""Note Store — create / read / update / delete notes against KeyedStorage.

Invariants:
    - Per-address lifecycle: ABSENT -> LIVE -> ABSENT, delete is terminal
    - Every check (consent, validation, authorization, address) runs BEFORE
      the single storage write; a rejected operation leaves storage untouched
    - The address is always derived from the validated title, and on
      update/delete re-derived from the stored (owner, title) and compared
      with the address the caller handed in
    - Storage is allocated at NOTE_SPACE bytes on create, never resized
    - No retries, no caching, no background work

Design Decisions:
    - Imperative shell around pure core functions: core returns violations,
      this module raises them (sandwich: load -> decide -> write)
    - Storage and clock injected: the store never touches ambient global state
    - `now` parameters override the clock so callers (and tests) can pin time
"""

import logging

from notevault.core.derive_address import derive_note_address
from notevault.core.domain_types import (
    Identity, NoteAddress, NoteOperation, UnixTimestamp,
)
from notevault.core.enforce_authority import authorize, require_owner_consent
from notevault.core.enforce_note_policy import first_violation, validate_content, validate_title
from notevault.core.errors import (
    AddressMismatchError, NoteAlreadyExistsError, NoteNotFoundError,
    NoteVaultError,
)
from notevault.core.identity import identity_to_hex
from notevault.core.note_codec import decode_note, encode_note
from notevault.core.note_record import NoteRecord
from notevault.core.repository_protocols import Clock, KeyedStorage

logger = logging.getLogger(__name__)


class NoteStore:
    """Owner-scoped note lifecycle over an address-keyed storage."""

    def __init__(self, storage: KeyedStorage, clock: Clock):
        self._storage = storage
        self._clock = clock

    def address_of(self, owner: Identity, title: str) -> NoteAddress:
        """Derive the address a note would live at. Validates the title first."""
        violation = validate_title(title)
        if violation:
            raise violation
        return derive_note_address(owner, title)

    async def create(
        self,
        owner: Identity,
        title: str,
        content: str,
        authority: Identity,
        now: UnixTimestamp | None = None,
    ) -> NoteAddress:
        """Allocate a new note at derive(owner, title). Returns its address."""
        op = NoteOperation.CREATE
        self._check(require_owner_consent(owner, authority), op)
        self._check(first_violation(title, content), op)

        address = derive_note_address(owner, title)
        if await self._storage.get(address) is not None:
            self._check(NoteAlreadyExistsError(address), op, address)

        stamp = self._resolve_now(now)
        record = NoteRecord.new(owner, title, content, stamp)
        await self._storage.allocate(address, encode_note(record), payer=owner)

        logger.info(
            f"Note created: {title!r}",
            extra={
                "address": address, "owner": identity_to_hex(owner),
                "operation": op.value,
            },
        )
        return address

    async def get(self, address: NoteAddress) -> NoteRecord:
        """Read the live note at address. Raises NoteNotFoundError."""
        data = await self._storage.get(address)
        if data is None:
            raise NoteNotFoundError(address)
        return decode_note(data)

    async def update(
        self,
        address: NoteAddress,
        content: str,
        authority: Identity,
        now: UnixTimestamp | None = None,
    ) -> NoteRecord:
        """Replace the content of the note at address. Returns the new record."""
        op = NoteOperation.UPDATE
        record = await self._load_live(address, op)
        self._check(validate_content(content), op, address)
        self._check(authorize(record.owner, authority), op, address)
        self._check_address(record, address, op)

        updated = record.with_content(content, self._resolve_now(now))
        await self._storage.put(address, encode_note(updated))

        logger.info(
            f"Note updated: {record.title!r}",
            extra={"address": address, "operation": op.value},
        )
        return updated

    async def delete(self, address: NoteAddress, authority: Identity) -> int:
        """Remove the note at address. Returns bytes refunded to the owner."""
        op = NoteOperation.DELETE
        record = await self._load_live(address, op)
        self._check(authorize(record.owner, authority), op, address)
        self._check_address(record, address, op)

        refunded = await self._storage.delete(address, refund_to=record.owner)

        logger.info(
            f"Note {record.title!r} deleted, {refunded} bytes refunded",
            extra={
                "address": address, "owner": identity_to_hex(record.owner),
                "operation": op.value,
            },
        )
        return refunded

    # ─── helpers ─────────────────────────────────────────────────

    async def _load_live(
        self, address: NoteAddress, op: NoteOperation,
    ) -> NoteRecord:
        data = await self._storage.get(address)
        if data is None:
            self._check(NoteNotFoundError(address), op, address)
        return decode_note(data)

    def _check_address(
        self, record: NoteRecord, address: NoteAddress, op: NoteOperation,
    ) -> None:
        derived = derive_note_address(record.owner, record.title)
        if derived != address:
            self._check(AddressMismatchError(address, derived), op, address)

    def _resolve_now(self, now: UnixTimestamp | None) -> UnixTimestamp:
        return now if now is not None else self._clock.now()

    @staticmethod
    def _check(
        violation: NoteVaultError | None,
        op: NoteOperation,
        address: NoteAddress | None = None,
    ) -> None:
        """Raise `violation` (if any) with operation context attached."""
        if violation is None:
            return
        violation.context.operation = op.value
        violation.context.address = address
        logger.warning(
            f"{op.value} rejected: {violation.message}",
            extra={
                "address": address, "operation": op.value,
                "error_code": violation.code,
            },
        )
        raise violation
