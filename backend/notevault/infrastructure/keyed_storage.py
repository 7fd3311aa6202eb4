"""Keyed Storage Adapters — address -> fixed-capacity record bytes.

Invariants:
    - allocate() charges len(data) to the payer and fails if the address is taken
    - put() only overwrites an existing slot; it never allocates
    - delete() frees the slot and returns the capacity refunded
    - reserved_by(payer) == sum of capacity of that payer's live slots
    - A write that loses a race raises ConcurrencyError; the caller may
      rerun the whole operation

Design Decisions:
    - Two adapters, one Protocol: InMemoryKeyedStorage for tests/dev,
      SqlKeyedStorage for durability
    - SQL per-address serialization comes from the primary key constraint,
      not from explicit locks
    - Each write commits immediately: one store operation = one transaction
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.core.domain_types import Identity, NoteAddress
from notevault.core.errors import ConcurrencyError
from notevault.core.identity import identity_to_hex
from notevault.models.note_account import NoteAccount

logger = logging.getLogger(__name__)


class InMemoryKeyedStorage:
    """Process-local storage. Each method body is free of awaits, so
    operations are atomic with respect to other coroutines."""

    def __init__(self):
        self._slots: dict[NoteAddress, bytes] = {}
        self._payers: dict[NoteAddress, Identity] = {}

    async def get(self, address: NoteAddress) -> bytes | None:
        return self._slots.get(address)

    async def allocate(
        self, address: NoteAddress, data: bytes, payer: Identity,
    ) -> None:
        if address in self._slots:
            raise ConcurrencyError(f"Address '{address}' was allocated concurrently")
        self._slots[address] = bytes(data)
        self._payers[address] = payer

    async def put(self, address: NoteAddress, data: bytes) -> None:
        if address not in self._slots:
            raise ConcurrencyError(f"Address '{address}' was freed concurrently")
        if len(data) != len(self._slots[address]):
            raise ValueError("put() must not change the slot size")
        self._slots[address] = bytes(data)

    async def delete(self, address: NoteAddress, refund_to: Identity) -> int:
        data = self._slots.pop(address, None)
        if data is None:
            raise ConcurrencyError(f"Address '{address}' was freed concurrently")
        self._payers.pop(address, None)
        return len(data)

    async def reserved_by(self, payer: Identity) -> int:
        return sum(
            len(self._slots[address])
            for address, owner in self._payers.items()
            if owner == payer
        )


class SqlKeyedStorage:
    """SQLAlchemy-backed storage over the note_accounts table."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def get(self, address: NoteAddress) -> bytes | None:
        result = await self._db.execute(
            select(NoteAccount.data).where(NoteAccount.address == address),
        )
        return result.scalar_one_or_none()

    async def allocate(
        self, address: NoteAddress, data: bytes, payer: Identity,
    ) -> None:
        self._db.add(NoteAccount(
            address=address,
            payer=identity_to_hex(payer),
            capacity=len(data),
            data=data,
        ))
        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            logger.warning(
                "Concurrent allocation lost the race",
                extra={"address": address},
            )
            raise ConcurrencyError(f"Address '{address}' was allocated concurrently")

    async def put(self, address: NoteAddress, data: bytes) -> None:
        result = await self._db.execute(
            update(NoteAccount)
            .where(NoteAccount.address == address)
            .where(NoteAccount.capacity == len(data))
            .values(data=data),
        )
        if result.rowcount != 1:
            await self._db.rollback()
            raise ConcurrencyError(f"Address '{address}' changed concurrently")
        await self._db.commit()

    async def delete(self, address: NoteAddress, refund_to: Identity) -> int:
        result = await self._db.execute(
            select(NoteAccount).where(NoteAccount.address == address),
        )
        account = result.scalar_one_or_none()
        if account is None:
            raise ConcurrencyError(f"Address '{address}' was freed concurrently")
        refunded = account.capacity
        await self._db.delete(account)
        await self._db.commit()
        logger.debug(
            f"Refunded {refunded} bytes",
            extra={"address": address, "owner": identity_to_hex(refund_to)},
        )
        return refunded

    async def reserved_by(self, payer: Identity) -> int:
        result = await self._db.execute(
            select(func.coalesce(func.sum(NoteAccount.capacity), 0))
            .where(NoteAccount.payer == identity_to_hex(payer)),
        )
        return int(result.scalar_one())
