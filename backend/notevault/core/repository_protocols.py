"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - KeyedStorage serializes access per address: at most one committed
      mutation per address at a time

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in KeyedStorage: implementations do IO. Clock and IdentityVerifier
      are sync because their adapters are CPU-only
    - Storage owns capacity accounting (charge on allocate, refund on delete);
      the store only says who pays and who is refunded
"""

from typing import Protocol

from notevault.core.domain_types import Identity, NoteAddress, UnixTimestamp


class KeyedStorage(Protocol):
    """Address-keyed record storage with fixed-capacity allocation."""

    async def get(self, address: NoteAddress) -> bytes | None: ...

    async def allocate(
        self, address: NoteAddress, data: bytes, payer: Identity,
    ) -> None:
        """Create the slot, charging len(data) to payer.

        Raises ConcurrencyError if the address was taken concurrently.
        """
        ...

    async def put(self, address: NoteAddress, data: bytes) -> None:
        """Overwrite an existing slot in place (same size, no reallocation)."""
        ...

    async def delete(self, address: NoteAddress, refund_to: Identity) -> int:
        """Remove the slot and return the capacity refunded to refund_to."""
        ...

    async def reserved_by(self, payer: Identity) -> int: ...


class Clock(Protocol):
    """Trusted source of `now`. Monotonicity is not checked by the core."""
    def now(self) -> UnixTimestamp: ...


class IdentityVerifier(Protocol):
    """Turns a raw credential into a proven identity."""
    def verify(self, credential: str) -> Identity:
        """Raises InvalidCredentialsError if the credential does not verify."""
        ...
