"""Note Store tests — lifecycle, authorization, and all-or-nothing writes.

Tests cover:
    - create/get round trip stamps both timestamps with `now`
    - create at an occupied address fails NOTE_ALREADY_EXISTS, record unchanged
    - create requires the owner to be the acting authority
    - update by a non-owner fails UNAUTHORIZED, record byte-for-byte unchanged
    - update/delete after delete fail NOT_FOUND
    - content boundary (CONTENT_MAX ok, +1 rejected, whitespace-only empty)
    - update/delete re-derive the address from the stored (owner, title)
    - capacity charged at NOTE_SPACE on create, refunded on delete
    - end-to-end Groceries scenario
"""

import pytest

from notevault.core.derive_address import derive_note_address
from notevault.core.domain_types import Identity, UnixTimestamp
from notevault.core.enforce_note_policy import CONTENT_MAX
from notevault.core.errors import (
    AddressMismatchError, ContentEmptyError, ContentTooLongError,
    ContentInvalidError, NoteAlreadyExistsError, NoteNotFoundError,
    TitleEmptyError, TitleInvalidError, TitleTooLongError, UnauthorizedError,
)
from notevault.core.note_codec import NOTE_SPACE, encode_note
from notevault.core.note_record import NoteRecord


# ─── create / get ────────────────────────────────────────────────

async def test_create_then_read_round_trip(store, owner_a):
    address = await store.create(owner_a, "T", "C", owner_a, now=UnixTimestamp(7))
    record = await store.get(address)
    assert record.title == "T"
    assert record.content == "C"
    assert record.owner == owner_a
    assert record.created_at == record.last_updated == 7


async def test_create_returns_derived_address(store, owner_a):
    address = await store.create(owner_a, "Groceries", "Milk", owner_a)
    assert address == derive_note_address(owner_a, "Groceries")
    assert address == store.address_of(owner_a, "Groceries")


async def test_create_uses_clock_when_now_omitted(store, clock, owner_a):
    clock.t = 4242
    address = await store.create(owner_a, "T", "C", owner_a)
    assert (await store.get(address)).created_at == 4242


async def test_second_create_same_title_rejected(store, storage, owner_a):
    address = await store.create(owner_a, "T", "C", owner_a, now=UnixTimestamp(1))
    before = await storage.get(address)

    with pytest.raises(NoteAlreadyExistsError) as exc_info:
        await store.create(owner_a, "T", "other", owner_a, now=UnixTimestamp(2))

    assert exc_info.value.context.address == address
    assert exc_info.value.context.operation == "create_note"
    assert await storage.get(address) == before


async def test_same_title_different_owners_coexist(store, owner_a, owner_b):
    a = await store.create(owner_a, "T", "from a", owner_a)
    b = await store.create(owner_b, "T", "from b", owner_b)
    assert a != b
    assert (await store.get(a)).content == "from a"
    assert (await store.get(b)).content == "from b"


async def test_create_requires_owner_consent(store, storage, owner_a, owner_b):
    with pytest.raises(UnauthorizedError):
        await store.create(owner_a, "T", "C", owner_b)
    assert await storage.get(derive_note_address(owner_a, "T")) is None


@pytest.mark.parametrize("title, error", [
    ("", TitleEmptyError),
    ("    ", TitleEmptyError),
    ("t" * 101, TitleTooLongError),
    ("\ud800", TitleInvalidError),
])
async def test_create_rejects_invalid_title(store, storage, owner_a, title, error):
    with pytest.raises(error):
        await store.create(owner_a, title, "C", owner_a)
    assert await storage.reserved_by(owner_a) == 0


async def test_create_rejects_invalid_content_without_side_effects(
    store, storage, owner_a,
):
    with pytest.raises(ContentEmptyError):
        await store.create(owner_a, "T", " \n\t ", owner_a)
    assert await storage.get(derive_note_address(owner_a, "T")) is None


async def test_update_rejects_unencodable_content(store, owner_a):
    address = await store.create(owner_a, "T", "C", owner_a)
    with pytest.raises(ContentInvalidError) as exc_info:
        await store.update(address, "bad \udc00", owner_a)
    assert exc_info.value.context.operation == "update_note"
    assert (await store.get(address)).content == "C"


async def test_get_absent_address_not_found(store, owner_a):
    with pytest.raises(NoteNotFoundError):
        await store.get(derive_note_address(owner_a, "missing"))


# ─── update ──────────────────────────────────────────────────────

async def test_update_overwrites_content_only(store, owner_a):
    address = await store.create(owner_a, "T", "C", owner_a, now=UnixTimestamp(10))
    updated = await store.update(address, "C2", owner_a, now=UnixTimestamp(20))

    assert updated.content == "C2"
    assert updated.last_updated == 20
    assert updated.created_at == 10
    assert updated.title == "T"
    assert await store.get(address) == updated


async def test_update_by_other_identity_unauthorized(
    store, storage, owner_a, owner_b,
):
    address = await store.create(owner_a, "T", "C", owner_a, now=UnixTimestamp(10))
    before = await storage.get(address)

    with pytest.raises(UnauthorizedError):
        await store.update(address, "new", owner_b, now=UnixTimestamp(11))

    assert await storage.get(address) == before
    record = await store.get(address)
    assert record.content == "C"
    assert record.last_updated == 10


async def test_update_content_boundary(store, owner_a):
    address = await store.create(owner_a, "T", "C", owner_a)

    record = await store.update(address, "x" * CONTENT_MAX, owner_a)
    assert len(record.content) == CONTENT_MAX

    with pytest.raises(ContentTooLongError):
        await store.update(address, "x" * (CONTENT_MAX + 1), owner_a)
    with pytest.raises(ContentEmptyError):
        await store.update(address, " " * (CONTENT_MAX + 5), owner_a)

    assert (await store.get(address)).content == "x" * CONTENT_MAX


async def test_update_absent_address_not_found(store, owner_a):
    with pytest.raises(NoteNotFoundError) as exc_info:
        await store.update(derive_note_address(owner_a, "nope"), "C", owner_a)
    assert exc_info.value.context.operation == "update_note"


async def test_update_rejects_record_stored_under_wrong_address(
    store, storage, owner_a,
):
    """A record whose (owner, title) derives elsewhere is never mutated."""
    record = NoteRecord.new(owner_a, "Real title", "C", UnixTimestamp(1))
    wrong = derive_note_address(owner_a, "Other title")
    await storage.allocate(wrong, encode_note(record), payer=owner_a)
    before = await storage.get(wrong)

    with pytest.raises(AddressMismatchError) as exc_info:
        await store.update(wrong, "C2", owner_a)

    assert exc_info.value.derived == derive_note_address(owner_a, "Real title")
    assert await storage.get(wrong) == before


async def test_update_size_never_changes(store, storage, owner_a):
    address = await store.create(owner_a, "T", "C", owner_a)
    await store.update(address, "y" * CONTENT_MAX, owner_a)
    assert len(await storage.get(address)) == NOTE_SPACE


# ─── delete ──────────────────────────────────────────────────────

async def test_delete_then_update_and_delete_not_found(store, owner_a):
    address = await store.create(owner_a, "T", "C", owner_a)
    await store.delete(address, owner_a)

    with pytest.raises(NoteNotFoundError):
        await store.update(address, "C2", owner_a)
    with pytest.raises(NoteNotFoundError):
        await store.delete(address, owner_a)
    with pytest.raises(NoteNotFoundError):
        await store.get(address)


async def test_delete_by_other_identity_unauthorized(
    store, storage, owner_a, owner_b,
):
    address = await store.create(owner_a, "T", "C", owner_a)
    before = await storage.get(address)

    with pytest.raises(UnauthorizedError):
        await store.delete(address, owner_b)

    assert await storage.get(address) == before


async def test_delete_rejects_record_stored_under_wrong_address(
    store, storage, owner_a,
):
    record = NoteRecord.new(owner_a, "Real title", "C", UnixTimestamp(1))
    wrong = derive_note_address(owner_a, "Other title")
    await storage.allocate(wrong, encode_note(record), payer=owner_a)

    with pytest.raises(AddressMismatchError):
        await store.delete(wrong, owner_a)
    assert await storage.get(wrong) is not None


async def test_recreate_after_delete(store, owner_a):
    address = await store.create(owner_a, "T", "first", owner_a, now=UnixTimestamp(1))
    await store.delete(address, owner_a)
    again = await store.create(owner_a, "T", "second", owner_a, now=UnixTimestamp(2))

    assert again == address
    record = await store.get(address)
    assert record.content == "second"
    assert record.created_at == 2


# ─── capacity accounting ─────────────────────────────────────────

async def test_capacity_reserved_up_front_and_refunded(store, storage, owner_a):
    address = await store.create(owner_a, "T", "C", owner_a)
    assert await storage.reserved_by(owner_a) == NOTE_SPACE

    await store.create(owner_a, "T2", "C", owner_a)
    assert await storage.reserved_by(owner_a) == 2 * NOTE_SPACE

    refunded = await store.delete(address, owner_a)
    assert refunded == NOTE_SPACE
    assert await storage.reserved_by(owner_a) == NOTE_SPACE


async def test_capacity_charged_to_owner_only(store, storage, owner_a, owner_b):
    await store.create(owner_a, "T", "C", owner_a)
    assert await storage.reserved_by(owner_b) == 0


# ─── end-to-end ──────────────────────────────────────────────────

async def test_groceries_scenario(store, owner_a, owner_b):
    address = await store.create(
        owner_a, "Groceries", "Milk, eggs", owner_a, now=UnixTimestamp(100),
    )
    record = await store.get(address)
    assert record.created_at == record.last_updated == 100

    await store.update(address, "Milk, eggs, bread", owner_a, now=UnixTimestamp(150))
    record = await store.get(address)
    assert record.last_updated == 150
    assert record.created_at == 100
    assert record.title == "Groceries"

    with pytest.raises(UnauthorizedError):
        await store.update(address, "Chips", owner_b, now=UnixTimestamp(160))
    assert (await store.get(address)).content == "Milk, eggs, bread"

    await store.delete(address, owner_a)
    with pytest.raises(NoteNotFoundError):
        await store.get(address)


def test_address_of_validates_title(store):
    with pytest.raises(TitleEmptyError):
        store.address_of(Identity(b"\x01" * 32), "   ")
