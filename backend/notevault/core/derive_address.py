"""Address Derivation — deterministic storage key from (owner, title).

Invariants:
    - derive_note_address is pure and total over (IDENTITY_SIZE-byte owner, str title)
    - Identical inputs always yield the identical address
    - Any byte-level difference in owner or title yields a different address
      (SHA-256 collision resistance)
    - Callers pass the already-validated title: the address and the stored
      record must agree on the same bytes

Design Decisions:
    - Preimage = ADDRESS_TAG || owner || utf8(title). The tag is fixed-length
      and owner is fixed-size, so the split point is unambiguous
    - Hex rendering: addresses travel through URLs and JSON as plain strings
"""

import hashlib

from notevault.core.domain_types import Identity, NoteAddress

ADDRESS_TAG: bytes = b"note"

# Shape of a derived address; shared by the HTTP path and response schema.
ADDRESS_PATTERN: str = r"^[0-9a-f]{64}$"


def derive_note_address(owner: Identity, title: str) -> NoteAddress:
    """Derive the storage address for a note owned by `owner` titled `title`."""
    digest = hashlib.sha256()
    digest.update(ADDRESS_TAG)
    digest.update(owner)
    digest.update(title.encode("utf-8"))
    return NoteAddress(digest.hexdigest())

