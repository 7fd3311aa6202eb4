"""Identity Parsing — hex text <-> fixed-size identity bytes.

Invariants:
    - parse_identity accepts exactly 2 * IDENTITY_SIZE hex digits
      (case-insensitive) and nothing else: no whitespace, no separators
    - identity_to_hex is the inverse for valid identities (lowercase)
"""

import re

from notevault.core.domain_types import IDENTITY_SIZE, Identity
from notevault.core.errors import InvalidIdentityError

_IDENTITY_PATTERN = re.compile(rf"[0-9a-fA-F]{{{IDENTITY_SIZE * 2}}}")


def parse_identity(value: str) -> Identity:
    """Parse a hex-encoded identity. Raises InvalidIdentityError."""
    if not isinstance(value, str) or len(value) != IDENTITY_SIZE * 2:
        raise InvalidIdentityError(
            f"Identity must be {IDENTITY_SIZE * 2} hex characters",
        )
    # bytes.fromhex skips whitespace, so the shape is checked first
    if not _IDENTITY_PATTERN.fullmatch(value):
        raise InvalidIdentityError("Identity is not valid hex")
    return Identity(bytes.fromhex(value))


def identity_to_hex(identity: Identity) -> str:
    return identity.hex()
