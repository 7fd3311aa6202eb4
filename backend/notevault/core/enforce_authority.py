"""Authorization Guard — only a note's owner may mutate it.

Invariants:
    - Exact identity equality; no delegation, no admin override, no owner sets
    - Pure: returns UnauthorizedError or None, never raises
    - `authority` is the identity already proven by the IdentityVerifier;
      credentials never reach this module

Design Decisions:
    - require_owner_consent models the co-signing rule on create: whoever pays
      for the storage must be the owner. Same error kind as authorize()
"""

from notevault.core.domain_types import Identity
from notevault.core.errors import UnauthorizedError


def authorize(owner: Identity, authority: Identity) -> UnauthorizedError | None:
    """Check that the acting authority is the note's stored owner."""
    if bytes(owner) != bytes(authority):
        return UnauthorizedError()
    return None


def require_owner_consent(
    owner: Identity, authority: Identity,
) -> UnauthorizedError | None:
    """Create precondition: the owner must be the one allocating the note."""
    return authorize(owner, authority)
