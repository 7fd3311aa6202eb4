"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Identity is exactly IDENTITY_SIZE raw bytes (e.g. an ed25519 public key)
    - NoteAddress is 64 lowercase hex chars (SHA-256 digest)
    - Timestamps are signed 64-bit unix seconds
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


IDENTITY_SIZE: int = 32


# ─── Identity Types ──────────────────────────────────────────────

Identity = NewType("Identity", bytes)          # IDENTITY_SIZE bytes
NoteAddress = NewType("NoteAddress", str)      # 64 hex chars


# ─── Value Types ─────────────────────────────────────────────────

UnixTimestamp = NewType("UnixTimestamp", int)  # i64 seconds


# ─── Enums ───────────────────────────────────────────────────────

class NoteOperation(str, Enum):
    """Mutating operations — used for logging and error context."""
    CREATE = "create_note"
    UPDATE = "update_note"
    DELETE = "delete_note"
