"""NoteAccount ORM — one row per live note slot.

Invariants:
    - address is the derived note address (primary key, no surrogate id)
    - data is the NOTE_SPACE-byte encoded record; rewritten in place on update
    - capacity is fixed at allocation and refunded on delete
    - payer is the hex identity charged for the capacity

Design Decisions:
    - Opaque data column: storage is record-agnostic, the codec lives in core
    - payer indexed: capacity accounting sums per payer
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, LargeBinary
from sqlalchemy.orm import Mapped, mapped_column

from notevault.db.base import Base


class NoteAccount(Base):
    """Fixed-capacity storage slot for a single note."""
    __tablename__ = "note_accounts"

    address: Mapped[str] = mapped_column(String(64), primary_key=True)
    payer: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    allocated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
