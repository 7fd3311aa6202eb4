"""Note Record — the persisted entity and its pure transitions.

Invariants:
    - owner, title, created_at never change after creation
    - content is the only mutable field
    - last_updated >= created_at (with_content clamps a lagging clock)

Design Decisions:
    - Frozen dataclass: transitions return a new record, the shell decides
      whether to persist it. A rejected update therefore cannot leak a
      half-applied record
"""

from dataclasses import dataclass, replace

from notevault.core.domain_types import Identity, UnixTimestamp


@dataclass(frozen=True)
class NoteRecord:
    owner: Identity
    title: str
    content: str
    created_at: UnixTimestamp
    last_updated: UnixTimestamp

    @classmethod
    def new(
        cls, owner: Identity, title: str, content: str, now: UnixTimestamp,
    ) -> "NoteRecord":
        return cls(
            owner=owner, title=title, content=content,
            created_at=now, last_updated=now,
        )

    def with_content(self, content: str, now: UnixTimestamp) -> "NoteRecord":
        """Return a copy with new content, stamped at `now`."""
        return replace(
            self,
            content=content,
            last_updated=UnixTimestamp(max(now, self.created_at)),
        )
