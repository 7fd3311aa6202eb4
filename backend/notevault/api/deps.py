"""API Dependencies — wire settings, storage, clock, and identity into routes.

Invariants:
    - get_authority returns ONLY a verified identity; a missing or bad
      bearer token raises InvalidCredentialsError (401)
    - get_note_store builds a NoteStore per request over that request's
      DB session (or the process-wide in-memory storage)

Design Decisions:
    - HTTPBearer(auto_error=False): missing credentials go through our own
      error envelope instead of FastAPI's default
    - Verifier cached per process: it only holds the secret
"""

from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.config import get_settings
from notevault.core.domain_types import Identity
from notevault.core.errors import InvalidCredentialsError
from notevault.infrastructure.clock import SystemClock
from notevault.infrastructure.database import get_db
from notevault.infrastructure.identity_verifier import JwtIdentityVerifier
from notevault.infrastructure.keyed_storage import (
    InMemoryKeyedStorage, SqlKeyedStorage,
)
from notevault.services.note_store import NoteStore

_bearer = HTTPBearer(auto_error=False)


@lru_cache
def get_identity_verifier() -> JwtIdentityVerifier:
    settings = get_settings()
    return JwtIdentityVerifier(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.jwt_expire_minutes,
    )


@lru_cache
def get_memory_storage() -> InMemoryKeyedStorage:
    return InMemoryKeyedStorage()


def get_authority(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    verifier: JwtIdentityVerifier = Depends(get_identity_verifier),
) -> Identity:
    """Identity proven by the bearer token on this request."""
    if credentials is None:
        raise InvalidCredentialsError("Missing bearer token")
    return verifier.verify(credentials.credentials)


async def get_note_store(db: AsyncSession = Depends(get_db)) -> NoteStore:
    if get_settings().storage_backend == "memory":
        return NoteStore(get_memory_storage(), SystemClock())
    return NoteStore(SqlKeyedStorage(db), SystemClock())
