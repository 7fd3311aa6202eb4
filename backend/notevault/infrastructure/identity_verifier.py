"""JWT Identity Verifier — proves which identity is acting on a request.

Invariants:
    - verify() returns an Identity only for a token signed with our secret,
      not expired, whose `sub` claim is a well-formed hex identity
    - Every failure surfaces as InvalidCredentialsError (401); the reason
      is logged, never echoed to the caller

Design Decisions:
    - python-jose HS256 bearer tokens: the core only ever sees the verified
      Identity, so a signature-based verifier can replace this class without
      touching services/
    - issue_token lives next to verify so dev tooling and tests mint tokens
      with the exact claims verify expects
"""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from notevault.core.domain_types import Identity
from notevault.core.errors import InvalidCredentialsError, InvalidIdentityError
from notevault.core.identity import identity_to_hex, parse_identity

logger = logging.getLogger(__name__)


class JwtIdentityVerifier:
    """IdentityVerifier adapter for HS256 bearer tokens."""

    def __init__(
        self, secret: str, algorithm: str = "HS256", expire_minutes: int = 60,
    ):
        self._secret = secret
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    def verify(self, credential: str) -> Identity:
        try:
            payload = jwt.decode(
                credential, self._secret, algorithms=[self._algorithm],
            )
        except JWTError as e:
            logger.warning(f"Bearer token rejected: {e}")
            raise InvalidCredentialsError()

        subject = payload.get("sub")
        if not subject:
            raise InvalidCredentialsError("Token has no subject")
        try:
            return parse_identity(subject)
        except InvalidIdentityError:
            raise InvalidCredentialsError("Token subject is not an identity")

    def issue_token(
        self, identity: Identity, expires_delta: timedelta | None = None,
    ) -> str:
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=self._expire_minutes)
        )
        return jwt.encode(
            {"sub": identity_to_hex(identity), "exp": expire},
            self._secret, algorithm=self._algorithm,
        )
