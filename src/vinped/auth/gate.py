from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore[import-not-found]

from vinped.auth.exceptions import TokenExpiredException, TokenVerificationException
from vinped.auth.sessions import SessionStore
from vinped.auth.tokens import TokenIssuer
from vinped.commons.results import ErrorKind, Ok, Result, ServiceError

NO_TOKEN = ServiceError(ErrorKind.UNAUTHORIZED, "No token provided", "missing_token")
INVALID_TOKEN = ServiceError(
    ErrorKind.UNAUTHORIZED, "Invalid or expired token", "invalid_token"
)
EXPIRED_TOKEN = ServiceError(
    ErrorKind.UNAUTHORIZED, "Invalid or expired token", "expired_token"
)
REVOKED_TOKEN = ServiceError(
    ErrorKind.UNAUTHORIZED, "Invalid or expired token", "revoked_token"
)


@dataclass(frozen=True)
class Identity:
    """The caller resolved from a bearer token."""

    user_id: UUID
    token: str = field(repr=False)


@dataclass(frozen=True)
class AuthenticationGate:
    tokens: TokenIssuer
    sessions: SessionStore
    # When False only signature and expiry are checked, so a token stays
    # usable after logout until it expires.
    check_revocation: bool = False

    async def authenticate(
        self, session: AsyncSession, *, token: str | None
    ) -> Result[Identity]:
        if not token:
            return NO_TOKEN
        try:
            user_id = self.tokens.verify(token)
        except TokenExpiredException:
            return EXPIRED_TOKEN
        except TokenVerificationException:
            return INVALID_TOKEN

        if self.check_revocation:
            active = await self.sessions.is_active(
                session, token=token, now=self.tokens.clock()
            )
            if not active:
                return REVOKED_TOKEN

        return Ok(Identity(user_id=user_id, token=token))
