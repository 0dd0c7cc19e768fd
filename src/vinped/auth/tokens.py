"""
Bearer token issuing and verification.

Tokens are HS256 JWTs carrying `sub` (user id), `iat`, `exp` and `jti`. The
signing secret is process configuration: read once at startup and immutable
afterwards. Time checks are done here against an injectable clock rather than
by PyJWT, so `now >= exp` is the single expiry rule.
"""

from __future__ import annotations

import datetime as dt
import secrets
from dataclasses import dataclass, field
from functools import lru_cache
from uuid import UUID

import jwt  # type: ignore[import-not-found]

from vinped.auth.exceptions import (
    AuthConfigurationException,
    TokenBadSignatureException,
    TokenExpiredException,
    TokenMalformedException,
)
from vinped.commons.clock import Clock, utcnow
from vinped.commons.ids import uuid7_str
from vinped.commons.logging import logger
from vinped.core.settings import Settings, settings

DEFAULT_TTL = dt.timedelta(days=30)
_REQUIRED_CLAIMS = ["sub", "iat", "exp", "jti"]


@dataclass(frozen=True)
class IssuedToken:
    token: str = field(repr=False)
    user_id: UUID
    issued_at: dt.datetime
    expires_at: dt.datetime


@dataclass(frozen=True)
class TokenIssuer:
    secret: str = field(repr=False)
    ttl: dt.timedelta = DEFAULT_TTL
    algorithm: str = "HS256"
    clock: Clock = utcnow

    @classmethod
    def from_settings(cls, s: Settings) -> "TokenIssuer":
        secret = s.JWT_SECRET
        if not secret:
            if s.is_production_like:
                raise AuthConfigurationException(
                    "JWT_SECRET is not set",
                    f"A signing secret is required when ENVIRONMENT={s.ENVIRONMENT}",
                )
            logger.warning(
                "JWT_SECRET is not set; using an ephemeral secret "
                "(tokens will not survive a restart)"
            )
            secret = secrets.token_urlsafe(64)
        return cls(
            secret=secret,
            ttl=dt.timedelta(days=int(s.AUTH_TOKEN_TTL_DAYS)),
            algorithm=s.JWT_ALGORITHM,
        )

    def issue(self, user_id: UUID, *, ttl: dt.timedelta | None = None) -> IssuedToken:
        issued_at = self.clock().replace(microsecond=0)
        expires_at = issued_at + (ttl if ttl is not None else self.ttl)
        # `exp` has whole-second resolution: round up so the claim never
        # expires before the reported `expires_at`.
        if expires_at.microsecond:
            expires_at = expires_at.replace(microsecond=0) + dt.timedelta(seconds=1)
        payload = {
            "sub": str(user_id),
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": uuid7_str(),
        }
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        return IssuedToken(
            token=token, user_id=user_id, issued_at=issued_at, expires_at=expires_at
        )

    def verify(self, token: str) -> UUID:
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidSignatureError as exc:
            raise TokenBadSignatureException("Invalid token signature") from exc
        except jwt.InvalidTokenError as exc:
            raise TokenMalformedException("Malformed token", str(exc)) from exc

        try:
            user_id = UUID(str(payload["sub"]))
            expires_at = dt.datetime.fromtimestamp(int(payload["exp"]), dt.UTC)
        except (TypeError, ValueError, OverflowError) as exc:
            raise TokenMalformedException("Malformed token claims", str(exc)) from exc

        if self.clock() >= expires_at:
            raise TokenExpiredException("Token has expired")
        return user_id


@lru_cache
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer.from_settings(settings)
