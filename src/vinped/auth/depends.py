from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore[import-not-found]
from starlette import status  # type: ignore[import-not-found]

from vinped.auth.gate import AuthenticationGate, Identity
from vinped.auth.service import AuthService
from vinped.auth.sessions import SessionStore
from vinped.auth.tokens import get_token_issuer
from vinped.commons.depends import database_session
from vinped.commons.logging import logger
from vinped.commons.results import ServiceError
from vinped.core.settings import settings

# auto_error=False: a missing or non-Bearer header comes through as None and is
# rejected by the gate with the same 401 shape as a bad token.
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_auth_service() -> AuthService:
    return AuthService.create()


@lru_cache
def get_authentication_gate() -> AuthenticationGate:
    return AuthenticationGate(
        tokens=get_token_issuer(),
        sessions=SessionStore(),
        check_revocation=bool(settings.AUTH_CHECK_SESSION_REVOCATION),
    )


async def current_identity(
    request: Request,
    session: Annotated[AsyncSession, Depends(database_session)],
    gate: Annotated[AuthenticationGate, Depends(get_authentication_gate)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> Identity:
    token = credentials.credentials if credentials else None
    try:
        result = await gate.authenticate(session, token=token)
    except Exception as exc:
        logger.exception("Authentication failed unexpectedly")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from exc

    if isinstance(result, ServiceError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.identity = result.value
    return result.value
