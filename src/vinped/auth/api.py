from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request  # type: ignore[import-not-found]
from fastapi.responses import JSONResponse  # type: ignore[import-not-found]
from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore[import-not-found]
from starlette import status  # type: ignore[import-not-found]

from vinped.api.exceptions import error_response
from vinped.auth.depends import current_identity, get_auth_service
from vinped.auth.gate import Identity
from vinped.auth.models import User
from vinped.auth.schemas import (
    AuthResponse,
    LoginRequest,
    LogoutResponse,
    MeResponse,
    RegisterRequest,
    RegisterResponse,
    UserPublic,
)
from vinped.auth.service import AuthService
from vinped.commons.depends import database_session
from vinped.commons.results import ServiceError
from vinped.wallets.api import to_wallet_public

router = APIRouter(prefix="/auth", tags=["auth"])


def _to_user_public(user: User) -> UserPublic:
    return UserPublic(
        id=user.id,
        name=user.name,
        email=user.email,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    req: RegisterRequest,
    request: Request,
    session: Annotated[AsyncSession, Depends(database_session)],
    svc: Annotated[AuthService, Depends(get_auth_service)],
) -> JSONResponse:
    result = await svc.register(
        session, name=req.name, email=str(req.email), password=req.password
    )
    if isinstance(result, ServiceError):
        return error_response(request, result)

    reg = result.value
    data = RegisterResponse(
        user=_to_user_public(reg.user),
        token=reg.token,
        wallet=to_wallet_public(reg.wallet),
    ).model_dump(mode="json")
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=data)


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    request: Request,
    session: Annotated[AsyncSession, Depends(database_session)],
    svc: Annotated[AuthService, Depends(get_auth_service)],
) -> JSONResponse:
    result = await svc.login(session, email=str(req.email), password=req.password)
    if isinstance(result, ServiceError):
        return error_response(request, result)

    data = AuthResponse(
        user=_to_user_public(result.value.user), token=result.value.token
    ).model_dump(mode="json")
    return JSONResponse(status_code=status.HTTP_200_OK, content=data)


@router.get("/me", response_model=MeResponse)
async def me(
    request: Request,
    session: Annotated[AsyncSession, Depends(database_session)],
    svc: Annotated[AuthService, Depends(get_auth_service)],
    identity: Annotated[Identity, Depends(current_identity)],
) -> MeResponse | JSONResponse:
    result = await svc.get_current_user(session, user_id=identity.user_id)
    if isinstance(result, ServiceError):
        return error_response(request, result)
    return MeResponse(user=_to_user_public(result.value))


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    session: Annotated[AsyncSession, Depends(database_session)],
    svc: Annotated[AuthService, Depends(get_auth_service)],
    identity: Annotated[Identity, Depends(current_identity)],
) -> LogoutResponse:
    await svc.logout(session, token=identity.token)
    return LogoutResponse()
