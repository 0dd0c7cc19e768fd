from __future__ import annotations

from functools import lru_cache
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request  # type: ignore[import-not-found]
from fastapi.responses import JSONResponse  # type: ignore[import-not-found]
from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore[import-not-found]
from starlette import status  # type: ignore[import-not-found]

from vinped.api.exceptions import error_response
from vinped.auth.depends import current_identity
from vinped.auth.gate import Identity
from vinped.commons.depends import database_session
from vinped.commons.results import ServiceError
from vinped.wallets.models import Wallet
from vinped.wallets.schemas import (
    CreateWalletRequest,
    DeleteWalletResponse,
    ListWalletsResponse,
    UpdateWalletRequest,
    WalletPublic,
)
from vinped.wallets.service import WALLET_NOT_FOUND, WalletsService

router = APIRouter(prefix="/wallets", tags=["wallets"])


@lru_cache
def get_wallets_service() -> WalletsService:
    return WalletsService.create()


def to_wallet_public(w: Wallet) -> WalletPublic:
    return WalletPublic(
        id=w.id,
        user_id=w.user_id,
        name=w.name,
        initial_balance=float(w.initial_balance),
        current_balance=float(w.current_balance),
        credit_limit=float(w.credit_limit) if w.credit_limit is not None else None,
        current_invoice=float(w.current_invoice or 0),
        is_active=bool(w.is_active),
        created_at=w.created_at,
        updated_at=w.updated_at,
    )


def _parse_id(wallet_id: str) -> UUID | None:
    try:
        return UUID(wallet_id)
    except ValueError:
        return None


@router.get("", response_model=ListWalletsResponse)
async def list_wallets(
    session: Annotated[AsyncSession, Depends(database_session)],
    svc: Annotated[WalletsService, Depends(get_wallets_service)],
    identity: Annotated[Identity, Depends(current_identity)],
) -> ListWalletsResponse:
    result = await svc.list_wallets(session, user_id=identity.user_id)
    return ListWalletsResponse(items=[to_wallet_public(w) for w in result.value])


@router.get("/{wallet_id}", response_model=WalletPublic)
async def get_wallet(
    wallet_id: str,
    request: Request,
    session: Annotated[AsyncSession, Depends(database_session)],
    svc: Annotated[WalletsService, Depends(get_wallets_service)],
    identity: Annotated[Identity, Depends(current_identity)],
) -> WalletPublic | JSONResponse:
    wid = _parse_id(wallet_id)
    if wid is None:
        return error_response(request, WALLET_NOT_FOUND)
    result = await svc.get_wallet(session, user_id=identity.user_id, wallet_id=wid)
    if isinstance(result, ServiceError):
        return error_response(request, result)
    return to_wallet_public(result.value)


@router.post("", response_model=WalletPublic, status_code=status.HTTP_201_CREATED)
async def create_wallet(
    req: CreateWalletRequest,
    request: Request,
    session: Annotated[AsyncSession, Depends(database_session)],
    svc: Annotated[WalletsService, Depends(get_wallets_service)],
    identity: Annotated[Identity, Depends(current_identity)],
) -> JSONResponse:
    result = await svc.create_wallet(session, user_id=identity.user_id, req=req)
    if isinstance(result, ServiceError):
        return error_response(request, result)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=to_wallet_public(result.value).model_dump(mode="json"),
    )


@router.patch("/{wallet_id}", response_model=WalletPublic)
async def update_wallet(
    wallet_id: str,
    req: UpdateWalletRequest,
    request: Request,
    session: Annotated[AsyncSession, Depends(database_session)],
    svc: Annotated[WalletsService, Depends(get_wallets_service)],
    identity: Annotated[Identity, Depends(current_identity)],
) -> WalletPublic | JSONResponse:
    wid = _parse_id(wallet_id)
    if wid is None:
        return error_response(request, WALLET_NOT_FOUND)
    result = await svc.update_wallet(
        session, user_id=identity.user_id, wallet_id=wid, req=req
    )
    if isinstance(result, ServiceError):
        return error_response(request, result)
    return to_wallet_public(result.value)


@router.delete("/{wallet_id}", response_model=DeleteWalletResponse)
async def delete_wallet(
    wallet_id: str,
    request: Request,
    session: Annotated[AsyncSession, Depends(database_session)],
    svc: Annotated[WalletsService, Depends(get_wallets_service)],
    identity: Annotated[Identity, Depends(current_identity)],
) -> DeleteWalletResponse | JSONResponse:
    wid = _parse_id(wallet_id)
    if wid is None:
        return error_response(request, WALLET_NOT_FOUND)
    result = await svc.delete_wallet(session, user_id=identity.user_id, wallet_id=wid)
    if isinstance(result, ServiceError):
        return error_response(request, result)
    return DeleteWalletResponse()
