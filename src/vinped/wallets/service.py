from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore[import-not-found]

from vinped.commons.results import ErrorKind, Ok, Result, ServiceError
from vinped.core.db import UniqueViolationException
from vinped.wallets.models import Wallet
from vinped.wallets.repository import WalletsRepository
from vinped.wallets.schemas import CreateWalletRequest, UpdateWalletRequest

WALLET_NOT_FOUND = ServiceError(ErrorKind.NOT_FOUND, "Wallet not found", "wallet_not_found")
WALLET_NAME_TAKEN = ServiceError(
    ErrorKind.CONFLICT, "A wallet with this name already exists", "wallet_name_taken"
)
NOTHING_TO_UPDATE = ServiceError(
    ErrorKind.VALIDATION, "No fields to update", "nothing_to_update"
)
LAST_WALLET = ServiceError(
    ErrorKind.VALIDATION, "Cannot delete the last wallet", "last_wallet"
)

# Columns that may be cleared by sending an explicit null.
_NULLABLE = frozenset({"credit_limit"})


def _money(value: float | None) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value))


def wallet_changes(req: UpdateWalletRequest) -> dict[str, Any]:
    """
    Map of column -> new value for the fields the client actually sent.

    Absent fields are left alone; explicit nulls only clear nullable columns.
    """
    changes: dict[str, Any] = {}
    for key, value in req.model_dump(exclude_unset=True).items():
        if value is None and key not in _NULLABLE:
            continue
        changes[key] = _money(value) if key == "credit_limit" else value
    return changes


@dataclass(frozen=True)
class WalletsService:
    repo: WalletsRepository

    @classmethod
    def create(cls) -> "WalletsService":
        return cls(repo=WalletsRepository())

    async def list_wallets(self, session: AsyncSession, *, user_id: UUID) -> Ok[list[Wallet]]:
        return Ok(await self.repo.list_for_user(session, user_id=user_id))

    async def get_wallet(
        self, session: AsyncSession, *, user_id: UUID, wallet_id: UUID
    ) -> Result[Wallet]:
        w = await self.repo.get_for_user(session, user_id=user_id, wallet_id=wallet_id)
        if w is None:
            return WALLET_NOT_FOUND
        return Ok(w)

    async def create_wallet(
        self, session: AsyncSession, *, user_id: UUID, req: CreateWalletRequest
    ) -> Result[Wallet]:
        try:
            w = await self.repo.insert_wallet(
                session,
                user_id=user_id,
                name=req.name,
                initial_balance=_money(req.initial_balance) or Decimal("0"),
                credit_limit=_money(req.credit_limit),
            )
        except UniqueViolationException:
            await session.rollback()
            return WALLET_NAME_TAKEN
        await session.commit()
        return Ok(w)

    async def update_wallet(
        self,
        session: AsyncSession,
        *,
        user_id: UUID,
        wallet_id: UUID,
        req: UpdateWalletRequest,
    ) -> Result[Wallet]:
        changes = wallet_changes(req)
        if not changes:
            return NOTHING_TO_UPDATE
        try:
            w = await self.repo.update_for_user(
                session, user_id=user_id, wallet_id=wallet_id, changes=changes
            )
        except UniqueViolationException:
            await session.rollback()
            return WALLET_NAME_TAKEN
        if w is None:
            return WALLET_NOT_FOUND
        await session.commit()
        return Ok(w)

    async def delete_wallet(
        self, session: AsyncSession, *, user_id: UUID, wallet_id: UUID
    ) -> Result[None]:
        active = await self.repo.count_active_for_user(session, user_id=user_id)
        if active <= 1:
            return LAST_WALLET
        deleted = await self.repo.delete_for_user(
            session, user_id=user_id, wallet_id=wallet_id
        )
        if not deleted:
            return WALLET_NOT_FOUND
        await session.commit()
        return Ok(None)
