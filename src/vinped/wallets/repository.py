from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

import sqlalchemy as sa  # type: ignore[import-not-found]
from sqlalchemy.exc import IntegrityError  # type: ignore[import-not-found]
from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore[import-not-found]

from vinped.commons.clock import utcnow
from vinped.commons.ids import uuid7_uuid
from vinped.core.db import translate_integrity_error
from vinped.wallets.models import Wallet

UPDATABLE_COLUMNS = frozenset({"name", "credit_limit", "is_active"})


@dataclass(frozen=True)
class WalletsRepository:
    async def list_for_user(self, session: AsyncSession, *, user_id: UUID) -> list[Wallet]:
        stmt = (
            sa.select(Wallet)
            .where(Wallet.user_id == user_id)
            .order_by(Wallet.created_at.desc())
        )
        res = await session.execute(stmt)
        return list(res.scalars().all())

    async def get_for_user(
        self, session: AsyncSession, *, user_id: UUID, wallet_id: UUID
    ) -> Wallet | None:
        stmt = (
            sa.select(Wallet)
            .where(Wallet.id == wallet_id)
            .where(Wallet.user_id == user_id)
        )
        res = await session.execute(stmt)
        return res.scalar_one_or_none()

    async def insert_wallet(
        self,
        session: AsyncSession,
        *,
        user_id: UUID,
        name: str,
        initial_balance: Decimal,
        credit_limit: Decimal | None = None,
    ) -> Wallet:
        now = utcnow()
        w = Wallet(
            id=uuid7_uuid(),
            user_id=user_id,
            name=name.strip(),
            initial_balance=initial_balance,
            current_balance=initial_balance,
            credit_limit=credit_limit,
            current_invoice=Decimal("0"),
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        session.add(w)
        try:
            await session.flush()
        except IntegrityError as exc:
            raise translate_integrity_error(exc) from exc
        return w

    async def update_for_user(
        self,
        session: AsyncSession,
        *,
        user_id: UUID,
        wallet_id: UUID,
        changes: dict[str, Any],
    ) -> Wallet | None:
        unknown = set(changes) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"not updatable: {sorted(unknown)}")
        stmt = (
            sa.update(Wallet)
            .where(Wallet.id == wallet_id)
            .where(Wallet.user_id == user_id)
            .values(**changes, updated_at=utcnow())
            .returning(Wallet)
        )
        try:
            res = await session.execute(stmt)
        except IntegrityError as exc:
            raise translate_integrity_error(exc) from exc
        return res.scalar_one_or_none()

    async def count_active_for_user(self, session: AsyncSession, *, user_id: UUID) -> int:
        stmt = (
            sa.select(sa.func.count())
            .select_from(Wallet)
            .where(Wallet.user_id == user_id)
            .where(Wallet.is_active.is_(True))
        )
        res = await session.execute(stmt)
        return int(res.scalar_one())

    async def delete_for_user(
        self, session: AsyncSession, *, user_id: UUID, wallet_id: UUID
    ) -> bool:
        stmt = (
            sa.delete(Wallet)
            .where(Wallet.id == wallet_id)
            .where(Wallet.user_id == user_id)
            .returning(Wallet.id)
        )
        res = await session.execute(stmt)
        return res.scalar_one_or_none() is not None
