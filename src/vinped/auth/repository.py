from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

import sqlalchemy as sa  # type: ignore[import-not-found]
from sqlalchemy.exc import IntegrityError  # type: ignore[import-not-found]
from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore[import-not-found]

from vinped.auth.models import User
from vinped.commons.clock import utcnow
from vinped.core.db import translate_integrity_error


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass(frozen=True)
class AuthRepository:
    async def get_user_by_email(
        self, session: AsyncSession, *, email: str
    ) -> User | None:
        stmt = sa.select(User).where(User.email == normalize_email(email))
        res = await session.execute(stmt)
        return res.scalar_one_or_none()

    async def get_user_by_id(self, session: AsyncSession, *, user_id: UUID) -> User | None:
        stmt = sa.select(User).where(User.id == user_id)
        res = await session.execute(stmt)
        return res.scalar_one_or_none()

    async def insert_user(
        self,
        session: AsyncSession,
        *,
        user_id: UUID,
        email: str,
        name: str,
        password_hash: str,
    ) -> User:
        now = utcnow()
        user = User(
            id=user_id,
            email=normalize_email(email),
            name=name.strip(),
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        session.add(user)
        try:
            await session.flush()
        except IntegrityError as exc:
            # Duplicate email surfaces as UniqueViolationException.
            raise translate_integrity_error(exc) from exc
        return user
