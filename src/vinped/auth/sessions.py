from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from uuid import UUID

import sqlalchemy as sa  # type: ignore[import-not-found]
from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore[import-not-found]

from vinped.auth.crypto import hash_session_token
from vinped.auth.models import Session
from vinped.commons.clock import utcnow
from vinped.commons.ids import uuid7_uuid


@dataclass(frozen=True)
class SessionStore:
    """
    Server-side record of issued tokens, keyed by token digest.

    A user may hold any number of sessions. Deleting a row revokes that one
    token; nothing sweeps expired rows.
    """

    async def create(
        self,
        session: AsyncSession,
        *,
        user_id: UUID,
        token: str,
        expires_at: dt.datetime,
    ) -> Session:
        s = Session(
            id=uuid7_uuid(),
            user_id=user_id,
            token_hash=hash_session_token(token),
            created_at=utcnow(),
            expires_at=expires_at,
        )
        session.add(s)
        await session.flush()
        return s

    async def revoke(self, session: AsyncSession, *, token: str) -> int:
        stmt = sa.delete(Session).where(
            Session.token_hash == hash_session_token(token)
        )
        res = await session.execute(stmt)
        await session.flush()
        return int(res.rowcount or 0)

    async def is_active(
        self, session: AsyncSession, *, token: str, now: dt.datetime
    ) -> bool:
        stmt = (
            sa.select(Session.id)
            .where(Session.token_hash == hash_session_token(token))
            .where(Session.expires_at > now)
        )
        res = await session.execute(stmt)
        return res.scalar_one_or_none() is not None
