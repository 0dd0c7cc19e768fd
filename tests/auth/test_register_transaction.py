"""
Register runs user, wallet and session inserts through one request-scoped
database session. These tests use a real AsyncSession over in-memory SQLite
so a failure part-way through is rolled back by the session manager, not by
a fake.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import pytest  # type: ignore[import-not-found]
import sqlalchemy as sa  # type: ignore[import-not-found]
from sqlalchemy.ext.asyncio import (  # type: ignore[import-not-found]
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # type: ignore[import-not-found]

from vinped.auth.models import Base, Session, User
from vinped.auth.repository import AuthRepository
from vinped.auth.service import AuthService
from vinped.auth.sessions import SessionStore
from vinped.auth.tokens import TokenIssuer
from vinped.commons.depends import database_session
from vinped.commons.results import Ok
from vinped.core.db import database_manager
from vinped.wallets.models import Wallet
from vinped.wallets.repository import WalletsRepository

request_scope = asynccontextmanager(database_session)


class BrokenSessionStore(SessionStore):
    async def create(self, session, **kwargs):  # type: ignore[no-untyped-def]
        raise RuntimeError("session insert failed")


@pytest.fixture()
async def sqlite_database(monkeypatch):  # type: ignore[no-untyped-def]
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    monkeypatch.setattr(database_manager, "engine", engine)
    monkeypatch.setattr(
        database_manager,
        "sessionmaker",
        async_sessionmaker(engine, expire_on_commit=False),
    )
    yield database_manager
    await engine.dispose()


def _service(token_issuer: TokenIssuer, sessions: SessionStore) -> AuthService:
    return AuthService(
        repo=AuthRepository(),
        wallets=WalletsRepository(),
        sessions=sessions,
        tokens=token_issuer,
        password_iterations=1_000,
    )


async def _count(model) -> int:  # type: ignore[no-untyped-def]
    async with request_scope() as session:
        return int(await session.scalar(sa.select(sa.func.count()).select_from(model)))


@pytest.mark.anyio
async def test_failed_session_insert_leaves_no_user_or_wallet(  # type: ignore[no-untyped-def]
    sqlite_database, token_issuer
) -> None:
    svc = _service(token_issuer, BrokenSessionStore())

    with pytest.raises(RuntimeError):
        async with request_scope() as session:
            await svc.register(
                session, name="Alice Doe", email="alice@x.com", password="Abcdef1!"
            )

    assert await _count(User) == 0
    assert await _count(Wallet) == 0
    assert await _count(Session) == 0


@pytest.mark.anyio
async def test_register_commits_all_three_rows(sqlite_database, token_issuer) -> None:  # type: ignore[no-untyped-def]
    svc = _service(token_issuer, SessionStore())

    async with request_scope() as session:
        result = await svc.register(
            session, name="Alice Doe", email="alice@x.com", password="Abcdef1!"
        )

    assert isinstance(result, Ok)
    assert await _count(User) == 1
    assert await _count(Wallet) == 1
    assert await _count(Session) == 1
