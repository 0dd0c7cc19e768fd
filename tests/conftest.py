"""
Global pytest fixtures.

No test touches a real Postgres instance: the DB session dependency is replaced
by `FakeDbSession`, and services are built over in-memory repositories that
keep the same call signatures as the SQLAlchemy ones.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from uuid import UUID

import pytest  # type: ignore[import-not-found]
from fastapi import FastAPI
from fastapi.testclient import TestClient

from vinped.api.main import build_app
from vinped.auth.crypto import hash_session_token
from vinped.auth.depends import get_auth_service, get_authentication_gate
from vinped.auth.gate import AuthenticationGate
from vinped.auth.models import User
from vinped.auth.service import AuthService
from vinped.auth.tokens import TokenIssuer
from vinped.commons.clock import utcnow
from vinped.commons.depends import database_session
from vinped.commons.ids import uuid7_uuid
from vinped.core.db import UniqueViolationException
from vinped.wallets.api import get_wallets_service
from vinped.wallets.models import Wallet
from vinped.wallets.service import WalletsService

TEST_SECRET = "test-signing-secret-0123456789-abcdefghijklmnopqrstuvwxyz"
FAST_ITERATIONS = 1_000


class FakeDbSession:
    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


class FakeAuthRepository:
    def __init__(self) -> None:
        self.users: dict[UUID, User] = {}

    async def get_user_by_email(self, session, *, email: str):  # type: ignore[no-untyped-def]
        email = email.strip().lower()
        return next((u for u in self.users.values() if u.email == email), None)

    async def get_user_by_id(self, session, *, user_id: UUID):  # type: ignore[no-untyped-def]
        return self.users.get(user_id)

    async def insert_user(self, session, *, user_id, email, name, password_hash):  # type: ignore[no-untyped-def]
        email = email.strip().lower()
        if any(u.email == email for u in self.users.values()):
            raise UniqueViolationException(
                "Record already exists", "23505", "users_email_unique"
            )
        now = utcnow()
        user = User(
            id=user_id,
            email=email,
            name=name.strip(),
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        self.users[user_id] = user
        return user


class FakeWalletsRepository:
    def __init__(self) -> None:
        self.wallets: dict[UUID, Wallet] = {}

    def for_user(self, user_id: UUID) -> list[Wallet]:
        return [w for w in self.wallets.values() if w.user_id == user_id]

    async def list_for_user(self, session, *, user_id):  # type: ignore[no-untyped-def]
        return sorted(self.for_user(user_id), key=lambda w: w.created_at, reverse=True)

    async def get_for_user(self, session, *, user_id, wallet_id):  # type: ignore[no-untyped-def]
        w = self.wallets.get(wallet_id)
        return w if w is not None and w.user_id == user_id else None

    async def insert_wallet(  # type: ignore[no-untyped-def]
        self, session, *, user_id, name, initial_balance, credit_limit=None
    ):
        name = name.strip()
        if any(w.name == name for w in self.for_user(user_id)):
            raise UniqueViolationException(
                "Record already exists", "23505", "wallets_user_name_unique"
            )
        now = utcnow()
        w = Wallet(
            id=uuid7_uuid(),
            user_id=user_id,
            name=name,
            initial_balance=initial_balance,
            current_balance=initial_balance,
            credit_limit=credit_limit,
            current_invoice=Decimal("0"),
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        self.wallets[w.id] = w
        return w

    async def update_for_user(self, session, *, user_id, wallet_id, changes):  # type: ignore[no-untyped-def]
        w = await self.get_for_user(session, user_id=user_id, wallet_id=wallet_id)
        if w is None:
            return None
        new_name = changes.get("name")
        if new_name is not None and any(
            o.name == new_name and o.id != w.id for o in self.for_user(user_id)
        ):
            raise UniqueViolationException(
                "Record already exists", "23505", "wallets_user_name_unique"
            )
        for key, value in changes.items():
            setattr(w, key, value)
        w.updated_at = utcnow()
        return w

    async def count_active_for_user(self, session, *, user_id):  # type: ignore[no-untyped-def]
        return sum(1 for w in self.for_user(user_id) if w.is_active)

    async def delete_for_user(self, session, *, user_id, wallet_id):  # type: ignore[no-untyped-def]
        w = await self.get_for_user(session, user_id=user_id, wallet_id=wallet_id)
        if w is None:
            return False
        del self.wallets[wallet_id]
        return True


class FakeSessionStore:
    def __init__(self) -> None:
        self.rows: dict[str, tuple[UUID, dt.datetime]] = {}

    async def create(self, session, *, user_id, token, expires_at):  # type: ignore[no-untyped-def]
        self.rows[hash_session_token(token)] = (user_id, expires_at)

    async def revoke(self, session, *, token):  # type: ignore[no-untyped-def]
        return 1 if self.rows.pop(hash_session_token(token), None) else 0

    async def is_active(self, session, *, token, now):  # type: ignore[no-untyped-def]
        row = self.rows.get(hash_session_token(token))
        return row is not None and row[1] > now

    def has(self, token: str) -> bool:
        return hash_session_token(token) in self.rows


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Default AnyIO backend for async tests."""
    return "asyncio"


@pytest.fixture()
def db() -> FakeDbSession:
    return FakeDbSession()


@pytest.fixture()
def token_issuer() -> TokenIssuer:
    return TokenIssuer(secret=TEST_SECRET)


@pytest.fixture()
def session_store() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture()
def wallets_repo() -> FakeWalletsRepository:
    return FakeWalletsRepository()


@pytest.fixture()
def auth_service(
    token_issuer: TokenIssuer,
    session_store: FakeSessionStore,
    wallets_repo: FakeWalletsRepository,
) -> AuthService:
    return AuthService(
        repo=FakeAuthRepository(),  # type: ignore[arg-type]
        wallets=wallets_repo,  # type: ignore[arg-type]
        sessions=session_store,  # type: ignore[arg-type]
        tokens=token_issuer,
        default_wallet_name="Carteira Principal",
        password_iterations=FAST_ITERATIONS,
    )


@pytest.fixture()
def wallets_service(wallets_repo: FakeWalletsRepository) -> WalletsService:
    return WalletsService(repo=wallets_repo)  # type: ignore[arg-type]


@pytest.fixture()
def gate(token_issuer: TokenIssuer, session_store: FakeSessionStore) -> AuthenticationGate:
    return AuthenticationGate(tokens=token_issuer, sessions=session_store)  # type: ignore[arg-type]


@pytest.fixture()
def app(
    db: FakeDbSession,
    auth_service: AuthService,
    wallets_service: WalletsService,
    gate: AuthenticationGate,
) -> FastAPI:
    app = build_app()

    async def fake_database_session():  # type: ignore[no-untyped-def]
        yield db

    app.dependency_overrides[database_session] = fake_database_session
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_wallets_service] = lambda: wallets_service
    app.dependency_overrides[get_authentication_gate] = lambda: gate
    return app


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    """Sync test client (covers most HTTP unit tests)."""
    return TestClient(app)
