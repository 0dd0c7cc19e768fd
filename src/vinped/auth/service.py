from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession  # type: ignore[import-not-found]

from vinped.auth.crypto import dummy_password_hash, hash_password, verify_password
from vinped.auth.exceptions import (
    EMAIL_ALREADY_EXISTS,
    INVALID_CREDENTIALS_MESSAGE,
    USER_NOT_FOUND,
)
from vinped.auth.models import User
from vinped.auth.repository import AuthRepository, normalize_email
from vinped.auth.sessions import SessionStore
from vinped.auth.tokens import IssuedToken, TokenIssuer, get_token_issuer
from vinped.commons.ids import uuid7_uuid
from vinped.commons.logging import logger
from vinped.commons.results import ErrorKind, Ok, Result, ServiceError
from vinped.core.db import UniqueViolationException
from vinped.core.settings import settings
from vinped.wallets.models import Wallet
from vinped.wallets.repository import WalletsRepository

INVALID_CREDENTIALS = ServiceError(
    ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE, "invalid_credentials"
)


@dataclass(frozen=True)
class Registration:
    user: User
    wallet: Wallet
    token: str


@dataclass(frozen=True)
class Login:
    user: User
    token: str


@dataclass(frozen=True)
class AuthService:
    repo: AuthRepository
    wallets: WalletsRepository
    sessions: SessionStore
    tokens: TokenIssuer
    default_wallet_name: str = "Carteira Principal"
    password_iterations: int = 210_000

    @classmethod
    def create(cls) -> "AuthService":
        return cls(
            repo=AuthRepository(),
            wallets=WalletsRepository(),
            sessions=SessionStore(),
            tokens=get_token_issuer(),
            default_wallet_name=settings.DEFAULT_WALLET_NAME,
            password_iterations=int(settings.PASSWORD_HASH_ITERATIONS),
        )

    async def register(
        self, session: AsyncSession, *, name: str, email: str, password: str
    ) -> Result[Registration]:
        """
        Create the user, their default wallet and a first session as one unit of
        work. Any failure leaves none of the three behind.
        """
        pw_hash = hash_password(password, iterations=self.password_iterations)
        try:
            user = await self.repo.insert_user(
                session,
                user_id=uuid7_uuid(),
                email=normalize_email(email),
                name=name,
                password_hash=pw_hash,
            )
        except UniqueViolationException:
            await session.rollback()
            return ServiceError(
                ErrorKind.CONFLICT, "Email already registered", EMAIL_ALREADY_EXISTS
            )

        wallet = await self.wallets.insert_wallet(
            session,
            user_id=user.id,
            name=self.default_wallet_name,
            initial_balance=Decimal("0"),
        )
        issued = await self._open_session(session, user_id=user.id)
        await session.commit()
        logger.info("User registered user_id=%s", user.id)
        return Ok(Registration(user=user, wallet=wallet, token=issued.token))

    async def login(
        self, session: AsyncSession, *, email: str, password: str
    ) -> Result[Login]:
        user = await self.repo.get_user_by_email(session, email=normalize_email(email))
        if user is None:
            verify_password(password, dummy_password_hash(self.password_iterations))
            return INVALID_CREDENTIALS

        if not verify_password(password, user.password_hash):
            logger.info("Rejected login user_id=%s", user.id)
            return INVALID_CREDENTIALS

        issued = await self._open_session(session, user_id=user.id)
        await session.commit()
        return Ok(Login(user=user, token=issued.token))

    async def logout(self, session: AsyncSession, *, token: str | None) -> Ok[None]:
        if token:
            revoked = await self.sessions.revoke(session, token=token)
            await session.commit()
            logger.debug("Logout revoked %d session(s)", revoked)
        return Ok(None)

    async def get_current_user(
        self, session: AsyncSession, *, user_id: UUID
    ) -> Result[User]:
        user = await self.repo.get_user_by_id(session, user_id=user_id)
        if user is None:
            return ServiceError(ErrorKind.NOT_FOUND, "User not found", USER_NOT_FOUND)
        return Ok(user)

    async def _open_session(self, session: AsyncSession, *, user_id: UUID) -> IssuedToken:
        issued = self.tokens.issue(user_id)
        await self.sessions.create(
            session,
            user_id=user_id,
            token=issued.token,
            expires_at=issued.expires_at,
        )
        return issued
