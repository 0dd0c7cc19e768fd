"""
Database manager (async SQLAlchemy).

A shared manager owns the engine (and its connection pool) and the
sessionmaker; `vinped.commons.depends.database_session` yields one session per
request. Integrity errors raised by the driver are translated here into the
distinguished unique / foreign-key conditions the services map to results.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError  # type: ignore[import-not-found]
from sqlalchemy.ext.asyncio import (  # type: ignore[import-not-found]
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from vinped.commons.exceptions import BaseCoreException
from vinped.commons.logging import logger
from vinped.core.settings import settings

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class DatabaseException(BaseCoreException):
    pass


class IntegrityViolationException(DatabaseException):
    def __init__(
        self,
        message: str,
        details: str | None = None,
        constraint: str | None = None,
    ):
        super().__init__(message, details)
        self.constraint = constraint


class UniqueViolationException(IntegrityViolationException):
    pass


class ForeignKeyViolationException(IntegrityViolationException):
    pass


def _sqlstate(exc: IntegrityError) -> str | None:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def _constraint_name(exc: IntegrityError) -> str | None:
    diag = getattr(getattr(exc, "orig", None), "diag", None)
    return getattr(diag, "constraint_name", None)


def translate_integrity_error(exc: IntegrityError) -> IntegrityViolationException:
    code = _sqlstate(exc)
    constraint = _constraint_name(exc)
    if code == UNIQUE_VIOLATION:
        return UniqueViolationException("Record already exists", code, constraint)
    if code == FOREIGN_KEY_VIOLATION:
        return ForeignKeyViolationException("Invalid reference", code, constraint)
    return IntegrityViolationException("Invalid data", code, constraint)


class DatabaseManager:
    def __init__(self) -> None:
        self.engine: AsyncEngine | None = None
        self.sessionmaker: async_sessionmaker[AsyncSession] | None = None

    def _build_dsn(self) -> str:
        # psycopg async driver
        return (
            "postgresql+psycopg://"
            f"{settings.VINPED_DB_USER}:{settings.VINPED_DB_PASSWORD}"
            f"@{settings.VINPED_DB_HOST}:{settings.VINPED_DB_PORT}"
            f"/{settings.VINPED_DB_NAME}"
        )

    async def initialize(self) -> None:
        if self.engine is not None:
            return
        try:
            dsn = self._build_dsn()
            self.engine = create_async_engine(
                dsn,
                echo=False,
                pool_size=int(settings.VINPED_DB_POOL_SIZE),
                pool_pre_ping=True,
            )
            self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)
            logger.info("Database initialized")
        except Exception as exc:
            raise DatabaseException("Failed to initialize database", str(exc)) from exc

    async def shutdown(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self.sessionmaker = None
        logger.info("Database shut down")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        if self.sessionmaker is None:
            raise DatabaseException("Database is not initialized")
        async with self.sessionmaker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()


database_manager = DatabaseManager()
