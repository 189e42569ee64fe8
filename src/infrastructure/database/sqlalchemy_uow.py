"""SQLAlchemy Unit of Work implementation."""

from types import TracebackType

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_profile_repo import (
    SQLAlchemyProfileRepository,
)


class SQLAlchemyUnitOfWork:
    """One session and transaction around a group of profile operations.

    Whatever has not been committed when the block exits is rolled back,
    whether the block raised, was cancelled, or only read.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None
        self._profiles: SQLAlchemyProfileRepository | None = None
        self._committed = False

    @property
    def profiles(self) -> SQLAlchemyProfileRepository:
        if self._profiles is None:
            raise RuntimeError("Unit of work is not active; use it as an async context manager")
        return self._profiles

    async def commit(self) -> None:
        if self._session is None:
            raise RuntimeError("Unit of work is not active")
        await self._session.commit()
        self._committed = True

    async def rollback(self) -> None:
        if self._session is not None:
            await self._session.rollback()
            self._committed = False

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._session = self._session_factory()
        self._profiles = SQLAlchemyProfileRepository(self._session)
        self._committed = False
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        session, self._session, self._profiles = self._session, None, None
        if session is None:
            return
        try:
            if exc_type is not None or not self._committed:
                await session.rollback()
        finally:
            await session.close()
