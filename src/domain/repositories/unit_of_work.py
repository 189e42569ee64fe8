"""Unit of Work protocol consumed by the record store."""

from types import TracebackType
from typing import Protocol

from domain.repositories.profile_repository import IProfileRepository


class IUnitOfWork(Protocol):
    """A transaction scope over the profile table.

    ``profiles`` is only usable inside ``async with``; leaving the block
    without ``commit`` discards the changes.
    """

    @property
    def profiles(self) -> IProfileRepository:
        ...

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        ...
