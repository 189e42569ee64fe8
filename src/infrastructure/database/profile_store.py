"""Record store: the single shared, mutation-serializing profile table."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from core.exceptions import DuplicateRecordError, StoreError
from domain.entities.profile import ProfileRecord
from domain.repositories.profile_repository import IProfileRepository
from domain.repositories.profile_store import SnapshotCallback
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.database.live_query import ChangeSignal, Subscription
from infrastructure.database.models import Base

logger = structlog.get_logger()

T = TypeVar("T")


class ProfileStore:
    """Persisted profile records with live full-snapshot views.

    Every read and write runs under one lock, so a write is applied and
    committed before anything else observes the table. Live views are
    re-queried after the commit of each write that changed rows. A started
    operation is never interrupted by cancelling its caller: a write either
    commits whole or never begins.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        engine: AsyncEngine | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._engine = engine
        self._lock = asyncio.Lock()
        self._signal = ChangeSignal()
        self._subscriptions: set[Subscription] = set()

    async def initialize(self) -> None:
        """Create the schema if it does not exist yet."""
        if self._engine is None:
            return
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Cancel every live view and dispose the engine."""
        subscriptions = list(self._subscriptions)
        for subscription in subscriptions:
            subscription.cancel()
        for subscription in subscriptions:
            await subscription.wait_closed()
        async with self._lock:
            if self._engine is not None:
                await self._engine.dispose()

    # --- Writes ---

    async def insert(self, record: ProfileRecord, *, replace: bool = False) -> str:
        """Insert one record; an existing identifier fails unless ``replace``."""

        async def op(repo: IProfileRepository) -> int:
            if replace:
                await repo.upsert(record)
            elif await repo.exists(record.identifier):
                raise DuplicateRecordError(record.identifier)
            else:
                await repo.add(record)
            return 1

        await self._write("insert", op)
        return record.identifier

    async def insert_many(
        self, records: list[ProfileRecord], *, replace: bool = False
    ) -> list[str]:
        """Insert a batch in one transaction.

        Conflicts are handled per record: with ``replace`` the newer row wins,
        without it the conflicting record is skipped and the rest still land.
        Returns the identifiers actually written.
        """
        written: list[str] = []

        async def op(repo: IProfileRepository) -> int:
            seen: set[str] = set()
            for record in records:
                if replace:
                    await repo.upsert(record)
                elif record.identifier in seen or await repo.exists(record.identifier):
                    logger.warning("record_insert_conflict", identifier=record.identifier)
                    continue
                else:
                    await repo.add(record)
                seen.add(record.identifier)
                written.append(record.identifier)
            return len(written)

        await self._write("insert_many", op)
        return written

    async def update(self, record: ProfileRecord) -> int:
        """Overwrite a stored record; 0 means it was not found."""
        return await self._write("update", lambda repo: repo.update(record))

    async def update_contact(
        self, identifier: str, email: str, phone: str, cell: str
    ) -> int:
        return await self._write(
            "update_contact",
            lambda repo: repo.update_contact(identifier, email, phone, cell),
        )

    async def delete_by_id(self, identifier: str) -> int:
        return await self._write("delete_by_id", lambda repo: repo.delete(identifier))

    async def delete(self, record: ProfileRecord) -> int:
        return await self.delete_by_id(record.identifier)

    async def delete_all(self) -> int:
        return await self._write("delete_all", lambda repo: repo.delete_all())

    async def delete_by_provenance(self, is_from_remote: bool) -> int:
        return await self._write(
            "delete_by_provenance",
            lambda repo: repo.delete_by_provenance(is_from_remote),
        )

    # --- Reads ---

    async def get_by_id(self, identifier: str) -> ProfileRecord | None:
        """Get a record, or None when absent."""
        return await self._read("get_by_id", lambda repo: repo.get(identifier))

    async def count(self) -> int:
        return await self._read("count", lambda repo: repo.count())

    async def snapshot_by_recency(self) -> list[ProfileRecord]:
        """One-off full read, newest first."""
        return await self._read("by_recency", lambda repo: repo.list_by_recency())

    async def search(self, query: str) -> list[ProfileRecord]:
        """Records whose first name, last name or email contains ``query``."""
        records = await self._read("search", lambda repo: repo.list_by_name())
        return [record for record in records if record.matches(query)]

    # --- Live views ---

    def observe_by_recency(self, callback: SnapshotCallback) -> Subscription:
        """Live view of all records, newest first."""
        return self._observe(
            "by_recency", lambda: self._read("by_recency", lambda repo: repo.list_by_recency()),
            callback,
        )

    def observe_by_name(self, callback: SnapshotCallback) -> Subscription:
        """Live view of all records by name, A to Z."""
        return self._observe(
            "by_name", lambda: self._read("by_name", lambda repo: repo.list_by_name()),
            callback,
        )

    def observe_by_location(self, callback: SnapshotCallback) -> Subscription:
        """Live view of all records by country then city, A to Z."""
        return self._observe(
            "by_location",
            lambda: self._read("by_location", lambda repo: repo.list_by_location()),
            callback,
        )

    def observe_search(self, query: str, callback: SnapshotCallback) -> Subscription:
        """Live view of records matching ``query``, ordered by name."""
        return self._observe("search", lambda: self.search(query), callback)

    def observe_by_provenance(
        self, is_from_remote: bool, callback: SnapshotCallback
    ) -> Subscription:
        """Live view of remote-fetched or manually created records, newest first."""
        return self._observe(
            "by_provenance",
            lambda: self._read(
                "by_provenance", lambda repo: repo.list_by_provenance(is_from_remote)
            ),
            callback,
        )

    def _observe(
        self,
        name: str,
        query: Callable[[], Awaitable[list[ProfileRecord]]],
        callback: SnapshotCallback,
    ) -> Subscription:
        subscription = Subscription(
            name, query, callback, self._signal, on_done=self._subscriptions.discard
        )
        self._subscriptions.add(subscription)
        return subscription

    # --- Plumbing ---

    async def _serialized(self, work: Callable[[], Awaitable[T]]) -> T:
        """Run ``work`` under the store lock, to completion.

        A caller cancelled while waiting for the lock never starts ``work``.
        Once started, ``work`` finishes and releases the lock even if the
        caller is cancelled: interrupting a statement drops the connection,
        and an in-memory database goes with it.
        """
        await self._lock.acquire()

        async def locked() -> T:
            try:
                return await work()
            finally:
                self._lock.release()

        task = asyncio.ensure_future(locked())
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            task.add_done_callback(_log_detached_failure)
            raise

    async def _read(
        self, operation: str, op: Callable[[IProfileRepository], Awaitable[T]]
    ) -> T:
        async def work() -> T:
            try:
                async with self._uow_factory() as uow:
                    return await op(uow.profiles)
            except SQLAlchemyError as e:
                logger.error("store_read_failed", operation=operation, error=str(e))
                raise StoreError(f"Failed to read profiles: {e}") from e

        return await self._serialized(work)

    async def _write(
        self, operation: str, op: Callable[[IProfileRepository], Awaitable[int]]
    ) -> int:
        async def work() -> int:
            try:
                async with self._uow_factory() as uow:
                    affected = await op(uow.profiles)
                    await uow.commit()
                    if affected:
                        self._signal.bump()
            except StoreError:
                raise
            except SQLAlchemyError as e:
                logger.error("store_write_failed", operation=operation, error=str(e))
                raise StoreError(f"Failed to write profiles: {e}") from e
            logger.debug("store_write_committed", operation=operation, affected=affected)
            return affected

        return await self._serialized(work)


def _log_detached_failure(task: "asyncio.Task[object]") -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.warning("store_operation_failed_after_cancel", error=str(error))
