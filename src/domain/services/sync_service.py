"""Sync coordinator: reconciles the remote profile source with the local store."""

import asyncio
import dataclasses

import structlog

from core.exceptions import ErrorCode
from core.result import Err, Ok, Result
from domain.entities.profile import ProfileRecord
from domain.repositories.profile_source import IProfileSource
from domain.repositories.profile_store import IProfileStore

logger = structlog.get_logger()

DEFAULT_BATCH_SIZE = 10


class ProfileSyncService:
    """Service layer for populating and mutating the local profile store.

    No exception escapes a public method: store and source failures come
    back as ``Err``. Task cancellation is the one exception and is always
    re-raised so the owning scope can stop outstanding work.
    """

    def __init__(
        self,
        store: IProfileStore,
        source: IProfileSource,
        default_batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        self._store = store
        self._source = source
        self._default_batch_size = default_batch_size
        self._populate_lock = asyncio.Lock()

    # --- Remote + store ---

    async def ensure_populated(self) -> Result[list[ProfileRecord]]:
        """Fetch a default batch if, and only if, the store is empty right now."""
        async with self._populate_lock:
            empty = await self.is_empty()
            if isinstance(empty, Err):
                return empty
            if not empty.value:
                return Ok([])
            logger.info("store_empty_populating", count=self._default_batch_size)
            return await self.refresh(self._default_batch_size, force_refresh=True)

    async def refresh(
        self, count: int = DEFAULT_BATCH_SIZE, force_refresh: bool = False
    ) -> Result[list[ProfileRecord]]:
        """Fetch ``count`` records and write them with replace-on-conflict.

        Without ``force_refresh`` nothing happens when the store already holds
        at least ``count`` records; the empty ``Ok`` then means "nothing new
        fetched", and callers read the data from the live views. A failed
        fetch leaves the store untouched.
        """
        try:
            if not force_refresh:
                local_count = await self._store.count()
                if local_count >= count:
                    logger.debug("refresh_skipped", local_count=local_count, requested=count)
                    return Ok([])

            fetched = await self._source.fetch_many(count)
            if isinstance(fetched, Err):
                logger.warning("refresh_failed", reason=fetched.reason)
                return fetched
            if not fetched.value:
                return Err("No users received from API", ErrorCode.NO_DATA)

            written = await self._store.insert_many(fetched.value, replace=True)
            logger.info("profiles_refreshed", fetched=len(fetched.value), written=len(written))
            return Ok(fetched.value)
        except asyncio.CancelledError:
            logger.info("refresh_cancelled", requested=count)
            raise
        except Exception as e:
            logger.error("refresh_error", error=str(e))
            return Err.from_exception(e)

    async def fill(self, count: int = DEFAULT_BATCH_SIZE) -> Result[list[ProfileRecord]]:
        """Always fetch ``count`` more records, regardless of what is stored."""
        return await self.refresh(count, force_refresh=True)

    async def add_one(self) -> Result[ProfileRecord]:
        """Fetch exactly one remote record and store it."""
        try:
            fetched = await self._source.fetch_one()
            if isinstance(fetched, Err):
                logger.warning("add_one_failed", reason=fetched.reason)
                return fetched
            await self._store.insert(fetched.value, replace=True)
            logger.info("profile_added", identifier=fetched.value.identifier)
            return fetched
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("add_one_error", error=str(e))
            return Err.from_exception(e)

    # --- Manual writes ---

    async def create_manual(self, record: ProfileRecord) -> Result[ProfileRecord]:
        """Store a locally created record, marked as manual."""
        manual = dataclasses.replace(record, is_from_remote=False)
        try:
            await self._store.insert(manual)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("create_manual_failed", identifier=manual.identifier, error=str(e))
            return Err.from_exception(e)
        logger.info("profile_created", identifier=manual.identifier)
        return Ok(manual)

    async def update(self, record: ProfileRecord) -> Result[ProfileRecord]:
        try:
            affected = await self._store.update(record)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            return Err.from_exception(e)
        if affected == 0:
            return Err(
                "User not found or no changes made",
                ErrorCode.RECORD_NOT_FOUND,
                {"identifier": record.identifier},
            )
        return Ok(record)

    async def update_contact(
        self, identifier: str, email: str, phone: str, cell: str
    ) -> Result[int]:
        """Change only email, phone and cell of a stored record."""
        try:
            affected = await self._store.update_contact(identifier, email, phone, cell)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            return Err.from_exception(e)
        if affected == 0:
            return Err("User not found", ErrorCode.RECORD_NOT_FOUND, {"identifier": identifier})
        return Ok(affected)

    async def delete_one(self, identifier: str) -> Result[int]:
        try:
            deleted = await self._store.delete_by_id(identifier)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            return Err.from_exception(e)
        if deleted == 0:
            return Err("User not found", ErrorCode.RECORD_NOT_FOUND, {"identifier": identifier})
        logger.info("profile_deleted", identifier=identifier)
        return Ok(deleted)

    async def delete_all(self) -> Result[int]:
        try:
            deleted = await self._store.delete_all()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            return Err.from_exception(e)
        logger.info("profiles_cleared", deleted=deleted)
        return Ok(deleted)

    async def delete_by_provenance(self, is_from_remote: bool) -> Result[int]:
        try:
            return Ok(await self._store.delete_by_provenance(is_from_remote))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            return Err.from_exception(e)

    # --- Queries ---

    async def get_by_id(self, identifier: str) -> Result[ProfileRecord | None]:
        try:
            return Ok(await self._store.get_by_id(identifier))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            return Err.from_exception(e)

    async def count(self) -> Result[int]:
        try:
            return Ok(await self._store.count())
        except asyncio.CancelledError:
            raise
        except Exception as e:
            return Err.from_exception(e)

    async def is_empty(self) -> Result[bool]:
        counted = await self.count()
        if isinstance(counted, Err):
            return counted
        return Ok(counted.value == 0)
