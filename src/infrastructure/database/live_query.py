"""Push-based live views over the profile table."""

import asyncio
import inspect
from collections.abc import Awaitable, Callable

import structlog

from domain.entities.profile import ProfileRecord
from domain.repositories.profile_store import SnapshotCallback

logger = structlog.get_logger()

SnapshotQuery = Callable[[], Awaitable[list[ProfileRecord]]]


class ChangeSignal:
    """Version counter bumped after every committed write to the table."""

    def __init__(self) -> None:
        self._version = 0
        self._event = asyncio.Event()

    @property
    def version(self) -> int:
        return self._version

    def bump(self) -> None:
        """Record a committed write and wake every waiting view."""
        self._version += 1
        event, self._event = self._event, asyncio.Event()
        event.set()

    async def wait_past(self, seen: int) -> int:
        """Wait until the version differs from ``seen``; return the new version."""
        while self._version == seen:
            await self._event.wait()
        return self._version


class Subscription:
    """A live view delivering full snapshots to one callback.

    The first snapshot is delivered as soon as the task runs; after that a
    new snapshot follows every committed write. Writes that land while a
    query is running are coalesced into the next snapshot, so each delivery
    reflects the latest committed state and deliveries never go backwards.
    """

    def __init__(
        self,
        name: str,
        query: SnapshotQuery,
        callback: SnapshotCallback,
        signal: ChangeSignal,
        on_done: Callable[["Subscription"], None] | None = None,
    ) -> None:
        self.name = name
        self._query = query
        self._callback = callback
        self._signal = signal
        self._on_done = on_done
        self._cancelled = False
        self.deliveries = 0
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=f"live-view:{name}"
        )

    @property
    def active(self) -> bool:
        return not self._cancelled and not self._task.done()

    def cancel(self) -> None:
        """Stop the view; no snapshot is delivered after this returns."""
        if self._cancelled:
            return
        self._cancelled = True
        self._task.cancel()

    async def wait_closed(self) -> None:
        """Wait for the background task to finish after ``cancel``."""
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        seen = -1
        try:
            while not self._cancelled:
                seen = await self._signal.wait_past(seen)
                try:
                    snapshot = await self._query()
                except Exception:
                    logger.exception("live_view_query_failed", view=self.name)
                    continue
                if self._cancelled:
                    return
                await self._deliver(snapshot)
        finally:
            if self._on_done:
                self._on_done(self)

    async def _deliver(self, snapshot: list[ProfileRecord]) -> None:
        try:
            outcome = self._callback(snapshot)
            if inspect.isawaitable(outcome):
                await outcome
            self.deliveries += 1
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("live_view_callback_failed", view=self.name)
