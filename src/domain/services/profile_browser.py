"""Browsing session: the observable state a profile list/detail shell binds to."""

import asyncio
from typing import Any

import structlog

from core.result import Err, Result
from domain.entities.profile import ProfileRecord
from domain.repositories.profile_store import IProfileStore
from domain.services.lookup import LookupOutcome, LookupResolver, LookupStatus
from domain.services.observable import ObservableValue
from domain.services.query_view import QueryViewManager, SortMode
from domain.services.sync_service import DEFAULT_BATCH_SIZE, ProfileSyncService
from domain.services.task_scope import TaskScope

logger = structlog.get_logger()


class ProfileBrowser:
    """Runs sync operations in its own task scope and publishes their effects.

    Data reaches ``results`` only through the store's live views; operation
    outcomes only touch ``is_loading``, ``error``, ``user_count`` and
    ``selected``. Closing the browser cancels outstanding operations and the
    active view.
    """

    def __init__(self, sync: ProfileSyncService, store: IProfileStore) -> None:
        self._sync = sync
        self._scope = TaskScope("profile-browser")
        self.is_loading: ObservableValue[bool] = ObservableValue(False)
        self.error: ObservableValue[str | None] = ObservableValue(None)
        self.user_count: ObservableValue[int] = ObservableValue(0)
        self.selected: ObservableValue[ProfileRecord | None] = ObservableValue(None)
        self.view = QueryViewManager(store)
        self.lookup = LookupResolver(store, selected=self.selected)
        self._unsubscribe_results = self.view.results.subscribe(self._on_results)

    @property
    def results(self) -> ObservableValue[list[ProfileRecord]]:
        return self.view.results

    @property
    def scope(self) -> TaskScope:
        return self._scope

    # --- Lifecycle ---

    def start(self) -> asyncio.Task[None]:
        """Populate the store if it is empty."""
        return self._scope.launch(self._populate(), name="ensure-populated")

    async def close(self) -> None:
        self._unsubscribe_results()
        self.view.close()
        await self._scope.close()

    # --- Remote operations ---

    def load(self, count: int = DEFAULT_BATCH_SIZE, force: bool = False) -> asyncio.Task[None]:
        return self._scope.launch(self._load(count, force), name="load")

    def fill_database(self, count: int = DEFAULT_BATCH_SIZE) -> asyncio.Task[None]:
        return self._scope.launch(self._fill(count), name="fill")

    def add_random(self) -> asyncio.Task[None]:
        return self._scope.launch(self._add_random(), name="add-random")

    # --- Manual operations ---

    def create_manual(self, record: ProfileRecord) -> asyncio.Task[None]:
        return self._scope.launch(self._create_manual(record), name="create-manual")

    def update(self, record: ProfileRecord) -> asyncio.Task[None]:
        return self._scope.launch(self._update(record), name="update")

    def delete(self, identifier: str) -> asyncio.Task[None]:
        return self._scope.launch(self._delete(identifier), name="delete")

    def empty_database(self) -> asyncio.Task[None]:
        return self._scope.launch(self._empty(), name="empty")

    # --- View state ---

    def set_sort_mode(self, mode: SortMode) -> None:
        self.view.set_sort_mode(mode)

    def set_search_text(self, text: str) -> None:
        self.view.set_search_text(text)

    def clear_search(self) -> None:
        self.view.clear_search()

    def select(self, record: ProfileRecord) -> None:
        self.selected.set(record)

    def clear_selection(self) -> None:
        self.selected.set(None)

    def clear_error(self) -> None:
        self.error.set(None)

    # --- Lookup ---

    def scan(self, scanned_text: str) -> asyncio.Task[LookupOutcome]:
        return self._scope.launch(self._scan(scanned_text), name="scan")

    def reset_lookup(self) -> None:
        self.lookup.reset()

    # --- Operation bodies ---

    async def _populate(self) -> None:
        self.is_loading.set(True)
        try:
            self._report(await self._sync.ensure_populated())
        finally:
            self.is_loading.set(False)

    async def _load(self, count: int, force: bool) -> None:
        self.is_loading.set(True)
        self.error.set(None)
        try:
            self._report(await self._sync.refresh(count, force_refresh=force))
        finally:
            self.is_loading.set(False)

    async def _fill(self, count: int) -> None:
        self.is_loading.set(True)
        self.error.set(None)
        try:
            self._report(await self._sync.fill(count), "Failed to fill database")
        finally:
            self.is_loading.set(False)

    async def _add_random(self) -> None:
        self._report(await self._sync.add_one())

    async def _create_manual(self, record: ProfileRecord) -> None:
        self._report(await self._sync.create_manual(record), "Failed to create user")

    async def _update(self, record: ProfileRecord) -> None:
        result = await self._sync.update(record)
        if self._report(result, "Failed to update user"):
            current = self.selected.value
            if current is not None and current.identifier == record.identifier:
                self.selected.set(record)

    async def _delete(self, identifier: str) -> None:
        result = await self._sync.delete_one(identifier)
        if self._report(result, "Failed to delete user"):
            current = self.selected.value
            if current is not None and current.identifier == identifier:
                self.selected.set(None)

    async def _empty(self) -> None:
        self.is_loading.set(True)
        try:
            if self._report(await self._sync.delete_all(), "Failed to empty database"):
                self.selected.set(None)
                self.lookup.reset()
        finally:
            self.is_loading.set(False)

    async def _scan(self, scanned_text: str) -> LookupOutcome:
        self.error.set(None)
        outcome = await self.lookup.resolve(scanned_text)
        if outcome.status in (LookupStatus.NOT_FOUND, LookupStatus.FAILED):
            self.error.set(outcome.message)
        return outcome

    def _report(self, result: Result[Any], context: str | None = None) -> bool:
        """Publish a failure to ``error``; True when ``result`` succeeded."""
        if isinstance(result, Err):
            self.error.set(f"{context}: {result.reason}" if context else result.reason)
            logger.info("browser_operation_failed", error_code=result.error_code.value)
            return False
        return True

    def _on_results(self, records: list[ProfileRecord]) -> None:
        if not self.view.is_searching:
            self.user_count.set(len(records))
        elif not self._scope.closed:
            self._scope.launch(self._refresh_count(), name="count")

    async def _refresh_count(self) -> None:
        counted = await self._sync.count()
        if not isinstance(counted, Err):
            self.user_count.set(counted.value)
