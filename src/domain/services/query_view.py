"""Sorted and searched live view of the profile store."""

from enum import StrEnum

import structlog

from domain.entities.profile import (
    ProfileRecord,
    location_key,
    name_key,
    recency_key,
)
from domain.repositories.profile_store import IProfileStore, ISubscription, SnapshotCallback
from domain.services.observable import ObservableValue

logger = structlog.get_logger()


class SortMode(StrEnum):
    """Display orderings; each reverse variant mirrors its forward one."""

    NEWEST_FIRST = "newest_first"
    OLDEST_FIRST = "oldest_first"
    NAME_A_TO_Z = "name_a_to_z"
    NAME_Z_TO_A = "name_z_to_a"
    LOCATION_A_TO_Z = "location_a_to_z"
    LOCATION_Z_TO_A = "location_z_to_a"

    @property
    def is_reversed(self) -> bool:
        return self in _REVERSED_MODES

    @property
    def family(self) -> str:
        """Which store ordering backs this mode: recency, name or location."""
        if self.value.startswith("name"):
            return "name"
        if self.value.startswith("location"):
            return "location"
        return "recency"


_REVERSED_MODES = frozenset(
    {SortMode.OLDEST_FIRST, SortMode.NAME_Z_TO_A, SortMode.LOCATION_Z_TO_A}
)


def order_records(
    records: list[ProfileRecord], mode: SortMode, *, presorted: bool = True
) -> list[ProfileRecord]:
    """Apply ``mode`` to a snapshot.

    Store views arrive already in forward order (newest first, A to Z);
    other snapshots, such as search results, are sorted here first. The
    reverse modes are always computed by reversing the forward order.
    """
    ordered = list(records)
    if not presorted:
        if mode.family == "name":
            ordered.sort(key=name_key)
        elif mode.family == "location":
            ordered.sort(key=location_key)
        else:
            ordered.sort(key=recency_key, reverse=True)
    if mode.is_reversed:
        ordered.reverse()
    return ordered


class QueryViewManager:
    """Keeps ``results`` equal to the store filtered by search text, ordered by sort mode.

    Exactly one store subscription is active at a time. Switching mode or
    search text cancels the old subscription before the new one is made,
    and each snapshot fully replaces the published list.
    """

    def __init__(self, store: IProfileStore) -> None:
        self._store = store
        self._sort_mode = SortMode.NEWEST_FIRST
        self._search_text = ""
        self._subscription: ISubscription | None = None
        self._generation = 0
        self.results: ObservableValue[list[ProfileRecord]] = ObservableValue([])
        self._resubscribe()

    @property
    def sort_mode(self) -> SortMode:
        return self._sort_mode

    @property
    def search_text(self) -> str:
        return self._search_text

    @property
    def is_searching(self) -> bool:
        return bool(self._search_text.strip())

    def set_sort_mode(self, mode: SortMode) -> None:
        if mode == self._sort_mode:
            return
        self._sort_mode = mode
        self._resubscribe()

    def set_search_text(self, text: str) -> None:
        if text == self._search_text:
            return
        self._search_text = text
        self._resubscribe()

    def clear_search(self) -> None:
        self.set_search_text("")

    def close(self) -> None:
        """Drop the store subscription; ``results`` keeps its last value."""
        self._generation += 1
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def _resubscribe(self) -> None:
        # Cancel first so a late snapshot of the old view cannot land after the new one
        self.close()
        generation = self._generation
        mode = self._sort_mode
        # Whitespace-only text means no search; other text is matched as typed
        query = self._search_text if self.is_searching else ""

        def on_snapshot(records: list[ProfileRecord]) -> None:
            if generation != self._generation:
                return
            if query:
                matching = [record for record in records if record.matches(query)]
                ordered = order_records(matching, mode, presorted=False)
            else:
                ordered = order_records(records, mode)
            self.results.set(ordered)

        self._subscription = self._subscribe(query, mode, on_snapshot)
        logger.debug("query_view_subscribed", sort_mode=mode.value, searching=bool(query))

    def _subscribe(
        self, query: str, mode: SortMode, callback: SnapshotCallback
    ) -> ISubscription:
        if query:
            return self._store.observe_search(query, callback)
        if mode.family == "name":
            return self._store.observe_by_name(callback)
        if mode.family == "location":
            return self._store.observe_by_location(callback)
        return self._store.observe_by_recency(callback)
