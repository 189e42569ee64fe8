"""Record store protocol consumed by the sync and view services."""

from collections.abc import Awaitable, Callable
from typing import Protocol

from domain.entities.profile import ProfileRecord

SnapshotCallback = Callable[[list[ProfileRecord]], Awaitable[None] | None]


class ISubscription(Protocol):
    """Handle to a live view; cancelling stops all further deliveries."""

    @property
    def active(self) -> bool:
        ...

    def cancel(self) -> None:
        ...


class IProfileStore(Protocol):
    """Persisted profile table with live, full-snapshot read views.

    Write methods raise ``StoreError`` on persistence failures.
    """

    async def insert(self, record: ProfileRecord, *, replace: bool = False) -> str:
        ...

    async def insert_many(
        self, records: list[ProfileRecord], *, replace: bool = False
    ) -> list[str]:
        ...

    async def get_by_id(self, identifier: str) -> ProfileRecord | None:
        ...

    async def update(self, record: ProfileRecord) -> int:
        ...

    async def update_contact(
        self, identifier: str, email: str, phone: str, cell: str
    ) -> int:
        ...

    async def delete_by_id(self, identifier: str) -> int:
        ...

    async def delete_all(self) -> int:
        ...

    async def delete_by_provenance(self, is_from_remote: bool) -> int:
        ...

    async def count(self) -> int:
        ...

    async def snapshot_by_recency(self) -> list[ProfileRecord]:
        ...

    def observe_by_recency(self, callback: SnapshotCallback) -> ISubscription:
        ...

    def observe_by_name(self, callback: SnapshotCallback) -> ISubscription:
        ...

    def observe_by_location(self, callback: SnapshotCallback) -> ISubscription:
        ...

    def observe_search(self, query: str, callback: SnapshotCallback) -> ISubscription:
        ...

    def observe_by_provenance(
        self, is_from_remote: bool, callback: SnapshotCallback
    ) -> ISubscription:
        ...
