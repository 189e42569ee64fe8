"""Remote profile source protocol."""

from typing import Protocol

from core.result import Result
from domain.entities.profile import ProfileRecord


class IProfileSource(Protocol):
    """A remote generator of fresh profile records.

    Implementations never raise; every outcome is a ``Result``.
    """

    async def fetch_many(
        self, count: int, page: int | None = None
    ) -> Result[list[ProfileRecord]]:
        """Fetch ``count`` freshly generated records (empty is a failure)."""
        ...

    async def fetch_one(self) -> Result[ProfileRecord]:
        """Fetch a single freshly generated record."""
        ...
