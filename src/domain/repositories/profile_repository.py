"""Profile repository protocol."""

from typing import Protocol

from domain.entities.profile import ProfileRecord


class IProfileRepository(Protocol):
    """Repository interface for ProfileRecord entities (one session)."""

    async def get(self, identifier: str) -> ProfileRecord | None:
        """Get a record by identifier."""
        ...

    async def exists(self, identifier: str) -> bool:
        """Check whether a record with this identifier is stored."""
        ...

    async def add(self, record: ProfileRecord) -> None:
        """Stage a new record for insertion."""
        ...

    async def upsert(self, record: ProfileRecord) -> None:
        """Insert a record, replacing any row with the same identifier."""
        ...

    async def update(self, record: ProfileRecord) -> int:
        """Overwrite the mutable fields of a stored record; returns rows affected."""
        ...

    async def update_contact(
        self, identifier: str, email: str, phone: str, cell: str
    ) -> int:
        """Overwrite the three contact fields; returns rows affected."""
        ...

    async def delete(self, identifier: str) -> int:
        """Delete one record; returns rows affected."""
        ...

    async def delete_all(self) -> int:
        """Delete every record; returns rows affected."""
        ...

    async def delete_by_provenance(self, is_from_remote: bool) -> int:
        """Delete records by origin; returns rows affected."""
        ...

    async def count(self) -> int:
        """Count stored records."""
        ...

    async def list_by_recency(self) -> list[ProfileRecord]:
        """All records, newest first."""
        ...

    async def list_by_name(self) -> list[ProfileRecord]:
        """All records by first name then last name, A to Z."""
        ...

    async def list_by_location(self) -> list[ProfileRecord]:
        """All records by country then city, A to Z."""
        ...

    async def list_by_provenance(self, is_from_remote: bool) -> list[ProfileRecord]:
        """Records of one origin, newest first."""
        ...
