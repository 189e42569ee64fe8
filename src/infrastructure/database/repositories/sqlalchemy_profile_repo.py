"""SQLAlchemy implementation of Profile repository."""

from dataclasses import fields

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import ProfileRecord
from infrastructure.database.models import ProfileRecordModel

_FIELD_NAMES = tuple(f.name for f in fields(ProfileRecord))

# Fixed at creation; whole-record updates leave them alone
_IMMUTABLE_FIELDS = frozenset({"identifier", "created_at", "is_from_remote"})
_MUTABLE_FIELDS = tuple(name for name in _FIELD_NAMES if name not in _IMMUTABLE_FIELDS)


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, identifier: str) -> ProfileRecord | None:
        """Get a record by identifier."""
        stmt = select(ProfileRecordModel).where(ProfileRecordModel.identifier == identifier)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def exists(self, identifier: str) -> bool:
        stmt = select(func.count()).where(ProfileRecordModel.identifier == identifier)
        result = await self._session.execute(stmt)
        return bool(result.scalar_one())

    async def add(self, record: ProfileRecord) -> None:
        self._session.add(self._to_model(record))
        await self._session.flush()

    async def upsert(self, record: ProfileRecord) -> None:
        await self._session.merge(self._to_model(record))
        await self._session.flush()

    async def update(self, record: ProfileRecord) -> int:
        """Overwrite every mutable column of an existing row."""
        stmt = (
            update(ProfileRecordModel)
            .where(ProfileRecordModel.identifier == record.identifier)
            .values({name: getattr(record, name) for name in _MUTABLE_FIELDS})
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def update_contact(
        self, identifier: str, email: str, phone: str, cell: str
    ) -> int:
        stmt = (
            update(ProfileRecordModel)
            .where(ProfileRecordModel.identifier == identifier)
            .values(email=email, phone=phone, cell=cell)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def delete(self, identifier: str) -> int:
        stmt = delete(ProfileRecordModel).where(ProfileRecordModel.identifier == identifier)
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def delete_all(self) -> int:
        result = await self._session.execute(delete(ProfileRecordModel))
        return result.rowcount or 0

    async def delete_by_provenance(self, is_from_remote: bool) -> int:
        stmt = delete(ProfileRecordModel).where(
            ProfileRecordModel.is_from_remote == is_from_remote
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(ProfileRecordModel))
        return int(result.scalar_one())

    async def list_by_recency(self) -> list[ProfileRecord]:
        """All records, newest first."""
        stmt = select(ProfileRecordModel).order_by(
            ProfileRecordModel.created_at.desc(),
            ProfileRecordModel.identifier.desc(),
        )
        return await self._list(stmt)

    async def list_by_name(self) -> list[ProfileRecord]:
        """All records sorted by first name, then last name."""
        stmt = select(ProfileRecordModel).order_by(
            ProfileRecordModel.first_name,
            ProfileRecordModel.last_name,
            ProfileRecordModel.identifier,
        )
        return await self._list(stmt)

    async def list_by_location(self) -> list[ProfileRecord]:
        """All records sorted by country, then city."""
        stmt = select(ProfileRecordModel).order_by(
            ProfileRecordModel.country,
            ProfileRecordModel.city,
            ProfileRecordModel.identifier,
        )
        return await self._list(stmt)

    async def list_by_provenance(self, is_from_remote: bool) -> list[ProfileRecord]:
        stmt = (
            select(ProfileRecordModel)
            .where(ProfileRecordModel.is_from_remote == is_from_remote)
            .order_by(
                ProfileRecordModel.created_at.desc(),
                ProfileRecordModel.identifier.desc(),
            )
        )
        return await self._list(stmt)

    async def _list(self, stmt) -> list[ProfileRecord]:  # type: ignore[no-untyped-def]
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: ProfileRecordModel) -> ProfileRecord:
        """Convert ORM model to domain entity."""
        return ProfileRecord(**{name: getattr(model, name) for name in _FIELD_NAMES})

    def _to_model(self, entity: ProfileRecord) -> ProfileRecordModel:
        """Convert domain entity to ORM model."""
        return ProfileRecordModel(**{name: getattr(entity, name) for name in _FIELD_NAMES})
