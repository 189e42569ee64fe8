"""SQLAlchemy ORM models."""

from sqlalchemy import BigInteger, Boolean, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileRecordModel(Base):
    """One flattened profile record (primary key: time-qualified identifier)."""

    __tablename__ = "profile_records"

    identifier: Mapped[str] = mapped_column(String(255), primary_key=True)

    # Demographics and contact
    gender: Mapped[str] = mapped_column(String(20), default="")
    title: Mapped[str] = mapped_column(String(50), default="")
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    nationality: Mapped[str] = mapped_column(String(10), default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), default="")
    cell: Mapped[str] = mapped_column(String(50), default="")

    # Address
    street_number: Mapped[int] = mapped_column(Integer, default=0)
    street_name: Mapped[str] = mapped_column(String(255), default="")
    city: Mapped[str] = mapped_column(String(100), default="")
    state: Mapped[str] = mapped_column(String(100), default="")
    country: Mapped[str] = mapped_column(String(100), default="")
    postcode: Mapped[str] = mapped_column(String(20), default="")
    latitude: Mapped[str] = mapped_column(String(20), default="")
    longitude: Mapped[str] = mapped_column(String(20), default="")
    timezone_offset: Mapped[str] = mapped_column(String(10), default="")
    timezone_description: Mapped[str] = mapped_column(String(255), default="")

    # Dates
    dob_date: Mapped[str] = mapped_column(String(40), default="")
    dob_age: Mapped[int] = mapped_column(Integer, default=0)
    registered_date: Mapped[str] = mapped_column(String(40), default="")
    registered_age: Mapped[int] = mapped_column(Integer, default=0)

    # Credentials (opaque, never interpreted)
    login_uuid: Mapped[str] = mapped_column(String(64), default="")
    username: Mapped[str] = mapped_column(String(100), default="")
    password: Mapped[str] = mapped_column(String(255), default="")
    salt: Mapped[str] = mapped_column(String(64), default="")
    md5: Mapped[str] = mapped_column(String(64), default="")
    sha1: Mapped[str] = mapped_column(String(64), default="")
    sha256: Mapped[str] = mapped_column(String(128), default="")

    # National id
    id_name: Mapped[str | None] = mapped_column(String(50))
    id_value: Mapped[str | None] = mapped_column(String(100))

    # Pictures
    picture_large: Mapped[str] = mapped_column(String(500), default="")
    picture_medium: Mapped[str] = mapped_column(String(500), default="")
    picture_thumbnail: Mapped[str] = mapped_column(String(500), default="")

    # Metadata
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    is_from_remote: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("ix_profile_records_created_at", "created_at"),
        Index("ix_profile_records_name", "first_name", "last_name"),
        Index("ix_profile_records_location", "country", "city"),
    )
