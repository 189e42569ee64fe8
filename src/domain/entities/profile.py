"""Profile record domain entity."""

import time
from dataclasses import dataclass, field
from uuid import uuid4


def now_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def make_identifier(source_id: str, created_at: int) -> str:
    """Qualify a source identifier with the local creation time."""
    return f"{source_id}_{created_at}"


@dataclass
class ProfileRecord:
    """Domain entity for one stored person profile.

    ``identifier``, ``created_at`` and ``is_from_remote`` are fixed when the
    record is created; the store never rewrites them on update.
    """

    identifier: str
    first_name: str
    last_name: str
    email: str
    title: str = ""
    gender: str = ""
    nationality: str = ""
    phone: str = ""
    cell: str = ""

    # Address
    street_number: int = 0
    street_name: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    postcode: str = ""
    latitude: str = ""
    longitude: str = ""
    timezone_offset: str = ""
    timezone_description: str = ""

    # Dates
    dob_date: str = ""
    dob_age: int = 0
    registered_date: str = ""
    registered_age: int = 0

    # Credential bundle (opaque)
    login_uuid: str = ""
    username: str = ""
    password: str = ""
    salt: str = ""
    md5: str = ""
    sha1: str = ""
    sha256: str = ""

    # National id, either part may be missing
    id_name: str | None = None
    id_value: str | None = None

    # Pictures
    picture_large: str = ""
    picture_medium: str = ""
    picture_thumbnail: str = ""

    # Metadata
    created_at: int = field(default_factory=now_millis)
    is_from_remote: bool = True

    @property
    def full_name(self) -> str:
        """Display name including the title, e.g. ``Mr John Doe``."""
        return " ".join(part for part in (self.title, self.first_name, self.last_name) if part)

    @property
    def location_label(self) -> str:
        return f"{self.city}, {self.country}"

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on first name, last name or email."""
        needle = query.casefold()
        return (
            needle in self.first_name.casefold()
            or needle in self.last_name.casefold()
            or needle in self.email.casefold()
        )

    @classmethod
    def create_manual(
        cls,
        first_name: str,
        last_name: str,
        email: str,
        **attributes: object,
    ) -> "ProfileRecord":
        """Build a locally created record with a fresh time-qualified identifier."""
        created_at = now_millis()
        login_uuid = str(attributes.pop("login_uuid", "") or uuid4())
        return cls(
            identifier=make_identifier(login_uuid, created_at),
            first_name=first_name,
            last_name=last_name,
            email=email,
            login_uuid=login_uuid,
            created_at=created_at,
            is_from_remote=False,
            **attributes,  # type: ignore[arg-type]
        )


def name_key(record: ProfileRecord) -> tuple[str, str, str]:
    return (record.first_name, record.last_name, record.identifier)


def location_key(record: ProfileRecord) -> tuple[str, str, str]:
    return (record.country, record.city, record.identifier)


def recency_key(record: ProfileRecord) -> tuple[int, str]:
    return (record.created_at, record.identifier)
