"""Map remote profile payloads onto flattened profile records."""

from collections.abc import Callable

from domain.entities.profile import ProfileRecord, make_identifier, now_millis
from infrastructure.remote.schemas import RemoteProfile


def to_record(
    payload: RemoteProfile, clock: Callable[[], int] = now_millis
) -> ProfileRecord:
    """Convert one remote profile into a remote-provenance record.

    The identifier combines the remote login uuid with the local creation
    time, so a uuid reused by the remote side still yields a new row.
    """
    created_at = clock()
    return ProfileRecord(
        identifier=make_identifier(payload.login.uuid, created_at),
        gender=payload.gender,
        title=payload.name.title,
        first_name=payload.name.first,
        last_name=payload.name.last,
        nationality=payload.nat,
        email=payload.email,
        phone=payload.phone,
        cell=payload.cell,
        street_number=payload.location.street.number,
        street_name=payload.location.street.name,
        city=payload.location.city,
        state=payload.location.state,
        country=payload.location.country,
        postcode=payload.location.postcode,
        latitude=payload.location.coordinates.latitude,
        longitude=payload.location.coordinates.longitude,
        timezone_offset=payload.location.timezone.offset,
        timezone_description=payload.location.timezone.description,
        dob_date=payload.dob.date,
        dob_age=payload.dob.age,
        registered_date=payload.registered.date,
        registered_age=payload.registered.age,
        login_uuid=payload.login.uuid,
        username=payload.login.username,
        password=payload.login.password,
        salt=payload.login.salt,
        md5=payload.login.md5,
        sha1=payload.login.sha1,
        sha256=payload.login.sha256,
        id_name=payload.id.name or None,
        id_value=payload.id.value or None,
        picture_large=payload.picture.large,
        picture_medium=payload.picture.medium,
        picture_thumbnail=payload.picture.thumbnail,
        created_at=created_at,
        is_from_remote=True,
    )


def to_records(
    payloads: list[RemoteProfile], clock: Callable[[], int] = now_millis
) -> list[ProfileRecord]:
    return [to_record(payload, clock) for payload in payloads]
