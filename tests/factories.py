"""Builders and fakes shared by the test suite."""

import asyncio
import itertools
from collections.abc import Callable
from typing import Any

from core.exceptions import ApiError, ErrorCode
from core.result import Err, Ok, Result
from domain.entities.profile import ProfileRecord, make_identifier

# Snapshot waits should never take this long
WAIT_TIMEOUT = 2.0

_FIRST_NAMES = ["Ada", "grace", "Linus", "Barbara", "Ken", "Margaret", "Dennis", "Frances"]
_LAST_NAMES = ["Lovelace", "Hopper", "Torvalds", "Liskov", "Thompson", "Hamilton", "Ritchie", "Allen"]
_PLACES = [
    ("London", "United Kingdom"),
    ("Arlington", "United States"),
    ("Helsinki", "Finland"),
    ("Boston", "United States"),
    ("Berkeley", "United States"),
    ("Paoli", "United States"),
    ("Bronxville", "United States"),
    ("Lawrenceburg", "Canada"),
]


def make_record(index: int, created_at: int | None = None, **overrides: Any) -> ProfileRecord:
    """Deterministic record number ``index``; higher indexes are newer."""
    created_at = created_at if created_at is not None else 1_700_000_000_000 + index
    city, country = _PLACES[index % len(_PLACES)]
    login_uuid = f"uuid-{index:04d}"
    values: dict[str, Any] = {
        "identifier": make_identifier(login_uuid, created_at),
        "first_name": _FIRST_NAMES[index % len(_FIRST_NAMES)],
        "last_name": _LAST_NAMES[index % len(_LAST_NAMES)],
        "email": f"user{index}@example.com",
        "title": "Ms",
        "phone": f"555-01{index:02d}",
        "cell": f"555-02{index:02d}",
        "city": city,
        "country": country,
        "login_uuid": login_uuid,
        "created_at": created_at,
    }
    values.update(overrides)
    return ProfileRecord(**values)


def make_records(count: int, start: int = 0) -> list[ProfileRecord]:
    return [make_record(i) for i in range(start, start + count)]


class FakeProfileSource:
    """In-memory profile source that counts its calls."""

    def __init__(self) -> None:
        self.calls: list[int] = []
        self.failure: Err | None = None
        self._counter = itertools.count(1000)

    async def fetch_many(self, count: int, page: int | None = None) -> Result[list[ProfileRecord]]:
        self.calls.append(count)
        if self.failure is not None:
            return self.failure
        return Ok([make_record(next(self._counter)) for _ in range(count)])

    async def fetch_one(self) -> Result[ProfileRecord]:
        result = await self.fetch_many(1)
        if isinstance(result, Err):
            return result
        return Ok(result.value[0])

    def fail_with(self, error_code: ErrorCode = ErrorCode.NETWORK_ERROR) -> None:
        self.failure = Err.from_exception(ApiError("remote down", error_code))


class GatedProfileSource(FakeProfileSource):
    """Profile source whose fetches hang until ``gate`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.gate = asyncio.Event()
        self.fetching = asyncio.Event()

    async def fetch_many(self, count: int, page: int | None = None) -> Result[list[ProfileRecord]]:
        self.fetching.set()
        await self.gate.wait()
        return await super().fetch_many(count, page)


class SnapshotRecorder:
    """Live-view callback that keeps every delivered snapshot."""

    def __init__(self) -> None:
        self.snapshots: list[list[ProfileRecord]] = []

    def __call__(self, records: list[ProfileRecord]) -> None:
        self.snapshots.append(records)

    @property
    def latest(self) -> list[ProfileRecord] | None:
        return self.snapshots[-1] if self.snapshots else None


async def eventually(predicate: Callable[[], bool], timeout: float = WAIT_TIMEOUT) -> None:
    """Poll ``predicate`` until it holds, failing the test after ``timeout``."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met within timeout")
        await asyncio.sleep(0.01)


def random_user_body(count: int, seed: str = "f00dfeed") -> dict[str, Any]:
    """A response body shaped like the random profile endpoint's."""
    results = []
    for i in range(count):
        results.append(
            {
                "gender": "female" if i % 2 else "male",
                "name": {"title": "Mx", "first": f"First{i}", "last": f"Last{i}"},
                "location": {
                    "street": {"number": 10 + i, "name": "Main Street"},
                    "city": "Springfield",
                    "state": "Oregon",
                    "country": "United States",
                    # The endpoint sends numeric postcodes for some nationalities
                    "postcode": 97477 if i % 2 == 0 else "OX1 2JD",
                    "coordinates": {"latitude": "44.05", "longitude": "-123.02"},
                    "timezone": {"offset": "-8:00", "description": "Pacific Time"},
                },
                "email": f"first{i}.last{i}@example.com",
                "login": {
                    "uuid": f"remote-uuid-{i}",
                    "username": f"user{i}",
                    "password": "hunter2",
                    "salt": "s",
                    "md5": "m",
                    "sha1": "s1",
                    "sha256": "s256",
                },
                "dob": {"date": "1990-01-01T00:00:00.000Z", "age": 34},
                "registered": {"date": "2015-06-01T00:00:00.000Z", "age": 9},
                "phone": "(555) 010-0000",
                "cell": "(555) 020-0000",
                "id": {"name": "", "value": None},
                "picture": {
                    "large": "https://example.com/l.jpg",
                    "medium": "https://example.com/m.jpg",
                    "thumbnail": "https://example.com/t.jpg",
                },
                "nat": "US",
                "unexpected": "ignored",
            }
        )
    return {"results": results, "info": {"seed": seed, "results": count, "page": 1, "version": "1.4"}}
