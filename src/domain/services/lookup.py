"""Lookup codes: the text payload behind a record's scannable code.

A payload is one ``Key: value`` line per field::

    UserID: 0f8b..._1718000000000
    Name: Mr John Doe
    Email: john@example.com
    Phone: 555-0100
    Location: Springfield, United States

Only ``UserID`` is required; the other lines are informational.
"""

import asyncio
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol

import structlog

from core.exceptions import ErrorCode
from core.result import Err, Ok, Result
from domain.entities.profile import ProfileRecord
from domain.repositories.profile_store import IProfileStore
from domain.services.observable import ObservableValue

logger = structlog.get_logger()

USER_ID_PREFIX = "UserID:"
NAME_PREFIX = "Name:"
EMAIL_PREFIX = "Email:"
PHONE_PREFIX = "Phone:"
LOCATION_PREFIX = "Location:"

_FIELD_PREFIXES = (
    ("user_id", USER_ID_PREFIX),
    ("name", NAME_PREFIX),
    ("email", EMAIL_PREFIX),
    ("phone", PHONE_PREFIX),
    ("location", LOCATION_PREFIX),
)

IDENTIFIER_PREFIX_LENGTH = 8


@dataclass(frozen=True)
class LookupPayload:
    """Parsed lookup payload."""

    user_id: str
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None


def encode_payload(record: ProfileRecord) -> str:
    """Render the lookup payload for ``record``."""
    lines = [
        f"{USER_ID_PREFIX} {record.identifier}",
        f"{NAME_PREFIX} {record.full_name}",
        f"{EMAIL_PREFIX} {record.email}",
        f"{PHONE_PREFIX} {record.phone}",
        f"{LOCATION_PREFIX} {record.location_label}",
    ]
    return "\n".join(lines) + "\n"


def parse_payload(text: str) -> LookupPayload | None:
    """Parse scanned text; None unless a non-empty ``UserID`` line is present."""
    try:
        values: dict[str, str] = {}
        for line in text.splitlines():
            line = line.strip()
            for key, prefix in _FIELD_PREFIXES:
                if line.startswith(prefix):
                    values[key] = line[len(prefix):].strip()
                    break
        user_id = values.pop("user_id", "")
        if not user_id:
            return None
        return LookupPayload(user_id=user_id, **values)
    except Exception:
        logger.debug("lookup_payload_unparseable")
        return None


def extract_identifier(text: str) -> str | None:
    payload = parse_payload(text)
    return payload.user_id if payload else None


# --- Image capabilities (implemented outside this package) ---


class VisualCodeEncoder(Protocol):
    def encode_to_image(self, text: str, width: int, height: int) -> Any | None:
        """Render ``text`` as a scannable image; None on failure."""
        ...


class FrameDecoder(Protocol):
    async def decode_frame(self, frame: Any) -> str | None:
        """Return the text of a code visible in ``frame``, if any."""
        ...


def render_lookup_code(
    encoder: VisualCodeEncoder, record: ProfileRecord, size: int = 300
) -> Result[Any]:
    """Encode a record's lookup payload into a square image."""
    try:
        image = encoder.encode_to_image(encode_payload(record), size, size)
    except Exception as e:
        logger.warning("lookup_code_encode_failed", identifier=record.identifier, error=str(e))
        return Err(f"Could not generate code: {e}", ErrorCode.ENCODE_FAILED)
    if image is None:
        return Err("Could not generate code", ErrorCode.ENCODE_FAILED)
    return Ok(image)


# --- Resolution ---


class LookupStatus(StrEnum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    SUPPRESSED = "suppressed"
    INVALID = "invalid"
    FAILED = "failed"


@dataclass(frozen=True)
class LookupOutcome:
    status: LookupStatus
    identifier: str | None = None
    record: ProfileRecord | None = None
    store_count: int | None = None
    reason: str | None = None

    @property
    def identifier_prefix(self) -> str:
        return (self.identifier or "")[:IDENTIFIER_PREFIX_LENGTH]

    @property
    def message(self) -> str | None:
        """User-facing explanation for a miss or failure."""
        if self.status == LookupStatus.NOT_FOUND:
            return (
                "User not found in current database.\n\n"
                f"Scanned ID: {self.identifier_prefix}...\n"
                f"Database has: {self.store_count} users\n\n"
                "Try: Settings → Reset Database → Generate fresh codes"
            )
        if self.status == LookupStatus.FAILED:
            return f"Database error: {self.reason}"
        return None


class LookupResolver:
    """Resolves scanned payloads to stored records.

    Once an identifier resolves, further scans of it are suppressed without
    touching the store until ``reset`` is called.
    """

    def __init__(
        self,
        store: IProfileStore,
        selected: ObservableValue[ProfileRecord | None] | None = None,
    ) -> None:
        self._store = store
        self.selected = selected if selected is not None else ObservableValue(None)
        self._last_resolved: str | None = None

    @property
    def last_resolved(self) -> str | None:
        return self._last_resolved

    def reset(self) -> None:
        self._last_resolved = None

    async def resolve(self, scanned_text: str) -> LookupOutcome:
        identifier = extract_identifier(scanned_text)
        if identifier is None:
            return LookupOutcome(LookupStatus.INVALID)
        return await self.resolve_identifier(identifier)

    async def resolve_identifier(self, identifier: str) -> LookupOutcome:
        if identifier == self._last_resolved:
            return LookupOutcome(LookupStatus.SUPPRESSED, identifier=identifier)
        try:
            store_count = await self._store.count()
            record = await self._store.get_by_id(identifier)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("lookup_failed", identifier_prefix=identifier[:IDENTIFIER_PREFIX_LENGTH], error=str(e))
            return LookupOutcome(LookupStatus.FAILED, identifier=identifier, reason=str(e))

        if record is None:
            logger.warning(
                "lookup_not_found",
                identifier_prefix=identifier[:IDENTIFIER_PREFIX_LENGTH],
                store_count=store_count,
            )
            return LookupOutcome(
                LookupStatus.NOT_FOUND, identifier=identifier, store_count=store_count
            )

        self._last_resolved = identifier
        self.selected.set(record)
        logger.info("lookup_resolved", identifier_prefix=identifier[:IDENTIFIER_PREFIX_LENGTH])
        return LookupOutcome(
            LookupStatus.FOUND, identifier=identifier, record=record, store_count=store_count
        )


class FrameScanner:
    """Decodes camera frames, keeping only the most recent one.

    ``submit`` never queues: a frame still waiting when a newer one arrives
    is dropped. Decoded text goes to the resolver one frame at a time.
    """

    def __init__(self, decoder: FrameDecoder, resolver: LookupResolver) -> None:
        self._decoder = decoder
        self._resolver = resolver
        self._latest: Any | None = None
        self._pending = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self.dropped_frames = 0
        self.outcomes: ObservableValue[LookupOutcome | None] = ObservableValue(None)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if not self.running:
            self._task = asyncio.get_running_loop().create_task(
                self._run(), name="frame-scanner"
            )

    def submit(self, frame: Any) -> None:
        if self._latest is not None:
            self.dropped_frames += 1
        self._latest = frame
        self._pending.set()

    async def close(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self._latest = None

    async def _run(self) -> None:
        while True:
            await self._pending.wait()
            self._pending.clear()
            frame, self._latest = self._latest, None
            if frame is None:
                continue
            try:
                text = await self._decoder.decode_frame(frame)
            except Exception:
                logger.exception("frame_decode_failed")
                continue
            if not text:
                continue
            outcome = await self._resolver.resolve(text)
            if outcome.status != LookupStatus.INVALID:
                self.outcomes.set(outcome)
