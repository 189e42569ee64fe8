"""HTTP adapter for the random profile generator."""

from collections.abc import Callable

import httpx
import structlog
from pydantic import ValidationError

from core.config import Settings
from core.exceptions import ApiError, ErrorCode, NetworkError
from core.result import Err, Ok, Result
from domain.entities.profile import ProfileRecord, now_millis
from infrastructure.remote.profile_mapper import to_records
from infrastructure.remote.schemas import RandomProfileResponse

logger = structlog.get_logger()

PROFILES_PATH = "api/"


class RandomUserClient:
    """Remote source adapter: ``GET api/?results=N[&page=P]``.

    Normalizes every outcome into a ``Result``; no retries happen here.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
        )
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "RandomUserClient":
        return cls(
            base_url=settings.remote_base_url,
            timeout=settings.remote_timeout_seconds,
        )

    async def fetch_many(
        self, count: int, page: int | None = None
    ) -> Result[list[ProfileRecord]]:
        """Fetch ``count`` generated profiles mapped to records.

        An empty batch is reported as a failure: it most likely means the
        request itself was malformed.
        """
        params: dict[str, int] = {"results": count}
        if page is not None:
            params["page"] = page

        try:
            response = await self._client.get(PROFILES_PATH, params=params)
        except httpx.HTTPError as e:
            logger.warning("remote_fetch_failed", count=count, error=str(e))
            return Err.from_exception(NetworkError(str(e) or e.__class__.__name__))

        if not response.is_success:
            logger.warning(
                "remote_fetch_rejected",
                count=count,
                status_code=response.status_code,
            )
            return Err.from_exception(
                ApiError(
                    f"API unavailable: {response.status_code} {response.reason_phrase}".rstrip(),
                    status_code=response.status_code,
                )
            )

        try:
            body = RandomProfileResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.warning("remote_response_malformed", error_count=e.error_count())
            return Err.from_exception(
                ApiError("Malformed response from profile API", ErrorCode.MALFORMED_RESPONSE)
            )

        if not body.results:
            logger.warning("remote_fetch_empty", count=count)
            return Err.from_exception(
                ApiError("No users received from API", ErrorCode.NO_DATA)
            )

        records = to_records(body.results, self._clock)
        logger.info(
            "remote_fetch_completed",
            requested=count,
            received=len(records),
            seed=body.info.seed,
        )
        return Ok(records)

    async def fetch_one(self) -> Result[ProfileRecord]:
        """Fetch a single generated profile."""
        result = await self.fetch_many(1)
        if isinstance(result, Err):
            return result
        return Ok(result.value[0])

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
