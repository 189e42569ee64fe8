"""Composition root: wires store, remote source and services together."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import structlog

from core.config import Settings, get_settings
from core.logging import setup_logging
from core.result import Err, Result
from domain.entities.profile import ProfileRecord
from domain.services.lookup import VisualCodeEncoder, render_lookup_code
from domain.services.profile_browser import ProfileBrowser
from domain.services.sync_service import ProfileSyncService
from infrastructure.database.profile_store import ProfileStore
from infrastructure.database.session import create_engine, create_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.remote.random_user_client import RandomUserClient

logger = structlog.get_logger()


@dataclass
class Application:
    """Explicitly constructed collaborators; nothing here is a global."""

    settings: Settings
    store: ProfileStore
    remote: RandomUserClient
    sync: ProfileSyncService

    def open_browser(self) -> ProfileBrowser:
        """Create a browsing session bound to this application's store."""
        return ProfileBrowser(self.sync, self.store)

    def render_lookup_code(self, encoder: VisualCodeEncoder, record: ProfileRecord) -> Result[Any]:
        """Render a record's scannable lookup code at the configured size."""
        return render_lookup_code(encoder, record, self.settings.lookup_code_size)


def create_app(
    settings: Settings | None = None,
    remote: RandomUserClient | None = None,
) -> Application:
    """Create and configure the application."""
    settings = settings or get_settings()
    engine = create_engine(settings)
    session_factory = create_session_factory(engine)

    def uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    store = ProfileStore(uow_factory, engine=engine)
    remote = remote or RandomUserClient.from_settings(settings)
    sync = ProfileSyncService(store, remote, default_batch_size=settings.default_batch_size)
    return Application(settings=settings, store=store, remote=remote, sync=sync)


@asynccontextmanager
async def lifespan(app: Application, populate: bool = True) -> AsyncIterator[Application]:
    """Application lifespan manager for startup/shutdown tasks."""
    await app.store.initialize()
    if populate:
        result = await app.sync.ensure_populated()
        if isinstance(result, Err):
            # Keep running on whatever is cached locally
            logger.warning("startup_population_failed", reason=result.reason)
    try:
        yield app
    finally:
        await app.remote.aclose()
        await app.store.close()


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.log_redact_pii)
    async with lifespan(create_app(settings)) as app:
        counted = await app.sync.count()
        logger.info("profile_store_ready", app=settings.app_name, count=counted.unwrap_or(0))


if __name__ == "__main__":
    asyncio.run(main())
