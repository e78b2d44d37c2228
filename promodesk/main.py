"""promoDesk FastAPI application entry point.

Wires together the storage provider, domain store, derived views, sheets
client, submission poller and routes.  Loads configuration from ``.env``
and ``config/config.yaml`` and configures structured logging.

The submission poller is a background task owned by the application
lifespan: it starts after the store is hydrated and is cancelled before
the shared HTTP client closes.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from promodesk import __version__
from promodesk.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from promodesk.api.routes import router as api_router
from promodesk.config.loader import load_config
from promodesk.config.settings import Settings
from promodesk.providers.sheets.apps_script_provider import AppsScriptSheetsProvider
from promodesk.providers.storage.sqlite_storage import SQLiteStorageProvider
from promodesk.services.backup_service import BackupService
from promodesk.services.submission_poller import SubmissionPoller
from promodesk.store.domain_store import DomainStore
from promodesk.store.views import DerivedViews
from promodesk.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings, app_config: dict[str, Any]) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=app_settings.sheets_timeout_seconds)

    # -- Storage + store --
    storage = SQLiteStorageProvider(db_path=app_settings.storage_db_path)
    storage.initialize()
    store = DomainStore(storage)
    store.hydrate()
    views = DerivedViews(store)

    # -- Sheets sync --
    sheets_provider = AppsScriptSheetsProvider(
        http_client=http_client,
        timeout=app_settings.sheets_timeout_seconds,
    )
    poller = SubmissionPoller(
        store=store,
        sheets_provider=sheets_provider,
        interval=app_settings.sheets_poll_interval_seconds,
        debounce=app_settings.sheets_debounce_seconds,
        signal_seconds=app_settings.new_data_signal_seconds,
    )

    backup_service = BackupService(
        store=store,
        filename_prefix=app_config.get("backup", {}).get("filename_prefix", "promodesk-backup"),
    )

    return {
        "http_client": http_client,
        "storage": storage,
        "store": store,
        "views": views,
        "sheets_provider": sheets_provider,
        "poller": poller,
        "backup_service": backup_service,
        "config": app_config,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings, config)

    for key, value in components.items():
        setattr(application.state, key, value)

    poller: SubmissionPoller = components["poller"]
    poller.start()

    _logger.info(
        "app_startup",
        version=__version__,
        environment=config["app"]["env"],
        storage=components["storage"].get_provider_name(),
        sync_configured=bool(components["store"].sheets_config.sheets_url),
    )

    yield

    # -- Shutdown: stop polling, then close the shared httpx client --
    await poller.stop()
    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="Poller stopped, HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="promoDesk API",
        version=__version__,
        description=(
            "Contact and campaign management for music promotion: radio stations, "
            "city halls, businesses, artists and their tracks, promotions, events, "
            "blitz actions and email campaigns, plus the public radio intake queue."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=config.get("app", {}).get("cors_origins"))

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "promodesk.main:app",
        host=config["app"]["host"],
        port=config["app"]["port"],
        reload=(settings.app_env == "development"),
    )
