"""FastAPI API routes for promoDesk.

Thin handlers: each one validates the edit payload at the form boundary,
calls exactly one lifecycle operation (or view) on the objects held in
``app.state``, and wraps the result.  Errors propagate to
``ErrorHandlingMiddleware``.

# ─── API ROUTE MAP ─────────────────────────────────────────────────────
#
# Endpoint                                         Method  Description
# ──────────────────────────────────────────────────────────────────────
# /api/v1/health                                   GET     Health check
# /api/v1/collections/{kind}                       GET     Active / archived / search
# /api/v1/collections/{kind}                       POST    Save (create or replace)
# /api/v1/collections/{kind}/{id}                  GET     One record
# /api/v1/collections/{kind}/{id}                  DELETE  Purge (with cascade)
# /api/v1/collections/{kind}/{id}/archive          POST    Archive (with cascade)
# /api/v1/collections/{kind}/{id}/restore          POST    Restore
# /api/v1/collections/{kind}/purge-archived        POST    Purge every archived record
# /api/v1/artists/with-music                       POST    Artist editor save
# /api/v1/promotions                               POST    New / clone / edit promotion
# /api/v1/promotions/board                         GET     Running promotions, filters, cash total
# /api/v1/music/{id}/toggle-dashboard              POST    Hide/show on dashboard
# /api/v1/campaigns                                POST    Record an email send
# /api/v1/markets                                  GET/POST/PUT  Market tags
# /api/v1/markets/{name}                           DELETE  Remove a market tag
# /api/v1/submissions                              GET     Pending queue
# /api/v1/submissions/status                       GET     Poller state
# /api/v1/submissions/sync                         POST    Poll now
# /api/v1/submissions/{sid}/approve                POST    Promote to radio
# /api/v1/submissions/{sid}                        DELETE  Discard
# /api/v1/intake                                   POST    Public radio registration
# /api/v1/settings/sheets                          GET/PUT Sheets endpoint URL
# /api/v1/preferences                              GET/PUT Active view + theme
# /api/v1/backup/export                            GET     Download backup
# /api/v1/backup/import                            POST    Restore backup
# /api/v1/dashboard                                GET     Stats + release reminders
# /api/v1/blitz/schedule                           GET     This week / upcoming blitzes
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import Response

from promodesk import __version__
from promodesk.api.schemas import (
    ApproveSubmissionRequest,
    ArchiveRequest,
    ArtistWithMusicResponse,
    BackupImportResponse,
    BlitzScheduleResponse,
    DashboardResponse,
    HealthResponse,
    IntakeResponse,
    MarketListResponse,
    MarketRenameRequest,
    MarketRequest,
    PreferencesRequest,
    PreferencesResponse,
    PromotionBoardResponse,
    PurgeArchivedResponse,
    RecordListResponse,
    RecordResponse,
    SheetsSettingsRequest,
    SheetsSettingsResponse,
    SubmissionListResponse,
    SyncResponse,
)
from promodesk.interfaces.sheets_provider import ISheetsProvider
from promodesk.models.entities import EmailCampaign, Music, MusicalBlitz, PromotionType, RadioStation
from promodesk.models.requests import PROMOTION_REQUEST_ADAPTER, ArtistSaveRequest
from promodesk.models.views import PromotionFilters
from promodesk.services.backup_service import BackupService
from promodesk.services.form_validation import (
    validate_artist_save,
    validate_blitz,
    validate_music,
    validate_promotion,
    validate_sheets_url,
)
from promodesk.services.submission_poller import SubmissionPoller
from promodesk.store.domain_store import DomainStore
from promodesk.store.kinds import EntityKind
from promodesk.store.views import DerivedViews
from promodesk.utils.errors import ConfigurationError, InvalidFieldError
from promodesk.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")


# ---------------------------------------------------------------------------
# Dependencies (resolved from app.state, populated in main._build_all)
# ---------------------------------------------------------------------------


def _get_store(request: Request) -> DomainStore:
    return request.app.state.store


def _get_views(request: Request) -> DerivedViews:
    return request.app.state.views


def _get_poller(request: Request) -> SubmissionPoller:
    return request.app.state.poller


def _get_sheets_provider(request: Request) -> ISheetsProvider:
    return request.app.state.sheets_provider


def _get_backup_service(request: Request) -> BackupService:
    return request.app.state.backup_service


def _get_config(request: Request) -> dict[str, Any]:
    return getattr(request.app.state, "config", {}) or {}


StoreDep = Annotated[DomainStore, Depends(_get_store)]
ViewsDep = Annotated[DerivedViews, Depends(_get_views)]
PollerDep = Annotated[SubmissionPoller, Depends(_get_poller)]
SheetsDep = Annotated[ISheetsProvider, Depends(_get_sheets_provider)]
BackupDep = Annotated[BackupService, Depends(_get_backup_service)]
ConfigDep = Annotated[dict[str, Any], Depends(_get_config)]


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health(request: Request, store: StoreDep) -> HealthResponse:
    storage = request.app.state.storage
    return HealthResponse(
        version=__version__,
        storage=storage.get_provider_name(),
        sync_configured=bool(store.sheets_config.sheets_url),
        persistence_warning=store.persistence_warning,
    )


# ---------------------------------------------------------------------------
# Generic collections
# ---------------------------------------------------------------------------


@router.get("/collections/{kind}", response_model=RecordListResponse, summary="List a collection")
async def list_records(
    kind: EntityKind,
    views: ViewsDep,
    archived: bool = False,
    q: Annotated[str | None, Query(max_length=200)] = None,
) -> RecordListResponse:
    """Active records in display order, or the archive; ``q`` filters by text."""
    records = views.search(kind, q or "", archived=archived)
    return RecordListResponse(records=[r.to_storage() for r in records], total=len(records))


@router.post("/collections/{kind}", response_model=RecordResponse, summary="Create or replace a record")
async def save_record(
    kind: EntityKind,
    store: StoreDep,
    payload: Annotated[dict[str, Any], Body()],
) -> RecordResponse:
    """New email campaigns are stamped like a send; existing ones are immutable."""
    record = kind.model.model_validate(payload)
    match record:
        case Music():
            validate_music(record)
        case MusicalBlitz():
            validate_blitz(record)
        case _:
            pass
    saved = store.save(kind, record)
    return RecordResponse(record=saved.to_storage(), persistence_warning=store.persistence_warning)


@router.post(
    "/collections/{kind}/purge-archived",
    response_model=PurgeArchivedResponse,
    summary="Permanently delete every archived record of a kind",
)
async def purge_archived(kind: EntityKind, store: StoreDep) -> PurgeArchivedResponse:
    removed = store.purge_all_archived(kind)
    return PurgeArchivedResponse(kind=kind.value, removed=removed, persistence_warning=store.persistence_warning)


@router.get("/collections/{kind}/{entity_id}", response_model=RecordResponse, summary="Get one record")
async def get_record(kind: EntityKind, entity_id: str, store: StoreDep) -> RecordResponse:
    return RecordResponse(record=store.get(kind, entity_id).to_storage())


@router.post("/collections/{kind}/{entity_id}/archive", response_model=RecordResponse, summary="Archive a record")
async def archive_record(
    kind: EntityKind,
    entity_id: str,
    store: StoreDep,
    body: ArchiveRequest | None = None,
) -> RecordResponse:
    record = store.archive(kind, entity_id, label=body.label if body else None)
    return RecordResponse(record=record.to_storage(), persistence_warning=store.persistence_warning)


@router.post("/collections/{kind}/{entity_id}/restore", response_model=RecordResponse, summary="Restore a record")
async def restore_record(kind: EntityKind, entity_id: str, store: StoreDep) -> RecordResponse:
    record = store.restore(kind, entity_id)
    return RecordResponse(record=record.to_storage(), persistence_warning=store.persistence_warning)


@router.delete("/collections/{kind}/{entity_id}", response_model=RecordResponse, summary="Purge a record")
async def purge_record(kind: EntityKind, entity_id: str, store: StoreDep) -> RecordResponse:
    record = store.purge(kind, entity_id)
    return RecordResponse(record=record.to_storage(), persistence_warning=store.persistence_warning)


# ---------------------------------------------------------------------------
# Composite editors
# ---------------------------------------------------------------------------


@router.post("/artists/with-music", response_model=ArtistWithMusicResponse, summary="Save an artist and its songs")
async def save_artist_with_music(body: ArtistSaveRequest, store: StoreDep) -> ArtistWithMusicResponse:
    validate_artist_save(body)
    artist, music = store.save_artist_with_music(body)
    return ArtistWithMusicResponse(
        artist=artist.to_storage(),
        music=[track.to_storage() for track in music],
        persistence_warning=store.persistence_warning,
    )


@router.post("/promotions", response_model=RecordListResponse, summary="Create, clone or edit promotions")
async def save_promotion(
    payload: Annotated[dict[str, Any], Body()],
    store: StoreDep,
) -> RecordListResponse:
    """Body carries ``mode``: ``new``, ``clone`` or ``edit``."""
    request = PROMOTION_REQUEST_ADAPTER.validate_python(payload)
    validate_promotion(request)
    saved = store.save_promotion(request)
    return RecordListResponse(
        records=[p.to_storage() for p in saved],
        total=len(saved),
        persistence_warning=store.persistence_warning,
    )


@router.get("/promotions/board", response_model=PromotionBoardResponse, summary="Running promotions")
async def promotion_board(
    views: ViewsDep,
    artist_id: Annotated[str, Query(alias="artistId")] = "",
    promotion_type: Annotated[PromotionType | None, Query(alias="type")] = None,
    state: Annotated[str, Query()] = "",
    crowley_market: Annotated[str, Query(alias="crowleyMarket")] = "",
    city: Annotated[str, Query(max_length=200)] = "",
) -> PromotionBoardResponse:
    now = datetime.now()
    filters = PromotionFilters(
        artist_id=artist_id,
        type=promotion_type,
        state=state,
        crowley_market=crowley_market,
        city=city,
    )
    board = views.promotion_board(now, filters)
    return PromotionBoardResponse(
        generated_at=now,
        items=board.items,
        total_verba=board.total_verba,
        options=board.options,
    )


@router.post("/music/{music_id}/toggle-dashboard", response_model=RecordResponse, summary="Hide or show a track")
async def toggle_music_dashboard(music_id: str, store: StoreDep) -> RecordResponse:
    track = store.toggle_music_dashboard(music_id)
    return RecordResponse(record=track.to_storage(), persistence_warning=store.persistence_warning)


@router.post("/campaigns", response_model=RecordResponse, summary="Record an email campaign")
async def record_campaign(payload: Annotated[dict[str, Any], Body()], store: StoreDep) -> RecordResponse:
    campaign = store.record_campaign(EmailCampaign.model_validate(payload))
    return RecordResponse(record=campaign.to_storage(), persistence_warning=store.persistence_warning)


# ---------------------------------------------------------------------------
# Crowley market tags
# ---------------------------------------------------------------------------


@router.get("/markets", response_model=MarketListResponse, summary="List market tags")
async def list_markets(store: StoreDep) -> MarketListResponse:
    return MarketListResponse(markets=store.markets)


@router.post("/markets", response_model=MarketListResponse, summary="Add a market tag")
async def add_market(body: MarketRequest, store: StoreDep) -> MarketListResponse:
    markets = store.add_market(body.name)
    return MarketListResponse(markets=markets, persistence_warning=store.persistence_warning)


@router.put("/markets", response_model=MarketListResponse, summary="Rename a market tag")
async def rename_market(body: MarketRenameRequest, store: StoreDep) -> MarketListResponse:
    markets = store.rename_market(body.old, body.new)
    return MarketListResponse(markets=markets, persistence_warning=store.persistence_warning)


@router.delete("/markets/{name}", response_model=MarketListResponse, summary="Delete a market tag")
async def delete_market(name: str, store: StoreDep) -> MarketListResponse:
    markets = store.delete_market(name)
    return MarketListResponse(markets=markets, persistence_warning=store.persistence_warning)


# ---------------------------------------------------------------------------
# Pending submissions
# ---------------------------------------------------------------------------


@router.get("/submissions", response_model=SubmissionListResponse, summary="Pending radio registrations")
async def list_submissions(store: StoreDep) -> SubmissionListResponse:
    submissions = store.submissions
    return SubmissionListResponse(submissions=[s.to_storage() for s in submissions], total=len(submissions))


@router.get("/submissions/status", response_model=SyncResponse, summary="Poller state")
async def submission_status(poller: PollerDep) -> SyncResponse:
    return SyncResponse(added=0, status=poller.status())


@router.post("/submissions/sync", response_model=SyncResponse, summary="Poll the intake spreadsheet now")
async def sync_submissions(poller: PollerDep) -> SyncResponse:
    added = await poller.poll_once(force=True)
    _logger.info("manual_sync_requested", added=added)
    return SyncResponse(added=added, status=poller.status())


@router.post(
    "/submissions/{submission_id}/approve",
    response_model=RecordResponse,
    summary="Approve a registration into the radio list",
)
async def approve_submission(
    submission_id: str,
    store: StoreDep,
    body: ApproveSubmissionRequest | None = None,
) -> RecordResponse:
    station = store.approve_submission(submission_id, overrides=body.overrides if body else None)
    return RecordResponse(record=station.to_storage(), persistence_warning=store.persistence_warning)


@router.delete("/submissions/{submission_id}", response_model=RecordResponse, summary="Discard a registration")
async def delete_submission(submission_id: str, store: StoreDep) -> RecordResponse:
    submission = store.delete_submission(submission_id)
    return RecordResponse(record=submission.to_storage(), persistence_warning=store.persistence_warning)


@router.post("/intake", response_model=IntakeResponse, summary="Public radio registration form")
async def submit_intake(
    payload: Annotated[dict[str, Any], Body()],
    store: StoreDep,
    sheets: SheetsDep,
) -> IntakeResponse:
    """Forward one registration to the spreadsheet; it comes back through the poller."""
    url = store.sheets_config.sheets_url
    if not url:
        raise ConfigurationError(message="Online registration is not configured yet")

    payload = {key: value for key, value in payload.items() if key not in ("id", "isArchived")}
    station = RadioStation.model_validate(payload)
    if not station.name.strip():
        raise InvalidFieldError(message="Station name is required", field="name")
    if not station.is_crowley_audited:
        station = station.model_copy(update={"crowley_markets": []})

    body = station.to_storage()
    body.pop("id", None)
    body.pop("isArchived", None)
    await sheets.submit(url, body)
    return IntakeResponse(name=station.name)


# ---------------------------------------------------------------------------
# Settings and preferences
# ---------------------------------------------------------------------------


@router.get("/settings/sheets", response_model=SheetsSettingsResponse, summary="Sheets endpoint URL")
async def get_sheets_settings(store: StoreDep) -> SheetsSettingsResponse:
    return SheetsSettingsResponse(sheets_url=store.sheets_config.sheets_url)


@router.put("/settings/sheets", response_model=SheetsSettingsResponse, summary="Change the sheets endpoint URL")
async def update_sheets_settings(body: SheetsSettingsRequest, store: StoreDep) -> SheetsSettingsResponse:
    validate_sheets_url(body.sheets_url)
    config = store.update_sheets_config(body.sheets_url)
    return SheetsSettingsResponse(sheets_url=config.sheets_url, persistence_warning=store.persistence_warning)


@router.get("/preferences", response_model=PreferencesResponse, summary="UI preferences")
async def get_preferences(store: StoreDep) -> PreferencesResponse:
    return PreferencesResponse(active_view=store.active_view, theme=store.theme)


@router.put("/preferences", response_model=PreferencesResponse, summary="Update UI preferences")
async def update_preferences(body: PreferencesRequest, store: StoreDep) -> PreferencesResponse:
    warning = None
    if body.active_view is not None:
        store.set_active_view(body.active_view)
        warning = store.persistence_warning
    if body.theme is not None:
        store.set_theme(body.theme)
        warning = warning or store.persistence_warning
    return PreferencesResponse(active_view=store.active_view, theme=store.theme, persistence_warning=warning)


# ---------------------------------------------------------------------------
# Backup
# ---------------------------------------------------------------------------


@router.get("/backup/export", summary="Download a backup of every collection")
async def export_backup(backup: BackupDep) -> Response:
    return Response(
        content=backup.export_json().encode("utf-8"),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{backup.filename()}"'},
    )


@router.post("/backup/import", response_model=BackupImportResponse, summary="Restore a backup file")
async def import_backup(request: Request, backup: BackupDep, store: StoreDep) -> BackupImportResponse:
    """Body is the raw backup document.  A corrupted file changes nothing."""
    restored = backup.import_json(await request.body())
    return BackupImportResponse(restored=restored, persistence_warning=store.persistence_warning)


# ---------------------------------------------------------------------------
# Dashboards
# ---------------------------------------------------------------------------


@router.get("/dashboard", response_model=DashboardResponse, summary="Dashboard stats and release reminders")
async def dashboard(
    views: ViewsDep,
    poller: PollerDep,
    config: ConfigDep,
    today: date | None = None,
) -> DashboardResponse:
    today = today or date.today()
    windows = config.get("dashboard", {})
    return DashboardResponse(
        stats=views.dashboard_stats(),
        upcoming_releases=list(views.upcoming_releases(today, windows.get("upcoming_release_days", 30))),
        release_reminders=list(views.release_reminders(today, windows.get("release_reminder_days", 7))),
        sync=poller.status(),
    )


@router.get("/blitz/schedule", response_model=BlitzScheduleResponse, summary="Blitz schedule")
async def blitz_schedule(views: ViewsDep, today: date | None = None) -> BlitzScheduleResponse:
    return BlitzScheduleResponse(schedule=views.blitz_schedule(today or date.today()))
