"""Pydantic request/response schemas for the promoDesk API.

Stored records travel in their persisted camelCase form (``isArchived``,
``artistId``), exactly as they appear in storage and backup files.  The
envelopes around them use plain snake_case fields.

Every mutation response carries ``persistence_warning``: ``None`` when all
touched collections were written, otherwise the message telling the
operator to export a backup.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from promodesk.models.entities import ActiveView, Theme
from promodesk.models.views import (
    BlitzSchedule,
    DashboardStats,
    PromotionBoardItem,
    PromotionFilterOptions,
    SyncStatus,
    UpcomingRelease,
)


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
    field: str | None = None


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    storage: str
    sync_configured: bool
    persistence_warning: str | None = None


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class RecordResponse(BaseModel):
    """One stored record after a lifecycle operation."""

    record: dict[str, Any]
    persistence_warning: str | None = None


class RecordListResponse(BaseModel):
    records: list[dict[str, Any]]
    total: int
    persistence_warning: str | None = None


class ArchiveRequest(BaseModel):
    """Optional confirmation label echoed into the audit log."""

    label: str | None = None


class PurgeArchivedResponse(BaseModel):
    kind: str
    removed: int
    persistence_warning: str | None = None


class ArtistWithMusicResponse(BaseModel):
    artist: dict[str, Any]
    music: list[dict[str, Any]]
    persistence_warning: str | None = None


# ---------------------------------------------------------------------------
# Markets, submissions, settings
# ---------------------------------------------------------------------------

class MarketRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class MarketRenameRequest(BaseModel):
    old: str = Field(..., min_length=1)
    new: str = Field(..., min_length=1, max_length=200)


class MarketListResponse(BaseModel):
    markets: list[str]
    persistence_warning: str | None = None


class SubmissionListResponse(BaseModel):
    submissions: list[dict[str, Any]]
    total: int


class ApproveSubmissionRequest(BaseModel):
    """Field corrections made in the review form (camelCase keys)."""

    overrides: dict[str, Any] = Field(default_factory=dict)


class SyncResponse(BaseModel):
    added: int
    status: SyncStatus


class IntakeResponse(BaseModel):
    status: str = "received"
    name: str


class SheetsSettingsRequest(BaseModel):
    sheets_url: str = ""


class SheetsSettingsResponse(BaseModel):
    sheets_url: str
    persistence_warning: str | None = None


class PreferencesRequest(BaseModel):
    active_view: ActiveView | None = None
    theme: Theme | None = None


class PreferencesResponse(BaseModel):
    active_view: ActiveView
    theme: Theme
    persistence_warning: str | None = None


# ---------------------------------------------------------------------------
# Backup and dashboards
# ---------------------------------------------------------------------------

class BackupImportResponse(BaseModel):
    restored: dict[str, int]
    persistence_warning: str | None = None


class DashboardResponse(BaseModel):
    stats: DashboardStats
    upcoming_releases: list[UpcomingRelease]
    release_reminders: list[UpcomingRelease]
    sync: SyncStatus


class BlitzScheduleResponse(BaseModel):
    schedule: BlitzSchedule


class PromotionBoardResponse(BaseModel):
    generated_at: datetime
    items: list[PromotionBoardItem]
    total_verba: float = 0.0
    options: PromotionFilterOptions | None = None
