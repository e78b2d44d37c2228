"""promoDesk domain models.

    - entities.py  -- Persisted records (stations, artists, music, promotions...)
    - requests.py  -- Editor payloads: promotion modes and artist-with-music saves
    - status.py    -- Date-window classifications
    - views.py     -- Read-only projections served by the dashboard endpoints
"""

from __future__ import annotations

from promodesk.models.entities import (
    ActiveView,
    AppEvent,
    Artist,
    Business,
    CityHall,
    EmailCampaign,
    Music,
    MusicalBlitz,
    MusicGenre,
    Promotion,
    PromotionType,
    RadioProfile,
    RadioStation,
    RadioSubmission,
    RadioType,
    RecipientCategory,
    Record,
    SheetsConfig,
    Theme,
)
from promodesk.models.requests import (
    PROMOTION_REQUEST_ADAPTER,
    ArtistSaveRequest,
    ClonePromotionRequest,
    EditPromotionRequest,
    MusicDraft,
    NewPromotionRequest,
    PromotionRequest,
)
from promodesk.models.status import (
    CountdownSeverity,
    ExpirationBucket,
    ExpirationStatus,
    PromotionCountdown,
    ReleaseBucket,
    ReleaseStatus,
)
from promodesk.models.views import (
    BlitzItem,
    BlitzSchedule,
    DashboardStats,
    PromotionBoard,
    PromotionBoardItem,
    PromotionFilterOptions,
    PromotionFilters,
    SyncStatus,
    UpcomingRelease,
)

__all__ = [
    "PROMOTION_REQUEST_ADAPTER",
    "ActiveView",
    "AppEvent",
    "Artist",
    "ArtistSaveRequest",
    "BlitzItem",
    "BlitzSchedule",
    "Business",
    "CityHall",
    "ClonePromotionRequest",
    "CountdownSeverity",
    "DashboardStats",
    "EditPromotionRequest",
    "EmailCampaign",
    "ExpirationBucket",
    "ExpirationStatus",
    "Music",
    "MusicDraft",
    "MusicGenre",
    "MusicalBlitz",
    "NewPromotionRequest",
    "Promotion",
    "PromotionBoard",
    "PromotionBoardItem",
    "PromotionCountdown",
    "PromotionFilterOptions",
    "PromotionFilters",
    "PromotionRequest",
    "PromotionType",
    "RadioProfile",
    "RadioStation",
    "RadioSubmission",
    "RadioType",
    "RecipientCategory",
    "Record",
    "ReleaseBucket",
    "ReleaseStatus",
    "SheetsConfig",
    "SyncStatus",
    "Theme",
    "UpcomingRelease",
]
