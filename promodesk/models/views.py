"""Read-only projections returned by the derived views.

These wrap stored records with the labels the dashboard, blitz schedule
and promotion board display.  Nothing here is persisted.
"""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from promodesk.models.entities import Artist, Music, MusicalBlitz, Promotion, PromotionType
from promodesk.models.status import ExpirationStatus, PromotionCountdown, ReleaseStatus


class _ViewModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class DashboardStats(_ViewModel):
    """Active record counts shown on the dashboard tiles."""

    radios: int = 0
    city_halls: int = 0
    businesses: int = 0
    artists: int = 0
    music: int = 0
    promotions: int = 0
    events: int = 0
    musical_blitzes: int = 0
    email_campaigns: int = 0
    pending_submissions: int = 0


class UpcomingRelease(_ViewModel):
    music: Music
    artist: Artist
    release_status: ReleaseStatus | None = None
    expiration_status: ExpirationStatus | None = None


class BlitzItem(_ViewModel):
    blitz: MusicalBlitz
    music: Music
    artist: Artist


class BlitzSchedule(_ViewModel):
    """Blitzes split into the planning week (Monday to Friday) and later dates."""

    week_start: datetime.date
    week_end: datetime.date
    this_week: list[BlitzItem]
    upcoming: list[BlitzItem]


class PromotionBoardItem(_ViewModel):
    promotion: Promotion
    countdown: PromotionCountdown
    radio_name: str | None = None
    artist_name: str | None = None


class PromotionFilters(_ViewModel):
    """Promotion board filters.  Empty fields do not filter.

    ``city`` is a normalized substring match; the rest are exact.  State,
    market and city filters read the promotion's radio station, so a
    promotion whose station is gone never matches them.
    """

    artist_id: str = ""
    type: PromotionType | None = None
    state: str = ""
    crowley_market: str = ""
    city: str = ""

    def is_empty(self) -> bool:
        return not (self.artist_id or self.type or self.state or self.crowley_market or self.city.strip())


class PromotionFilterOptions(_ViewModel):
    """Distinct values offered by the board's filter selectors."""

    states: list[str]
    cities: list[str]
    types: list[PromotionType]
    markets: list[str]


class PromotionBoard(_ViewModel):
    """Filtered promotions, cash deals first, with the cash total."""

    items: list[PromotionBoardItem]
    total_verba: float
    options: PromotionFilterOptions


class SyncStatus(_ViewModel):
    """State of the submission poller, for the sync indicator."""

    configured: bool
    running: bool
    syncing: bool
    has_new_data: bool
    pending_submissions: int
    last_synced_at: datetime.datetime | None = None
    last_error: str | None = None
