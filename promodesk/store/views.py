"""Memoized read projections over the domain store.

Every view is a pure function of one or more collections.  Results are
cached in a ``cachetools.LRUCache`` keyed by the view name, its arguments
and the version counters of the collections it reads, so a view is
recomputed only after one of its inputs changed.  Cached results are
tuples or frozen models and are safe to share.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from datetime import date, datetime, timedelta
from typing import Any, TypeVar

from cachetools import LRUCache

from promodesk.models.entities import (
    AppEvent,
    Artist,
    Business,
    CityHall,
    EmailCampaign,
    Music,
    MusicalBlitz,
    Promotion,
    PromotionType,
    RadioStation,
    Record,
)
from promodesk.models.views import (
    BlitzItem,
    BlitzSchedule,
    DashboardStats,
    PromotionBoard,
    PromotionBoardItem,
    PromotionFilterOptions,
    PromotionFilters,
    UpcomingRelease,
)
from promodesk.store.domain_store import SUBMISSIONS_KEY, DomainStore
from promodesk.store.kinds import EntityKind
from promodesk.utils.date_status import (
    business_week,
    expiration_status,
    promotion_countdown,
    release_status,
)
from promodesk.utils.text_normalizer import collation_key, matches_search, normalize_search_text

_T = TypeVar("_T")

_DEFAULT_CACHE_SIZE = 256


def _search_fields(record: Record) -> tuple[Any, ...]:
    """Fields a search term is matched against, per record type."""
    match record:
        case RadioStation():
            return (record.name, record.city, record.state, record.frequency, *record.crowley_markets)
        case CityHall():
            return (record.city_name, record.state, record.mayor)
        case Business():
            return (record.name, record.city, record.category, *record.regions_of_operation)
        case Artist():
            return (record.name, record.genre.value)
        case Music():
            return (record.title, record.composers)
        case Promotion():
            return (record.name, record.details)
        case AppEvent():
            return (record.name, record.city, record.state, record.venue)
        case MusicalBlitz():
            return (record.notes,)
        case EmailCampaign():
            return (record.subject, record.recipient_filter)
        case _:
            return ()


class DerivedViews:
    """Partitions, sorted lists and dashboard projections of the store.

    Parameters
    ----------
    store:
        The domain store to read from.
    cache_size:
        Maximum number of memoized results.
    """

    def __init__(self, store: DomainStore, cache_size: int = _DEFAULT_CACHE_SIZE) -> None:
        self._store = store
        self._cache: LRUCache[Hashable, Any] = LRUCache(maxsize=cache_size)

    def _memo(self, key: Hashable, compute: Callable[[], _T]) -> _T:
        try:
            return self._cache[key]
        except KeyError:
            pass
        value = compute()
        self._cache[key] = value
        return value

    def _v(self, *kinds: EntityKind) -> tuple[int, ...]:
        return tuple(self._store.version(kind.storage_key) for kind in kinds)

    # ------------------------------------------------------------------
    # Partitions
    # ------------------------------------------------------------------

    def active(self, kind: EntityKind) -> tuple[Record, ...]:
        """Records whose archive flag is not set, in collection order."""
        return self._memo(
            ("active", kind, self._v(kind)),
            lambda: tuple(r for r in self._store.records(kind) if not r.is_archived),
        )

    def archived(self, kind: EntityKind) -> tuple[Record, ...]:
        return self._memo(
            ("archived", kind, self._v(kind)),
            lambda: tuple(r for r in self._store.records(kind) if r.is_archived),
        )

    def sorted_active(self, kind: EntityKind) -> tuple[Record, ...]:
        """Active records in display order.

        Artists sort by name ignoring case and accents, events by date
        (oldest first) and campaigns by send time (newest first).  Other
        kinds keep collection order.
        """
        return self._memo(("sorted_active", kind, self._v(kind)), lambda: self._sort(kind, self.active(kind)))

    @staticmethod
    def _sort(kind: EntityKind, records: tuple[Record, ...]) -> tuple[Record, ...]:
        match kind:
            case EntityKind.ARTISTS:
                return tuple(sorted(records, key=lambda r: collation_key(getattr(r, "name", ""))))
            case EntityKind.EVENTS:
                return tuple(sorted(records, key=lambda r: getattr(r, "date")))
            case EntityKind.EMAIL_CAMPAIGNS:
                # Campaigns without a send time go last.
                stamped = [r for r in records if getattr(r, "sent_at", None) is not None]
                unstamped = [r for r in records if getattr(r, "sent_at", None) is None]
                stamped.sort(key=lambda r: getattr(r, "sent_at"), reverse=True)
                return (*stamped, *unstamped)
            case _:
                return records

    def search(self, kind: EntityKind, term: str, archived: bool = False) -> tuple[Record, ...]:
        """Filter a partition by a normalized substring match."""
        source = self.archived(kind) if archived else self.sorted_active(kind)
        if not term or not term.strip():
            return source
        return self._memo(
            ("search", kind, archived, term, self._v(kind)),
            lambda: tuple(r for r in source if matches_search(term, *_search_fields(r))),
        )

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def dashboard_stats(self) -> DashboardStats:
        kinds = tuple(EntityKind)
        versions = (*self._v(*kinds), self._store.version(SUBMISSIONS_KEY))

        def compute() -> DashboardStats:
            counts = {kind.storage_key: len(self.active(kind)) for kind in kinds}
            return DashboardStats.model_validate(
                {**counts, "pendingSubmissions": len(self._store.submissions)}
            )

        return self._memo(("dashboard_stats", versions), compute)

    def upcoming_releases(self, today: date | None = None, window_days: int = 30) -> tuple[UpcomingRelease, ...]:
        """Visible tracks of active artists releasing within *window_days*.

        Includes today; sorted by release date.
        """
        today = today or date.today()

        def compute() -> tuple[UpcomingRelease, ...]:
            artists = {a.id: a for a in self.active(EntityKind.ARTISTS) if isinstance(a, Artist)}
            horizon = today + timedelta(days=window_days)
            items = [
                UpcomingRelease(
                    music=track,
                    artist=artists[track.artist_id],
                    release_status=release_status(track.release_date, today),
                    expiration_status=expiration_status(track.release_date, today),
                )
                for track in self.active(EntityKind.MUSIC)
                if isinstance(track, Music)
                and track.artist_id in artists
                and not track.hide_from_dashboard
                and track.release_date is not None
                and today <= track.release_date <= horizon
            ]
            items.sort(key=lambda item: item.music.release_date or today)
            return tuple(items)

        return self._memo(
            ("upcoming_releases", today, window_days, self._v(EntityKind.ARTISTS, EntityKind.MUSIC)),
            compute,
        )

    def release_reminders(self, today: date | None = None, window_days: int = 7) -> tuple[UpcomingRelease, ...]:
        """The short list shown as a reminder when the app starts."""
        return self.upcoming_releases(today, window_days)

    # ------------------------------------------------------------------
    # Blitz schedule and promotion board
    # ------------------------------------------------------------------

    def blitz_schedule(self, today: date | None = None) -> BlitzSchedule:
        """Active blitzes for the planning week and after it.

        Blitzes whose track or artist no longer exists are left out;
        blitzes before the planning week are not listed.
        """
        today = today or date.today()
        week_start, week_end = business_week(today)

        def compute() -> BlitzSchedule:
            music = {m.id: m for m in self._store.records(EntityKind.MUSIC) if isinstance(m, Music)}
            artists = {a.id: a for a in self._store.records(EntityKind.ARTISTS) if isinstance(a, Artist)}
            items: list[BlitzItem] = []
            for blitz in self.active(EntityKind.MUSICAL_BLITZES):
                if not isinstance(blitz, MusicalBlitz):
                    continue
                track = music.get(blitz.music_id)
                artist = artists.get(track.artist_id) if track else None
                if track is None or artist is None:
                    continue
                items.append(BlitzItem(blitz=blitz, music=track, artist=artist))
            items.sort(key=lambda item: item.blitz.event_date)
            return BlitzSchedule(
                week_start=week_start,
                week_end=week_end,
                this_week=[i for i in items if week_start <= i.blitz.event_date <= week_end],
                upcoming=[i for i in items if i.blitz.event_date > week_end],
            )

        versions = self._v(EntityKind.MUSICAL_BLITZES, EntityKind.MUSIC, EntityKind.ARTISTS)
        return self._memo(("blitz_schedule", week_start, versions), compute)

    def promotion_board(
        self,
        now: datetime | None = None,
        filters: PromotionFilters | None = None,
    ) -> PromotionBoard:
        """Active promotions with their countdown.

        Cash (``Verba``) promotions come first, then everything by end
        date.  ``total_verba`` sums the values of the listed cash
        promotions.  Filter options are drawn from every active promotion,
        not just the filtered ones.
        """
        now = now or datetime.now()
        filters = filters or PromotionFilters()
        radios = {r.id: r for r in self._store.records(EntityKind.RADIOS) if isinstance(r, RadioStation)}
        artists = {a.id: a for a in self._store.records(EntityKind.ARTISTS) if isinstance(a, Artist)}
        promotions = [p for p in self.active(EntityKind.PROMOTIONS) if isinstance(p, Promotion)]

        items: list[PromotionBoardItem] = []
        for promotion in promotions:
            radio = radios.get(promotion.radio_station_id)
            if not filters.is_empty() and not _matches_filters(promotion, radio, filters):
                continue
            artist = artists.get(promotion.artist_id)
            items.append(
                PromotionBoardItem(
                    promotion=promotion,
                    countdown=promotion_countdown(promotion.end_date, now),
                    radio_name=radio.name if radio else None,
                    artist_name=artist.name if artist else None,
                )
            )
        items.sort(key=lambda item: (item.promotion.type is not PromotionType.VERBA, item.promotion.end_date))

        total = sum(
            item.promotion.value or 0.0
            for item in items
            if item.promotion.type is PromotionType.VERBA
        )
        return PromotionBoard(items=items, total_verba=total, options=_filter_options(promotions, radios))


def _matches_filters(promotion: Promotion, radio: RadioStation | None, filters: PromotionFilters) -> bool:
    if filters.artist_id and promotion.artist_id != filters.artist_id:
        return False
    if filters.type and promotion.type is not filters.type:
        return False
    if not (filters.state or filters.crowley_market or filters.city.strip()):
        return True
    if radio is None:
        return False
    if filters.state and radio.state != filters.state:
        return False
    if filters.crowley_market and filters.crowley_market not in radio.crowley_markets:
        return False
    city = normalize_search_text(filters.city)
    return not city or city in normalize_search_text(radio.city)


def _filter_options(promotions: list[Promotion], radios: dict[str, RadioStation]) -> PromotionFilterOptions:
    in_use = [radios[p.radio_station_id] for p in promotions if p.radio_station_id in radios]
    return PromotionFilterOptions(
        states=sorted({r.state for r in in_use if r.state}),
        cities=sorted({r.city for r in in_use if r.city}, key=collation_key),
        types=sorted({p.type for p in promotions}, key=lambda t: t.value),
        markets=sorted({m for r in in_use for m in r.crowley_markets}, key=collation_key),
    )
