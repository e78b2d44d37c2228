"""The domain store: sole owner of every promoDesk collection.

All lifecycle operations (save, archive, restore, purge, bulk purge and the
composite editor saves) are synchronous methods on :class:`DomainStore`.
Each operation replaces the touched collections in memory, bumps their
version counters (read by :class:`~promodesk.store.views.DerivedViews` for
memoization) and then writes every touched collection to the storage
provider before returning.

Persistence policy
------------------
Only storage writes can fail.  A failed write is caught per key, logged,
and recorded as :attr:`DomainStore.persistence_warning`; the in-memory
change is kept.  A multi-collection cascade is not atomic: if the second
write fails after the first succeeded, nothing is rolled back.  The API
returns the warning with every mutation response so that the operator
knows to export a backup.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from promodesk.interfaces.storage_provider import IStorageProvider
from promodesk.models.entities import (
    ActiveView,
    Artist,
    EmailCampaign,
    Music,
    Promotion,
    RadioStation,
    RadioSubmission,
    Record,
    SheetsConfig,
    Theme,
)
from promodesk.models.requests import (
    ArtistSaveRequest,
    ClonePromotionRequest,
    EditPromotionRequest,
    MusicDraft,
    NewPromotionRequest,
)
from promodesk.store.cascades import archive_cascade, purge_cascade
from promodesk.store.kinds import EntityKind
from promodesk.utils.errors import (
    EntityNotFoundError,
    ImmutableRecordError,
    InvalidFieldError,
    StorageReadError,
    StorageWriteError,
)
from promodesk.utils.ids import generate_id
from promodesk.utils.logging import get_logger

# Storage keys that are not entity collections.
MARKETS_KEY = "crowleyMarkets"
SUBMISSIONS_KEY = "radioSubmissions"
SHEETS_CONFIG_KEY = "sheetsConfig"
ACTIVE_VIEW_KEY = "activeView"
THEME_KEY = "theme"
_SETTING_KEYS = (MARKETS_KEY, SUBMISSIONS_KEY, SHEETS_CONFIG_KEY, ACTIVE_VIEW_KEY, THEME_KEY)

PERSISTENCE_WARNING = (
    "Changes could not be saved to durable storage and will be lost on restart. "
    "Export a backup now."
)

# Draft fields that cannot be cleared from the Artist editor.
_NON_NULLABLE_MUSIC_FIELDS = frozenset({"title", "hide_from_dashboard"})

_MARKETS_ADAPTER = TypeAdapter(list[str])


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DomainStore:
    """Single-writer store for all collections, preferences and the pending queue.

    Parameters
    ----------
    storage:
        Durable per-key storage.  Call :meth:`hydrate` once to load it.
    clock:
        Returns the current time; stamped on ``created_at`` / ``sent_at``.
    id_factory:
        Produces new record ids.
    """

    def __init__(
        self,
        storage: IStorageProvider,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = generate_id,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._id_factory = id_factory
        self._logger: structlog.BoundLogger = get_logger(__name__)

        self._collections: dict[EntityKind, list[Record]] = {kind: [] for kind in EntityKind}
        self._markets: list[str] = []
        self._submissions: list[RadioSubmission] = []
        self._sheets_config = SheetsConfig()
        self._active_view = ActiveView.DASHBOARD
        self._theme = Theme.LIGHT

        # Stored items that failed validation, written back untouched on flush.
        self._rejected: dict[str, list[Any]] = {}
        self._versions: dict[str, int] = {}
        self._dirty: list[str] = []
        self._persistence_warning: str | None = None

    # ------------------------------------------------------------------
    # Hydration
    # ------------------------------------------------------------------

    def hydrate(self) -> None:
        """Load every key from storage, falling back to defaults.

        A value that cannot be decoded is logged and replaced by the
        default.  Individual records that fail validation are kept out of
        memory but preserved in storage: every later write of that key
        appends them again, so only a backup import drops them.
        """
        for kind in EntityKind:
            raw = self._read_json(kind.storage_key)
            if isinstance(raw, list):
                self._collections[kind] = self._validate_records(kind.storage_key, kind.model, raw)
            elif raw is not None:
                self._log_corrupted(kind.storage_key, "expected a list")

        raw = self._read_json(SUBMISSIONS_KEY)
        if isinstance(raw, list):
            self._submissions = self._validate_records(SUBMISSIONS_KEY, RadioSubmission, raw)

        raw = self._read_json(MARKETS_KEY)
        if raw is not None:
            try:
                self._markets = _MARKETS_ADAPTER.validate_python(raw)
            except PydanticValidationError:
                self._log_corrupted(MARKETS_KEY, "expected a list of strings")

        raw = self._read_json(SHEETS_CONFIG_KEY)
        if isinstance(raw, dict):
            # Stored object merged over the defaults.
            defaults = SheetsConfig().to_storage()
            try:
                self._sheets_config = SheetsConfig.model_validate({**defaults, **raw})
            except PydanticValidationError:
                self._log_corrupted(SHEETS_CONFIG_KEY, "invalid sheets config")

        raw = self._read_json(ACTIVE_VIEW_KEY)
        if raw is not None:
            try:
                self._active_view = ActiveView(raw)
            except ValueError:
                self._log_corrupted(ACTIVE_VIEW_KEY, "unknown view")

        raw = self._read_json(THEME_KEY)
        if raw is not None:
            try:
                self._theme = Theme(raw)
            except ValueError:
                self._log_corrupted(THEME_KEY, "unknown theme")

        for key in [*(kind.storage_key for kind in EntityKind), *_SETTING_KEYS]:
            self._versions[key] = self.version(key) + 1

        self._logger.info(
            "store_hydrated",
            provider=self._storage.get_provider_name(),
            **{kind.storage_key: len(self._collections[kind]) for kind in EntityKind},
            pending_submissions=len(self._submissions),
        )

    def _read_json(self, key: str) -> Any:
        try:
            text = self._storage.get(key)
        except StorageReadError as exc:
            self._log_corrupted(key, str(exc))
            return None
        if text is None:
            return None
        try:
            return json.loads(text)
        except ValueError:
            self._log_corrupted(key, "invalid JSON")
            return None

    def _validate_records(self, key: str, model: type[Any], raw: list[Any]) -> list[Any]:
        records = []
        rejected = []
        for index, item in enumerate(raw):
            try:
                records.append(model.model_validate(item))
            except PydanticValidationError as exc:
                rejected.append(item)
                self._logger.warning(
                    "stored_record_skipped",
                    key=key,
                    index=index,
                    error=str(exc)[:200],
                )
        if rejected:
            self._rejected[key] = rejected
        else:
            self._rejected.pop(key, None)
        return records

    def _log_corrupted(self, key: str, reason: str) -> None:
        self._logger.warning("stored_value_corrupted", key=key, reason=reason)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def records(self, kind: EntityKind) -> list[Record]:
        """Return a copy of the collection, archived records included."""
        return list(self._collections[kind])

    def get(self, kind: EntityKind, entity_id: str) -> Record:
        index = self._find(kind, entity_id)
        return self._collections[kind][index]

    def version(self, key: str) -> int:
        """Monotonic change counter of one storage key."""
        return self._versions.get(key, 0)

    @property
    def markets(self) -> list[str]:
        return list(self._markets)

    @property
    def submissions(self) -> list[RadioSubmission]:
        return list(self._submissions)

    @property
    def sheets_config(self) -> SheetsConfig:
        return self._sheets_config

    @property
    def active_view(self) -> ActiveView:
        return self._active_view

    @property
    def theme(self) -> Theme:
        return self._theme

    @property
    def persistence_warning(self) -> str | None:
        """Warning raised by the most recent mutation, or ``None`` if it was saved."""
        return self._persistence_warning

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(self, kind: EntityKind, payload: Record | Mapping[str, Any]) -> Record:
        """Create or fully replace one record.

        A payload whose id matches an existing record replaces it in place;
        any other payload gets a fresh id and is appended.  New email
        campaigns are handed to :meth:`record_campaign`, so the send time
        and recipient count are never taken from the caller.

        Raises
        ------
        ImmutableRecordError
            If the payload targets an existing email campaign.
        """
        if kind is EntityKind.EMAIL_CAMPAIGNS:
            campaign = payload if isinstance(payload, EmailCampaign) else EmailCampaign.model_validate(payload)
            if campaign.id and any(c.id == campaign.id for c in self._collections[kind]):
                _reject_campaign_edit()
            return self.record_campaign(campaign)
        record = self._put(kind, payload)
        self._flush()
        return record

    def save_artist_with_music(self, request: ArtistSaveRequest) -> tuple[Artist, list[Music]]:
        """Save an artist together with the song list from its editor.

        Songs listed in ``music_to_delete_ids`` are removed first.  Songs
        without an id (or with a ``temp-`` id) are created for the artist;
        the others are merged into the stored track field by field.
        """
        artist = self._put(EntityKind.ARTISTS, request.artist)

        to_delete = set(request.music_to_delete_ids)
        music = [track for track in self._collections[EntityKind.MUSIC] if track.id not in to_delete]
        taken = {track.id for track in music}
        now = self._clock()

        for draft in request.songs:
            if draft.is_new:
                track = Music(
                    **_draft_fields(draft, drop_none=True),
                    artist_id=artist.id,
                    id=self._new_id(taken),
                    created_at=now,
                )
                taken.add(track.id)
                music.append(track)
                continue

            index = next((i for i, m in enumerate(music) if m.id == draft.id), None)
            if index is None:
                self._logger.warning("music_draft_unknown_id", music_id=draft.id, artist_id=artist.id)
                continue
            update = _draft_fields(draft, drop_none=False)
            update["artist_id"] = artist.id
            music[index] = music[index].model_copy(update=update)

        self._replace(EntityKind.MUSIC, music)
        self._flush()

        owned = [track for track in music if isinstance(track, Music) and track.artist_id == artist.id]
        self._logger.info(
            "artist_saved_with_music",
            artist_id=artist.id,
            songs=len(owned),
            deleted=len(to_delete),
        )
        return artist, owned  # type: ignore[return-value]

    def save_promotion(
        self,
        request: NewPromotionRequest | ClonePromotionRequest | EditPromotionRequest,
    ) -> list[Promotion]:
        """Create one promotion per selected station, or update an existing one."""
        fields = request.promotion_fields()
        promotions = list(self._collections[EntityKind.PROMOTIONS])
        saved: list[Promotion] = []

        match request:
            case EditPromotionRequest():
                index = self._find(EntityKind.PROMOTIONS, request.id)
                existing = Promotion.model_validate(promotions[index].model_dump())
                radio_id = request.radio_station_ids[0] if request.radio_station_ids else existing.radio_station_id
                updated = existing.model_copy(update={**fields, "radio_station_id": radio_id})
                promotions[index] = updated
                saved.append(updated)
            case NewPromotionRequest() | ClonePromotionRequest():
                taken = {p.id for p in promotions}
                for radio_id in request.radio_station_ids:
                    promotion = Promotion(**fields, radio_station_id=radio_id, id=self._new_id(taken))
                    taken.add(promotion.id)
                    promotions.append(promotion)
                    saved.append(promotion)

        self._replace(EntityKind.PROMOTIONS, promotions)
        self._flush()
        self._logger.info("promotions_saved", mode=request.mode, count=len(saved))
        return saved

    def record_campaign(self, payload: EmailCampaign | Mapping[str, Any]) -> EmailCampaign:
        """Append the historical record of an email send.

        ``sent_at`` is stamped now and ``recipient_count`` is taken from
        the recipient snapshot.  Any id on the payload is ignored.
        """
        campaign = payload if isinstance(payload, EmailCampaign) else EmailCampaign.model_validate(payload)
        campaign = campaign.model_copy(
            update={
                "id": "",
                "sent_at": self._clock(),
                "recipient_count": len(campaign.recipient_ids),
                "is_archived": False,
            }
        )
        saved = self._put(EntityKind.EMAIL_CAMPAIGNS, campaign)
        self._flush()
        return saved  # type: ignore[return-value]

    def toggle_music_dashboard(self, music_id: str) -> Music:
        """Flip ``hide_from_dashboard`` on one track."""
        index = self._find(EntityKind.MUSIC, music_id)
        music = list(self._collections[EntityKind.MUSIC])
        track = music[index]
        music[index] = track = track.model_copy(update={"hide_from_dashboard": not track.hide_from_dashboard})  # type: ignore[attr-defined]
        self._replace(EntityKind.MUSIC, music)
        self._flush()
        return track  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Archive / restore / purge
    # ------------------------------------------------------------------

    def archive(self, kind: EntityKind, entity_id: str, label: str | None = None) -> Record:
        """Soft-delete one record.  Archiving an artist archives its tracks."""
        record = self._set_archived(kind, entity_id, True)
        changes = archive_cascade(kind, entity_id, self._collections)
        for changed_kind, items in changes.items():
            self._replace(changed_kind, items)
        self._flush()
        self._logger.info(
            "entity_archived",
            kind=kind.value,
            entity_id=entity_id,
            label=label,
            cascaded=[k.value for k in changes],
        )
        return record

    def restore(self, kind: EntityKind, entity_id: str) -> Record:
        """Clear the archive flag on one record only."""
        record = self._set_archived(kind, entity_id, False)
        self._flush()
        self._logger.info("entity_restored", kind=kind.value, entity_id=entity_id)
        return record

    def purge(self, kind: EntityKind, entity_id: str) -> Record:
        """Permanently delete one record and apply its purge cascade."""
        index = self._find(kind, entity_id)
        items = list(self._collections[kind])
        removed = items.pop(index)

        self._replace(kind, items)
        self._apply_purge_cascade(kind, [entity_id])
        self._flush()
        self._logger.info("entity_purged", kind=kind.value, entity_id=entity_id)
        return removed

    def purge_all_archived(self, kind: EntityKind) -> int:
        """Delete every archived record of *kind*; returns how many were removed."""
        items = self._collections[kind]
        archived_ids = [item.id for item in items if item.is_archived]
        if not archived_ids:
            return 0

        self._apply_purge_cascade(kind, archived_ids)
        self._replace(kind, [item for item in items if not item.is_archived])
        self._flush()
        self._logger.info("archived_entities_purged", kind=kind.value, count=len(archived_ids))
        return len(archived_ids)

    def _set_archived(self, kind: EntityKind, entity_id: str, archived: bool) -> Record:
        index = self._find(kind, entity_id)
        items = list(self._collections[kind])
        items[index] = record = items[index].model_copy(update={"is_archived": archived})
        self._replace(kind, items)
        return record

    def _apply_purge_cascade(self, kind: EntityKind, entity_ids: Sequence[str]) -> None:
        for changed_kind, changed in purge_cascade(kind, entity_ids, self._collections).items():
            self._replace(changed_kind, changed)

    # ------------------------------------------------------------------
    # Crowley market tags
    # ------------------------------------------------------------------

    def add_market(self, name: str) -> list[str]:
        name = _require_market_name(name)
        if name not in self._markets:
            self._markets = [*self._markets, name]
            self._touch(MARKETS_KEY)
            self._flush()
        return self.markets

    def rename_market(self, old: str, new: str) -> list[str]:
        """Rename a market tag.  Radio records keep the old tag."""
        new = _require_market_name(new)
        if old not in self._markets:
            raise EntityNotFoundError(message=f"Market {old!r} not found")
        self._markets = [new if market == old else market for market in self._markets]
        self._touch(MARKETS_KEY)
        self._flush()
        return self.markets

    def delete_market(self, name: str) -> list[str]:
        if name not in self._markets:
            raise EntityNotFoundError(message=f"Market {name!r} not found")
        self._markets = [market for market in self._markets if market != name]
        self._touch(MARKETS_KEY)
        self._flush()
        return self.markets

    # ------------------------------------------------------------------
    # Pending submission queue
    # ------------------------------------------------------------------

    def merge_submissions(self, records: Iterable[RadioSubmission]) -> list[RadioSubmission]:
        """Append submissions whose ``submission_id`` is not queued yet.

        Queued submissions are never replaced or reordered.  Returns the
        newly appended ones.
        """
        seen = {s.submission_id for s in self._submissions}
        added: list[RadioSubmission] = []
        for record in records:
            if record.submission_id in seen:
                continue
            seen.add(record.submission_id)
            added.append(record)

        if added:
            self._submissions = [*self._submissions, *added]
            self._touch(SUBMISSIONS_KEY)
            self._flush()
        return added

    def delete_submission(self, submission_id: str) -> RadioSubmission:
        submission = self._find_submission(submission_id)
        self._submissions = [s for s in self._submissions if s.submission_id != submission_id]
        self._touch(SUBMISSIONS_KEY)
        self._flush()
        self._logger.info("submission_deleted", submission_id=submission_id)
        return submission

    def approve_submission(
        self,
        submission_id: str,
        overrides: Mapping[str, Any] | None = None,
    ) -> RadioStation:
        """Promote a pending submission into the radio collection.

        *overrides* (camelCase keys, as sent by the review form) are applied
        on top of the submitted fields.  Markets are dropped unless the
        station is Crowley-audited.
        """
        submission = self._find_submission(submission_id)
        station = submission.to_station()
        if overrides:
            data = {**station.to_storage(), **overrides}
            data.pop("id", None)
            station = RadioStation.model_validate(data)
            if not station.is_crowley_audited:
                station = station.model_copy(update={"crowley_markets": []})

        saved = self._put(EntityKind.RADIOS, station)
        self._submissions = [s for s in self._submissions if s.submission_id != submission_id]
        self._touch(SUBMISSIONS_KEY)
        self._flush()
        self._logger.info("submission_approved", submission_id=submission_id, radio_id=saved.id)
        return saved  # type: ignore[return-value]

    def _find_submission(self, submission_id: str) -> RadioSubmission:
        for submission in self._submissions:
            if submission.submission_id == submission_id:
                return submission
        raise EntityNotFoundError(message=f"Submission {submission_id!r} not found")

    # ------------------------------------------------------------------
    # Configuration and preferences
    # ------------------------------------------------------------------

    def update_sheets_config(self, sheets_url: str) -> SheetsConfig:
        self._sheets_config = SheetsConfig(sheets_url=sheets_url.strip())
        self._touch(SHEETS_CONFIG_KEY)
        self._flush()
        self._logger.info("sheets_config_updated", configured=bool(self._sheets_config.sheets_url))
        return self._sheets_config

    def set_active_view(self, view: ActiveView) -> ActiveView:
        self._active_view = ActiveView(view)
        self._touch(ACTIVE_VIEW_KEY)
        self._flush()
        return self._active_view

    def set_theme(self, theme: Theme) -> Theme:
        self._theme = Theme(theme)
        self._touch(THEME_KEY)
        self._flush()
        return self._theme

    # ------------------------------------------------------------------
    # Backup support
    # ------------------------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        """Return the backup document: every collection plus the market tags."""
        document: dict[str, Any] = {
            kind.storage_key: [record.to_storage() for record in self._collections[kind]]
            for kind in EntityKind
        }
        document[MARKETS_KEY] = list(self._markets)
        return document

    def replace_collections(
        self,
        collections: Mapping[EntityKind, Sequence[Record]],
        markets: Sequence[str],
    ) -> None:
        """Replace every collection wholesale.  Kinds not given become empty."""
        for kind in EntityKind:
            self._rejected.pop(kind.storage_key, None)
            self._replace(kind, list(collections.get(kind, [])))
        self._markets = list(markets)
        self._touch(MARKETS_KEY)
        self._flush()
        self._logger.info(
            "collections_replaced",
            **{kind.storage_key: len(self._collections[kind]) for kind in EntityKind},
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _find(self, kind: EntityKind, entity_id: str) -> int:
        for index, item in enumerate(self._collections[kind]):
            if item.id == entity_id:
                return index
        raise EntityNotFoundError(message=f"No {kind.value} record with id {entity_id!r}")

    def _new_id(self, taken: set[str]) -> str:
        new_id = self._id_factory()
        while new_id in taken:
            new_id = self._id_factory()
        return new_id

    def _put(self, kind: EntityKind, payload: Record | Mapping[str, Any]) -> Record:
        """Upsert one record into its collection without flushing."""
        model = kind.model
        record = payload if isinstance(payload, model) else model.model_validate(payload)
        items = list(self._collections[kind])
        index = next((i for i, item in enumerate(items) if record.id and item.id == record.id), None)

        if index is not None:
            if kind is EntityKind.EMAIL_CAMPAIGNS:
                _reject_campaign_edit()
            existing = items[index]
            if isinstance(existing, Artist):
                created_at = existing.created_at or getattr(record, "created_at", None) or self._clock()
                record = record.model_copy(update={"created_at": created_at})
            items[index] = record
        else:
            update: dict[str, Any] = {"id": self._new_id({item.id for item in items})}
            if kind in (EntityKind.ARTISTS, EntityKind.MUSIC):
                update["created_at"] = self._clock()
            record = record.model_copy(update=update)
            items.append(record)

        self._replace(kind, items)
        return record

    def _replace(self, kind: EntityKind, items: list[Record]) -> None:
        self._collections[kind] = items
        self._touch(kind.storage_key)

    def _touch(self, key: str) -> None:
        self._versions[key] = self._versions.get(key, 0) + 1
        if key not in self._dirty:
            self._dirty.append(key)

    def _serialize(self, key: str) -> str:
        value: Any
        if key == MARKETS_KEY:
            value = self._markets
        elif key == SUBMISSIONS_KEY:
            value = [s.to_storage() for s in self._submissions]
        elif key == SHEETS_CONFIG_KEY:
            value = self._sheets_config.to_storage()
        elif key == ACTIVE_VIEW_KEY:
            value = self._active_view.value
        elif key == THEME_KEY:
            value = self._theme.value
        else:
            value = [record.to_storage() for record in self._collections[EntityKind(key)]]
        if key in self._rejected:
            value = [*value, *self._rejected[key]]
        return json.dumps(value, ensure_ascii=False)

    def _flush(self) -> None:
        """Write every touched key.  Failures are recorded, never raised."""
        keys, self._dirty = self._dirty, []
        self._persistence_warning = None
        for key in keys:
            try:
                self._storage.set(key, self._serialize(key))
            except StorageWriteError as exc:
                self._persistence_warning = PERSISTENCE_WARNING
                self._logger.error(
                    "storage_write_failed",
                    key=key,
                    provider=exc.provider_name,
                    error=exc.message,
                )


def _draft_fields(draft: MusicDraft, drop_none: bool) -> dict[str, Any]:
    fields = draft.changes()
    if drop_none:
        return {name: value for name, value in fields.items() if value is not None}
    return {
        name: value
        for name, value in fields.items()
        if value is not None or name not in _NON_NULLABLE_MUSIC_FIELDS
    }


def _reject_campaign_edit() -> None:
    raise ImmutableRecordError(
        message="Email campaigns are historical records and cannot be edited",
        field="id",
    )


def _require_market_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise InvalidFieldError(message="Market name is required", field="name")
    return name
