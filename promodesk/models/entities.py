"""Core domain entities for promoDesk.

Defines enums and Pydantic v2 models for every record the store keeps:
radio stations (and pending radio submissions), city halls, businesses,
artists, music, promotions, events, musical blitzes and email campaigns.

All models are frozen; the store produces updated copies with
``model_copy(update=...)``.  Attribute names are snake_case in Python while
the persisted JSON uses camelCase (``isArchived``, ``artistId``,
``crowleyMarkets``) via an alias generator, so stored collections and backup
files keep the same keys the web client has always written.

Key relationships:
    - Music.artist_id -> Artist (required, cascade on archive and purge)
    - Promotion.radio_station_id -> RadioStation, Promotion.artist_id -> Artist
      (blanked, not deleted, when the artist is purged)
    - AppEvent.linked_artist_ids / Business.artist_ids -> Artist (pruned on purge)
    - MusicalBlitz.music_id -> Music
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class RadioType(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """Broadcast medium of a radio station."""

    FM = "FM"
    AM = "AM"
    WEB = "WEB"
    COMUNITARIA = "Comunitária"


class RadioProfile(str, Enum):  # noqa: UP042
    """Programming profile of a radio station."""

    POPULAR = "Popular"
    SERTANEJO = "Sertanejo"
    POPROCK = "Pop/Rock"
    EVANGELICA = "Evangélica"
    JORNALISMO = "Jornalismo"
    OUTRO = "Outro"


class MusicGenre(str, Enum):  # noqa: UP042
    """Genre tag of an artist."""

    SERTANEJO = "Sertanejo"
    PAGODE = "Pagode"
    SAMBA = "Samba"
    ROCK = "Rock"
    POP = "Pop"
    MPB = "MPB"
    FUNK = "Funk"
    AXE = "Axé"
    FORRO = "Forró"
    ELETRONICA = "Eletrônica"
    OUTRO = "Outro"


class PromotionType(str, Enum):  # noqa: UP042
    """Kind of deal agreed with a station.  ``VERBA`` carries a cash value."""

    VERBA = "Verba"
    BRINDES = "Brindes"
    PARCERIA_SHOW = "Parceria de Show"
    DIVULGACAO = "Divulgação"
    OUTRO = "Outro"


class RecipientCategory(str, Enum):  # noqa: UP042
    """Audience an email campaign was sent to."""

    RADIOS = "Rádios"
    CITY_HALLS = "Prefeituras"
    BUSINESSES = "Empresários"


# ---------------------------------------------------------------------------
# Base models
# ---------------------------------------------------------------------------

def _blank_to_none(value: Any) -> Any:
    # Web forms and spreadsheet rows send "" for unset dates.
    if isinstance(value, str) and not value.strip():
        return None
    return value


class StoredModel(BaseModel):
    """Base for everything persisted: frozen, camelCase on the wire."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        # Spreadsheet rows deliver phone numbers and CEPs as numbers.
        coerce_numbers_to_str=True,
    )

    def to_storage(self) -> dict[str, Any]:
        """Return the JSON-ready camelCase dict written to storage and backups."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Record(StoredModel):
    """A collection member with an opaque id and a soft-delete flag.

    ``id == ""`` means "not saved yet"; the store assigns one on save.
    """

    id: str = ""
    is_archived: bool = False

    @field_validator("is_archived", mode="before")
    @classmethod
    def _none_is_false(cls, value: Any) -> Any:
        return False if value is None else value


class _ContactFields(StoredModel):
    """Address and social fields shared by stations, city halls and businesses."""

    phone: str = ""
    street: str = ""
    number: str = ""
    complement: str | None = None
    neighborhood: str = ""
    state: str = ""
    zip_code: str = ""
    email: str | None = None
    whatsapp: str | None = None
    instagram: str | None = None
    facebook: str | None = None


# ---------------------------------------------------------------------------
# Radio stations and submissions
# ---------------------------------------------------------------------------

class _RadioFields(_ContactFields):
    name: str = ""
    type: RadioType = RadioType.FM
    frequency: str = ""
    website: str = ""
    city: str = ""
    slogan: str | None = None
    listeners_whatsapp: str | None = None
    logo_url: str | None = None
    pix_key: str | None = None
    cnpj: str | None = None
    corporate_name: str | None = None
    artistic_director: str | None = None
    profile: RadioProfile | None = None
    is_crowley_audited: bool = False
    # Crowley audience markets; only meaningful when is_crowley_audited.
    crowley_markets: list[str] = Field(default_factory=list)

    @field_validator("is_crowley_audited", mode="before")
    @classmethod
    def _audited_none_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("profile", mode="before")
    @classmethod
    def _blank_profile(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("crowley_markets", mode="before")
    @classmethod
    def _split_markets(cls, value: Any) -> Any:
        # The intake spreadsheet stores the selection as "A, B".
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value


class RadioStation(_RadioFields, Record):
    """A radio station contact."""


class RadioSubmission(_RadioFields):
    """A station registration received from the public intake form.

    Same shape as :class:`RadioStation` minus ``id``; identified by the
    ``submission_id`` the spreadsheet assigns.  Lives in the pending queue
    until an operator approves it into the radio collection.
    """

    submission_id: str

    def to_station(self) -> RadioStation:
        """Build an unsaved RadioStation from this submission.

        Markets are dropped unless the station declared a Crowley audit.
        """
        data = self.model_dump(exclude={"submission_id"})
        if not self.is_crowley_audited:
            data["crowley_markets"] = []
        return RadioStation(**data)


# ---------------------------------------------------------------------------
# City halls and businesses
# ---------------------------------------------------------------------------

class CityHall(_ContactFields, Record):
    """A municipal contact (prefeitura)."""

    city_name: str = ""
    mayor: str = ""
    website: str = ""
    logo_url: str | None = None


class Business(_ContactFields, Record):
    """A business manager / booking agency, optionally representing artists."""

    name: str = ""
    category: str = ""
    contact_person: str = ""
    city: str = ""
    website: str | None = None
    regions_of_operation: list[str] = Field(default_factory=list)
    # Informational only; pruned when a referenced artist is purged.
    artist_ids: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Artists and music
# ---------------------------------------------------------------------------

class Artist(Record):
    """A promoted artist.  ``created_at`` is fixed on first save."""

    name: str = ""
    genre: MusicGenre = MusicGenre.OUTRO
    created_at: datetime.datetime | None = None
    business_id: str | None = None
    bio: str | None = None

    @field_validator("business_id", mode="before")
    @classmethod
    def _blank_business(cls, value: Any) -> Any:
        return _blank_to_none(value)


class Music(Record):
    """A track owned by exactly one artist."""

    title: str = ""
    artist_id: str
    wav_url: str | None = None
    created_at: datetime.datetime | None = None
    composers: str | None = None
    release_date: datetime.date | None = None
    hide_from_dashboard: bool = False

    @field_validator("release_date", mode="before")
    @classmethod
    def _blank_release(cls, value: Any) -> Any:
        return _blank_to_none(value)


# ---------------------------------------------------------------------------
# Promotions, events, blitzes
# ---------------------------------------------------------------------------

class Promotion(Record):
    """A deal with one radio station around one artist (and optionally a track).

    ``artist_id`` becomes ``""`` when the artist is purged; the promotion
    itself is kept.
    """

    name: str = ""
    radio_station_id: str = ""
    artist_id: str = ""
    music_id: str | None = None
    type: PromotionType = PromotionType.OUTRO
    details: str = ""
    start_date: datetime.date
    end_date: datetime.date
    value: float | None = None

    @field_validator("music_id", mode="before")
    @classmethod
    def _blank_music(cls, value: Any) -> Any:
        return _blank_to_none(value)


class AppEvent(Record):
    """A show or event, linked to artists and businesses by id."""

    name: str = ""
    date: datetime.date
    city: str = ""
    state: str = ""
    venue: str = ""
    details: str | None = None
    linked_artist_ids: list[str] = Field(default_factory=list)
    linked_business_ids: list[str] = Field(default_factory=list)


class MusicalBlitz(Record):
    """A scheduled radio blitz for one track."""

    music_id: str
    event_date: datetime.date
    notes: str | None = None


class EmailCampaign(Record):
    """Historical record of one email send.  Written once, only archived later."""

    subject: str = ""
    body: str = ""
    recipient_category: RecipientCategory = RecipientCategory.RADIOS
    recipient_filter: str = ""
    recipient_count: int = 0
    sent_at: datetime.datetime | None = None
    attached_music_id: str | None = None
    attached_artist_id: str | None = None
    recipient_ids: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Configuration records
# ---------------------------------------------------------------------------

class SheetsConfig(StoredModel):
    """Endpoint of the spreadsheet web app backing the public intake form."""

    sheets_url: str = ""


class Theme(str, Enum):  # noqa: UP042
    LIGHT = "light"
    DARK = "dark"


class ActiveView(str, Enum):  # noqa: UP042
    """Sections of the client; the last one visited is remembered."""

    DASHBOARD = "dashboard"
    RADIOS = "radios"
    CITY_HALLS = "prefeituras"
    BUSINESSES = "empresarios"
    ARTISTS = "artistas"
    PROMOTIONS = "promocoes"
    EVENTS = "eventos"
    BLITZ = "blitz"
    EMAIL = "email"
    CAMPAIGN_HISTORY = "campaign-history"
    ONLINE_FORM = "online-form"
    ARCHIVE = "archive"
    CROWLEY_MARKETS = "crowley-markets"
    SETTINGS = "configuracoes"
