"""The closed set of entity kinds held by the domain store.

Each member's value is the storage key of its collection, so
``EntityKind("artists")`` parses a path segment or a backup key directly.
"""

from __future__ import annotations

from enum import Enum

from promodesk.models.entities import (
    AppEvent,
    Artist,
    Business,
    CityHall,
    EmailCampaign,
    Music,
    MusicalBlitz,
    Promotion,
    RadioStation,
    Record,
)


class EntityKind(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    RADIOS = "radios"
    CITY_HALLS = "cityHalls"
    BUSINESSES = "businesses"
    ARTISTS = "artists"
    MUSIC = "music"
    PROMOTIONS = "promotions"
    EVENTS = "events"
    MUSICAL_BLITZES = "musicalBlitzes"
    EMAIL_CAMPAIGNS = "emailCampaigns"

    @property
    def model(self) -> type[Record]:
        """The record model stored in this collection."""
        return _MODELS[self]

    @property
    def storage_key(self) -> str:
        return self.value


_MODELS: dict[EntityKind, type[Record]] = {
    EntityKind.RADIOS: RadioStation,
    EntityKind.CITY_HALLS: CityHall,
    EntityKind.BUSINESSES: Business,
    EntityKind.ARTISTS: Artist,
    EntityKind.MUSIC: Music,
    EntityKind.PROMOTIONS: Promotion,
    EntityKind.EVENTS: AppEvent,
    EntityKind.MUSICAL_BLITZES: MusicalBlitz,
    EntityKind.EMAIL_CAMPAIGNS: EmailCampaign,
}
