"""Cross-collection cascade rules for archive and purge.

Pure functions: they receive the current collections and return only the
collections that change *besides* the target collection itself, which the
store updates on its own.  The store writes every returned collection
before the lifecycle operation returns; there is no rollback if a later
write fails.

Only artists cascade:

    archive artist  ->  archive every track it owns (restore does not undo this)
    purge artist    ->  delete its tracks, blank ``artist_id`` on promotions,
                        drop the id from event links and business rosters
"""

from __future__ import annotations

from collections.abc import Collection, Mapping, Sequence

from promodesk.models.entities import AppEvent, Business, Music, Promotion, Record
from promodesk.store.kinds import EntityKind

Collections = Mapping[EntityKind, Sequence[Record]]
Changes = dict[EntityKind, list[Record]]


def archive_cascade(kind: EntityKind, entity_id: str, collections: Collections) -> Changes:
    """Return the dependent collections changed by archiving *entity_id*."""
    match kind:
        case EntityKind.ARTISTS:
            music: list[Record] = []
            changed = False
            for track in collections[EntityKind.MUSIC]:
                if isinstance(track, Music) and track.artist_id == entity_id and not track.is_archived:
                    track = track.model_copy(update={"is_archived": True})
                    changed = True
                music.append(track)
            return {EntityKind.MUSIC: music} if changed else {}
        case (
            EntityKind.RADIOS
            | EntityKind.CITY_HALLS
            | EntityKind.BUSINESSES
            | EntityKind.MUSIC
            | EntityKind.PROMOTIONS
            | EntityKind.EVENTS
            | EntityKind.MUSICAL_BLITZES
            | EntityKind.EMAIL_CAMPAIGNS
        ):
            return {}
        case _:
            raise ValueError(f"Unknown entity kind: {kind!r}")


def purge_cascade(kind: EntityKind, entity_ids: Collection[str], collections: Collections) -> Changes:
    """Return the dependent collections changed by purging *entity_ids*.

    Accepts several ids so that bulk purges apply one cascade pass.
    """
    match kind:
        case EntityKind.ARTISTS:
            return _purge_artists(set(entity_ids), collections)
        case (
            EntityKind.RADIOS
            | EntityKind.CITY_HALLS
            | EntityKind.BUSINESSES
            | EntityKind.MUSIC
            | EntityKind.PROMOTIONS
            | EntityKind.EVENTS
            | EntityKind.MUSICAL_BLITZES
            | EntityKind.EMAIL_CAMPAIGNS
        ):
            return {}
        case _:
            raise ValueError(f"Unknown entity kind: {kind!r}")


def _purge_artists(artist_ids: set[str], collections: Collections) -> Changes:
    if not artist_ids:
        return {}

    music = [
        track
        for track in collections[EntityKind.MUSIC]
        if not (isinstance(track, Music) and track.artist_id in artist_ids)
    ]

    promotions: list[Record] = []
    for promotion in collections[EntityKind.PROMOTIONS]:
        if isinstance(promotion, Promotion) and promotion.artist_id in artist_ids:
            # Orphaned, not deleted.
            promotion = promotion.model_copy(update={"artist_id": ""})
        promotions.append(promotion)

    events: list[Record] = []
    for event in collections[EntityKind.EVENTS]:
        if isinstance(event, AppEvent) and artist_ids.intersection(event.linked_artist_ids):
            event = event.model_copy(
                update={"linked_artist_ids": [a for a in event.linked_artist_ids if a not in artist_ids]}
            )
        events.append(event)

    businesses: list[Record] = []
    for business in collections[EntityKind.BUSINESSES]:
        if isinstance(business, Business) and artist_ids.intersection(business.artist_ids):
            business = business.model_copy(
                update={"artist_ids": [a for a in business.artist_ids if a not in artist_ids]}
            )
        businesses.append(business)

    return {
        EntityKind.MUSIC: music,
        EntityKind.PROMOTIONS: promotions,
        EntityKind.EVENTS: events,
        EntityKind.BUSINESSES: businesses,
    }
