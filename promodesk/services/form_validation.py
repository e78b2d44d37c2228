"""Edit-form validation applied before a payload reaches the domain store.

Every check raises a :class:`~promodesk.utils.errors.ValidationError`
subclass naming the offending field (camelCase, as the client sends it).
A rejected payload never mutates anything: the API runs these checks
first and only then calls the lifecycle operation.
"""

from __future__ import annotations

from urllib.parse import urlparse

from promodesk.models.entities import Music, MusicalBlitz
from promodesk.models.requests import (
    ArtistSaveRequest,
    ClonePromotionRequest,
    EditPromotionRequest,
    NewPromotionRequest,
)
from promodesk.utils.date_status import ensure_weekday
from promodesk.utils.errors import InvalidFieldError


def _require(value: str | None, field: str, label: str) -> None:
    if not value or not value.strip():
        raise InvalidFieldError(message=f"{label} is required", field=field)


def validate_http_url(value: str, field: str) -> None:
    """Reject anything that is not an absolute http(s) URL."""
    parsed = urlparse(value.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidFieldError(
            message=f"{value!r} is not a valid URL; use a full link starting with http:// or https://",
            field=field,
        )


def validate_artist_save(request: ArtistSaveRequest) -> None:
    """Artist editor: name required, song titles required, links and dates checked."""
    _require(request.artist.name, "name", "Artist name")
    for index, song in enumerate(request.songs):
        prefix = f"songs[{index}]"
        if song.is_new or "title" in song.model_fields_set:
            _require(song.title, f"{prefix}.title", "Song title")
        if song.wav_url:
            validate_http_url(song.wav_url, f"{prefix}.wavUrl")
        ensure_weekday(song.release_date, field=f"{prefix}.releaseDate")


def validate_blitz(blitz: MusicalBlitz) -> None:
    """Blitz form: a track must be chosen and the date must be a weekday."""
    _require(blitz.music_id, "musicId", "Music")
    ensure_weekday(blitz.event_date, field="eventDate")


def validate_promotion(
    request: NewPromotionRequest | ClonePromotionRequest | EditPromotionRequest,
) -> None:
    """Promotion form: name, artist and at least one station; end not before start."""
    _require(request.name, "name", "Promotion name")
    _require(request.artist_id, "artistId", "Artist")
    if not request.radio_station_ids:
        raise InvalidFieldError(message="Select at least one radio station", field="radioStationIds")
    if request.end_date < request.start_date:
        raise InvalidFieldError(message="End date is before the start date", field="endDate")


def validate_sheets_url(url: str) -> None:
    """Settings form: an empty URL disables sync; anything else must be http(s)."""
    if url.strip():
        validate_http_url(url, "sheetsUrl")


def validate_music(music: Music) -> None:
    """Single-track save: title required, link and release date checked."""
    _require(music.title, "title", "Song title")
    _require(music.artist_id, "artistId", "Artist")
    if music.wav_url:
        validate_http_url(music.wav_url, "wavUrl")
    ensure_weekday(music.release_date, field="releaseDate")
