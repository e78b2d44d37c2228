"""Unit tests for edit-form validation."""

from __future__ import annotations

from datetime import date

import pytest

from promodesk.models.entities import Artist, Music, MusicalBlitz
from promodesk.models.requests import ArtistSaveRequest, MusicDraft, NewPromotionRequest
from promodesk.services.form_validation import (
    validate_artist_save,
    validate_blitz,
    validate_http_url,
    validate_music,
    validate_promotion,
    validate_sheets_url,
)
from promodesk.utils.errors import InvalidFieldError, WeekendDateError

SATURDAY = date(2024, 6, 15)
FRIDAY = date(2024, 6, 14)


class TestUrls:
    @pytest.mark.parametrize("url", ["https://drive.google.com/file/x", "http://example.com/a.wav"])
    def test_valid(self, url: str) -> None:
        validate_http_url(url, "wavUrl")

    @pytest.mark.parametrize("url", ["drive.google.com/x", "ftp://host/file", "https://", "not a url"])
    def test_invalid(self, url: str) -> None:
        with pytest.raises(InvalidFieldError) as excinfo:
            validate_http_url(url, "wavUrl")
        assert excinfo.value.field == "wavUrl"

    def test_empty_sheets_url_allowed(self) -> None:
        validate_sheets_url("")
        with pytest.raises(InvalidFieldError):
            validate_sheets_url("script.google.com")


class TestArtistEditor:
    def test_valid_request(self) -> None:
        validate_artist_save(
            ArtistSaveRequest(
                artist=Artist(name="Ana"),
                songs=[MusicDraft(id="temp-1", title="Pipoco", release_date=FRIDAY, wav_url="https://x.io/a.wav")],
            )
        )

    def test_artist_name_required(self) -> None:
        with pytest.raises(InvalidFieldError) as excinfo:
            validate_artist_save(ArtistSaveRequest(artist=Artist(name="  ")))
        assert excinfo.value.field == "name"

    def test_new_song_needs_title(self) -> None:
        with pytest.raises(InvalidFieldError) as excinfo:
            validate_artist_save(ArtistSaveRequest(artist=Artist(name="Ana"), songs=[MusicDraft(id="temp-1")]))
        assert excinfo.value.field == "songs[0].title"

    def test_weekend_release_rejected(self) -> None:
        request = ArtistSaveRequest(
            artist=Artist(name="Ana"),
            songs=[MusicDraft(title="ok"), MusicDraft(title="Sábado", release_date=SATURDAY)],
        )
        with pytest.raises(WeekendDateError) as excinfo:
            validate_artist_save(request)
        assert excinfo.value.field == "songs[1].releaseDate"


class TestSingleForms:
    def test_blitz_on_weekend_rejected(self) -> None:
        with pytest.raises(WeekendDateError):
            validate_blitz(MusicalBlitz(music_id="m1", event_date=SATURDAY))

    def test_blitz_needs_music(self) -> None:
        with pytest.raises(InvalidFieldError):
            validate_blitz(MusicalBlitz(music_id="", event_date=FRIDAY))

    def test_music_release_on_weekend_rejected(self) -> None:
        with pytest.raises(WeekendDateError):
            validate_music(Music(artist_id="a1", title="x", release_date=SATURDAY))

    def test_promotion_needs_a_station(self) -> None:
        request = NewPromotionRequest(
            name="Promo", artist_id="a1", start_date=FRIDAY, end_date=FRIDAY, radio_station_ids=[]
        )
        with pytest.raises(InvalidFieldError) as excinfo:
            validate_promotion(request)
        assert excinfo.value.field == "radioStationIds"

    def test_promotion_end_before_start(self) -> None:
        request = NewPromotionRequest(
            name="Promo", artist_id="a1", start_date=FRIDAY, end_date=date(2024, 6, 1), radio_station_ids=["r1"]
        )
        with pytest.raises(InvalidFieldError) as excinfo:
            validate_promotion(request)
        assert excinfo.value.field == "endDate"
