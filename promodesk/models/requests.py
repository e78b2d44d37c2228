"""Typed request payloads for the composite save operations.

Promotion saves arrive as one of three tagged variants (``mode`` is the
discriminator) instead of a loose dict that branches on the presence of an
id:

    - ``new``   -- create one Promotion per selected radio station
    - ``clone`` -- same as ``new``; the form was pre-filled from ``source_id``
    - ``edit``  -- update the promotion ``id``; only the first selected radio
                   station is kept

The Artist editor saves an artist together with its song list in one call
(:class:`ArtistSaveRequest`).
"""

from __future__ import annotations

import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from promodesk.models.entities import Artist, PromotionType
from promodesk.utils.text_normalizer import parse_amount

# Songs added in the editor before their first save carry this id prefix.
TEMP_ID_PREFIX = "temp-"


class _RequestModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


# ---------------------------------------------------------------------------
# Promotion requests
# ---------------------------------------------------------------------------

class _PromotionFields(_RequestModel):
    name: str = ""
    artist_id: str = ""
    music_id: str | None = None
    type: PromotionType = PromotionType.OUTRO
    details: str = ""
    start_date: datetime.date
    end_date: datetime.date
    value: float | None = None
    radio_station_ids: list[str] = Field(default_factory=list)

    @field_validator("value", mode="before")
    @classmethod
    def _parse_value(cls, value: Any) -> Any:
        # Accepts 1234.56 or the pt-BR text "1.234,56".
        return parse_amount(value)

    @field_validator("music_id", mode="before")
    @classmethod
    def _blank_music(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def promotion_fields(self) -> dict[str, Any]:
        """Return the fields copied onto each stored Promotion."""
        return self.model_dump(
            include={
                "name",
                "artist_id",
                "music_id",
                "type",
                "details",
                "start_date",
                "end_date",
                "value",
            }
        )


class NewPromotionRequest(_PromotionFields):
    mode: Literal["new"] = "new"


class ClonePromotionRequest(_PromotionFields):
    """A new promotion pre-filled from an existing one."""

    mode: Literal["clone"] = "clone"
    source_id: str | None = None


class EditPromotionRequest(_PromotionFields):
    mode: Literal["edit"] = "edit"
    id: str


PromotionRequest = Annotated[
    NewPromotionRequest | ClonePromotionRequest | EditPromotionRequest,
    Field(discriminator="mode"),
]


# ---------------------------------------------------------------------------
# Artist editor
# ---------------------------------------------------------------------------

class MusicDraft(_RequestModel):
    """One song row from the Artist editor.

    Every field is optional so that edits can be merged: only the fields
    the client actually sent (``model_fields_set``) overwrite the stored
    track.
    """

    id: str = ""
    title: str | None = None
    wav_url: str | None = None
    composers: str | None = None
    release_date: datetime.date | None = None
    hide_from_dashboard: bool | None = None

    @field_validator("release_date", mode="before")
    @classmethod
    def _blank_release(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def is_new(self) -> bool:
        return not self.id or self.id.startswith(TEMP_ID_PREFIX)

    def changes(self) -> dict[str, Any]:
        """Return the explicitly supplied fields, without the id."""
        return {name: getattr(self, name) for name in self.model_fields_set if name != "id"}


class ArtistSaveRequest(_RequestModel):
    artist: Artist
    songs: list[MusicDraft] = Field(default_factory=list)
    music_to_delete_ids: list[str] = Field(default_factory=list)

PROMOTION_REQUEST_ADAPTER: TypeAdapter[NewPromotionRequest | ClonePromotionRequest | EditPromotionRequest] = TypeAdapter(
    PromotionRequest
)
