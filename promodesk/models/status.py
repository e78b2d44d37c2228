"""Display-status models produced by the date classification utilities.

These are read-only labels attached to music and promotions when they are
listed; nothing in the store depends on them.  Frozen like every other
model in the package.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ReleaseBucket(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """How close a track's release date is.

    Thresholds (days until release):
        URGENT:    <= 15
        SOON:      <= 30
        SCHEDULED: >  30
        RELEASED:  release date already passed (terminal, no day count)
    """

    RELEASED = "RELEASED"
    URGENT = "URGENT"
    SOON = "SOON"
    SCHEDULED = "SCHEDULED"


class ExpirationBucket(str, Enum):  # noqa: UP042
    """How close a track is to the end of its 90-day promotion window."""

    EXPIRED = "EXPIRED"
    TODAY = "TODAY"
    URGENT = "URGENT"
    WARNING = "WARNING"
    OK = "OK"


class CountdownSeverity(str, Enum):  # noqa: UP042
    """Severity of a running promotion's remaining time."""

    ENDED = "ENDED"
    CRITICAL = "CRITICAL"
    URGENT = "URGENT"
    WARNING = "WARNING"
    OK = "OK"


class ReleaseStatus(BaseModel):
    """Release countdown for one track.  ``days`` is ``None`` once released."""

    model_config = ConfigDict(frozen=True)

    bucket: ReleaseBucket
    days: int | None = None
    label: str


class ExpirationStatus(BaseModel):
    """Days left until ``release_date + 90 days``; negative once expired."""

    model_config = ConfigDict(frozen=True)

    bucket: ExpirationBucket
    days: int
    label: str


class PromotionCountdown(BaseModel):
    """Remaining days of a promotion.  ``days`` is ``None`` once ended."""

    model_config = ConfigDict(frozen=True)

    severity: CountdownSeverity
    days: int | None = None
    label: str
