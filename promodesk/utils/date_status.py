"""Date-window classification for release, expiration and promotion labels.

All arithmetic is done on local calendar dates (no time-of-day), so a stored
``YYYY-MM-DD`` compares cleanly with "today" regardless of timezone.  Every
function accepts an explicit ``today`` / ``now`` so tests can pin the clock.

Also provides :func:`ensure_weekday`, the rule that music release dates and
blitz event dates must fall on a business day.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

from promodesk.models.status import (
    CountdownSeverity,
    ExpirationBucket,
    ExpirationStatus,
    PromotionCountdown,
    ReleaseBucket,
    ReleaseStatus,
)
from promodesk.utils.errors import WeekendDateError

EXPIRATION_WINDOW_DAYS = 90

_WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def _days_between(start: date, end: date) -> int:
    return (end - start).days


def _plural(days: int) -> str:
    return "day" if days == 1 else "days"


def release_status(release_date: date | None, today: date | None = None) -> ReleaseStatus | None:
    """Classify how close *release_date* is.

    Returns ``None`` when the track has no release date.
    """
    if release_date is None:
        return None
    today = today or date.today()

    if release_date < today:
        return ReleaseStatus(bucket=ReleaseBucket.RELEASED, days=None, label="Released")

    days = _days_between(today, release_date)
    label = f"{days} {_plural(days)} left"
    if days <= 15:
        bucket = ReleaseBucket.URGENT
    elif days <= 30:
        bucket = ReleaseBucket.SOON
    else:
        bucket = ReleaseBucket.SCHEDULED
    return ReleaseStatus(bucket=bucket, days=days, label=label)


def expiration_status(
    release_date: date | None,
    today: date | None = None,
) -> ExpirationStatus | None:
    """Classify how close a track is to the end of its 90-day window."""
    if release_date is None:
        return None
    today = today or date.today()

    expiration = release_date + timedelta(days=EXPIRATION_WINDOW_DAYS)
    days = _days_between(today, expiration)

    if days < 0:
        return ExpirationStatus(bucket=ExpirationBucket.EXPIRED, days=days, label="Expired")
    if days == 0:
        return ExpirationStatus(bucket=ExpirationBucket.TODAY, days=0, label="Expires today")

    label = f"Expires in {days} {_plural(days)}"
    if days <= 30:
        bucket = ExpirationBucket.URGENT
    elif days <= 60:
        bucket = ExpirationBucket.WARNING
    else:
        bucket = ExpirationBucket.OK
    return ExpirationStatus(bucket=bucket, days=days, label=label)


def promotion_countdown(end_date: date, now: datetime | None = None) -> PromotionCountdown:
    """Label the time left in a promotion ending on *end_date*.

    A promotion is running for the whole of its end date; it ends once the
    last instant of that day has passed.
    """
    now = now or datetime.now()
    end_of_day = datetime.combine(end_date, time.max)
    if now.tzinfo is not None:
        end_of_day = end_of_day.replace(tzinfo=now.tzinfo)

    if end_of_day < now:
        return PromotionCountdown(severity=CountdownSeverity.ENDED, days=None, label="Ended")

    days = _days_between(now.date(), end_date)
    if days == 0:
        label = "Ends today"
    elif days == 1:
        label = "Ends tomorrow"
    else:
        label = f"{days} days left"

    if days <= 1:
        severity = CountdownSeverity.CRITICAL
    elif days <= 30:
        severity = CountdownSeverity.URGENT
    elif days <= 60:
        severity = CountdownSeverity.WARNING
    else:
        severity = CountdownSeverity.OK
    return PromotionCountdown(severity=severity, days=days, label=label)


def is_weekend(value: date) -> bool:
    """Return ``True`` for Saturday and Sunday."""
    return value.weekday() >= 5


def ensure_weekday(value: date | None, field: str = "date") -> date | None:
    """Reject Saturday and Sunday dates.

    ``None`` passes through (the date is optional on music).  The date is
    never adjusted; the caller gets a :class:`WeekendDateError` instead.
    """
    if value is None:
        return None
    if is_weekend(value):
        weekday = _WEEKDAY_NAMES[value.weekday()]
        raise WeekendDateError(
            message=f"{value.isoformat()} is a {weekday}; pick a weekday",
            field=field,
            weekday=weekday,
        )
    return value


def business_week(today: date | None = None) -> tuple[date, date]:
    """Return the Monday and Friday of the week blitz actions are planned for.

    On a weekend this is the following week.
    """
    today = today or date.today()
    weekday = today.weekday()
    if weekday >= 5:
        monday = today + timedelta(days=7 - weekday)
    else:
        monday = today - timedelta(days=weekday)
    return monday, monday + timedelta(days=4)
