"""Unit tests for promodesk.utils.date_status."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from promodesk.models.status import CountdownSeverity, ExpirationBucket, ReleaseBucket
from promodesk.utils.date_status import (
    business_week,
    ensure_weekday,
    expiration_status,
    is_weekend,
    promotion_countdown,
    release_status,
)
from promodesk.utils.errors import ValidationError, WeekendDateError

TODAY = date(2024, 6, 10)


# ======================================================================
# release_status
# ======================================================================


class TestReleaseStatus:
    @pytest.mark.parametrize(
        ("offset", "bucket"),
        [
            (0, ReleaseBucket.URGENT),
            (15, ReleaseBucket.URGENT),
            (16, ReleaseBucket.SOON),
            (30, ReleaseBucket.SOON),
            (31, ReleaseBucket.SCHEDULED),
        ],
    )
    def test_buckets(self, offset: int, bucket: ReleaseBucket) -> None:
        status = release_status(TODAY + timedelta(days=offset), TODAY)
        assert status is not None
        assert status.bucket is bucket
        assert status.days == offset

    def test_past_date_is_released_without_days(self) -> None:
        status = release_status(TODAY - timedelta(days=1), TODAY)
        assert status is not None
        assert status.bucket is ReleaseBucket.RELEASED
        assert status.days is None

    def test_label(self) -> None:
        assert release_status(TODAY + timedelta(days=1), TODAY).label == "1 day left"  # type: ignore[union-attr]
        assert release_status(TODAY + timedelta(days=5), TODAY).label == "5 days left"  # type: ignore[union-attr]

    def test_no_date(self) -> None:
        assert release_status(None, TODAY) is None


# ======================================================================
# expiration_status
# ======================================================================


class TestExpirationStatus:
    def test_thirty_days_before_expiry_is_urgent(self) -> None:
        released = date(2024, 3, 1)
        status = expiration_status(released, released + timedelta(days=60))
        assert status is not None
        assert status.bucket is ExpirationBucket.URGENT
        assert status.days == 30

    def test_day_after_expiry_is_expired(self) -> None:
        released = date(2024, 3, 1)
        status = expiration_status(released, released + timedelta(days=91))
        assert status is not None
        assert status.bucket is ExpirationBucket.EXPIRED
        assert status.days == -1

    def test_expiry_day(self) -> None:
        released = date(2024, 3, 1)
        status = expiration_status(released, released + timedelta(days=90))
        assert status is not None
        assert status.bucket is ExpirationBucket.TODAY

    @pytest.mark.parametrize(
        ("elapsed", "bucket"),
        [(29, ExpirationBucket.OK), (30, ExpirationBucket.WARNING), (59, ExpirationBucket.WARNING)],
    )
    def test_warning_and_ok(self, elapsed: int, bucket: ExpirationBucket) -> None:
        released = date(2024, 3, 1)
        status = expiration_status(released, released + timedelta(days=elapsed))
        assert status is not None
        assert status.bucket is bucket


# ======================================================================
# promotion_countdown
# ======================================================================


class TestPromotionCountdown:
    def test_running_through_end_date(self) -> None:
        countdown = promotion_countdown(TODAY, datetime(2024, 6, 10, 23, 0))
        assert countdown.severity is CountdownSeverity.CRITICAL
        assert countdown.label == "Ends today"

    def test_ended(self) -> None:
        countdown = promotion_countdown(TODAY, datetime(2024, 6, 11, 0, 1))
        assert countdown.severity is CountdownSeverity.ENDED
        assert countdown.days is None

    @pytest.mark.parametrize(
        ("days", "severity"),
        [
            (1, CountdownSeverity.CRITICAL),
            (2, CountdownSeverity.URGENT),
            (30, CountdownSeverity.URGENT),
            (31, CountdownSeverity.WARNING),
            (61, CountdownSeverity.OK),
        ],
    )
    def test_severity(self, days: int, severity: CountdownSeverity) -> None:
        countdown = promotion_countdown(TODAY + timedelta(days=days), datetime(2024, 6, 10, 8, 0))
        assert countdown.severity is severity
        assert countdown.days == days


# ======================================================================
# Weekday rule
# ======================================================================


class TestWeekdayRule:
    def test_weekend_detection(self) -> None:
        assert is_weekend(date(2024, 6, 15))
        assert is_weekend(date(2024, 6, 16))
        assert not is_weekend(date(2024, 6, 14))

    def test_weekday_passes_through(self) -> None:
        assert ensure_weekday(date(2024, 6, 14)) == date(2024, 6, 14)
        assert ensure_weekday(None) is None

    def test_weekend_rejected_with_field(self) -> None:
        with pytest.raises(WeekendDateError) as excinfo:
            ensure_weekday(date(2024, 6, 16), field="releaseDate")
        assert excinfo.value.field == "releaseDate"
        assert excinfo.value.weekday == "Sunday"
        assert isinstance(excinfo.value, ValidationError)

    @pytest.mark.parametrize(
        ("today", "monday"),
        [
            (date(2024, 6, 10), date(2024, 6, 10)),
            (date(2024, 6, 14), date(2024, 6, 10)),
            (date(2024, 6, 15), date(2024, 6, 17)),
            (date(2024, 6, 16), date(2024, 6, 17)),
        ],
    )
    def test_business_week(self, today: date, monday: date) -> None:
        assert business_week(today) == (monday, monday + timedelta(days=4))
