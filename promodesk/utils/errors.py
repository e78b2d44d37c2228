"""Custom exception hierarchy for promoDesk.

All application exceptions inherit from :class:`PromoDeskError`, which
carries an optional ``provider_name`` so error handlers can identify which
collaborator (e.g. "sqlite", "memory", "apps_script") caused the failure.

The hierarchy is organized by the layer that raises it:

    PromoDeskError  (base -- catch-all for any promoDesk error)
    +-- ValidationError          (edit-form boundary, blocking)
    |   +-- WeekendDateError     (release / blitz date on Saturday or Sunday)
    |   +-- InvalidFieldError    (required field empty, malformed URL, ...)
    |   +-- ImmutableRecordError (update attempted on a write-once record)
    +-- EntityNotFoundError      (lifecycle operation on an unknown id)
    +-- PersistenceError         (durable storage)
    |   +-- StorageWriteError    (quota exceeded / store unavailable)
    |   +-- StorageReadError     (stored value cannot be decoded)
    +-- BackupCorruptedError     (backup import could not be parsed)
    +-- SyncError                (submission poller, soft failure)
    +-- SubmissionError          (intake write-back, hard failure)
    +-- ConfigurationError       (startup / missing config)

Validation and backup errors are surfaced to the user and must be
acknowledged.  Persistence and sync errors are advisory: the store and the
poller catch them, log them, and keep running.
"""

from __future__ import annotations


class PromoDeskError(Exception):
    """Base exception for all promoDesk errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which collaborator triggered the error.
    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[sqlite] database is locked``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Edit-form validation errors
# ---------------------------------------------------------------------------

class ValidationError(PromoDeskError):
    """Raised when an edit payload is rejected before reaching the store."""

    def __init__(
        self,
        message: str = "Invalid input",
        provider_name: str | None = None,
        field: str | None = None,
    ) -> None:
        self._field = field
        super().__init__(message=message, provider_name=provider_name)

    @property
    def field(self) -> str | None:
        return self._field


class WeekendDateError(ValidationError):
    """Raised when a release or blitz date falls on a Saturday or Sunday.

    The date is never clamped or moved to the next business day; the
    caller must pick another date.
    """

    def __init__(
        self,
        message: str = "Date falls on a weekend",
        provider_name: str | None = None,
        field: str | None = None,
        weekday: str | None = None,
    ) -> None:
        self._weekday = weekday
        super().__init__(message=message, provider_name=provider_name, field=field)

    @property
    def weekday(self) -> str | None:
        return self._weekday


class InvalidFieldError(ValidationError):
    """Raised when a required field is empty or a value is malformed."""


class ImmutableRecordError(ValidationError):
    """Raised when an update targets a record that is write-once (email campaigns)."""


# ---------------------------------------------------------------------------
# Lifecycle errors
# ---------------------------------------------------------------------------

class EntityNotFoundError(PromoDeskError):
    """Raised when archive/restore/purge targets an id that does not exist."""

    def __init__(
        self,
        message: str = "Entity not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Persistence errors
# ---------------------------------------------------------------------------

class PersistenceError(PromoDeskError):
    """Raised when the durable key-value store cannot be used."""

    def __init__(
        self,
        message: str = "Storage operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class StorageWriteError(PersistenceError):
    """Raised when a value could not be written (quota exceeded, store unavailable).

    The domain store catches this per write and keeps the in-memory change;
    the user is warned that data may not be durably saved.
    """


class StorageReadError(PersistenceError):
    """Raised when a stored value exists but cannot be decoded."""


# ---------------------------------------------------------------------------
# Backup / sync errors
# ---------------------------------------------------------------------------

class BackupCorruptedError(PromoDeskError):
    """Raised when a backup document is malformed.  No state is changed."""

    def __init__(
        self,
        message: str = "Backup file is corrupted",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class SyncError(PromoDeskError):
    """Raised when a submission poll cycle fails (timeout, HTTP, parse).

    The poller logs and swallows it; the next scheduled cycle retries.
    """

    def __init__(
        self,
        message: str = "Submission sync failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class SubmissionError(PromoDeskError):
    """Raised when the public intake form cannot deliver a registration."""

    def __init__(
        self,
        message: str = "Submission could not be delivered",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(PromoDeskError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
