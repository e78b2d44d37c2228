"""Utility modules for promoDesk.

- **errors** -- Exception hierarchy rooted at PromoDeskError; validation,
  persistence, sync and backup failures each have their own subclass.
- **logging** -- structlog setup: coloured console output in development,
  JSON in production.
- **date_status** -- Release, expiration and promotion-countdown labels and
  the weekday rule for release and blitz dates.
- **text_normalizer** -- Accent-insensitive search matching, collation keys
  and pt-BR currency parsing.
- **ids** (not re-exported here) -- Opaque record id generation.
"""

from promodesk.utils.date_status import (
    business_week,
    ensure_weekday,
    expiration_status,
    is_weekend,
    promotion_countdown,
    release_status,
)
from promodesk.utils.errors import (
    BackupCorruptedError,
    ConfigurationError,
    EntityNotFoundError,
    ImmutableRecordError,
    InvalidFieldError,
    PersistenceError,
    PromoDeskError,
    StorageReadError,
    StorageWriteError,
    SubmissionError,
    SyncError,
    ValidationError,
    WeekendDateError,
)
from promodesk.utils.logging import configure_logging, get_logger
from promodesk.utils.text_normalizer import (
    collation_key,
    format_brl,
    matches_search,
    normalize_search_text,
    parse_amount,
)

__all__ = [
    "BackupCorruptedError",
    "ConfigurationError",
    "EntityNotFoundError",
    "ImmutableRecordError",
    "InvalidFieldError",
    "PersistenceError",
    "PromoDeskError",
    "StorageReadError",
    "StorageWriteError",
    "SubmissionError",
    "SyncError",
    "ValidationError",
    "WeekendDateError",
    "business_week",
    "collation_key",
    "configure_logging",
    "ensure_weekday",
    "expiration_status",
    "format_brl",
    "get_logger",
    "is_weekend",
    "matches_search",
    "normalize_search_text",
    "parse_amount",
    "promotion_countdown",
    "release_status",
]
