"""Timer-driven pull of public radio registrations into the pending queue.

# ─── HOW THE POLLER WORKS ──────────────────────────────────────────────
#
#   app lifespan ──start()──→ background task ──poll_once()──→ ISheetsProvider
#                                   │                               │
#                                   │        new rows (by id) ←─────┘
#                                   ↓
#                         DomainStore.merge_submissions()
#
#   - Runs once immediately, then every ``interval`` seconds.
#   - A cycle is skipped while another is in flight, or when fewer than
#     ``debounce`` seconds passed since the last *attempted* cycle.
#   - No URL configured → no network activity at all.
#   - Every failure (timeout, HTTP status, bad JSON) is logged and
#     swallowed; the next tick is the only retry.
#   - When rows were merged, ``has_new_data`` is raised and a loop timer
#     lowers it again after ``signal_seconds``.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
import contextlib
import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from promodesk.interfaces.sheets_provider import ISheetsProvider
from promodesk.models.entities import RadioSubmission
from promodesk.models.views import SyncStatus
from promodesk.store.domain_store import DomainStore
from promodesk.utils.errors import SyncError
from promodesk.utils.logging import get_logger


class SubmissionPoller:
    """Owns the polling task and the transient new-data signal.

    Parameters
    ----------
    store:
        Destination of merged submissions; also supplies the endpoint URL.
    sheets_provider:
        Client for the spreadsheet endpoint.
    interval:
        Seconds between scheduled cycles.
    debounce:
        Minimum seconds between two attempted cycles.
    signal_seconds:
        How long ``has_new_data`` stays raised.
    clock:
        Monotonic clock used for the debounce window.
    """

    def __init__(
        self,
        store: DomainStore,
        sheets_provider: ISheetsProvider,
        interval: float = 60.0,
        debounce: float = 30.0,
        signal_seconds: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._sheets = sheets_provider
        self._interval = interval
        self._debounce = debounce
        self._signal_seconds = signal_seconds
        self._clock = clock
        self._logger: structlog.BoundLogger = get_logger(__name__)

        self._task: asyncio.Task[None] | None = None
        self._in_flight = False
        self._last_attempt: float | None = None
        self._has_new_data = False
        self._clear_handle: asyncio.TimerHandle | None = None
        self._last_synced_at: datetime | None = None
        self._last_error: str | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def has_new_data(self) -> bool:
        return self._has_new_data

    @property
    def is_syncing(self) -> bool:
        return self._in_flight

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def status(self) -> SyncStatus:
        return SyncStatus(
            configured=bool(self._store.sheets_config.sheets_url),
            running=self.is_running,
            syncing=self._in_flight,
            has_new_data=self._has_new_data,
            pending_submissions=len(self._store.submissions),
            last_synced_at=self._last_synced_at,
            last_error=self._last_error,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Schedule the polling task on the running loop.  Idempotent."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="submission-poller")
        self._logger.info("submission_poller_started", interval=self._interval, debounce=self._debounce)

    async def stop(self) -> None:
        """Cancel the polling task and the pending signal timer."""
        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        self._logger.info("submission_poller_stopped")

    async def _run(self) -> None:
        while True:
            await self.poll_once()
            await asyncio.sleep(self._interval)

    # ------------------------------------------------------------------
    # One cycle
    # ------------------------------------------------------------------

    async def poll_once(self, force: bool = False) -> int:
        """Run one poll cycle and return the number of merged submissions.

        ``force`` bypasses the debounce window (manual "sync now"), never
        the in-flight guard.  Skipped and failed cycles return 0.
        """
        url = self._store.sheets_config.sheets_url
        if not url or self._in_flight:
            return 0

        now = self._clock()
        if not force and self._last_attempt is not None and now - self._last_attempt < self._debounce:
            self._logger.debug("sheets_sync_debounced", since_last=round(now - self._last_attempt, 1))
            return 0

        self._in_flight = True
        self._last_attempt = now
        try:
            rows = await self._sheets.read_submissions(url)
        except SyncError as exc:
            self._last_error = exc.message
            self._logger.warning(
                "sheets_sync_failed",
                provider=exc.provider_name,
                error=exc.message,
            )
            return 0
        finally:
            self._in_flight = False

        self._last_error = None
        self._last_synced_at = datetime.now(timezone.utc)
        added = self._store.merge_submissions(self._parse_rows(rows))
        if added:
            self._raise_new_data_signal()
            self._logger.info("submissions_merged", added=len(added), received=len(rows))
        return len(added)

    def _parse_rows(self, rows: list[dict[str, Any]]) -> list[RadioSubmission]:
        submissions: list[RadioSubmission] = []
        for row in rows:
            if not row.get("submissionId"):
                continue
            try:
                submissions.append(RadioSubmission.model_validate(row))
            except PydanticValidationError as exc:
                self._logger.warning(
                    "submission_row_invalid",
                    submission_id=str(row.get("submissionId")),
                    error=str(exc)[:200],
                )
        return submissions

    def _raise_new_data_signal(self) -> None:
        self._has_new_data = True
        if self._clear_handle is not None:
            self._clear_handle.cancel()
        loop = asyncio.get_running_loop()
        self._clear_handle = loop.call_later(self._signal_seconds, self._clear_new_data_signal)

    def _clear_new_data_signal(self) -> None:
        self._has_new_data = False
        self._clear_handle = None
