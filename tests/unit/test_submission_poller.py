"""Unit tests for SubmissionPoller: dedup, debounce, soft failures, signal."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from promodesk.interfaces.sheets_provider import ISheetsProvider
from promodesk.models.entities import RadioSubmission
from promodesk.services.submission_poller import SubmissionPoller
from promodesk.store.domain_store import DomainStore
from promodesk.utils.errors import SyncError

SHEETS_URL = "https://script.google.com/macros/s/abc/exec"


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _row(sid: str, **extra) -> dict:
    return {"submissionId": sid, "name": f"Rádio {sid}", "city": "Campinas", **extra}


def _mock_sheets(*responses) -> MagicMock:
    provider = MagicMock(spec=ISheetsProvider)
    provider.read_submissions = AsyncMock(side_effect=list(responses))
    provider.get_provider_name.return_value = "mock"
    return provider


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def configured_store(store: DomainStore) -> DomainStore:
    store.update_sheets_config(SHEETS_URL)
    return store


def _poller(store: DomainStore, sheets: MagicMock, clock: FakeClock, **kwargs) -> SubmissionPoller:
    kwargs.setdefault("signal_seconds", 0.05)
    return SubmissionPoller(store, sheets, interval=60, debounce=30, clock=clock, **kwargs)


# ======================================================================
# Merge and dedup
# ======================================================================


class TestPollOnce:
    @pytest.mark.asyncio
    async def test_merges_new_rows(self, configured_store: DomainStore, clock: FakeClock) -> None:
        sheets = _mock_sheets([_row("A"), _row("B")])
        poller = _poller(configured_store, sheets, clock)

        added = await poller.poll_once()

        assert added == 2
        assert [s.submission_id for s in configured_store.submissions] == ["A", "B"]
        sheets.read_submissions.assert_awaited_once_with(SHEETS_URL)

    @pytest.mark.asyncio
    async def test_dedup_keeps_existing_and_appends_new(self, configured_store: DomainStore, clock: FakeClock) -> None:
        configured_store.merge_submissions(
            [RadioSubmission(submission_id="A", name="Original A"), RadioSubmission(submission_id="B", name="B")]
        )
        sheets = _mock_sheets([_row("A"), _row("B"), _row("C")])
        poller = _poller(configured_store, sheets, clock)

        assert await poller.poll_once() == 1

        queue = configured_store.submissions
        assert [s.submission_id for s in queue] == ["A", "B", "C"]
        assert queue[0].name == "Original A"

    @pytest.mark.asyncio
    async def test_rows_without_id_or_invalid_are_skipped(self, configured_store: DomainStore, clock: FakeClock) -> None:
        sheets = _mock_sheets([{"name": "no id"}, _row("A", type="Satellite"), _row("B", phone=11987654321)])
        poller = _poller(configured_store, sheets, clock)

        assert await poller.poll_once() == 1
        submission = configured_store.submissions[0]
        assert submission.submission_id == "B"
        assert submission.phone == "11987654321"

    @pytest.mark.asyncio
    async def test_comma_separated_markets_are_split(self, configured_store: DomainStore, clock: FakeClock) -> None:
        sheets = _mock_sheets([_row("A", isCrowleyAudited=True, crowleyMarkets="Campinas, Sorocaba")])
        await _poller(configured_store, sheets, clock).poll_once()
        assert configured_store.submissions[0].crowley_markets == ["Campinas", "Sorocaba"]

    @pytest.mark.asyncio
    async def test_no_url_means_no_network(self, store: DomainStore, clock: FakeClock) -> None:
        sheets = _mock_sheets()
        assert await _poller(store, sheets, clock).poll_once() == 0
        sheets.read_submissions.assert_not_awaited()


# ======================================================================
# Debounce and in-flight guard
# ======================================================================


class TestDebounce:
    @pytest.mark.asyncio
    async def test_second_attempt_within_window_is_skipped(self, configured_store: DomainStore, clock: FakeClock) -> None:
        sheets = _mock_sheets([], [])
        poller = _poller(configured_store, sheets, clock)

        await poller.poll_once()
        clock.advance(29)
        await poller.poll_once()

        assert sheets.read_submissions.await_count == 1

    @pytest.mark.asyncio
    async def test_attempt_after_window_runs(self, configured_store: DomainStore, clock: FakeClock) -> None:
        sheets = _mock_sheets([], [])
        poller = _poller(configured_store, sheets, clock)

        await poller.poll_once()
        clock.advance(30)
        await poller.poll_once()

        assert sheets.read_submissions.await_count == 2

    @pytest.mark.asyncio
    async def test_failed_attempt_still_starts_window(self, configured_store: DomainStore, clock: FakeClock) -> None:
        sheets = _mock_sheets(SyncError(message="boom"), [])
        poller = _poller(configured_store, sheets, clock)

        await poller.poll_once()
        clock.advance(5)
        await poller.poll_once()

        assert sheets.read_submissions.await_count == 1

    @pytest.mark.asyncio
    async def test_force_bypasses_debounce(self, configured_store: DomainStore, clock: FakeClock) -> None:
        sheets = _mock_sheets([], [_row("A")])
        poller = _poller(configured_store, sheets, clock)

        await poller.poll_once()
        assert await poller.poll_once(force=True) == 1

    @pytest.mark.asyncio
    async def test_in_flight_cycle_is_not_overlapped(self, configured_store: DomainStore, clock: FakeClock) -> None:
        release = asyncio.Event()

        async def slow_read(url: str) -> list[dict]:
            await release.wait()
            return [_row("A")]

        sheets = _mock_sheets()
        sheets.read_submissions = AsyncMock(side_effect=slow_read)
        poller = _poller(configured_store, sheets, clock)

        first = asyncio.create_task(poller.poll_once())
        await asyncio.sleep(0)
        assert poller.is_syncing
        assert await poller.poll_once(force=True) == 0

        release.set()
        assert await first == 1
        assert sheets.read_submissions.await_count == 1


# ======================================================================
# Failures and the new-data signal
# ======================================================================


class TestFailuresAndSignal:
    @pytest.mark.asyncio
    async def test_sync_error_is_soft(self, configured_store: DomainStore, clock: FakeClock) -> None:
        sheets = _mock_sheets(SyncError(message="Unexpected status 500", provider_name="apps_script"))
        poller = _poller(configured_store, sheets, clock)

        assert await poller.poll_once() == 0
        status = poller.status()
        assert status.last_error == "Unexpected status 500"
        assert status.syncing is False
        assert configured_store.submissions == []

    @pytest.mark.asyncio
    async def test_new_data_signal_raised_then_cleared(self, configured_store: DomainStore, clock: FakeClock) -> None:
        sheets = _mock_sheets([_row("A")])
        poller = _poller(configured_store, sheets, clock, signal_seconds=0.01)

        await poller.poll_once()
        assert poller.has_new_data is True

        await asyncio.sleep(0.05)
        assert poller.has_new_data is False

    @pytest.mark.asyncio
    async def test_no_signal_when_nothing_new(self, configured_store: DomainStore, clock: FakeClock) -> None:
        sheets = _mock_sheets([])
        poller = _poller(configured_store, sheets, clock)
        await poller.poll_once()
        assert poller.has_new_data is False
        assert poller.status().last_synced_at is not None


# ======================================================================
# Background task
# ======================================================================


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_polls_immediately_and_stop_cancels(
        self, configured_store: DomainStore, clock: FakeClock
    ) -> None:
        sheets = _mock_sheets([_row("A")])
        poller = _poller(configured_store, sheets, clock)

        poller.start()
        poller.start()
        for _ in range(5):
            await asyncio.sleep(0)
        assert poller.is_running
        assert [s.submission_id for s in configured_store.submissions] == ["A"]

        await poller.stop()
        assert not poller.is_running
        assert sheets.read_submissions.await_count == 1
