"""Unit tests for AppsScriptSheetsProvider against a mocked transport."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from promodesk.providers.sheets.apps_script_provider import AppsScriptSheetsProvider
from promodesk.utils.errors import SubmissionError, SyncError

URL = "https://script.google.com/macros/s/abc/exec"


def _provider(handler: Callable[[httpx.Request], httpx.Response]) -> AppsScriptSheetsProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AppsScriptSheetsProvider(http_client=client, timeout=5.0)


# ======================================================================
# read_submissions
# ======================================================================


class TestReadSubmissions:
    @pytest.mark.asyncio
    async def test_returns_data_rows(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": [{"submissionId": "A"}, "junk", {"submissionId": "B"}]})

        rows = await _provider(handler).read_submissions(URL)

        assert rows == [{"submissionId": "A"}, {"submissionId": "B"}]
        assert seen[0].method == "GET"
        assert seen[0].url.params["action"] == "read"

    @pytest.mark.asyncio
    async def test_non_200_is_sync_error(self) -> None:
        provider = _provider(lambda request: httpx.Response(500, text="oops"))
        with pytest.raises(SyncError, match="500"):
            await provider.read_submissions(URL)

    @pytest.mark.asyncio
    async def test_invalid_json_is_sync_error(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, text="<html>login</html>"))
        with pytest.raises(SyncError):
            await provider.read_submissions(URL)

    @pytest.mark.asyncio
    async def test_missing_data_array_is_sync_error(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, json={"rows": []}))
        with pytest.raises(SyncError):
            await provider.read_submissions(URL)

    @pytest.mark.asyncio
    async def test_network_error_is_sync_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(SyncError) as excinfo:
            await _provider(handler).read_submissions(URL)
        assert excinfo.value.provider_name == "apps_script"

    @pytest.mark.asyncio
    async def test_timeout_is_sync_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(SyncError, match="Timed out"):
            await _provider(handler).read_submissions(URL)


# ======================================================================
# submit
# ======================================================================


class TestSubmit:
    @pytest.mark.asyncio
    async def test_posts_json_body_as_plain_text(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"status": "ok"})

        await _provider(handler).submit(URL, {"name": "Rádio Cidade", "city": "Campinas"})

        assert seen[0].method == "POST"
        assert seen[0].headers["content-type"].startswith("text/plain")
        assert json.loads(seen[0].content) == {"name": "Rádio Cidade", "city": "Campinas"}

    @pytest.mark.asyncio
    async def test_rejected_status_is_submission_error(self) -> None:
        provider = _provider(lambda request: httpx.Response(403))
        with pytest.raises(SubmissionError, match="403"):
            await provider.submit(URL, {"name": "x"})

    @pytest.mark.asyncio
    async def test_network_error_is_submission_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        with pytest.raises(SubmissionError):
            await _provider(handler).submit(URL, {"name": "x"})
