"""Spreadsheet web-app client for the public radio intake form.

The operator publishes a spreadsheet script as a web app and stores its
URL in ``SheetsConfig``.  The endpoint speaks a tiny protocol:

    GET  <url>?action=read  ->  {"data": [<submission rows>...]}
    POST <url>              <-  one RadioStation-shaped JSON body

The POST body is sent as ``text/plain`` because the script host rejects
pre-flighted JSON requests from browsers; the server parses it as JSON
either way.  Both calls follow the redirect the host answers with.

The ``httpx.AsyncClient`` is injected for testability and connection
pooling; it is owned (and closed) by the application lifespan.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from promodesk.interfaces.sheets_provider import ISheetsProvider
from promodesk.utils.errors import SubmissionError, SyncError
from promodesk.utils.logging import get_logger

_DEFAULT_TIMEOUT = 15.0


class AppsScriptSheetsProvider(ISheetsProvider):
    """Reads and writes radio submissions through a spreadsheet web app.

    Parameters
    ----------
    http_client:
        Shared async HTTP client.
    timeout:
        Per-request timeout in seconds.
    """

    def __init__(self, http_client: httpx.AsyncClient, timeout: float = _DEFAULT_TIMEOUT) -> None:
        self._http = http_client
        self._timeout = timeout
        self._logger = get_logger(__name__)

    async def read_submissions(self, url: str) -> list[dict[str, Any]]:
        try:
            response = await self._http.get(
                url,
                params={"action": "read"},
                timeout=self._timeout,
                follow_redirects=True,
            )
        except httpx.TimeoutException as exc:
            raise SyncError(
                message=f"Timed out after {self._timeout:g}s reading submissions",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise SyncError(
                message=f"Request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code != 200:
            raise SyncError(
                message=f"Unexpected status {response.status_code}",
                provider_name=self.get_provider_name(),
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise SyncError(
                message="Response is not valid JSON",
                provider_name=self.get_provider_name(),
            ) from exc

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, list):
            raise SyncError(
                message="Response has no 'data' array",
                provider_name=self.get_provider_name(),
            )

        rows = [row for row in data if isinstance(row, dict)]
        self._logger.debug("sheets_rows_read", rows=len(rows))
        return rows

    async def submit(self, url: str, payload: dict[str, Any]) -> None:
        try:
            response = await self._http.post(
                url,
                content=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
                headers={"Content-Type": "text/plain;charset=utf-8"},
                timeout=self._timeout,
                follow_redirects=True,
            )
        except httpx.TimeoutException as exc:
            raise SubmissionError(
                message="The registration service took too long to answer",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise SubmissionError(
                message=f"Request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code != 200:
            raise SubmissionError(
                message=f"Registration rejected with status {response.status_code}",
                provider_name=self.get_provider_name(),
            )

        self._logger.info("sheets_submission_sent", name=payload.get("name", ""))

    def get_provider_name(self) -> str:
        return "apps_script"
