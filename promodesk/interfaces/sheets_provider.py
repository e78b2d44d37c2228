"""Abstract base class for the spreadsheet-backed submission endpoint.

The public radio intake form writes registrations to a spreadsheet web app;
the submission poller reads them back.  Both directions go through this
interface so the HTTP client can be replaced in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ISheetsProvider(ABC):
    """Contract for reading and writing radio submissions."""

    @abstractmethod
    async def read_submissions(self, url: str) -> list[dict[str, Any]]:
        """Fetch every submission row currently held by the endpoint.

        Raises
        ------
        SyncError
            On timeout, transport error, non-200 status, a body that is not
            JSON, or a body without a ``data`` array.
        """

    @abstractmethod
    async def submit(self, url: str, payload: dict[str, Any]) -> None:
        """Deliver one RadioStation-shaped registration to the endpoint.

        Raises
        ------
        SubmissionError
            On timeout, transport error or any non-200 status.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
