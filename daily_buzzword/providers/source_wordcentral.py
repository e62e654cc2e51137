from __future__ import annotations

import logging
from datetime import date

import httpx

from daily_buzzword.providers.base import SourceProvider, SourceUnavailableError

log = logging.getLogger("daily_buzzword.source")

WORDCENTRAL_URL = "http://www.wordcentral.com/buzzword/buzzword.php"


class WordCentralSource(SourceProvider):
    """Fetches today's buzzword page, or an archived day when archive_date is set."""

    def __init__(
        self,
        url: str = WORDCENTRAL_URL,
        timeout: float = 20.0,
        user_agent: str = "",
        archive_date: str = "",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self.user_agent = user_agent
        # Fail early on a malformed date rather than on the first request
        self.archive_date = date.fromisoformat(archive_date) if archive_date else None
        self._transport = transport

    def params(self) -> dict[str, str]:
        if self.archive_date is None:
            return {}
        d = self.archive_date
        return {"month": f"{d.month:02d}", "day": f"{d.day:02d}", "year": str(d.year)}

    async def fetch(self) -> str:
        headers = {"User-Agent": self.user_agent} if self.user_agent else {}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=headers,
                transport=self._transport,
            ) as client:
                resp = await client.get(self.url, params=self.params())
                resp.raise_for_status()
        except httpx.HTTPError as e:
            log.warning("Fetch of %s failed: %s", self.url, e)
            raise SourceUnavailableError(f"Could not fetch {self.url}: {e}") from e
        log.info("Fetched %s (%d chars)", resp.url, len(resp.text))
        return resp.text

    def name(self) -> str:
        if self.archive_date:
            return f"wordcentral/{self.archive_date.isoformat()}"
        return "wordcentral"
