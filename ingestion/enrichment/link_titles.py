"""
Resolve human-readable titles for cross-reference links
"""

import re
import httpx
from typing import Optional
from bs4 import BeautifulSoup
from core.config import settings
from core.exceptions import EnrichmentError, EnrichmentTimeoutError
import logging

logger = logging.getLogger(__name__)

SITE_SUFFIX_RE = re.compile(r"\s*\|.*$")


def parse_title(html: str) -> Optional[str]:
    """
    Page title without the trailing "| Site Name" part.

    "Announcing X | AWS News Blog" becomes "Announcing X".
    """
    soup = BeautifulSoup(html, "html.parser")
    if soup.title is None:
        return None
    title = " ".join(soup.title.get_text().split())
    title = SITE_SUFFIX_RE.sub("", title).strip()
    return title or None


class LinkTitleFetcher:
    """
    Fetch link targets with a short timeout and extract their title.

    Every failure (timeout, transport error, non-200) yields None; the
    title is an optional enrichment and never fails a write.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None
    ):
        self.timeout = timeout if timeout is not None else settings.LINK_TITLE_TIMEOUT
        self.user_agent = user_agent or settings.LINK_USER_AGENT
        self._client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> "LinkTitleFetcher":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch_title(self, url: str) -> Optional[str]:
        try:
            html = await self._fetch_html(url)
        except EnrichmentError as e:
            logger.debug(f"No title for {url}: {e.message}")
            return None
        return parse_title(html)

    async def _fetch_html(self, url: str) -> str:
        if self._client is None:
            raise RuntimeError("LinkTitleFetcher must be used as an async context manager")

        try:
            response = await self._client.get(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout
            )
        except httpx.TimeoutException as e:
            raise EnrichmentTimeoutError(
                f"Title fetch timed out after {self.timeout}s",
                context={"url": url},
                original_exception=e
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise EnrichmentError(
                "Title fetch failed",
                context={"url": url},
                original_exception=e
            )

        if response.status_code != 200:
            raise EnrichmentTimeoutError(
                f"Title fetch returned {response.status_code}",
                context={"url": url, "status_code": response.status_code}
            )
        return response.text
