"""
Client for the upstream content-search API.

This module fetches one page per call:
- Builds the directory/tag/page query for announcements and blog posts
- Runs every request through the retry executor
- Parses the envelope item by item so one malformed hit does not
  discard the rest of the page
"""

import httpx
from typing import Any, Dict, Optional
from pydantic import ValidationError
from core.config import settings
from core.exceptions import UpstreamRequestError
from ingestion.retry import with_retry
from schemas.upstream import RawItem, SearchMetadata, SearchResponse
import logging

logger = logging.getLogger(__name__)


class ContentApiClient:
    """
    Page fetcher for the content-search endpoint.

    The endpoint needs no authentication. Pages are 1-based here and
    converted to the API's 0-based `page` parameter when the query is
    built.

    Attributes:
        base_url: Search endpoint URL
        max_retries: Attempts per page request (default: MAX_RETRIES)
        timeout: Request timeout in seconds (default: REQUEST_TIMEOUT)
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        locale: Optional[str] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        retry_growth: Optional[float] = None,
        timeout: Optional[float] = None
    ):
        self.base_url = base_url or settings.NEWS_API_URL
        self.locale = locale or settings.LOCALE
        self.max_retries = max_retries if max_retries is not None else settings.MAX_RETRIES
        self.retry_delay = retry_delay if retry_delay is not None else settings.RETRY_BASE_DELAY
        self.retry_growth = retry_growth if retry_growth is not None else settings.RETRY_GROWTH_FACTOR
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self._client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> "ContentApiClient":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # Query builders
    # ------------------------------------------------------------------

    def build_news_params(self, tag_id: str, page: int, page_size: int) -> Dict[str, Any]:
        """Query for one page of announcements carrying a year tag"""
        return {
            "item.directoryId": settings.NEWS_DIRECTORY_ID,
            "sort_by": settings.NEWS_SORT_FIELD,
            "sort_order": "desc",
            "item.locale": self.locale,
            "size": page_size,
            "page": page - 1,
            "tags.id": tag_id,
        }

    def build_blog_params(
        self,
        page: int,
        page_size: int,
        category_tag: Optional[str] = None
    ) -> Dict[str, Any]:
        """Query for one page of blog posts, optionally filtered by category"""
        params = {
            "item.directoryId": settings.BLOG_DIRECTORY_ID,
            "sort_by": settings.BLOG_SORT_FIELD,
            "sort_order": "desc",
            "item.locale": self.locale,
            "size": page_size,
            "page": page - 1,
        }
        if category_tag:
            params["tags.id"] = category_tag
        return params

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def fetch_news_page(
        self,
        tag_id: str,
        page: int,
        page_size: Optional[int] = None
    ) -> SearchResponse:
        """
        Fetch one page of announcements for a tag.

        Raises:
            UpstreamRequestError: The request kept failing after all retries
        """
        params = self.build_news_params(tag_id, page, page_size or settings.PAGE_SIZE)
        return await self._fetch(params, description=f"news page {page} ({tag_id})")

    async def fetch_blog_page(
        self,
        page: int,
        page_size: Optional[int] = None,
        category_tag: Optional[str] = None
    ) -> SearchResponse:
        """
        Fetch one page of blog posts.

        Raises:
            UpstreamRequestError: The request kept failing after all retries
        """
        params = self.build_blog_params(page, page_size or settings.PAGE_SIZE, category_tag)
        return await self._fetch(params, description=f"blog page {page}")

    async def _fetch(self, params: Dict[str, Any], description: str) -> SearchResponse:
        if self._client is None:
            raise RuntimeError("ContentApiClient must be used as an async context manager")

        async def attempt() -> SearchResponse:
            return await self._request(params)

        return await with_retry(
            attempt,
            max_attempts=self.max_retries,
            base_delay=self.retry_delay,
            growth_factor=self.retry_growth,
            description=description
        )

    async def _request(self, params: Dict[str, Any]) -> SearchResponse:
        """Single attempt: one GET, status check, envelope parse"""
        logger.debug(f"Fetching {self.base_url} with {params}")

        try:
            response = await self._client.get(self.base_url, params=params, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise UpstreamRequestError(
                "Content API request failed",
                context={"url": self.base_url, "params": params},
                original_exception=e
            )

        if response.status_code != 200:
            logger.error(f"Content API returned {response.status_code} for {params}")
            raise UpstreamRequestError(
                f"Content API request failed: {response.status_code}",
                context={
                    "url": self.base_url,
                    "params": params,
                    "response_body": response.text[:500]
                },
                status_code=response.status_code
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamRequestError(
                "Failed to parse JSON response",
                context={"url": self.base_url, "params": params, "response_body": response.text[:500]},
                original_exception=e
            )

        return parse_search_response(payload)


def parse_search_response(payload: Any) -> SearchResponse:
    """
    Parse a search envelope, tolerating missing or malformed parts.

    Hits that fail validation (no item id, wrong types) are dropped and
    counted in `malformed_items`.
    """
    if not isinstance(payload, dict):
        logger.warning(f"Unexpected envelope type: {type(payload).__name__}")
        return SearchResponse()

    metadata_raw = payload.get("metadata")
    try:
        metadata = SearchMetadata.parse_obj(metadata_raw or {})
    except ValidationError:
        logger.warning(f"Ignoring malformed envelope metadata: {metadata_raw}")
        metadata = SearchMetadata()

    items = []
    malformed = 0
    for raw in payload.get("items") or []:
        try:
            items.append(RawItem.parse_obj(raw))
        except ValidationError as e:
            malformed += 1
            logger.warning(f"Skipping malformed item: {e.errors()[:1]}")

    return SearchResponse(
        metadata=metadata,
        items=items,
        fieldTypes=payload.get("fieldTypes") if isinstance(payload.get("fieldTypes"), dict) else None,
        malformed_items=malformed
    )
