"""
End-to-end ingestion runs against a mocked content API and in-memory storage
"""

import httpx
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
from core.exceptions import InvalidWindowError
from ingestion.client import ContentApiClient
from ingestion.enrichment.link_titles import LinkTitleFetcher
from ingestion.runner import IngestionRunner
from models.base import RunStatus
from schemas.ingestion import IngestionRequest

NOW = datetime(2026, 1, 27, 12, 0, tzinfo=timezone.utc)
BLOG_URL = "https://aws.amazon.com/blogs/aws/launch/"


def content_api(item_factory, envelope_factory, failing_tags=()):
    """Handler serving one page per tag and an empty page afterwards"""
    pages = {
        "whats-new-v2#year#2026": [
            item_factory(
                "launch",
                post_date="2026-01-26T09:00:00Z",
                body=f'<p>Now available. <a href="{BLOG_URL}">Read more</a></p>'
            ),
            item_factory("update", post_date="2026-01-22T09:00:00Z"),
            item_factory("stale", post_date="2026-01-02T09:00:00Z"),
        ],
        "GLOBAL#local-tags-whats-new-v2-year#2026": [
            item_factory("update", post_date="2026-01-22T09:00:00Z"),
            item_factory("global-only", post_date="2026-01-23T09:00:00Z"),
        ],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        tag = request.url.params.get("tags.id")
        if tag in failing_tags:
            return httpx.Response(503, text="unavailable")
        if request.url.params.get("page") != "0":
            return httpx.Response(200, json=envelope_factory([], total_hits=0))
        items = pages.get(tag, [])
        return httpx.Response(200, json=envelope_factory(items))

    return handler


def blog_site(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, text="<title>Launch post | AWS News Blog</title>")


async def run_news(item_factory, envelope_factory, repository, request, failing_tags=()):
    api_http = httpx.AsyncClient(transport=httpx.MockTransport(
        content_api(item_factory, envelope_factory, failing_tags)
    ))
    site_http = httpx.AsyncClient(transport=httpx.MockTransport(blog_site))

    with patch("ingestion.runner.ArticleRepository", return_value=repository), \
            patch("ingestion.retry.asyncio.sleep", new_callable=AsyncMock):
        async with ContentApiClient(http_client=api_http) as client, \
                LinkTitleFetcher(http_client=site_http) as titles:
            runner = IngestionRunner(AsyncMock(), client, title_fetcher=titles, now=NOW)
            return await runner.run_news(request)


@pytest.mark.asyncio
async def test_news_ingestion_end_to_end(item_factory, envelope_factory, fake_repository):
    result = await run_news(item_factory, envelope_factory, fake_repository, IngestionRequest(daysBack=7))

    payload = result.to_payload()
    assert payload["statusCode"] == 200
    assert payload["source"] == "aws-news"
    assert payload["status"] == "success"
    assert payload["inserted"] == 3
    assert payload["skipped"] == 0
    assert payload["linksInserted"] == 1
    assert payload["dateRange"] == {
        "start": "2026-01-20T12:00:00.000Z",
        "end": "2026-01-27T12:00:00.000Z",
    }
    assert payload["diagnostics"]["duplicates_removed"] == 1

    stored = {row["source_id"] for row in fake_repository.articles.values()}
    assert stored == {"launch", "update", "global-only"}
    link = list(fake_repository.links.values())[0]
    assert link["url"] == BLOG_URL
    assert link["title"] == "Launch post"


@pytest.mark.asyncio
async def test_reingesting_same_window_is_idempotent(item_factory, envelope_factory, fake_repository):
    request = IngestionRequest(startDate="2026-01-20T12:00:00Z", endDate="2026-01-27T12:00:00Z")

    first = await run_news(item_factory, envelope_factory, fake_repository, request)
    second = await run_news(item_factory, envelope_factory, fake_repository, request)

    assert first.inserted == 3
    assert second.inserted == 0
    assert second.skipped == 3
    assert second.links_inserted == 0
    assert len(fake_repository.articles) == 3
    assert len(fake_repository.links) == 1


@pytest.mark.asyncio
async def test_failing_tag_format_degrades_to_partial_result(item_factory, envelope_factory, fake_repository):
    result = await run_news(
        item_factory,
        envelope_factory,
        fake_repository,
        IngestionRequest(daysBack=7),
        failing_tags=("GLOBAL#local-tags-whats-new-v2-year#2026",)
    )

    assert result.inserted == 2
    assert result.status == RunStatus.PARTIAL
    assert result.diagnostics["failed_formats"] == {"2026": ["global"]}
    stored = {row["source_id"] for row in fake_repository.articles.values()}
    assert stored == {"launch", "update"}


@pytest.mark.asyncio
async def test_invalid_window_aborts_before_fetching(item_factory, envelope_factory, fake_repository):
    with pytest.raises(InvalidWindowError):
        await run_news(
            item_factory,
            envelope_factory,
            fake_repository,
            IngestionRequest(endDate="2026-01-27T12:00:00Z")
        )

    assert fake_repository.articles == {}
