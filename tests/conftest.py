"""
Pytest configuration and fixtures
"""

import pytest
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from ingestion.client import parse_search_response


def build_item(
    source_id: str = "item-1",
    headline: str = "Amazon S3 announces a new feature",
    url: Optional[str] = None,
    post_date: Optional[str] = "2026-01-25T10:00:00Z",
    body: Optional[str] = "<p>Amazon S3 now supports a new feature.</p>",
    tags: Optional[List[str]] = None,
    **fields: Any
) -> Dict[str, Any]:
    """One search hit as returned by the content API"""
    additional = {
        "headline": headline,
        "headlineUrl": url if url is not None else f"https://aws.amazon.com/about-aws/whats-new/{source_id}/",
        "postBody": body,
        "postDateTime": post_date,
    }
    additional.update(fields)
    return {
        "item": {
            "id": source_id,
            "name": source_id,
            "dateCreated": post_date,
            "additionalFields": additional,
        },
        "tags": [{"id": tag, "name": tag} for tag in (tags or [])],
    }


def build_envelope(items: List[Dict[str, Any]], total_hits: Optional[int] = None) -> Dict[str, Any]:
    metadata = {"count": len(items)}
    if total_hits is not None:
        metadata["totalHits"] = total_hits
    return {"metadata": metadata, "fieldTypes": {}, "items": items}


@pytest.fixture
def item_factory():
    """Factory for raw search hits"""
    return build_item


@pytest.fixture
def envelope_factory():
    """Factory for search envelopes"""
    return build_envelope


@pytest.fixture
def response_factory():
    """Factory for parsed SearchResponse pages"""
    def make(items: List[Dict[str, Any]], total_hits: Optional[int] = None):
        return parse_search_response(build_envelope(items, total_hits))
    return make


class FakeArticleRepository:
    """
    In-memory stand-in for ArticleRepository.

    Rows only become visible to exists() after commit, like a real
    transaction. Ids in fail_on raise on insert.
    """

    def __init__(self, fail_on: Optional[set] = None, fail_links: bool = False):
        self.articles: Dict[str, Dict[str, Any]] = {}
        self.links: Dict[str, Dict[str, Any]] = {}
        self.pending_articles: Dict[str, Dict[str, Any]] = {}
        self.pending_links: Dict[str, Dict[str, Any]] = {}
        self.fail_on = fail_on or set()
        self.fail_links = fail_links
        self.commits = 0
        self.rollbacks = 0

    async def exists(self, article_id):
        return article_id in self.articles

    async def insert_article(self, article_id, article):
        if article_id in self.fail_on:
            raise RuntimeError(f"insert failed for {article_id}")
        if article_id in self.articles or article_id in self.pending_articles:
            return False
        self.pending_articles[article_id] = {
            "article_id": article_id,
            "source_id": article.source_id,
            "source": article.source.value,
            "title": article.title,
            "url": article.url,
            "description": article.description,
            "published_at": article.published_at,
            "ai_summary": None,
        }
        return True

    async def insert_link(self, link_id, article_id, url, title, domain):
        if self.fail_links:
            raise RuntimeError(f"link insert failed for {url}")
        if link_id in self.links or link_id in self.pending_links:
            return False
        self.pending_links[link_id] = {
            "link_id": link_id,
            "article_id": article_id,
            "url": url,
            "title": title,
            "domain": domain,
        }
        return True

    async def find_articles_needing_summary(self, source, min_description_length, limit):
        rows = [
            row for row in self.articles.values()
            if row["ai_summary"] is None
            and row["description"] is not None
            and len(row["description"]) > min_description_length
            and row["source"] == source
        ]
        rows.sort(key=lambda row: row["published_at"], reverse=True)
        return [SimpleNamespace(**row) for row in rows[:limit]]

    async def save_summary(self, article_id, summary, generated_at=None):
        self.articles[article_id]["ai_summary"] = summary

    async def commit(self):
        self.articles.update(self.pending_articles)
        self.links.update(self.pending_links)
        self.pending_articles.clear()
        self.pending_links.clear()
        self.commits += 1

    async def rollback(self):
        self.pending_articles.clear()
        self.pending_links.clear()
        self.rollbacks += 1


@pytest.fixture
def fake_repository():
    return FakeArticleRepository()


@pytest.fixture
def repository_factory():
    """Build a FakeArticleRepository with failure injection"""
    return FakeArticleRepository
