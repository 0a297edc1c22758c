"""
Translate raw upstream items into normalized articles.

This is the only place that knows which keys of the upstream field bag
belong to announcements and which to blog posts.
"""

import re
from datetime import datetime
from typing import List, Optional
from urllib.parse import urlparse
from bs4 import BeautifulSoup
from core.config import settings
from core.exceptions import MalformedItemError
from core.utils import parse_datetime
from models.base import ArticleSource
from schemas.articles import Announcement, BlogPost, ContentItem, NormalizedArticle
from schemas.upstream import RawItem
import logging

logger = logging.getLogger(__name__)

TAG_RE = re.compile(r"<[^>]*>")
CATEGORY_TAG_PREFIX = "blog-posts#category#"


def strip_html(html: Optional[str]) -> Optional[str]:
    """
    Remove markup from an HTML fragment.

    Tags are dropped, then any stray angle bracket, then surrounding
    whitespace. Empty results come back as None so callers never have to
    tell "" and None apart. Applying it twice gives the same result.
    """
    if not html:
        return None
    text = TAG_RE.sub("", html)
    text = text.replace("<", "").replace(">", "")
    return text.strip() or None


def extract_blog_urls(html: Optional[str], prefix: Optional[str] = None) -> List[str]:
    """
    Anchor hrefs in a body that point at the blog path of the content host.

    A link matches when host + path starts with `prefix`
    (aws.amazon.com/blogs/ by default). Other paths on the same host and
    other hosts are ignored. Duplicates are dropped, first-seen order kept.
    """
    if not html:
        return []

    prefix = (prefix or settings.CROSS_REFERENCE_PREFIX).lower()
    soup = BeautifulSoup(html, "html.parser")

    urls = []
    seen = set()
    for anchor in soup.find_all("a", href=True):
        url = anchor["href"].strip()
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https"):
            continue
        if not f"{parsed.netloc.lower()}{parsed.path}".startswith(prefix):
            continue
        if url in seen:
            continue
        seen.add(url)
        urls.append(url)

    return urls


def resolve_published_at(raw: RawItem) -> Optional[datetime]:
    """
    Publish date of an item: explicit publish-time field first
    (postDateTime for announcements, createdDate for blog posts), then
    the item's creation timestamp.
    """
    fields = raw.additional_fields
    for candidate in (fields.postDateTime, fields.createdDate, raw.item.dateCreated):
        published = parse_datetime(candidate)
        if published is not None:
            return published
    return None


def extract_category(raw: RawItem) -> Optional[str]:
    """Name of the first blog category tag, if any"""
    for tag in raw.tags:
        if tag.id.startswith(CATEGORY_TAG_PREFIX):
            return tag.name or None
    return None


class ItemNormalizer:
    """
    Normalize raw items of one source into NormalizedArticle.

    Handles:
    - Variant selection (announcement vs blog post)
    - Publish date resolution
    - HTML stripping of body / excerpt
    - Cross-reference link extraction for announcements
    """

    def __init__(self, source: ArticleSource, cross_reference_prefix: Optional[str] = None):
        self.source = source
        self.cross_reference_prefix = cross_reference_prefix

    def normalize(self, raw: RawItem) -> NormalizedArticle:
        """
        Normalize a raw item.

        Raises:
            MalformedItemError: The item has no URL or no resolvable date
        """
        return self.to_article(self.to_content_item(raw))

    def to_content_item(self, raw: RawItem) -> ContentItem:
        if self.source == ArticleSource.AWS_NEWS:
            return self._to_announcement(raw)
        elif self.source == ArticleSource.AWS_BLOG:
            return self._to_blog_post(raw)
        else:
            raise ValueError(f"Unknown source: {self.source}")

    def to_article(self, content: ContentItem) -> NormalizedArticle:
        if isinstance(content, Announcement):
            return NormalizedArticle(
                source=ArticleSource.AWS_NEWS,
                source_id=content.source_id,
                title=content.headline,
                url=content.url,
                description=strip_html(content.body),
                raw_body=content.body or None,
                published_at=content.published_at,
                cross_references=extract_blog_urls(content.body, self.cross_reference_prefix),
            )
        return NormalizedArticle(
            source=ArticleSource.AWS_BLOG,
            source_id=content.source_id,
            title=content.title,
            url=content.url,
            description=strip_html(content.excerpt),
            published_at=content.published_at,
            blog_category=content.category,
        )

    def _to_announcement(self, raw: RawItem) -> Announcement:
        fields = raw.additional_fields
        url = (fields.headlineUrl or "").strip()
        if not url:
            raise MalformedItemError(
                "Announcement has no headline URL",
                context={"source_id": raw.source_id, "missing_field": "headlineUrl"}
            )
        return Announcement(
            source_id=raw.source_id,
            headline=fields.headline,
            url=url,
            body=fields.postBody,
            published_at=self._published_at(raw),
        )

    def _to_blog_post(self, raw: RawItem) -> BlogPost:
        fields = raw.additional_fields
        url = (fields.link or "").strip()
        if not url:
            raise MalformedItemError(
                "Blog post has no link",
                context={"source_id": raw.source_id, "missing_field": "link"}
            )
        return BlogPost(
            source_id=raw.source_id,
            title=fields.title,
            url=url,
            excerpt=fields.postExcerpt,
            author=raw.item.author or None,
            category=extract_category(raw),
            published_at=self._published_at(raw),
        )

    @staticmethod
    def _published_at(raw: RawItem) -> datetime:
        published = resolve_published_at(raw)
        if published is None:
            raise MalformedItemError(
                "Item has no resolvable publish date",
                context={"source_id": raw.source_id, "missing_field": "postDateTime"}
            )
        return published
