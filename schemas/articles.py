"""
Pydantic schemas for normalized articles.

The upstream field bag mixes announcement-only and blog-only keys; the
normalizer translates it into one of two explicit variants, both of
which project onto NormalizedArticle for storage.
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, List, Union
from datetime import datetime
from models.base import ArticleSource
from core.utils import derive_id


class Announcement(BaseModel):
    """A What's New announcement"""
    kind: str = "announcement"
    source_id: str = Field(..., min_length=1)
    headline: str = ""
    url: str = Field(..., min_length=1)
    body: Optional[str] = None
    published_at: datetime

    @validator("headline", pre=True)
    def clean_headline(cls, v):
        return (v or "").strip()


class BlogPost(BaseModel):
    """A post from the blog directory"""
    kind: str = "blog_post"
    source_id: str = Field(..., min_length=1)
    title: str = ""
    url: str = Field(..., min_length=1)
    excerpt: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    published_at: datetime

    @validator("title", pre=True)
    def clean_title(cls, v):
        return (v or "").strip()


ContentItem = Union[Announcement, BlogPost]


class NormalizedArticle(BaseModel):
    """
    Canonical article shape handed to the storage writer.

    derived_id is a pure function of the identity-bearing field (source id
    for announcements, URL for blog posts), so it is stable across runs.
    """
    source: ArticleSource
    source_id: Optional[str] = None
    title: str = ""
    url: str = Field(..., min_length=1)
    description: Optional[str] = None
    raw_body: Optional[str] = None
    published_at: datetime
    blog_category: Optional[str] = None
    cross_references: List[str] = Field(default_factory=list)

    @property
    def derived_id(self) -> str:
        if self.source == ArticleSource.AWS_BLOG:
            return derive_id(self.url)
        return derive_id(self.source_id or self.url)
