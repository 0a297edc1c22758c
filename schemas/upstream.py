"""
Pydantic schemas for the upstream content-search API envelope.

The upstream API is undocumented and has changed shape over time, so
every field except the item id is optional and unknown fields are kept.
Timestamps stay as strings here; the normalizer parses them leniently.
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, List, Dict, Any


class Tag(BaseModel):
    """Tag attached to an upstream item, e.g. whats-new-v2#year#2025"""
    id: str
    name: str = ""
    description: Optional[str] = None
    tagNamespaceId: Optional[str] = None

    class Config:
        extra = "allow"


class ItemFields(BaseModel):
    """
    Sparse field bag whose keys depend on the directory.

    Announcements: headline, headlineUrl, postBody, postDateTime
    Blog posts: title, link, postExcerpt, createdDate
    """
    # Announcement fields
    headline: Optional[str] = None
    headlineUrl: Optional[str] = None
    postBody: Optional[str] = None
    postDateTime: Optional[str] = None
    postSummary: Optional[str] = None
    regionalAvailability: Optional[str] = None

    # Blog post fields
    title: Optional[str] = None
    link: Optional[str] = None
    postExcerpt: Optional[str] = None
    contributors: Optional[str] = None
    createdDate: Optional[str] = None
    displayDate: Optional[str] = None
    modifiedDate: Optional[str] = None

    class Config:
        extra = "allow"


class ItemRecord(BaseModel):
    """The `item` part of a search hit"""
    id: str = Field(..., min_length=1)
    name: Optional[str] = None
    author: Optional[str] = None
    dateCreated: Optional[str] = None
    dateUpdated: Optional[str] = None
    additionalFields: ItemFields = Field(default_factory=ItemFields)

    @validator("additionalFields", pre=True)
    def default_fields(cls, v):
        """Treat a null field bag as empty"""
        return v if v is not None else {}

    class Config:
        extra = "allow"


class RawItem(BaseModel):
    """One search hit: the item plus its tags"""
    item: ItemRecord
    tags: List[Tag] = Field(default_factory=list)

    @validator("tags", pre=True)
    def default_tags(cls, v):
        return v if v is not None else []

    @property
    def source_id(self) -> str:
        return self.item.id

    @property
    def additional_fields(self) -> ItemFields:
        return self.item.additionalFields


class SearchMetadata(BaseModel):
    count: Optional[int] = None
    totalHits: Optional[int] = None


class SearchResponse(BaseModel):
    """
    Envelope returned by the search endpoint.

    Items are validated one by one by the client so a single malformed
    hit does not discard the whole page; this model only carries the
    ones that parsed.
    """
    metadata: SearchMetadata = Field(default_factory=SearchMetadata)
    items: List[RawItem] = Field(default_factory=list)
    fieldTypes: Optional[Dict[str, Any]] = None
    malformed_items: int = 0

    @property
    def total_available(self) -> Optional[int]:
        return self.metadata.totalHits
