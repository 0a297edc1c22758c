"""
Known upstream encodings of the year tag.

The content API has changed how it tags an announcement's year without
migrating old items, and during the transition items were tagged under
either format (sometimes with the wrong year). Every format is queried
for every partition and the results merged; the resolver never guesses
which single format applies.
"""

from typing import List, NamedTuple
from core.config import settings


class TagFormat(NamedTuple):
    name: str
    pattern: str

    def tag_for(self, year: int) -> str:
        return self.pattern.format(directory=settings.NEWS_DIRECTORY_ID, year=year)


# Merge order matters: earlier formats win deduplication
TAG_FORMATS: List[TagFormat] = [
    TagFormat("standard", "{directory}#year#{year}"),
    TagFormat("global", "GLOBAL#local-tags-{directory}-year#{year}"),
]


def resolve_tag_formats(year: int) -> List[TagFormat]:
    """Ordered tag formats to query for a partition"""
    return list(TAG_FORMATS)


def resolve_tag_ids(year: int) -> List[str]:
    return [fmt.tag_for(year) for fmt in resolve_tag_formats(year)]
