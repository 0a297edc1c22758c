"""
Remove repeated upstream items.

The same item can come back once per tag format and again on an
overlapping page; the first occurrence is kept.
"""

from typing import Iterable, List
from schemas.upstream import RawItem


def deduplicate_items(items: Iterable[RawItem]) -> List[RawItem]:
    """Keep the first occurrence of each source id, preserving order"""
    seen = set()
    unique = []
    for item in items:
        if item.source_id in seen:
            continue
        seen.add(item.source_id)
        unique.append(item)
    return unique
