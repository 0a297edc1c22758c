"""
Diagnostics for upstream tagging inconsistencies
"""

import re
import logging
from typing import Iterable, List
from ingestion.normalizer import resolve_published_at
from schemas.ingestion import Diagnostics, MismatchedItem, PartitionDiagnostics
from schemas.upstream import RawItem, Tag

logger = logging.getLogger(__name__)

YEAR_TAG_RE = re.compile(r"year#(\d{4})$")


def extract_year_tags(tags: Iterable[Tag]) -> List[int]:
    """Years encoded in year tags of either format, in tag order"""
    years = []
    for tag in tags:
        match = YEAR_TAG_RE.search(tag.id)
        if match:
            years.append(int(match.group(1)))
    return years


def find_mismatched_items(items: Iterable[RawItem], expected_year: int) -> List[MismatchedItem]:
    """Items whose resolved publish year differs from the partition they were found under"""
    mismatched = []
    for item in items:
        published = resolve_published_at(item)
        if published is None or published.year == expected_year:
            continue
        mismatched.append(MismatchedItem(
            id=item.source_id,
            headline=item.additional_fields.headline or "",
            post_date_time=item.additional_fields.postDateTime or "",
            actual_year=published.year,
            tagged_years=extract_year_tags(item.tags),
        ))
    return mismatched


def log_partition(diagnostics: PartitionDiagnostics) -> None:
    logger.info(
        f"Partition {diagnostics.year}: formats={diagnostics.tag_format_results}, "
        f"pages={diagnostics.pages_fetched}, fetched={diagnostics.total_items_fetched}, "
        f"duplicates_removed={diagnostics.duplicates_removed}, "
        f"in_window={diagnostics.items_in_window}, "
        f"mismatched={len(diagnostics.mismatched_items)}"
    )
    if diagnostics.failed_formats:
        logger.warning(f"Partition {diagnostics.year}: failed tag formats {diagnostics.failed_formats}")
    for item in diagnostics.mismatched_items:
        logger.debug(
            f"Mismatched year tag: id={item.id} actual_year={item.actual_year} "
            f"tagged_years={item.tagged_years} headline={item.headline!r}"
        )


def log_diagnostics(diagnostics: Diagnostics) -> None:
    logger.info(f"Fetch diagnostics: {diagnostics.summary()}")
