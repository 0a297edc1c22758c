"""
Unit tests for tag formats and year-tag diagnostics
"""

from ingestion.client import parse_search_response
from ingestion.diagnostics import extract_year_tags, find_mismatched_items
from ingestion.tag_formats import TAG_FORMATS, resolve_tag_formats, resolve_tag_ids
from schemas.upstream import Tag


class TestTagFormats:

    def test_both_formats_for_every_year(self):
        assert resolve_tag_ids(2025) == [
            "whats-new-v2#year#2025",
            "GLOBAL#local-tags-whats-new-v2-year#2025",
        ]
        assert resolve_tag_ids(2019) == [
            "whats-new-v2#year#2019",
            "GLOBAL#local-tags-whats-new-v2-year#2019",
        ]

    def test_standard_format_comes_first(self):
        names = [fmt.name for fmt in resolve_tag_formats(2026)]
        assert names == ["standard", "global"]

    def test_resolver_returns_a_copy(self):
        formats = resolve_tag_formats(2026)
        formats.clear()
        assert len(TAG_FORMATS) == 2


class TestYearTagDiagnostics:

    def test_extract_year_tags_reads_both_formats(self):
        tags = [
            Tag(id="whats-new-v2#year#2025"),
            Tag(id="GLOBAL#local-tags-whats-new-v2-year#2026"),
            Tag(id="whats-new-v2#general-products#amazon-s3"),
        ]
        assert extract_year_tags(tags) == [2025, 2026]

    def test_find_mismatched_items(self, item_factory, envelope_factory):
        response = parse_search_response(envelope_factory([
            item_factory("in-year", post_date="2025-06-01T00:00:00Z", tags=["whats-new-v2#year#2025"]),
            item_factory(
                "mistagged",
                headline="Tagged with the wrong year",
                post_date="2026-01-03T00:00:00Z",
                tags=["whats-new-v2#year#2025"]
            ),
        ]))

        mismatched = find_mismatched_items(response.items, 2025)

        assert len(mismatched) == 1
        assert mismatched[0].id == "mistagged"
        assert mismatched[0].actual_year == 2026
        assert mismatched[0].tagged_years == [2025]
        assert mismatched[0].headline == "Tagged with the wrong year"

    def test_undated_items_are_not_mismatched(self, item_factory, envelope_factory):
        response = parse_search_response(envelope_factory([
            item_factory("undated", post_date=None),
        ]))
        assert find_mismatched_items(response.items, 2025) == []
