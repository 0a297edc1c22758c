"""
Unit tests for fetch window resolution
"""

import pytest
from datetime import datetime, timezone
from core.exceptions import InvalidWindowError
from core.utils import derive_id, format_timestamp, parse_datetime
from schemas.ingestion import FetchWindow, IngestionRequest

NOW = datetime(2026, 1, 27, 12, 0, tzinfo=timezone.utc)


class TestFetchWindow:

    def test_days_back(self):
        window = FetchWindow.resolve(IngestionRequest(daysBack=7), now=NOW)

        assert window.to_range() == {
            "start": "2026-01-20T12:00:00.000Z",
            "end": "2026-01-27T12:00:00.000Z",
        }

    def test_defaults_to_seven_days(self):
        window = FetchWindow.resolve(IngestionRequest(), now=NOW)
        assert window.to_range()["start"] == "2026-01-20T12:00:00.000Z"

    def test_explicit_start_ends_now(self):
        window = FetchWindow.resolve(IngestionRequest(startDate="2025-12-01T00:00:00Z"), now=NOW)

        assert window.start == datetime(2025, 12, 1, tzinfo=timezone.utc)
        assert window.end == NOW

    def test_explicit_start_wins_over_days_back(self):
        window = FetchWindow.resolve(
            IngestionRequest(startDate="2026-01-01T00:00:00Z", daysBack=1),
            now=NOW
        )
        assert window.start == datetime(2026, 1, 1, tzinfo=timezone.utc)

    def test_end_without_start_is_rejected(self):
        with pytest.raises(InvalidWindowError):
            FetchWindow.resolve(IngestionRequest(endDate="2026-01-10T00:00:00Z"), now=NOW)

    def test_start_after_end_is_rejected(self):
        with pytest.raises(InvalidWindowError):
            FetchWindow.resolve(
                IngestionRequest(startDate="2026-01-10T00:00:00Z", endDate="2026-01-01T00:00:00Z"),
                now=NOW
            )

    def test_unparseable_start_is_rejected(self):
        with pytest.raises(InvalidWindowError):
            FetchWindow.resolve(IngestionRequest(startDate="last tuesday"), now=NOW)

    def test_partitions_newest_first_capped_at_current_year(self):
        window = FetchWindow(
            start=datetime(2023, 11, 1, tzinfo=timezone.utc),
            end=datetime(2027, 1, 1, tzinfo=timezone.utc),
        )
        assert window.partitions(current_year=2026) == [2026, 2025, 2024, 2023]

    def test_single_year_partition(self):
        window = FetchWindow.resolve(IngestionRequest(daysBack=7), now=NOW)
        assert window.partitions(current_year=2026) == [2026]


class TestUtils:

    def test_derive_id_is_deterministic(self):
        assert derive_id("abc") == derive_id("abc")
        assert len(derive_id("abc")) == 32
        assert derive_id("article", "https://x") != derive_id("article", "https://y")

    def test_parse_datetime_variants(self):
        assert parse_datetime("2026-01-27T12:00:00Z") == NOW
        assert parse_datetime("2026-01-27T12:00:00") == NOW
        assert parse_datetime("2026-01-27T13:00:00+01:00") == NOW
        assert parse_datetime("not a date") is None
        assert parse_datetime(None) is None

    def test_format_timestamp_milliseconds(self):
        value = datetime(2026, 1, 27, 12, 0, 0, 123456, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2026-01-27T12:00:00.123Z"
