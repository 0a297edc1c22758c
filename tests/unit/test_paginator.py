"""
Unit tests for the pagination state machine
"""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock
from core.exceptions import UpstreamRequestError
from ingestion.paginator import PaginationController, PaginationState, StopReason
from schemas.ingestion import FetchWindow

WINDOW = FetchWindow(
    start=datetime(2026, 1, 20, 12, 0, tzinfo=timezone.utc),
    end=datetime(2026, 1, 27, 12, 0, tzinfo=timezone.utc),
)
IN_WINDOW = "2026-01-25T10:00:00Z"
TOO_OLD = "2026-01-10T10:00:00Z"
TOO_NEW = "2026-02-05T10:00:00Z"


def page_of(item_factory, prefix, count, post_date=IN_WINDOW):
    return [item_factory(f"{prefix}-{i}", post_date=post_date) for i in range(count)]


class TestPaginationController:

    @pytest.mark.asyncio
    async def test_stops_when_whole_page_is_too_old(self, item_factory, response_factory):
        fetch_page = AsyncMock(side_effect=[
            response_factory(page_of(item_factory, "new", 100)),
            response_factory(page_of(item_factory, "old", 100, post_date=TOO_OLD)),
            response_factory(page_of(item_factory, "never", 100)),
        ])

        controller = PaginationController(fetch_page, WINDOW)
        accepted = await controller.run()

        assert controller.state == PaginationState.DONE
        assert controller.stop_reason == StopReason.ALL_TOO_OLD
        assert controller.pages_fetched == 2
        assert len(accepted) == 100
        assert accepted[0].source_id == "new-0"
        assert accepted[-1].source_id == "new-99"
        assert [c.args[0] for c in fetch_page.await_args_list] == [1, 2]

    @pytest.mark.asyncio
    async def test_stops_when_total_reached(self, item_factory, response_factory):
        """totalHits=250 with page size 100 takes exactly three pages"""
        fetch_page = AsyncMock(side_effect=[
            response_factory(page_of(item_factory, "p1", 100), total_hits=250),
            response_factory(page_of(item_factory, "p2", 100), total_hits=250),
            response_factory(page_of(item_factory, "p3", 50), total_hits=250),
        ])

        controller = PaginationController(fetch_page, WINDOW)
        accepted = await controller.run()

        assert controller.stop_reason == StopReason.EXHAUSTED_TOTAL
        assert fetch_page.await_count == 3
        assert controller.items_fetched == 250
        assert len(accepted) == 250

    @pytest.mark.asyncio
    async def test_stops_on_empty_page(self, item_factory, response_factory):
        fetch_page = AsyncMock(side_effect=[
            response_factory(page_of(item_factory, "p1", 2)),
            response_factory([]),
        ])

        controller = PaginationController(fetch_page, WINDOW)
        await controller.run()

        assert controller.stop_reason == StopReason.EMPTY_PAGE
        assert controller.pages_fetched == 2
        assert len(controller.accepted) == 2

    @pytest.mark.asyncio
    async def test_one_in_window_item_keeps_paging(self, item_factory, response_factory):
        """Upstream ordering is not guaranteed, so a mixed page is not a stop signal"""
        mixed = page_of(item_factory, "old", 4, post_date=TOO_OLD) + [item_factory("late", post_date=IN_WINDOW)]
        fetch_page = AsyncMock(side_effect=[
            response_factory(mixed),
            response_factory(page_of(item_factory, "older", 2, post_date=TOO_OLD)),
        ])

        controller = PaginationController(fetch_page, WINDOW)
        accepted = await controller.run()

        assert controller.pages_fetched == 2
        assert [item.source_id for item in accepted] == ["late"]

    @pytest.mark.asyncio
    async def test_items_after_window_end_are_skipped_without_stopping(self, item_factory, response_factory):
        fetch_page = AsyncMock(side_effect=[
            response_factory(page_of(item_factory, "future", 2, post_date=TOO_NEW)),
            response_factory(page_of(item_factory, "now", 2)),
            response_factory([]),
        ])

        controller = PaginationController(fetch_page, WINDOW)
        accepted = await controller.run()

        assert controller.pages_fetched == 3
        assert [item.source_id for item in accepted] == ["now-0", "now-1"]
        assert len(controller.fetched) == 4

    @pytest.mark.asyncio
    async def test_undated_items_are_not_too_old(self, item_factory, response_factory):
        fetch_page = AsyncMock(side_effect=[
            response_factory([item_factory("undated", post_date=None)]),
            response_factory([]),
        ])

        controller = PaginationController(fetch_page, WINDOW)
        accepted = await controller.run()

        assert controller.stop_reason == StopReason.EMPTY_PAGE
        assert accepted == []

    @pytest.mark.asyncio
    async def test_failure_keeps_earlier_pages(self, item_factory, response_factory):
        fetch_page = AsyncMock(side_effect=[
            response_factory(page_of(item_factory, "p1", 2)),
            UpstreamRequestError("unavailable", status_code=503),
        ])

        controller = PaginationController(fetch_page, WINDOW)
        with pytest.raises(UpstreamRequestError):
            await controller.run()

        assert controller.state == PaginationState.FETCHING
        assert controller.page == 2
        assert [item.source_id for item in controller.accepted] == ["p1-0", "p1-1"]

    @pytest.mark.asyncio
    async def test_page_limit(self, item_factory, response_factory):
        fetch_page = AsyncMock(side_effect=lambda page: response_factory(page_of(item_factory, f"p{page}", 1)))

        controller = PaginationController(fetch_page, WINDOW, max_pages=3)
        await controller.run()

        assert controller.stop_reason == StopReason.PAGE_LIMIT
        assert controller.pages_fetched == 3
