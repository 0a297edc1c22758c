"""
Pagination over one upstream result stream.

Upstream results are sorted by publish date, newest first, but under the
tag-format inconsistencies that is a tendency rather than a guarantee.
One in-window item is therefore enough to keep paging, while stopping
requires the whole page to be older than the window.
"""

import enum
import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional
from core.config import settings
from ingestion.normalizer import resolve_published_at
from schemas.ingestion import FetchWindow
from schemas.upstream import RawItem, SearchResponse

logger = logging.getLogger(__name__)

FetchPage = Callable[[int], Awaitable[SearchResponse]]


class PaginationState(str, enum.Enum):
    FETCHING = "fetching"
    DONE = "done"


class StopReason(str, enum.Enum):
    EMPTY_PAGE = "empty_page"
    ALL_TOO_OLD = "all_too_old"
    EXHAUSTED_TOTAL = "exhausted_total"
    PAGE_LIMIT = "page_limit"


class PaginationController:
    """
    Drive sequential page fetches for one stream until a stop condition.

    Stops when a page is empty, when every item on a page is older than
    the window start, or when the cumulative number of fetched items
    reaches the total the upstream reported. Items older than the start
    or newer than the end are left out of `accepted` but only the former
    count towards stopping.

    Attributes:
        accepted: In-window items, in fetch order
        fetched: Every item fetched, in fetch order
        pages_fetched: Number of pages requested successfully
        stop_reason: Why the controller reached DONE
    """

    def __init__(
        self,
        fetch_page: FetchPage,
        window: FetchWindow,
        date_of: Callable[[RawItem], Optional[datetime]] = resolve_published_at,
        max_pages: Optional[int] = None,
        label: str = "stream"
    ):
        self.fetch_page = fetch_page
        self.window = window
        self.date_of = date_of
        self.max_pages = max_pages if max_pages is not None else settings.MAX_PAGES_PER_STREAM
        self.label = label

        self.state = PaginationState.FETCHING
        self.stop_reason: Optional[StopReason] = None
        self.page = 1
        self.pages_fetched = 0
        self.items_fetched = 0
        self.fetched: List[RawItem] = []
        self.accepted: List[RawItem] = []

    async def run(self) -> List[RawItem]:
        """
        Fetch pages until DONE and return the in-window items.

        Exceptions from fetch_page propagate; items accepted from earlier
        pages stay available on `accepted`.
        """
        while self.state == PaginationState.FETCHING:
            response = await self.fetch_page(self.page)
            self.pages_fetched += 1
            self.evaluate(response)
            if self.state == PaginationState.FETCHING:
                self.page += 1

        logger.debug(
            f"{self.label}: done after {self.pages_fetched} pages "
            f"({self.stop_reason.value}), {len(self.accepted)}/{self.items_fetched} items in window"
        )
        return self.accepted

    def evaluate(self, response: SearchResponse) -> None:
        """Apply one page to the state machine"""
        items = response.items
        if not items:
            self._stop(StopReason.EMPTY_PAGE)
            return

        self.items_fetched += len(items)
        self.fetched.extend(items)

        all_too_old = True
        for item in items:
            published = self.date_of(item)
            if published is None:
                # Undated items are never "too old"
                all_too_old = False
                continue
            if published < self.window.start:
                continue
            all_too_old = False
            if published > self.window.end:
                continue
            self.accepted.append(item)

        total = response.total_available
        if all_too_old:
            self._stop(StopReason.ALL_TOO_OLD)
        elif total is not None and self.items_fetched >= total:
            self._stop(StopReason.EXHAUSTED_TOTAL)
        elif self.pages_fetched >= self.max_pages:
            logger.warning(f"{self.label}: stopping at page limit {self.max_pages}")
            self._stop(StopReason.PAGE_LIMIT)

    def _stop(self, reason: StopReason) -> None:
        self.state = PaginationState.DONE
        self.stop_reason = reason
